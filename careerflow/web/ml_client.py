"""HTTP clients for the remote keyword extractor and course recommender."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, List

import httpx

from ..domain.keyword_terms import DEFAULT_KEYWORD_COUNT
from ..observability import service_call
from .errors import APIError, upstream_failure

logger = logging.getLogger("careerflow.web.ml_client")


@dataclass
class CourseRecommendation:
    title: str
    url: str


class KeywordClient:
    """Extract keywords from a job description via the ML model API."""

    def __init__(
        self,
        http: httpx.AsyncClient,
        url: str,
        num_keywords: int = DEFAULT_KEYWORD_COUNT,
    ) -> None:
        self._http = http
        self.url = url
        self.num_keywords = num_keywords

    async def extract(self, job_description: str) -> List[str]:
        payload = {"job_description": job_description, "num_keywords": self.num_keywords}
        try:
            with service_call("keyword_extractor", url=self.url):
                response = await self._http.post(self.url, json=payload)
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise _keyword_error(f"Model API error: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise _keyword_error(f"Model API unreachable: {type(exc).__name__}") from exc
        except ValueError as exc:
            raise _keyword_error("Model API returned invalid JSON") from exc

        keywords = data.get("keywords") if isinstance(data, dict) else None
        if not isinstance(keywords, list):
            raise _keyword_error("Model API response is missing 'keywords'")
        return [str(k) for k in keywords]


class CourseClient:
    """Fetch course recommendations for a user."""

    def __init__(self, http: httpx.AsyncClient, url: str) -> None:
        self._http = http
        self.url = url

    async def recommendations(self, user_id: str) -> List[CourseRecommendation]:
        try:
            with service_call("course_recommender", url=self.url):
                response = await self._http.get(self.url, params={"userId": user_id})
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as exc:
            raise _course_error(f"Course API error: {exc.response.status_code}") from exc
        except httpx.HTTPError as exc:
            raise _course_error(f"Course API unreachable: {type(exc).__name__}") from exc
        except ValueError as exc:
            raise _course_error("Course API returned invalid JSON") from exc

        items = data.get("recommendations") if isinstance(data, dict) else None
        return [_to_course(item) for item in items or [] if isinstance(item, dict)]


def _to_course(item: Dict[str, Any]) -> CourseRecommendation:
    return CourseRecommendation(title=str(item.get("title", "")), url=str(item.get("url", "")))


def _keyword_error(reason: str) -> APIError:
    logger.error("Keyword extraction error: %s", reason)
    return upstream_failure("KEYWORD_SERVICE_ERROR", "Failed to generate keywords", reason)


def _course_error(reason: str) -> APIError:
    logger.error("Error fetching courses: %s", reason)
    return upstream_failure("COURSE_SERVICE_ERROR", "Failed to fetch courses", reason)

"""Resume operations that combine the store, the AI provider and the ML clients.

Every remote failure becomes an :class:`APIError`; nothing is retried and
stored state is only touched after the remote call succeeded.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from ..domain.ats_scorer import (
    ATSScoreResult,
    KeywordPayloadError,
    build_keyword_prompt,
    combine_scores,
    parse_keyword_payload,
    score_heuristics,
)
from ..domain.keyword_terms import industry_terms, union_keywords
from ..domain.markdown_projector import flatten_for_save
from ..domain.resume_model import resolve_display_name
from ..observability import service_call
from ..providers import ChatProvider, GenerationConfig, Message
from .errors import APIError, bad_request, provider_not_configured, upstream_failure
from .ml_client import KeywordClient
from .store import ResumeRecord, SQLiteStore, UserRecord

logger = logging.getLogger("careerflow.web.assistant")

IMPROVE_PROMPT = """\
As an expert resume writer, improve the following {kind} for a {industry} professional.
Make it more impactful, quantifiable, and aligned with industry standards.
Current content: "{current}"

Requirements:
1. Use action verbs
2. Include metrics and results where possible
3. Highlight relevant technical skills
4. Keep it concise but detailed
5. Focus on achievements over responsibilities
6. Use industry-specific keywords

Format the response as a single paragraph without any additional text or explanations.
"""


@dataclass
class ScoredResume:
    result: ATSScoreResult
    record: ResumeRecord


def display_name_for(user: UserRecord) -> str:
    return resolve_display_name(user.full_name, user.first_name, user.last_name)


class ResumeAssistant:
    """Application service behind the resume endpoints."""

    def __init__(
        self,
        store: SQLiteStore,
        keyword_client: KeywordClient,
        provider: Optional[ChatProvider] = None,
        temperature: float = 0.7,
        max_tokens: int = 2048,
    ) -> None:
        self.store = store
        self.keyword_client = keyword_client
        self.provider = provider
        self.temperature = temperature
        self.max_tokens = max_tokens

    # -- persistence ---------------------------------------------------------

    async def load_resume(self, clerk_user_id: str) -> Optional[ResumeRecord]:
        user = await self.store.get_user(clerk_user_id)
        return await self.store.get_resume(user.user_id)

    async def save_resume(self, clerk_user_id: str, content: str) -> ResumeRecord:
        user = await self.store.get_user(clerk_user_id)
        record = await self.store.save_resume(user.user_id, flatten_for_save(content))
        logger.info("resume_saved user_id=%s size=%d", user.user_id, len(record.content))
        return record

    # -- ATS scoring ---------------------------------------------------------

    async def calculate_ats_score(self, clerk_user_id: str, content: str, job_description: str) -> ScoredResume:
        if not job_description.strip():
            raise bad_request("Please enter a job description first")

        user = await self.store.get_user(clerk_user_id)
        heuristic = score_heuristics(content)

        prompt = build_keyword_prompt(content, job_description)
        raw = await self._generate(prompt, "gemini.keyword_score", failure_message="Failed to calculate ATS score")
        try:
            keywords = parse_keyword_payload(raw)
        except KeywordPayloadError as exc:
            logger.error("ATS keyword payload invalid: %s", exc)
            raise upstream_failure("AI_RESPONSE_INVALID", "Failed to calculate ATS score", str(exc)) from exc

        result = combine_scores(heuristic, keywords)
        record = await self.store.update_ats_result(user.user_id, result.score, result.feedback)
        logger.info("ats_scored user_id=%s score=%d", user.user_id, result.score)
        return ScoredResume(result=result, record=record)

    # -- keywords ------------------------------------------------------------

    async def suggest_keywords(self, clerk_user_id: str, job_description: str) -> List[str]:
        if not job_description.strip():
            raise bad_request("Please enter a job description first")

        user = await self.store.get_user(clerk_user_id)
        remote = await self.keyword_client.extract(job_description)
        return union_keywords(remote, industry_terms(user.industry))

    # -- summary improvement -------------------------------------------------

    async def improve_summary(self, clerk_user_id: str, current: str, keywords: str = "") -> str:
        if not current.strip() and not keywords.strip():
            raise bad_request("Please enter a summary or generate keywords first")

        user = await self.store.get_user(clerk_user_id)
        content = current
        if keywords.strip():
            content = f"{current}\n\nIncorporate these keywords: {keywords.strip()}"

        prompt = IMPROVE_PROMPT.format(kind="professional summary", industry=user.industry or "general", current=content)
        improved = await self._generate(prompt, "gemini.improve_summary", failure_message="Failed to improve summary")
        if not improved:
            raise upstream_failure("AI_RESPONSE_INVALID", "Failed to improve summary", "empty response")
        return improved

    # -- helpers -------------------------------------------------------------

    async def _generate(self, prompt: str, service: str, failure_message: str) -> str:
        if self.provider is None:
            raise provider_not_configured()

        config = GenerationConfig(temperature=self.temperature, max_tokens=self.max_tokens)
        try:
            with service_call(service, model=self.provider.model):
                response = await self.provider.generate([Message.user(prompt)], config)
        except APIError:
            raise
        except Exception as exc:
            logger.error("%s failed: %s", service, exc)
            raise upstream_failure("AI_SERVICE_ERROR", failure_message, type(exc).__name__) from exc
        return response.text.strip()

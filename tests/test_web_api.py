"""Web API v1 contract tests."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import httpx
import pytest
from fastapi.testclient import TestClient

from careerflow.config import AppConfig
from careerflow.providers import LLMResponse
from careerflow.web.app import create_app

KEYWORD_URL = "http://ml.test/extract-keywords"
COURSES_URL = "http://ml.test/api/get-courses"

USER = {"X-User-Id": "clerk_jane"}

FORM = {
    "contactInfo": {"professionalTitle": "Backend Engineer", "email": "jane@example.com", "mobile": "555"},
    "summary": "Builds APIs.",
    "skills": "Python\nSQL",
    "experience": [
        {"organization": "Acme", "title": "Engineer", "startDate": "2020", "endDate": "2023", "description": "Shipped"}
    ],
}


class FakeProvider:
    model = "fake-model"

    def __init__(self, text: str = "", error: Optional[Exception] = None) -> None:
        self.text = text
        self.error = error
        self.prompts: List[str] = []

    async def generate(self, messages, config) -> LLMResponse:
        self.prompts.append(messages[-1].text)
        if self.error is not None:
            raise self.error
        return LLMResponse(text=self.text)


class FakeMLService:
    """Stand-in for the keyword extractor and course recommender."""

    def __init__(self) -> None:
        self.keywords: List[str] = ["Python", "React"]
        self.keyword_status = 200
        self.course_status = 200
        self.requests: List[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if request.url.path == "/extract-keywords":
            if self.keyword_status != 200:
                return httpx.Response(self.keyword_status, json={"detail": "boom"})
            return httpx.Response(200, json={"keywords": self.keywords})
        if request.url.path == "/api/get-courses":
            if self.course_status != 200:
                return httpx.Response(self.course_status, text="down")
            return httpx.Response(
                200,
                json={"recommendations": [{"title": "Intro to SQL", "url": "https://courses.test/sql"}]},
            )
        return httpx.Response(404)


@pytest.fixture
def ml_service() -> FakeMLService:
    return FakeMLService()


@pytest.fixture
def make_client(tmp_path: Path, ml_service: FakeMLService):
    def _make(provider: Any = None) -> TestClient:
        config = AppConfig(
            database_path=str(tmp_path / "careerflow.db"),
            keyword_api_url=KEYWORD_URL,
            courses_api_url=COURSES_URL,
        )
        http = httpx.AsyncClient(transport=httpx.MockTransport(ml_service))
        return TestClient(create_app(config=config, provider=provider, http_client=http))

    return _make


def _sync(client: TestClient) -> Dict[str, Any]:
    response = client.post("/api/v1/users/sync", json={"first_name": "Jane", "last_name": "Doe"}, headers=USER)
    assert response.status_code == 200
    return response.json()


def _onboard(client: TestClient, **overrides: Any):
    payload = {"industry": "WEB_DEV", "subIndustry": "Full Stack", "experience": "4", "skills": "Python, SQL"}
    payload.update(overrides)
    return client.post("/api/v1/onboarding", json=payload, headers=USER)


# ---------------------------------------------------------------------------
# System / identity
# ---------------------------------------------------------------------------


def test_healthz(make_client) -> None:
    with make_client() as client:
        response = client.get("/healthz")
        assert response.status_code == 200
        assert response.json() == {"status": "ok", "ai_configured": False}


def test_missing_identity_is_unauthorized(make_client) -> None:
    with make_client() as client:
        response = client.get("/api/v1/resume")
        assert response.status_code == 401
        assert response.json() == {"error": {"code": "UNAUTHORIZED", "message": "Unauthorized", "details": {}}}


def test_unknown_user_is_not_found(make_client) -> None:
    with make_client() as client:
        response = client.get("/api/v1/resume", headers=USER)
        assert response.status_code == 404
        assert response.json()["error"]["code"] == "USER_NOT_FOUND"


def test_sync_user(make_client) -> None:
    with make_client() as client:
        body = _sync(client)
        assert body["user_id"].startswith("user_")
        assert body["display_name"] == "Jane Doe"
        assert body["is_onboarded"] is False


def test_invalid_payload_is_bad_request(make_client) -> None:
    with make_client() as client:
        _sync(client)
        response = client.post("/api/v1/resume/keywords", json={"job_description": ["x"]}, headers=USER)
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "BAD_REQUEST"
        assert "job_description" in error["details"]["fields"]


# ---------------------------------------------------------------------------
# Resume save / load / preview / export
# ---------------------------------------------------------------------------


def test_save_and_load_resume(make_client) -> None:
    with make_client() as client:
        _sync(client)
        assert client.get("/api/v1/resume", headers=USER).json()["content"] == ""

        response = client.put("/api/v1/resume", json={"content": "\n\nJane\n\n\n\n## Skills\n  \n"}, headers=USER)
        assert response.status_code == 200
        assert response.json()["content"] == "Jane\n\n## Skills"
        assert response.json()["ats"] is None

        loaded = client.get("/api/v1/resume", headers=USER).json()
        assert loaded["content"] == "Jane\n\n## Skills"
        assert loaded["updated_at"].endswith("Z")


def test_save_rejects_invalid_form(make_client) -> None:
    with make_client() as client:
        _sync(client)
        form = {"contactInfo": {"email": "nope"}, "experience": [{"organization": "A", "startDate": "2020"}]}
        response = client.put("/api/v1/resume", json={"content": "x", "form": form}, headers=USER)
        assert response.status_code == 422
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_FAILED"
        assert error["details"]["fields"] == {
            "contactInfo.email": "Invalid email",
            "experience.0.endDate": "End date is required unless this is your current position",
        }
        assert client.get("/api/v1/resume", headers=USER).json()["content"] == ""


def test_save_with_job_description_scores(make_client) -> None:
    provider = FakeProvider('{"keywordScore": 80, "keywordFeedback": "Good match."}')
    with make_client(provider) as client:
        _sync(client)
        response = client.put(
            "/api/v1/resume",
            json={"content": "Jane", "form": FORM, "job_description": "Python backend role"},
            headers=USER,
        )
        assert response.status_code == 200
        ats = response.json()["ats"]
        # heuristic: 100 - 4 * 10 = 60
        assert ats["score"] == 70
        assert ats["heuristic_score"] == 60
        assert "Python backend role" in provider.prompts[0]


def test_save_survives_scoring_failure(make_client) -> None:
    with make_client(FakeProvider(error=RuntimeError("down"))) as client:
        _sync(client)
        content = "N\nT\nC\n\n## Experience"
        response = client.put(
            "/api/v1/resume",
            json={"content": content, "job_description": "Python backend role"},
            headers=USER,
        )
        assert response.status_code == 200
        body = response.json()
        assert body["content"] == content
        assert body["ats"] is None
        assert body["ats_error"] == {"code": "AI_SERVICE_ERROR", "message": "Failed to calculate ATS score"}

        stored = client.get("/api/v1/resume", headers=USER).json()
        assert stored["content"] == content
        assert stored["ats_score"] is None


def test_preview_uses_display_name_and_keeps_loaded_text(make_client) -> None:
    with make_client() as client:
        _sync(client)
        empty = client.post(
            "/api/v1/resume/preview", json={"form": {}, "initial_content": "Loaded text"}, headers=USER
        ).json()
        assert empty == {"content": "Loaded text", "form_empty": True, "errors": {}}

        filled = client.post("/api/v1/resume/preview", json={"form": FORM}, headers=USER).json()
        assert filled["form_empty"] is False
        assert filled["content"].startswith("Jane Doe\nBackend Engineer\nCity, State | 555 | jane@example.com")
        assert "Acme | Engineer\n2020 - 2023\n- Shipped" in filled["content"]

        chrono = client.post(
            "/api/v1/resume/preview", json={"form": FORM, "style": "reverse_chronological"}, headers=USER
        ).json()
        assert "### ENGINEER @ ACME" in chrono["content"]


def test_export_pdf(make_client) -> None:
    with make_client() as client:
        _sync(client)
        response = client.post("/api/v1/resume/export", json={"form": FORM}, headers=USER)
        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert 'filename="resume.pdf"' in response.headers["content-disposition"]
        assert response.content.startswith(b"%PDF")


def test_export_falls_back_to_saved_resume(make_client) -> None:
    with make_client() as client:
        _sync(client)
        empty = client.post("/api/v1/resume/export", json={}, headers=USER)
        assert empty.status_code == 400

        client.put("/api/v1/resume", json={"content": "Jane\nDev\nCity"}, headers=USER)
        response = client.post("/api/v1/resume/export", json={}, headers=USER)
        assert response.status_code == 200
        assert response.content.startswith(b"%PDF")


# ---------------------------------------------------------------------------
# ATS score
# ---------------------------------------------------------------------------


def test_ats_score_combines_and_persists(make_client) -> None:
    provider = FakeProvider('```json\n{"keywordScore": 70, "keywordFeedback": "Add SQL."}\n```')
    with make_client(provider) as client:
        _sync(client)
        response = client.post(
            "/api/v1/resume/ats-score",
            json={"content": "📧 jane@example.com\n## Professional Summary\nHi", "job_description": "SQL dev"},
            headers=USER,
        )
        assert response.status_code == 200
        body = response.json()
        # heuristic: 100 - 20 - 3 * 10 = 50; (50 + 70) / 2 = 60
        assert body["heuristic_score"] == 50
        assert body["keyword_score"] == 70
        assert body["score"] == 60
        assert body["feedback"].endswith("Add SQL.")
        assert body["scored_at"].endswith("Z")

        stored = client.get("/api/v1/resume", headers=USER).json()
        assert stored["ats_score"] == 60
        assert stored["feedback"] == body["feedback"]


def test_ats_score_requires_job_description(make_client) -> None:
    provider = FakeProvider('{"keywordScore": 70}')
    with make_client(provider) as client:
        _sync(client)
        response = client.post("/api/v1/resume/ats-score", json={"content": "x", "job_description": " "}, headers=USER)
        assert response.status_code == 400
        assert response.json()["error"]["message"] == "Please enter a job description first"
        assert provider.prompts == []


def test_ats_score_without_provider(make_client) -> None:
    with make_client() as client:
        _sync(client)
        response = client.post("/api/v1/resume/ats-score", json={"content": "x", "job_description": "jd"}, headers=USER)
        assert response.status_code == 503
        assert response.json()["error"]["code"] == "PROVIDER_NOT_CONFIGURED"


def test_ats_score_invalid_model_output_stores_nothing(make_client) -> None:
    with make_client(FakeProvider("I think it is a 7/10")) as client:
        _sync(client)
        response = client.post("/api/v1/resume/ats-score", json={"content": "x", "job_description": "jd"}, headers=USER)
        assert response.status_code == 502
        assert response.json()["error"]["code"] == "AI_RESPONSE_INVALID"
        assert client.get("/api/v1/resume", headers=USER).json()["ats_score"] is None


def test_ats_score_provider_failure(make_client) -> None:
    with make_client(FakeProvider(error=RuntimeError("quota"))) as client:
        _sync(client)
        response = client.post("/api/v1/resume/ats-score", json={"content": "x", "job_description": "jd"}, headers=USER)
        assert response.status_code == 502
        assert response.json()["error"] == {
            "code": "AI_SERVICE_ERROR",
            "message": "Failed to calculate ATS score",
            "details": {"reason": "RuntimeError"},
        }


# ---------------------------------------------------------------------------
# Keywords / summary
# ---------------------------------------------------------------------------


def test_keywords_merge_industry_terms(make_client, ml_service: FakeMLService) -> None:
    with make_client() as client:
        _sync(client)
        assert _onboard(client).status_code == 200

        response = client.post("/api/v1/resume/keywords", json={"job_description": "React dev"}, headers=USER)
        assert response.status_code == 200
        body = response.json()
        assert body["keywords"] == "Python, React, REST API, Node.js, TypeScript"
        assert body["items"][0] == "Python"

        sent = json.loads(ml_service.requests[-1].content)
        assert sent == {"job_description": "React dev", "num_keywords": 15}


def test_keyword_items_keep_embedded_commas(make_client, ml_service: FakeMLService) -> None:
    ml_service.keywords = ["Washington, DC", "SQL"]
    with make_client() as client:
        _sync(client)
        response = client.post("/api/v1/resume/keywords", json={"job_description": "Analyst"}, headers=USER)
        assert response.status_code == 200
        body = response.json()
        assert body["items"] == ["Washington, DC", "SQL"]
        assert body["keywords"] == "Washington, DC, SQL"


def test_keywords_require_job_description(make_client, ml_service: FakeMLService) -> None:
    with make_client() as client:
        _sync(client)
        response = client.post("/api/v1/resume/keywords", json={"job_description": ""}, headers=USER)
        assert response.status_code == 400
        assert ml_service.requests == []


def test_keyword_service_failure(make_client, ml_service: FakeMLService) -> None:
    ml_service.keyword_status = 500
    with make_client() as client:
        _sync(client)
        response = client.post("/api/v1/resume/keywords", json={"job_description": "jd"}, headers=USER)
        assert response.status_code == 502
        error = response.json()["error"]
        assert error["code"] == "KEYWORD_SERVICE_ERROR"
        assert error["message"] == "Failed to generate keywords"


def test_improve_summary(make_client) -> None:
    provider = FakeProvider("  Improved summary.  ")
    with make_client(provider) as client:
        _sync(client)
        _onboard(client)
        response = client.post(
            "/api/v1/resume/improve-summary", json={"current": "I code.", "keywords": "Go, SQL"}, headers=USER
        )
        assert response.status_code == 200
        assert response.json() == {"summary": "Improved summary."}
        assert "I code.\n\nIncorporate these keywords: Go, SQL" in provider.prompts[0]
        assert "WEB_DEV-full-stack" in provider.prompts[0]


def test_improve_summary_needs_input(make_client) -> None:
    with make_client(FakeProvider("x")) as client:
        _sync(client)
        response = client.post("/api/v1/resume/improve-summary", json={}, headers=USER)
        assert response.status_code == 400


# ---------------------------------------------------------------------------
# Onboarding / courses
# ---------------------------------------------------------------------------


def test_onboarding_flow(make_client) -> None:
    with make_client() as client:
        _sync(client)
        assert client.get("/api/v1/onboarding/status", headers=USER).json() == {"is_onboarded": False}

        bad = _onboard(client, experience="60", skills="")
        assert bad.status_code == 422
        assert bad.json()["error"]["details"]["fields"] == {
            "experience": "Experience cannot exceed 50 years",
            "skills": "Please provide your skills",
        }

        good = _onboard(client)
        assert good.status_code == 200
        assert good.json() == {
            "industry": "WEB_DEV-full-stack",
            "experience": 4,
            "skills": ["Python", "SQL"],
            "bio": None,
            "is_onboarded": True,
        }
        assert client.get("/api/v1/onboarding/status", headers=USER).json() == {"is_onboarded": True}


def test_courses(make_client, ml_service: FakeMLService) -> None:
    with make_client() as client:
        _sync(client)
        response = client.get("/api/v1/courses", headers=USER)
        assert response.status_code == 200
        assert response.json() == {"recommendations": [{"title": "Intro to SQL", "url": "https://courses.test/sql"}]}
        assert ml_service.requests[-1].url.params["userId"] == "clerk_jane"


def test_courses_failure(make_client, ml_service: FakeMLService) -> None:
    ml_service.course_status = 503
    with make_client() as client:
        _sync(client)
        response = client.get("/api/v1/courses", headers=USER)
        assert response.status_code == 502
        assert response.json()["error"]["code"] == "COURSE_SERVICE_ERROR"

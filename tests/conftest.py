"""Global pytest fixtures for deterministic test environment."""

from __future__ import annotations

import pytest

from careerflow.domain import ContactInfo, Entry, Resume


@pytest.fixture(autouse=True)
def _isolate_runtime_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clear local runtime env that can leak into tests on developer machines."""
    for key in (
        "GEMINI_API_KEY",
        "CAREERFLOW_CONFIG",
        "CAREERFLOW_GEMINI_MODEL",
        "CAREERFLOW_KEYWORD_API_URL",
        "CAREERFLOW_KEYWORD_COUNT",
        "CAREERFLOW_COURSES_API_URL",
        "CAREERFLOW_HTTP_TIMEOUT_SECONDS",
        "CAREERFLOW_DATABASE_PATH",
        "CAREERFLOW_EXPORT_DIR",
    ):
        monkeypatch.delenv(key, raising=False)


@pytest.fixture
def sample_resume() -> Resume:
    """A filled-in form with one entry per section."""
    return Resume(
        contact_info=ContactInfo(
            professional_title="Backend Engineer",
            email="jane@example.com",
            mobile="555-0100",
            city="Austin",
            state="TX",
            linkedin="https://linkedin.com/in/jane",
        ),
        summary="Builds reliable APIs.",
        skills="Python\n\nSQL\n",
        experience=[
            Entry(
                organization="Acme",
                title="Engineer",
                start_date="2020",
                end_date="2023",
                description="Built the billing service\n\nCut latency by 30%",
            )
        ],
        education=[Entry(organization="State University", title="BSc CS", start_date="2014", end_date="2018")],
        projects=[Entry(title="Resume Parser", start_date="2022", current=True, description="Open source tool")],
    )

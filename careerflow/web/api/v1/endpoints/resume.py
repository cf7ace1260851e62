"""Resume endpoints for Web API v1."""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends
from fastapi.responses import Response
from pydantic import BaseModel, Field

from ..deps import get_assistant, get_store, get_user_id
from ....assistant import ResumeAssistant, ScoredResume, display_name_for
from ....errors import APIError, bad_request, validation_failed
from ....store import SQLiteStore
from .....domain import (
    ProjectionStyle,
    Resume,
    is_form_empty,
    project_resume,
    recompute_preview,
    validate_resume_form,
)
from .....rendering import EXPORT_FILENAME, render_pdf

logger = logging.getLogger("careerflow.web.api")

router = APIRouter(prefix="/resume", tags=["resume"])


class ResumeResponse(BaseModel):
    content: str
    ats_score: Optional[int] = None
    feedback: Optional[str] = None
    scored_at: Optional[str] = None
    updated_at: Optional[str] = None


class ATSScoreResponse(BaseModel):
    score: int
    feedback: str
    scored_at: Optional[str] = None
    heuristic_score: int
    keyword_score: float


class SaveResumeRequest(BaseModel):
    content: str = Field(default="")
    form: Optional[Dict[str, Any]] = None
    job_description: Optional[str] = None


class ScoringError(BaseModel):
    code: str
    message: str


class SaveResumeResponse(BaseModel):
    content: str
    updated_at: str
    warnings: Dict[str, str] = Field(default_factory=dict)
    ats: Optional[ATSScoreResponse] = None
    ats_error: Optional[ScoringError] = None


class PreviewRequest(BaseModel):
    form: Dict[str, Any] = Field(default_factory=dict)
    initial_content: str = Field(default="")
    style: ProjectionStyle = Field(default=ProjectionStyle.STANDARD)


class PreviewResponse(BaseModel):
    content: str
    form_empty: bool
    errors: Dict[str, str] = Field(default_factory=dict)


class ContentRequest(BaseModel):
    content: Optional[str] = None
    form: Optional[Dict[str, Any]] = None
    style: ProjectionStyle = Field(default=ProjectionStyle.STANDARD)


class ATSScoreRequest(ContentRequest):
    job_description: str = Field(default="")


class KeywordsRequest(BaseModel):
    job_description: str = Field(default="")


class KeywordsResponse(BaseModel):
    keywords: str
    items: List[str]


class ImproveSummaryRequest(BaseModel):
    current: str = Field(default="")
    keywords: str = Field(default="")


class ImproveSummaryResponse(BaseModel):
    summary: str


@router.get("", response_model=ResumeResponse)
async def get_resume(
    assistant: ResumeAssistant = Depends(get_assistant),
    clerk_user_id: str = Depends(get_user_id),
) -> ResumeResponse:
    record = await assistant.load_resume(clerk_user_id)
    if record is None:
        return ResumeResponse(content="")
    return ResumeResponse(
        content=record.content,
        ats_score=record.ats_score,
        feedback=record.feedback,
        scored_at=record.scored_at,
        updated_at=record.updated_at,
    )


@router.put("", response_model=SaveResumeResponse)
async def save_resume(
    request: SaveResumeRequest,
    assistant: ResumeAssistant = Depends(get_assistant),
    clerk_user_id: str = Depends(get_user_id),
) -> SaveResumeResponse:
    warnings: Dict[str, str] = {}
    if request.form is not None:
        result = validate_resume_form(Resume.from_dict(request.form))
        if not result.valid:
            raise validation_failed(result)
        warnings = {w["field"]: w["message"] for w in result.warnings}

    record = await assistant.save_resume(clerk_user_id, request.content)
    response = SaveResumeResponse(content=record.content, updated_at=record.updated_at, warnings=warnings)
    if request.job_description and request.job_description.strip():
        # The save already landed; a scoring failure is reported beside it.
        try:
            scored = await assistant.calculate_ats_score(clerk_user_id, record.content, request.job_description)
        except APIError as exc:
            logger.warning("Scoring after save failed for %s: %s", clerk_user_id, exc.code)
            response.ats_error = ScoringError(code=exc.code, message=exc.message)
        else:
            response.ats = _ats_response(scored)
            response.updated_at = scored.record.updated_at
    return response


@router.post("/preview", response_model=PreviewResponse)
async def preview_resume(
    request: PreviewRequest,
    store: SQLiteStore = Depends(get_store),
    clerk_user_id: str = Depends(get_user_id),
) -> PreviewResponse:
    user = await store.get_user(clerk_user_id)
    resume = Resume.from_dict(request.form)
    content = recompute_preview(resume, request.initial_content, display_name_for(user), request.style)
    return PreviewResponse(
        content=content,
        form_empty=is_form_empty(resume),
        errors=validate_resume_form(resume).field_errors(),
    )


@router.post("/export")
async def export_resume(
    request: ContentRequest,
    store: SQLiteStore = Depends(get_store),
    clerk_user_id: str = Depends(get_user_id),
) -> Response:
    content = await _resolve_content(request, store, clerk_user_id)
    pdf_bytes = await asyncio.to_thread(render_pdf, content)
    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{EXPORT_FILENAME}"'},
    )


@router.post("/ats-score", response_model=ATSScoreResponse)
async def ats_score(
    request: ATSScoreRequest,
    store: SQLiteStore = Depends(get_store),
    assistant: ResumeAssistant = Depends(get_assistant),
    clerk_user_id: str = Depends(get_user_id),
) -> ATSScoreResponse:
    if not request.job_description.strip():
        raise bad_request("Please enter a job description first")
    content = await _resolve_content(request, store, clerk_user_id)
    scored = await assistant.calculate_ats_score(clerk_user_id, content, request.job_description)
    return _ats_response(scored)


@router.post("/keywords", response_model=KeywordsResponse)
async def suggest_keywords(
    request: KeywordsRequest,
    assistant: ResumeAssistant = Depends(get_assistant),
    clerk_user_id: str = Depends(get_user_id),
) -> KeywordsResponse:
    items = await assistant.suggest_keywords(clerk_user_id, request.job_description)
    return KeywordsResponse(keywords=", ".join(items), items=items)


@router.post("/improve-summary", response_model=ImproveSummaryResponse)
async def improve_summary(
    request: ImproveSummaryRequest,
    assistant: ResumeAssistant = Depends(get_assistant),
    clerk_user_id: str = Depends(get_user_id),
) -> ImproveSummaryResponse:
    summary = await assistant.improve_summary(clerk_user_id, request.current, request.keywords)
    return ImproveSummaryResponse(summary=summary)


async def _resolve_content(request: ContentRequest, store: SQLiteStore, clerk_user_id: str) -> str:
    """Explicit text wins, then the projected form, then the saved resume."""
    user = await store.get_user(clerk_user_id)
    if request.content and request.content.strip():
        return request.content
    if request.form is not None:
        resume = Resume.from_dict(request.form)
        if not is_form_empty(resume):
            return project_resume(resume, display_name_for(user), style=request.style)
    record = await store.get_resume(user.user_id)
    if record is None or not record.content.strip():
        raise bad_request("Resume content is empty")
    return record.content


def _ats_response(scored: ScoredResume) -> ATSScoreResponse:
    return ATSScoreResponse(
        score=scored.result.score,
        feedback=scored.result.feedback,
        scored_at=scored.record.scored_at,
        heuristic_score=scored.result.heuristic.score,
        keyword_score=scored.result.keywords.score,
    )

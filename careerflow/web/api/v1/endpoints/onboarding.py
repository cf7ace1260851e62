"""Onboarding endpoints for Web API v1."""

from __future__ import annotations

from typing import List, Optional, Union

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from ..deps import get_store, get_user_id
from ....errors import validation_failed
from ....store import SQLiteStore
from .....domain import validate_onboarding

router = APIRouter(prefix="/onboarding", tags=["onboarding"])


class OnboardingRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    industry: Optional[str] = None
    sub_industry: Optional[str] = Field(default=None, alias="subIndustry")
    experience: Optional[Union[int, str]] = None
    skills: Optional[str] = None
    bio: Optional[str] = None


class ProfileResponse(BaseModel):
    industry: Optional[str] = None
    experience: Optional[int] = None
    skills: List[str]
    bio: Optional[str] = None
    is_onboarded: bool


class OnboardingStatusResponse(BaseModel):
    is_onboarded: bool


@router.post("", response_model=ProfileResponse)
async def complete_onboarding(
    request: OnboardingRequest,
    store: SQLiteStore = Depends(get_store),
    clerk_user_id: str = Depends(get_user_id),
) -> ProfileResponse:
    result = validate_onboarding(request.model_dump(by_alias=True))
    if not result.valid:
        raise validation_failed(result, message="Onboarding validation failed")

    user = await store.update_profile(clerk_user_id, result.value)
    return ProfileResponse(
        industry=user.industry,
        experience=user.experience,
        skills=user.skills,
        bio=user.bio,
        is_onboarded=user.is_onboarded,
    )


@router.get("/status", response_model=OnboardingStatusResponse)
async def onboarding_status(
    store: SQLiteStore = Depends(get_store),
    clerk_user_id: str = Depends(get_user_id),
) -> OnboardingStatusResponse:
    return OnboardingStatusResponse(is_onboarded=await store.onboarding_status(clerk_user_id))

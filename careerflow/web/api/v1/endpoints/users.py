"""User identity endpoints for Web API v1."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from ..deps import get_store, get_user_id
from ....assistant import display_name_for
from ....store import SQLiteStore

router = APIRouter(prefix="/users", tags=["users"])


class SyncUserRequest(BaseModel):
    email: str = Field(default="")
    first_name: str = Field(default="")
    last_name: str = Field(default="")
    full_name: str = Field(default="")


class UserResponse(BaseModel):
    user_id: str
    email: str
    display_name: str
    industry: Optional[str] = None
    is_onboarded: bool
    created_at: str


@router.post("/sync", response_model=UserResponse)
async def sync_user(
    request: SyncUserRequest,
    store: SQLiteStore = Depends(get_store),
    clerk_user_id: str = Depends(get_user_id),
) -> UserResponse:
    user = await store.ensure_user(
        clerk_user_id,
        email=request.email,
        first_name=request.first_name,
        last_name=request.last_name,
        full_name=request.full_name,
    )
    return UserResponse(
        user_id=user.user_id,
        email=user.email,
        display_name=display_name_for(user),
        industry=user.industry,
        is_onboarded=user.is_onboarded,
        created_at=user.created_at,
    )

"""Top-level v1 API router."""

from __future__ import annotations

from fastapi import APIRouter

from .endpoints.courses import router as courses_router
from .endpoints.onboarding import router as onboarding_router
from .endpoints.resume import router as resume_router
from .endpoints.users import router as users_router

api_v1_router = APIRouter(prefix="/api/v1")
api_v1_router.include_router(users_router)
api_v1_router.include_router(resume_router)
api_v1_router.include_router(onboarding_router)
api_v1_router.include_router(courses_router)

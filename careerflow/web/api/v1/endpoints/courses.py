"""Course recommendation endpoint for Web API v1."""

from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from ..deps import get_course_client, get_store, get_user_id
from ....ml_client import CourseClient
from ....store import SQLiteStore

router = APIRouter(prefix="/courses", tags=["courses"])


class CourseItem(BaseModel):
    title: str
    url: str


class CoursesResponse(BaseModel):
    recommendations: List[CourseItem]


@router.get("", response_model=CoursesResponse)
async def list_courses(
    store: SQLiteStore = Depends(get_store),
    courses: CourseClient = Depends(get_course_client),
    clerk_user_id: str = Depends(get_user_id),
) -> CoursesResponse:
    await store.get_user(clerk_user_id)
    items = await courses.recommendations(clerk_user_id)
    return CoursesResponse(recommendations=[CourseItem(title=c.title, url=c.url) for c in items])

"""Dependency providers for v1 API."""

from __future__ import annotations

from typing import Optional

from fastapi import Header, Request

from ....config import AppConfig
from ...assistant import ResumeAssistant
from ...errors import unauthorized
from ...ml_client import CourseClient
from ...store import SQLiteStore


def get_store(request: Request) -> SQLiteStore:
    """Access shared store from app state."""
    return request.app.state.store


def get_assistant(request: Request) -> ResumeAssistant:
    return request.app.state.assistant


def get_course_client(request: Request) -> CourseClient:
    return request.app.state.course_client


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_user_id(x_user_id: Optional[str] = Header(default=None, alias="X-User-Id")) -> str:
    """Return the caller identity set by the external auth layer."""
    if not x_user_id or not x_user_id.strip():
        raise unauthorized()
    return x_user_id.strip()

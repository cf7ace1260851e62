"""FastAPI app entrypoint for Careerflow web APIs."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from time import perf_counter
from typing import Optional

import httpx
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError

from ..config import AppConfig, load_config
from ..observability import setup_logging
from ..providers import ChatProvider, create_provider
from .api.v1.router import api_v1_router
from .assistant import ResumeAssistant
from .errors import APIError, api_error_handler, validation_error_handler
from .ml_client import CourseClient, KeywordClient
from .store import SQLiteStore

logger = logging.getLogger("careerflow.web.api")


def create_app(
    config: Optional[AppConfig] = None,
    provider: Optional[ChatProvider] = None,
    http_client: Optional[httpx.AsyncClient] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""
    config = config or load_config()
    setup_logging(config.verbose)

    if provider is None:
        provider = _default_provider(config)

    owns_http = http_client is None
    http = http_client or httpx.AsyncClient(timeout=config.timeout_seconds)
    store = SQLiteStore(config.database_path)
    keyword_client = KeywordClient(http, config.keyword_api_url, num_keywords=config.keyword_count)
    assistant = ResumeAssistant(
        store,
        keyword_client,
        provider=provider,
        temperature=config.temperature,
        max_tokens=config.max_tokens,
    )

    @asynccontextmanager
    async def lifespan(_: FastAPI):
        await store.start()
        try:
            yield
        finally:
            await store.stop()
            if owns_http:
                await http.aclose()

    app = FastAPI(title="Careerflow API", version="0.1.0", lifespan=lifespan)
    app.state.config = config
    app.state.store = store
    app.state.assistant = assistant
    app.state.course_client = CourseClient(http, config.courses_api_url)
    app.include_router(api_v1_router)

    @app.middleware("http")
    async def request_logging_middleware(request: Request, call_next):
        start = perf_counter()
        user = request.headers.get("x-user-id") or "-"
        try:
            response = await call_next(request)
        except Exception:
            duration_ms = (perf_counter() - start) * 1000
            logger.info(
                "api_request method=%s path=%s status=%s duration_ms=%.2f user=%s",
                request.method,
                request.url.path,
                500,
                duration_ms,
                user,
            )
            raise

        duration_ms = (perf_counter() - start) * 1000
        logger.info(
            "api_request method=%s path=%s status=%s duration_ms=%.2f user=%s",
            request.method,
            request.url.path,
            response.status_code,
            duration_ms,
            user,
        )
        return response

    @app.get("/healthz", tags=["system"])
    async def healthz() -> dict:
        return {"status": "ok", "ai_configured": provider is not None}

    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    return app


def _default_provider(config: AppConfig) -> Optional[ChatProvider]:
    try:
        return create_provider("gemini", config.gemini_api_key, config.gemini_model)
    except ValueError as exc:
        logger.warning("AI provider disabled: %s", exc)
        return None


def main() -> None:
    """Run development API server."""
    import uvicorn

    uvicorn.run("careerflow.web.app:create_app", factory=True, host="127.0.0.1", port=8000)

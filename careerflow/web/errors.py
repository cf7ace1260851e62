"""API error type, the error factories used across the web layer, and handlers.

Every failure leaves the API as ``{"error": {"code", "message", "details"}}``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ..domain.resume_validator import ValidationResult


class APIError(Exception):
    """Error carrying its HTTP status and a stable machine-readable code."""

    def __init__(
        self,
        status_code: int,
        code: str,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.code = code
        self.message = message
        self.details = details or {}

    def to_dict(self) -> Dict[str, Any]:
        return {"error": {"code": self.code, "message": self.message, "details": self.details}}


# ---------------------------------------------------------------------------
# Factories
# ---------------------------------------------------------------------------


def unauthorized() -> APIError:
    return APIError(401, "UNAUTHORIZED", "Unauthorized")


def bad_request(message: str) -> APIError:
    return APIError(400, "BAD_REQUEST", message)


def not_found(code: str, message: str) -> APIError:
    return APIError(404, code, message)


def upstream_failure(code: str, message: str, reason: str) -> APIError:
    """A remote service (model or ML API) failed; the request is not retried."""
    return APIError(502, code, message, {"reason": reason})


def provider_not_configured() -> APIError:
    return APIError(503, "PROVIDER_NOT_CONFIGURED", "AI provider is not configured (set GEMINI_API_KEY)")


def validation_failed(result: ValidationResult, message: str = "Form validation failed") -> APIError:
    """422 carrying the first message per form field."""
    return APIError(422, "VALIDATION_FAILED", message, {"fields": result.field_errors()})


# ---------------------------------------------------------------------------
# Handlers
# ---------------------------------------------------------------------------


async def api_error_handler(_: Request, exc: APIError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content=exc.to_dict())


async def validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Report malformed request bodies as 400 with per-field messages."""
    errors = jsonable_encoder(exc.errors())
    error = APIError(
        400,
        "BAD_REQUEST",
        "Invalid request payload",
        {"fields": _payload_fields(errors), "errors": errors},
    )
    return JSONResponse(status_code=error.status_code, content=error.to_dict())


def _payload_fields(errors: List[Dict[str, Any]]) -> Dict[str, str]:
    fields: Dict[str, str] = {}
    for item in errors:
        loc = [str(part) for part in item.get("loc", ()) if part != "body"]
        fields.setdefault(".".join(loc) or "body", str(item.get("msg", "")))
    return fields

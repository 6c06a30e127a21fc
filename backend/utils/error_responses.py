"""Builders for the JSON error envelope returned by every failing endpoint.

Each payload carries the current request ID and a timezone-aware timestamp.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from backend.schemas.error import (
    ErrorResponse,
    ErrorType,
    ValidationErrorDetail,
    ValidationErrorResponse,
)
from backend.utils.request_context import get_request_id

__all__ = [
    "build_error_response",
    "build_validation_error_response",
    "validation_details",
]


def validation_details(errors: Iterable[Mapping[str, Any]]) -> list[ValidationErrorDetail]:
    """Flatten pydantic/FastAPI error dicts into ``field``/``message`` pairs."""
    return [
        ValidationErrorDetail(
            field=".".join(str(part) for part in error.get("loc", ())),
            message=error.get("msg", "Invalid value"),
            value=error.get("input"),
        )
        for error in errors
    ]


def build_validation_error_response(
    errors: Iterable[Mapping[str, Any]],
    *,
    path: str,
    status_code: int = 422,
    request_id: str | None = None,
) -> ValidationErrorResponse:
    details = validation_details(errors)
    return ValidationErrorResponse(
        message="Request validation failed",
        detail=f"{len(details)} validation error(s)",
        status_code=status_code,
        request_id=request_id or get_request_id(),
        path=path,
        errors=details,
    )


def build_error_response(
    error_type: ErrorType,
    message: str,
    *,
    status_code: int,
    path: str,
    detail: str | None = None,
    request_id: str | None = None,
) -> ErrorResponse:
    return ErrorResponse(
        error_type=error_type,
        message=message,
        detail=detail,
        status_code=status_code,
        request_id=request_id or get_request_id(),
        path=path,
    )

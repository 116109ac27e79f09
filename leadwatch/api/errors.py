"""Unified API error response helpers."""
from __future__ import annotations

from typing import Any, NoReturn

from fastapi import HTTPException, Request

from leadwatch.core.exceptions import (
    FatalScanError,
    ForbiddenError,
    InvalidArgumentError,
    LeadwatchError,
    NotFoundError,
)


def build_error_payload(
    *,
    code: str,
    message: str,
    detail: Any = None,
    context: dict[str, Any] | None = None,
    request: Request | None = None,
) -> dict[str, Any]:
    payload_context = context.copy() if context else {}
    if request is not None:
        payload_context.setdefault("request_id", getattr(request.state, "request_id", None))
        payload_context.setdefault("correlation_id", getattr(request.state, "correlation_id", None))
        payload_context.setdefault("path", request.url.path)
        payload_context.setdefault("method", request.method)

    return {
        "code": code,
        "message": message,
        "detail": detail,
        "context": payload_context,
    }


def raise_api_error(
    *,
    status_code: int,
    code: str,
    message: str,
    detail: Any = None,
    context: dict[str, Any] | None = None,
) -> NoReturn:
    raise HTTPException(
        status_code=status_code,
        detail={
            "code": code,
            "message": message,
            "detail": detail,
            "context": context or {},
        },
    )


def raise_for_domain_error(exc: LeadwatchError) -> NoReturn:
    """Translate an engine error into the matching HTTP error."""
    if isinstance(exc, NotFoundError):
        raise_api_error(
            status_code=404,
            code=f"{exc.entity.lower()}_not_found",
            message=f"{exc.entity} not found",
            detail=str(exc),
            context={"id": exc.entity_id},
        )
    if isinstance(exc, ForbiddenError):
        raise_api_error(
            status_code=403,
            code="forbidden",
            message="Forbidden",
            detail=str(exc),
            context={"id": exc.entity_id},
        )
    if isinstance(exc, InvalidArgumentError):
        raise_api_error(
            status_code=400,
            code="invalid_argument",
            message=exc.reason,
            detail=str(exc),
            context={"field": exc.field},
        )
    if isinstance(exc, FatalScanError):
        raise_api_error(
            status_code=500,
            code="scan_failed",
            message="Failed to check inactivity",
            detail=str(exc),
        )
    raise exc

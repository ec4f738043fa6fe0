"""
Error-handling middleware - maps engine errors to RFC 7807 responses.

The engine raises :class:`~hookd.core.errors.HookdError` subclasses and
knows nothing about HTTP; this module is the only place categories turn
into status codes.  Internal errors are logged with their full cause and
answered with a generic message so internals never reach the client.
"""

from __future__ import annotations

from fastapi import Request
from fastapi.responses import JSONResponse

from hookd.api.schemas.common import ProblemDetail
from hookd.core.errors import ErrorCategory, HookdError
from hookd.core.logging import get_logger

logger = get_logger(__name__)

# ── Error category → HTTP status mapping ─────────────────────────────────

ERROR_CATEGORY_TO_STATUS: dict[ErrorCategory, int] = {
    ErrorCategory.NOT_FOUND: 404,
    ErrorCategory.INVALID_RANGE: 400,
    ErrorCategory.RANGE_NOT_SATISFIABLE: 416,
    ErrorCategory.CONFIG: 500,
    ErrorCategory.INTERNAL: 500,
}


def status_for_category(category: ErrorCategory) -> int:
    """Resolve an error category to HTTP status, defaulting to 500."""
    return ERROR_CATEGORY_TO_STATUS.get(category, 500)


def problem_response(
    *,
    status: int,
    title: str,
    detail: str = "",
    instance: str = "",
    code: str = "INTERNAL",
) -> JSONResponse:
    """Build a RFC 7807 JSON error response."""
    body = ProblemDetail(
        title=title,
        status=status,
        detail=detail,
        instance=instance,
        code=code,
    )
    return JSONResponse(
        status_code=status,
        content=body.model_dump(),
        media_type="application/problem+json",
    )


async def hookd_error_handler(request: Request, exc: HookdError) -> JSONResponse:
    """Translate a :class:`HookdError` into a Problem Details response."""
    status = status_for_category(exc.category)
    if status >= 500:
        logger.error(
            "request_failed",
            path=request.url.path,
            exc_info=exc,
            **exc.to_dict(),
        )
        return problem_response(
            status=status,
            title="Couldn't handle request",
            instance=request.url.path,
            code=exc.category.value,
        )
    logger.debug("request_rejected", path=request.url.path, **exc.to_dict())
    return problem_response(
        status=status,
        title=exc.message,
        instance=request.url.path,
        code=exc.category.value,
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all for unhandled exceptions - returns 500 with ProblemDetail."""
    logger.error("request_crashed", path=request.url.path, exc_info=exc)
    return problem_response(
        status=500,
        title="Internal Server Error",
        detail="An unexpected error occurred.",
        instance=request.url.path,
    )

"""
Common API schemas - RFC 7807 errors and the health envelope.

Successful responses use the engine's own types (plain-text instance id,
the :class:`~hookd.core.models.Info` record, plain-text logs).  Every
4xx/5xx response uses :class:`ProblemDetail`.

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field


class ProblemDetail(BaseModel):
    """RFC 7807 «Problem Details for HTTP APIs».

    Error Codes:
        - ``NOT_FOUND`` (404): Unknown hook, instance, or log stream
        - ``INVALID_RANGE`` (400): Malformed ``Range`` header
        - ``RANGE_NOT_SATISFIABLE`` (416): Range start beyond end of log
        - ``INTERNAL`` (500): Unexpected server error

    Example:
        {
            "type": "about:blank",
            "title": "No hook with this name configured",
            "status": 404,
            "detail": "",
            "instance": "/hook/deploy",
            "code": "NOT_FOUND"
        }
    """

    type: str = Field(default="about:blank", description="Error type URI (usually 'about:blank')")
    title: str = Field(description="Short human-readable error summary")
    status: int = Field(description="HTTP status code (e.g., 400, 404, 500)")
    detail: str = Field(default="", description="Human-readable explanation of the error")
    instance: str = Field(default="", description="URI of the failing request")
    code: str = Field(default="INTERNAL", description="Machine-readable error category")


class HealthResponse(BaseModel):
    """Liveness response returned by ``GET /health``."""

    status: Literal["healthy", "degraded", "unhealthy"] = "healthy"
    service: str = "hookd"
    version: str = ""
    hooks: int = Field(default=0, description="Number of configured hooks")
    running: int = Field(default=0, description="Instances supervised by this process")

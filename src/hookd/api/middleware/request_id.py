"""Request-ID middleware - correlates a launch request with its instance.

Manifesto:
    A client may send ``X-Request-ID``; otherwise a UUID4 is generated.
    The ID is echoed back on the response and bound into the structlog
    contextvars for the duration of the request.  The supervisor task
    spawned by ``POST /hook/{name}`` copies that context when it is
    created, so ``hook_started``, ``instance_timed_out`` and
    ``instance_finished`` all carry the ``request_id`` of the launch
    that caused them.

Tags:
    hookd, api, middleware, request-id, correlation

Doc-Types:
    api-reference
"""

from __future__ import annotations

import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from hookd.core.logging import LogContext


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Attach a unique request ID to every request/response cycle."""

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = request.headers.get("X-Request-ID", str(uuid.uuid4()))
        request.state.request_id = request_id
        async with LogContext(request_id=request_id):
            response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response

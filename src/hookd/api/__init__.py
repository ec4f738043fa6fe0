"""
HTTP transport for hookd.

Provides a FastAPI application factory whose routers are thin wrappers
around the execution engine (``hookd.execution``).  This package handles
only transport concerns: request parsing, range headers, serialisation,
and mapping :class:`~hookd.core.errors.HookdError` categories to status
codes.

Quick start::

    from hookd.api import create_app

    app = create_app()  # ready for uvicorn

Tags:
    hookd, api, REST, FastAPI, transport-layer

Doc-Types:
    api-reference
"""

from hookd.api.app import create_app

__all__ = ["create_app"]

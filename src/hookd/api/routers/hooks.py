"""
Hooks router - start hook instances.

Endpoints:
    POST   /hook/{name}     Start an instance, returns its id as text

Tags:
    hookd, api, hooks, launch

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Path
from fastapi.responses import PlainTextResponse

from hookd.api.deps import Launcher, Snapshot
from hookd.core.models import LaunchRequest

router = APIRouter()


@router.post("/hook/{name}", response_class=PlainTextResponse)
async def start_hook(
    launcher: Launcher,
    snapshot: Snapshot,
    body: LaunchRequest,
    name: Annotated[str, Path(description="Configured hook name")],
) -> PlainTextResponse:
    """Start a hook and return its instance id.

    Returns as soon as the process is spawned; poll
    ``GET /status/{id}`` for completion.  Vars that the hook doesn't
    allow are dropped silently.
    """
    instance_id = await launcher.start(name, body, snapshot)
    return PlainTextResponse(instance_id)

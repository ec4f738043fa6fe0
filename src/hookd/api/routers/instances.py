"""
Instances router - status and logs of hook instances.

Endpoints:
    GET    /status/{id}           Status record (JSON)
    GET    /status/{id}/stdout    Standard output log (text, Range-aware)
    GET    /status/{id}/stderr    Standard error log (text, Range-aware)

Log endpoints honour a single ``Range: bytes=...`` header.  A partial
read answers ``206`` with the effective ``Content-Range``, which may be
shorter than requested: content is cut back to the last complete line.

Tags:
    hookd, api, status, logs, http-range

Doc-Types: API_REFERENCE
"""

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Header, Path
from fastapi.responses import PlainTextResponse, Response

from hookd.api.deps import Logs, Statuses
from hookd.api.ranges import content_range_header, parse_range_header

router = APIRouter(prefix="/status")

InstanceId = Annotated[str, Path(description="Instance id returned by POST /hook/{name}")]
RangeHeader = Annotated[str | None, Header(alias="Range")]


@router.get("/{instance_id}")
async def hook_status(statuses: Statuses, instance_id: InstanceId) -> Response:
    """Read the current status record of an instance."""
    info = await statuses.read(instance_id)
    return Response(content=info.to_json(), media_type="application/json")


async def _log_response(
    logs: Logs,
    stream: str,
    instance_id: str,
    range_header: str | None,
) -> PlainTextResponse:
    byte_range = parse_range_header(range_header)
    log_slice = await logs.read(stream, instance_id, byte_range)
    headers = {"Accept-Ranges": "bytes"}
    content_range = content_range_header(log_slice) if log_slice.partial else None
    if content_range is None:
        # whole log, or a range that trimmed down to nothing
        return PlainTextResponse(log_slice.content, headers=headers)
    headers["Content-Range"] = content_range
    return PlainTextResponse(log_slice.content, status_code=206, headers=headers)


@router.get("/{instance_id}/stdout", response_class=PlainTextResponse)
async def hook_stdout(
    logs: Logs,
    instance_id: InstanceId,
    range_header: RangeHeader = None,
) -> PlainTextResponse:
    """Read the stdout log of an instance."""
    return await _log_response(logs, "stdout", instance_id, range_header)


@router.get("/{instance_id}/stderr", response_class=PlainTextResponse)
async def hook_stderr(
    logs: Logs,
    instance_id: InstanceId,
    range_header: RangeHeader = None,
) -> PlainTextResponse:
    """Read the stderr log of an instance."""
    return await _log_response(logs, "stderr", instance_id, range_header)

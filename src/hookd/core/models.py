"""
Value objects shared by the launcher, supervisor and readers.

- :class:`LaunchRequest` - body of a launch request (``{"vars": {...}}``)
- :class:`RequestSnapshot` - audit copy of the HTTP request that launched
  an instance
- :class:`Info` - the persisted status record (``info.json``)

Schema evolution:
    Every field that can be absent (``vars``, ``finished``, ``success``,
    ``peer_address``) is optional with a default, is omitted on
    serialization when unset, and unknown fields are ignored on parse.
    Records written by older or newer daemons stay readable.

Tags:
    hookd, models, pydantic, status-record

Doc-Types:
    api-reference
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from hookd.core.config import HookDefinition


def utcnow() -> datetime:
    return datetime.now(UTC)


class LaunchRequest(BaseModel):
    """Configuration for running a hook, passed when creating an instance."""

    vars: dict[str, str] = Field(
        default_factory=dict,
        description="Env vars for the hook; filtered to the hook's allowed keys",
    )

    def filter(self, allowed_keys: Iterable[str]) -> None:
        """Drop every var whose key isn't allowed (in place, silently)."""
        allowed = set(allowed_keys)
        for key in [k for k in self.vars if k not in allowed]:
            del self.vars[key]


class RequestSnapshot(BaseModel):
    """Request parameters of the HTTP request that spawned an instance."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    uri: str
    method: str
    version: str
    headers: dict[str, str] = Field(default_factory=dict)
    peer_address: str | None = None

    @classmethod
    def from_parts(
        cls,
        *,
        uri: str,
        method: str,
        http_version: str,
        headers: Iterable[tuple[str | bytes, str | bytes]] | Mapping[str, str],
        peer_address: str | None = None,
    ) -> RequestSnapshot:
        """Build a snapshot from a generic request descriptor.

        Pure function; any transport can supply the parts.  Header names
        are lowercased, and headers whose value isn't plain ASCII text
        are skipped.  Repeated headers keep the last value.
        """
        items = headers.items() if isinstance(headers, Mapping) else headers
        collected: dict[str, str] = {}
        for key, value in items:
            try:
                name = key.decode("latin-1") if isinstance(key, bytes) else key
                text = value.decode("ascii") if isinstance(value, bytes) else value
            except UnicodeDecodeError:
                continue
            if not text.isascii():
                continue
            collected[name.lower()] = text
        return cls(
            uri=uri,
            method=method.upper(),
            version=http_version,
            headers=collected,
            peer_address=peer_address,
        )


class Info(BaseModel):
    """Info about a hook instance - the on-disk status record.

    Invariant: while ``running`` is true, ``finished`` and ``success`` are
    absent.  :meth:`mark_finished` performs the single transition to
    ``running=False`` and sets both.
    """

    model_config = ConfigDict(extra="ignore")

    request: RequestSnapshot
    config: HookDefinition
    vars: dict[str, str] | None = None
    running: bool = True
    started: datetime
    finished: datetime | None = None
    success: bool | None = None

    def mark_finished(self, success: bool, finished: datetime | None = None) -> None:
        if not self.running:
            raise ValueError("instance already finished")
        self.running = False
        self.success = success
        self.finished = finished or utcnow()

    def to_json(self) -> str:
        return self.model_dump_json(indent=2, exclude_none=True)

    @classmethod
    def from_json(cls, content: str | bytes) -> Info:
        return cls.model_validate_json(content)


__all__ = [
    "Info",
    "LaunchRequest",
    "RequestSnapshot",
    "utcnow",
]

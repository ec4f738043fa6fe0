"""API schemas package.

Manifesto:
    Pydantic schemas define the API contract.  The status record itself
    is :class:`hookd.core.models.Info`; only transport envelopes live here.

Tags:
    hookd, api, schemas, pydantic

Doc-Types:
    api-reference
"""

from hookd.api.schemas.common import HealthResponse, ProblemDetail

__all__ = ["HealthResponse", "ProblemDetail"]

"""Error envelope schema written onto failed responses."""

from __future__ import annotations

from pydantic import BaseModel
from pydantic import ConfigDict


class ErrorResponse(BaseModel):
    """Flat error body: kind tag, human-readable description, trace token."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    error: str
    error_description: str
    trace: str

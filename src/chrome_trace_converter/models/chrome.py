"""Pydantic model for one Chrome Trace Event.

Field declaration order is the JSON key order: `name, cat, ph, ts, pid, tid,
args`. Consumers diff traces byte-for-byte, so do not reorder the fields.
"""
from __future__ import annotations

from typing import Dict, Literal

from pydantic import BaseModel, Field

Phase = Literal["B", "E"]

BEGIN: Phase = "B"
END: Phase = "E"


class TraceEvent(BaseModel):
    """A begin or end marker of a duration slice on the trace timeline."""

    name: str
    cat: str
    ph: Phase
    ts: int = Field(ge=0, description="Timestamp in microseconds")
    pid: int = 0  # single process namespace
    tid: int = Field(default=0, ge=0)
    args: Dict[str, str] = Field(default_factory=dict)

    def to_json(self) -> str:
        """Render as compact JSON (no whitespace, non-ASCII left unescaped)."""
        return self.model_dump_json()

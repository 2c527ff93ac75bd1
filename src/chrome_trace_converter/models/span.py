"""Pydantic models for decoded span records.

These models give a typed, validated view of one `TraceSpan` message read
from the binary log. They are produced by the decoder and consumed by the
`mapper` module; a record is not retained after its events are built.
"""
from __future__ import annotations

from typing import List

from pydantic import BaseModel, Field


class Annotation(BaseModel):
    """A free-form key/value pair attached to a span."""

    name: str
    value: str


class SpanRecord(BaseModel):
    """A named, timestamped interval with its annotations.

    Timestamps are nanoseconds. `end >= start` is expected but deliberately not
    validated: malformed intervals pass through to the output unchanged.
    """

    name: str
    start: int = Field(ge=0)
    end: int = Field(ge=0)
    # Source order, duplicates allowed. Resolution happens in mapping.annotations.
    annotations: List[Annotation] = Field(default_factory=list)

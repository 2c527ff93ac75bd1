"""Typed records flowing through the converter: decoded spans in, trace events out."""
from __future__ import annotations

from .chrome import BEGIN, END, Phase, TraceEvent
from .span import Annotation, SpanRecord

__all__ = ["Annotation", "SpanRecord", "TraceEvent", "Phase", "BEGIN", "END"]

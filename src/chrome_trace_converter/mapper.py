"""Public facade for span record to Chrome trace event mapping.

Each span record maps to exactly two events, a begin (`ph="B"`) at the span
start and an end (`ph="E"`) at the span end. The pair shares `name`, `cat`,
`pid`, `tid` and `args`; only `ph` and `ts` differ. Annotation handling is
delegated to `chrome_trace_converter.mapping.annotations`.

Public Functions:
    map_span_to_events: Convert one SpanRecord to its (begin, end) event pair
"""
from __future__ import annotations

from typing import Tuple

from .mapping.annotations import (
    build_annotation_map,
    render_args,
    resolve_category,
    resolve_thread_id,
)
from .mapping.time_utils import ns_to_us
from .models.chrome import BEGIN, END, TraceEvent
from .models.span import SpanRecord

__all__ = ["map_span_to_events", "SINGLE_PID"]

SINGLE_PID = 0


def map_span_to_events(record: SpanRecord) -> Tuple[TraceEvent, TraceEvent]:
    """Convert a span record into its begin and end trace events.

    Args:
        record: Decoded span with nanosecond timestamps and raw annotations

    Returns:
        `(begin, end)` events with microsecond timestamps

    Note:
        `end < start` is not corrected; the events are emitted as recorded.
    """
    annotation_map = build_annotation_map(record.annotations)
    cat = resolve_category(annotation_map)
    tid = resolve_thread_id(annotation_map)
    args = render_args(annotation_map)

    begin = TraceEvent(
        name=record.name,
        cat=cat,
        ph=BEGIN,
        ts=ns_to_us(record.start),
        pid=SINGLE_PID,
        tid=tid,
        args=args,
    )
    end = begin.model_copy(update={"ph": END, "ts": ns_to_us(record.end)})
    return begin, end

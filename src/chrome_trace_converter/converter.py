"""Trace assembly: span records in, Chrome trace event JSON array out.

This module holds the conversion pipeline:

1.  Write the array opening `[` to the sink before anything is decoded.
2.  Decode records one by one and map each to a begin/end event pair,
    serializing both right away and buffering them with their raw
    nanosecond timestamps.
3.  Stable-sort the buffer by timestamp. Ties keep stream order, so a
    record's begin still precedes its own end when both fall on the same
    nanosecond.
4.  Write each event followed by `,\\n`.

The array is never closed and the final comma is kept. Trace viewers accept
this form and existing tooling compares output byte-for-byte, so it must stay
as is.

If decoding fails part way, the buffered events are dropped and only the
opening `[` has reached the sink. Memory grows with the number of records;
an incremental merge (timestamp min-heap with lookahead) is the place to
start if unbounded logs ever need support.
"""
from __future__ import annotations

import logging
from typing import BinaryIO, Iterable, List, Optional, Tuple

from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from .config import Settings, get_settings
from .decoder import CapnpSpanDecoder, DecoderFactory, SpanRecordDecoder
from .errors import SerializationError
from .mapper import map_span_to_events
from .models.span import SpanRecord

logger = logging.getLogger(__name__)

__all__ = [
    "ARRAY_OPEN",
    "EVENT_TERMINATOR",
    "collect_events",
    "convert",
    "convert_records",
    "sort_events",
    "write_events",
]

ARRAY_OPEN = "[\n"
EVENT_TERMINATOR = ",\n"

# (raw nanosecond timestamp, serialized event)
TimedEvent = Tuple[int, str]


def collect_events(records: Iterable[SpanRecord]) -> List[TimedEvent]:
    """Map every record to its serialized event pair, in stream order.

    Raises:
        DecodeError: propagated from the decoder; nothing is returned.
        SerializationError: an event could not be built or rendered.
    """
    events: List[TimedEvent] = []
    for record in records:
        try:
            begin, end = map_span_to_events(record)
            begin_json = begin.to_json()
            end_json = end.to_json()
        except (ValidationError, PydanticSerializationError) as e:
            raise SerializationError(
                f"cannot serialize span {record.name!r}: {e}"
            ) from e
        events.append((record.start, begin_json))
        events.append((record.end, end_json))
    return events


def sort_events(events: List[TimedEvent]) -> List[TimedEvent]:
    """Order events by raw timestamp; equal timestamps keep their input order."""
    return sorted(events, key=lambda event: event[0])


def write_events(events: Iterable[TimedEvent], sink: BinaryIO) -> int:
    count = 0
    for _, payload in events:
        sink.write(payload.encode("utf-8"))
        sink.write(EVENT_TERMINATOR.encode("utf-8"))
        count += 1
    return count


def convert_records(records: Iterable[SpanRecord], output_sink: BinaryIO) -> int:
    """Run the assembly pipeline over already-decoded records.

    Args:
        records: Span records in stream order; may raise `DecodeError` mid-way
        output_sink: Byte-writable destination; flushing is the caller's job

    Returns:
        Number of events written (twice the number of records)
    """
    output_sink.write(ARRAY_OPEN.encode("utf-8"))
    events = collect_events(records)
    logger.debug("Collected %d event(s); sorting", len(events))
    written = write_events(sort_events(events), output_sink)
    logger.info("Converted %d span(s) into %d trace event(s)", written // 2, written)
    return written


def convert(
    input_stream: BinaryIO,
    output_sink: BinaryIO,
    *,
    decoder_factory: Optional[DecoderFactory] = None,
    settings: Optional[Settings] = None,
) -> int:
    """Convert a binary span log into a Chrome trace event JSON array.

    Args:
        input_stream: Byte-readable span log
        output_sink: Byte-writable destination
        decoder_factory: Builds the record iterable from `input_stream`;
            defaults to `CapnpSpanDecoder` configured from settings
        settings: Overrides the cached application settings

    Returns:
        Number of events written

    Raises:
        ConversionError: the log was malformed or an event failed to serialize.
            Only the opening `[` has been written in that case.
        OSError: reading the input or writing the output failed.
    """
    if decoder_factory is None:
        settings = settings or get_settings()
        traversal_limit = settings.TRAVERSAL_LIMIT_IN_WORDS
        nesting_limit = settings.NESTING_LIMIT

        def _capnp_decoder(stream: BinaryIO) -> SpanRecordDecoder:
            return CapnpSpanDecoder(
                stream,
                traversal_limit_in_words=traversal_limit,
                nesting_limit=nesting_limit,
            )

        decoder_factory = _capnp_decoder

    return convert_records(decoder_factory(input_stream), output_sink)

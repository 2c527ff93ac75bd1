"""Record decoding layer for packed Cap'n Proto span logs.

This module is the "read" side of the converter. A span log is a sequence of
`TraceSpan` messages (see `schema/tracepoint.capnp`), each written with Cap'n
Proto packed framing and concatenated in recording order.

`CapnpSpanDecoder` yields one `SpanRecord` per message. Iteration stops
normally only when the stream ends exactly on a message boundary. Anything
else raises `DecodeError` and ends the stream: a truncated message, trailing
bytes after the last record, a corrupt segment table or unreadable text.
There is no attempt to skip ahead to the next good record.

Message boundaries are located by walking the packed encoding far enough to
read the segment table and count the message's words; the bytes of each
message are then handed to pycapnp, which does the actual decoding and
validation.

Any `SpanRecordDecoder` (any iterable of `SpanRecord`) can drive the
converter, so tests can feed records from memory without Cap'n Proto.
"""
from __future__ import annotations

import logging
import struct
from functools import lru_cache
from pathlib import Path
from typing import Any, BinaryIO, Callable, Dict, Iterator, Optional, Protocol

import capnp
from pydantic import ValidationError

from .errors import DecodeError
from .models.span import Annotation, SpanRecord

logger = logging.getLogger(__name__)

__all__ = [
    "SCHEMA_PATH",
    "CapnpSpanDecoder",
    "DecoderFactory",
    "SpanRecordDecoder",
    "load_schema",
    "packed_message_length",
]

SCHEMA_PATH = Path(__file__).resolve().parent / "schema" / "tracepoint.capnp"

# Same cap Cap'n Proto's own stream readers apply.
MAX_SEGMENTS = 512

_WORD = 8


class SpanRecordDecoder(Protocol):
    """Anything that yields span records in stream order."""

    def __iter__(self) -> Iterator[SpanRecord]: ...


DecoderFactory = Callable[[BinaryIO], SpanRecordDecoder]


@lru_cache(maxsize=1)
def load_schema() -> Any:
    """Compile the bundled tracepoint schema once per process."""
    return capnp.load(str(SCHEMA_PATH))


def _message_words(header: bytes) -> Optional[int]:
    """Total words of a message from its unpacked prefix, or None if the
    segment table is not complete yet."""
    if len(header) < _WORD:
        return None
    (last_segment,) = struct.unpack_from("<I", header, 0)
    segments = last_segment + 1
    if segments > MAX_SEGMENTS:
        raise DecodeError(f"segment table declares {segments} segments")
    table_words = segments // 2 + 1
    if len(header) < table_words * _WORD:
        return None
    sizes = struct.unpack_from(f"<{segments}I", header, 4)
    return table_words + sum(sizes)


def packed_message_length(data: bytes, start: int = 0) -> int:
    """Return the number of bytes the packed message at `start` occupies.

    Raises:
        DecodeError: the data ends before the message does, or a run of
            packed words spills past the end of the message.
    """
    pos = start
    end = len(data)
    header = bytearray()
    total: Optional[int] = None
    produced = 0

    def take(n: int) -> bytes:
        nonlocal pos
        if pos + n > end:
            raise DecodeError(f"truncated message at byte {start} ({end - start} byte(s) left)")
        chunk = data[pos:pos + n]
        pos += n
        return chunk

    while total is None or produced < total:
        tag = take(1)[0]
        word = bytearray(_WORD)
        for bit in range(_WORD):
            if tag & (1 << bit):
                word[bit] = take(1)[0]
        run = b""
        run_words = 0
        if tag == 0x00:
            run_words = take(1)[0]
            if total is None:
                run = bytes(run_words * _WORD)
        elif tag == 0xFF:
            run_words = take(1)[0]
            run = take(run_words * _WORD)
        produced += 1 + run_words
        if total is None:
            header += word
            header += run
            total = _message_words(bytes(header))
    if produced != total:
        raise DecodeError(f"packed run crosses the end of the message at byte {start}")
    return pos - start


def _to_record(span: Any) -> SpanRecord:
    # Field access is lazy in pycapnp; pointer and text errors surface here.
    return SpanRecord(
        name=span.name,
        start=span.start,
        end=span.end,
        annotations=[
            Annotation(name=item.name, value=item.value) for item in span.annotations
        ],
    )


class CapnpSpanDecoder:
    """Iterate `SpanRecord`s from a packed `TraceSpan` message stream.

    The whole input is read up front; the converter buffers every event before
    sorting anyway, so this does not change the memory profile. Records are
    still decoded and yielded one at a time.
    """

    def __init__(
        self,
        stream: BinaryIO,
        *,
        traversal_limit_in_words: Optional[int] = None,
        nesting_limit: Optional[int] = None,
    ):
        self._stream = stream
        self._reader_options: Dict[str, int] = {}
        if traversal_limit_in_words is not None:
            self._reader_options["traversal_limit_in_words"] = traversal_limit_in_words
        if nesting_limit is not None:
            self._reader_options["nesting_limit"] = nesting_limit

    def __iter__(self) -> Iterator[SpanRecord]:
        data = self._stream.read()
        offset = 0
        index = 0
        while offset < len(data):
            try:
                length = packed_message_length(data, offset)
            except DecodeError as e:
                raise DecodeError(f"malformed record #{index}: {e}") from e
            chunk = data[offset:offset + length]
            try:
                span = load_schema().TraceSpan.from_bytes_packed(chunk, **self._reader_options)
                record = _to_record(span)
            except (capnp.KjException, UnicodeDecodeError, ValidationError) as e:
                raise DecodeError(f"malformed record #{index}: {e}") from e
            offset += length
            index += 1
            yield record
        logger.debug("Decoded %d record(s) from %d byte(s)", index, len(data))

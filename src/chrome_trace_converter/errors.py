"""Error taxonomy for the conversion pipeline.

Every failure that should end a run surfaces as a `ConversionError` so the CLI
can report it with a single message. Nothing here is retried.
"""
from __future__ import annotations

__all__ = ["ConversionError", "DecodeError", "SerializationError"]


class ConversionError(RuntimeError):
    """A span log could not be converted."""


class DecodeError(ConversionError):
    """The next record could not be decoded, or one of its fields was unreadable.

    Terminal for the whole stream: the decoder never resynchronises.
    """


class SerializationError(ConversionError):
    """A trace event could not be rendered as JSON."""

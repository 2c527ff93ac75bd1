"""Annotation map construction and reserved-key resolution.

A span's annotation list is an ordered sequence of key/value pairs in which
keys may repeat. Mapping collapses it into a dict (last write wins) and reads
two reserved keys out of it:

    categories -> trace event `cat`, default "all"
    tid        -> trace event `tid`, unsigned 64-bit integer, default 0

Missing keys and unparseable thread ids fall back identically; callers cannot
tell the two apart.

Public Functions:
    build_annotation_map: Collapse annotations into a dict, last write wins
    resolve_category: Category for the event pair
    resolve_thread_id: Thread id for the event pair
    render_args: Key-sorted copy used as the event `args`
"""
from __future__ import annotations

import re
from typing import Dict, Iterable, Mapping

from ..models.span import Annotation

__all__ = [
    "CATEGORIES_KEY",
    "TID_KEY",
    "DEFAULT_CATEGORY",
    "DEFAULT_TID",
    "build_annotation_map",
    "resolve_category",
    "resolve_thread_id",
    "render_args",
]

CATEGORIES_KEY = "categories"
TID_KEY = "tid"
DEFAULT_CATEGORY = "all"
DEFAULT_TID = 0

_U64_MAX = 2**64 - 1
# ASCII digits only; int() alone would also take whitespace, underscores and
# non-ASCII digits.
_UNSIGNED_RE = re.compile(r"\+?[0-9]+")


def build_annotation_map(annotations: Iterable[Annotation]) -> Dict[str, str]:
    """Insert annotations in order; a repeated key keeps its last value."""
    result: Dict[str, str] = {}
    for annotation in annotations:
        result[annotation.name] = annotation.value
    return result


def resolve_category(annotation_map: Mapping[str, str]) -> str:
    return annotation_map.get(CATEGORIES_KEY, DEFAULT_CATEGORY)


def resolve_thread_id(annotation_map: Mapping[str, str]) -> int:
    """Parse the `tid` annotation as an unsigned 64-bit integer.

    Returns `DEFAULT_TID` when the key is absent, the value is not a plain
    decimal number, or it does not fit in 64 bits.
    """
    raw = annotation_map.get(TID_KEY)
    if raw is None or not _UNSIGNED_RE.fullmatch(raw):
        return DEFAULT_TID
    value = int(raw)
    if value > _U64_MAX:
        return DEFAULT_TID
    return value


def render_args(annotation_map: Mapping[str, str]) -> Dict[str, str]:
    """Return the annotation map with keys in sorted order.

    Reserved keys are kept. Sorting makes `args` independent of the order the
    annotations were recorded in, matching existing trace files.
    """
    return {key: annotation_map[key] for key in sorted(annotation_map)}

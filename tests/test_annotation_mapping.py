from __future__ import annotations

import pytest

from chrome_trace_converter.mapping.annotations import (
    DEFAULT_CATEGORY,
    DEFAULT_TID,
    build_annotation_map,
    render_args,
    resolve_category,
    resolve_thread_id,
)
from chrome_trace_converter.mapping.time_utils import ns_to_us
from chrome_trace_converter.models.span import Annotation


def _annotations(*pairs):
    return [Annotation(name=k, value=v) for k, v in pairs]


def test_last_duplicate_key_wins():
    amap = build_annotation_map(
        _annotations(("phase", "parse"), ("tid", "1"), ("phase", "plan"))
    )
    assert amap == {"phase": "plan", "tid": "1"}


def test_empty_annotation_list():
    assert build_annotation_map([]) == {}


def test_category_default_and_explicit():
    assert resolve_category({}) == DEFAULT_CATEGORY == "all"
    assert resolve_category({"categories": "io,net"}) == "io,net"
    # Empty string is a value, not absence.
    assert resolve_category({"categories": ""}) == ""


@pytest.mark.parametrize(
    "raw,expected",
    [
        ("4", 4),
        ("0", 0),
        ("+7", 7),
        ("007", 7),
        (str(2**64 - 1), 2**64 - 1),
        (str(2**64), DEFAULT_TID),
        ("-1", DEFAULT_TID),
        ("", DEFAULT_TID),
        (" 4", DEFAULT_TID),
        ("4 ", DEFAULT_TID),
        ("1_000", DEFAULT_TID),
        ("0x10", DEFAULT_TID),
        ("main", DEFAULT_TID),
        ("٣", DEFAULT_TID),  # Arabic-Indic digit three
    ],
)
def test_thread_id_parsing(raw, expected):
    assert resolve_thread_id({"tid": raw}) == expected


def test_thread_id_missing_defaults_to_zero():
    assert resolve_thread_id({"categories": "io"}) == 0


def test_render_args_sorts_keys_and_keeps_reserved():
    amap = build_annotation_map(
        _annotations(("zeta", "1"), ("tid", "3"), ("categories", "gc"), ("alpha", "2"))
    )
    args = render_args(amap)
    assert list(args) == ["alpha", "categories", "tid", "zeta"]
    assert args["tid"] == "3"
    assert args["categories"] == "gc"


def test_ns_to_us_truncates():
    assert ns_to_us(1_500_000) == 1500
    assert ns_to_us(1_999) == 1
    assert ns_to_us(999) == 0
    assert ns_to_us(0) == 0

from __future__ import annotations

import pytest
from pydantic import ValidationError

from chrome_trace_converter.config import Settings


def _settings(monkeypatch, env: dict):
    for key in ("LOG_LEVEL", "TRAVERSAL_LIMIT_IN_WORDS", "NESTING_LIMIT"):
        monkeypatch.delenv(key, raising=False)
    for key, value in env.items():
        monkeypatch.setenv(key, value)
    return Settings(_env_file=None)


def test_defaults(monkeypatch):
    s = _settings(monkeypatch, {})
    assert s.LOG_LEVEL == "WARNING"
    assert s.TRAVERSAL_LIMIT_IN_WORDS is None
    assert s.NESTING_LIMIT is None


def test_env_overrides(monkeypatch):
    s = _settings(
        monkeypatch,
        {"LOG_LEVEL": " debug ", "TRAVERSAL_LIMIT_IN_WORDS": "1024", "NESTING_LIMIT": "8"},
    )
    assert s.LOG_LEVEL == "DEBUG"
    assert s.TRAVERSAL_LIMIT_IN_WORDS == 1024
    assert s.NESTING_LIMIT == 8


def test_blank_log_level_falls_back(monkeypatch):
    assert _settings(monkeypatch, {"LOG_LEVEL": ""}).LOG_LEVEL == "WARNING"


def test_rejects_unknown_log_level(monkeypatch):
    with pytest.raises(ValidationError):
        _settings(monkeypatch, {"LOG_LEVEL": "chatty"})


def test_rejects_non_positive_limits(monkeypatch):
    with pytest.raises(ValidationError):
        _settings(monkeypatch, {"NESTING_LIMIT": "0"})

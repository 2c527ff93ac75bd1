"""Internal mapping subpackage for span to trace event transformation.

All functions within this package are pure and deterministic. The public API
lives in the top-level `mapper.py` facade.

Modules:
    annotations: Annotation map construction and reserved-key resolution
    time_utils: Nanosecond to microsecond conversion
"""
from __future__ import annotations

from . import annotations as annotations  # noqa: F401
from . import time_utils as time_utils  # noqa: F401

__all__ = ["annotations", "time_utils"]

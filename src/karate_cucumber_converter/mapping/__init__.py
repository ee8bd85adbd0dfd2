"""Internal mapping subpackage holding the unit conversions used by the mapper.

All functions within this package are pure (no file I/O) and deterministic.
The public API remains in the top-level `mapper.py` facade; callers should not
import directly from this package unless accessing helpers for testing.

Modules:
    time_utils: Epoch-millisecond timestamps and millisecond durations
"""
from __future__ import annotations

from . import time_utils as time_utils  # noqa: F401

__all__ = ["time_utils"]

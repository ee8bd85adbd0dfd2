"""Timestamp and duration conversion between Karate and Cucumber units.

Karate records scenario start times as epoch milliseconds and step durations
in (possibly fractional) milliseconds. Cucumber expects an ISO-8601 start
timestamp and integral nanosecond durations.

Public Functions:
    epoch_ms_to_iso: Epoch milliseconds to `YYYY-MM-DDTHH:MM:SS.mmmZ`
    millis_to_nanos: Milliseconds to whole nanoseconds, without float drift

Design Invariant:
    Timestamps are always rendered in UTC with a literal `Z` suffix. Invalid
    input raises instead of falling back to a default value. Tests scan the
    codebase for naive `datetime.utcnow()` usage and fail if found.  # allow-naive-datetime
"""
from __future__ import annotations

import math
from datetime import datetime, timedelta, timezone
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Union

from ..errors import DurationConversionError, TimestampConversionError

__all__ = ["epoch_ms_to_iso", "millis_to_nanos", "NANOS_PER_MILLI"]

NANOS_PER_MILLI = 1_000_000
_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def _require_finite_number(value: object, error_cls: type) -> Union[int, float]:
    # bool is an int subclass but never a meaningful time value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise error_cls(f"expected a number of milliseconds, got {value!r}")
    if isinstance(value, float) and not math.isfinite(value):
        raise error_cls(f"expected a finite number of milliseconds, got {value!r}")
    return value


def epoch_ms_to_iso(ms: Union[int, float]) -> str:
    """Convert epoch milliseconds to an ISO-8601 UTC string with millisecond precision.

    The result has the form `1970-01-01T00:00:00.000Z`. Fractional
    milliseconds are truncated toward zero. Arithmetic is done on an integer
    `timedelta` from the epoch so large values do not suffer float rounding.

    Args:
        ms: Milliseconds since 1970-01-01T00:00:00Z (negative values allowed).

    Returns:
        ISO-8601 timestamp string in UTC.

    Raises:
        TimestampConversionError: If `ms` is not a finite number or falls
            outside the years 1-9999.
    """
    value = int(_require_finite_number(ms, TimestampConversionError))
    try:
        dt = _EPOCH + timedelta(milliseconds=value)
    except (OverflowError, ValueError) as e:
        raise TimestampConversionError(
            f"epoch milliseconds {ms!r} out of supported range"
        ) from e
    return (
        f"{dt.year:04d}-{dt.month:02d}-{dt.day:02d}"
        f"T{dt.hour:02d}:{dt.minute:02d}:{dt.second:02d}"
        f".{dt.microsecond // 1000:03d}Z"
    )


def millis_to_nanos(ms: Union[int, float]) -> int:
    """Convert a millisecond duration to whole nanoseconds.

    Integers are multiplied exactly. Floats go through their shortest decimal
    representation (`repr`) so that e.g. `0.1` yields `100000` rather than
    `100000.00000000001`; sub-nanosecond remainders are rounded half-even.

    Raises:
        DurationConversionError: If `ms` is not a finite number.
    """
    value = _require_finite_number(ms, DurationConversionError)
    if isinstance(value, int):
        return value * NANOS_PER_MILLI
    nanos = Decimal(repr(value)) * NANOS_PER_MILLI
    return int(nanos.to_integral_value(rounding=ROUND_HALF_EVEN))

"""Failure types raised while converting Karate reports.

Per-document failures (`MappingFailure` and its subclasses) are recoverable:
the batch converter logs them and moves on to the next input. A
`PersistFailure` means the combined report could not be written and ends the
run.
"""
from __future__ import annotations

from typing import List, Optional

__all__ = [
    "ConverterError",
    "MappingFailure",
    "ValidationFailure",
    "ParseFailure",
    "PersistFailure",
    "TimestampConversionError",
    "DurationConversionError",
    "MISSING_SCENARIO_RESULTS",
]

MISSING_SCENARIO_RESULTS = "missing or non-list scenario results"


class ConverterError(Exception):
    """Base class for all converter errors."""


class MappingFailure(ConverterError):
    """A single source document could not be turned into a Cucumber feature.

    Attributes:
        reason: Short, stable description of what went wrong.
        context: Identifier locating the bad input (relativePath or file path).
        details: Optional structured details, one `field.path: message` each.
    """

    def __init__(
        self,
        reason: str,
        context: Optional[str] = None,
        details: Optional[List[str]] = None,
    ) -> None:
        self.reason = reason
        self.context = context
        self.details = list(details or [])
        super().__init__(self._render())

    def _render(self) -> str:
        msg = self.reason
        if self.context:
            msg = f"{msg} for {self.context}"
        if self.details:
            msg = f"{msg} ({'; '.join(self.details)})"
        return msg


class ValidationFailure(MappingFailure):
    """Document decoded as JSON but does not have the Karate feature shape."""


class ParseFailure(MappingFailure):
    """Document could not be read or decoded as JSON at all."""


class PersistFailure(ConverterError):
    """The combined Cucumber report could not be written to its destination."""

    def __init__(self, destination: str, cause: Optional[BaseException] = None) -> None:
        self.destination = destination
        self.cause = cause
        detail = f": {cause}" if cause else ""
        super().__init__(f"Error writing file {destination}{detail}")


class TimestampConversionError(ValueError):
    """Raised when an epoch millisecond value cannot be rendered as ISO-8601."""


class DurationConversionError(ValueError):
    """Raised when a millisecond duration cannot be converted to nanoseconds."""

"""
Exception hierarchy for gokz-dump.

Two severities:
- `RecordValidationError` and subclasses: one row is bad. The row is logged and
  dropped; the export carries on.
- `DumpError` and subclasses: the run cannot continue. The CLI reports it and
  exits non-zero.
"""

from __future__ import annotations

from typing import Any


class RecordValidationError(ValueError):
    """A raw row could not be turned into a Record."""


class RangeError(RecordValidationError):
    """An integer column is not an integer or does not fit its unsigned width."""

    def __init__(self, field: str, value: Any, bits: int) -> None:
        self.field = field
        self.value = value
        self.bits = bits
        super().__init__(
            f"{field}={value!r} does not fit an unsigned {bits}-bit integer"
        )


class FieldTypeError(RecordValidationError):
    """A column that must hold an integer holds something else."""

    def __init__(self, field: str, value: Any) -> None:
        self.field = field
        self.value = value
        super().__init__(f"{field}={value!r} is not an integer")


class UnknownModeError(RecordValidationError):
    def __init__(self, code: Any) -> None:
        self.code = code
        super().__init__(f"{code!r} is not a valid mode")


class TimestampFormatError(RecordValidationError):
    def __init__(self, value: Any) -> None:
        self.value = value
        super().__init__(
            f"Failed to convert date {value!r} (expected YYYY-MM-DD HH:MM:SS)"
        )


class MissingFieldError(RecordValidationError):
    def __init__(self, field: str) -> None:
        self.field = field
        super().__init__(f"{field} is missing")


class DumpError(RuntimeError):
    """Fatal error that aborts the whole export."""


class DatabaseConnectionError(DumpError):
    pass


class QueryError(DumpError):
    pass


class OutputError(DumpError):
    pass


__all__ = [
    "RecordValidationError",
    "RangeError",
    "FieldTypeError",
    "UnknownModeError",
    "TimestampFormatError",
    "MissingFieldError",
    "DumpError",
    "DatabaseConnectionError",
    "QueryError",
    "OutputError",
]

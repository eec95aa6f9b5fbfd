"""
Domain package for gokz-dump.

Exports the data definitions and error types shared by the transformer, the
writers and the orchestrator. No I/O lives here.
"""

from gokz_dump.domain.errors import (
    DatabaseConnectionError,
    DumpError,
    FieldTypeError,
    MissingFieldError,
    OutputError,
    QueryError,
    RangeError,
    RecordValidationError,
    TimestampFormatError,
    UnknownModeError,
)
from gokz_dump.domain.models import Mode, RawRow, Record
from gokz_dump.domain.steam_id import SteamID

__all__ = [
    "Mode",
    "RawRow",
    "Record",
    "SteamID",
    # Errors
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

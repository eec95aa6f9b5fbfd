"""
Row transformer for gokz-dump.

Turns raw query rows into validated `Record`s. A row either becomes exactly
one Record or is dropped with a logged reason; one bad row never stops the
batch.

Usage:
    from gokz_dump.transformer import transform_rows
    from gokz_dump.variants import CSV_VARIANT

    outcome = transform_rows(rows, CSV_VARIANT)
    print(len(outcome.records), len(outcome.failures))
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Iterable, Iterator, List, Mapping, Union

from gokz_dump.domain.errors import (
    FieldTypeError,
    MissingFieldError,
    RangeError,
    RecordValidationError,
    TimestampFormatError,
    UnknownModeError,
)
from gokz_dump.domain.models import Mode, Record
from gokz_dump.domain.steam_id import SteamID
from gokz_dump.utils.logging import get_logger
from gokz_dump.variants import ExportVariant

log = get_logger(__name__)

CREATED_FORMAT = "%Y-%m-%d %H:%M:%S"
_CREATED_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2}", re.ASCII)


def _integer(row: Mapping[str, Any], column: str) -> int:
    value = row.get(column)
    if value is None:
        raise MissingFieldError(column)
    # bool is an int subclass but never a valid column value here
    if not isinstance(value, int) or isinstance(value, bool):
        raise FieldTypeError(column, value)
    return value


def _narrow(row: Mapping[str, Any], column: str, bits: int) -> int:
    """Read an integer column and check it fits an unsigned `bits`-wide integer."""
    value = _integer(row, column)
    if not 0 <= value < (1 << bits):
        raise RangeError(column, value, bits)
    return value


def _text(row: Mapping[str, Any], column: str) -> str:
    value = row.get(column)
    if value is None:
        raise MissingFieldError(column)
    return str(value)


def _mode(row: Mapping[str, Any], variant: ExportVariant) -> Mode:
    code = row.get("Mode")
    if isinstance(code, int) and not isinstance(code, bool) and code in variant.mode_codes:
        return variant.mode_codes[code]
    raise UnknownModeError(code)


def _created_on(row: Mapping[str, Any]) -> str:
    value = row.get("Created")
    if not isinstance(value, str) or not _CREATED_PATTERN.fullmatch(value):
        raise TimestampFormatError(value)
    try:
        parsed = datetime.strptime(value, CREATED_FORMAT)
    except ValueError as exc:
        raise TimestampFormatError(value) from exc
    return str(parsed)


def transform_row(row: Mapping[str, Any], variant: ExportVariant) -> Record:
    """
    Validate one raw row and build its Record.

    Raises
    ------
    RecordValidationError
        RangeError, FieldTypeError, MissingFieldError, UnknownModeError or
        TimestampFormatError, naming the offending column.
    """
    id32 = _narrow(row, "SteamID32", 32)
    time = _integer(row, "RunTime") / variant.divisor

    if variant.joined:
        extras = {
            "player_name": _text(row, "PlayerName"),
            "map_id": _narrow(row, "MapID", 16),
            "map_name": _text(row, "MapName"),
            "stage": _narrow(row, "Course", 8),
        }
    else:
        extras = {"map_id": _narrow(row, "MapCourseID", 16)}

    return Record(
        id=_narrow(row, "TimeID", 32),
        steam_id=SteamID.from_id32(id32),
        mode=_mode(row, variant),
        time=time,
        teleports=_narrow(row, "Teleports", 32),
        created_on=_created_on(row),
        **extras,
    )


@dataclass(frozen=True)
class RowFailure:
    """A dropped row: its TimeID (as found, possibly invalid) and why."""

    time_id: Any
    error: RecordValidationError


@dataclass
class TransformOutcome:
    records: List[Record] = field(default_factory=list)
    failures: List[RowFailure] = field(default_factory=list)

    @property
    def rows(self) -> int:
        return len(self.records) + len(self.failures)


def iter_results(
    rows: Iterable[Mapping[str, Any]], variant: ExportVariant
) -> Iterator[Union[Record, RowFailure]]:
    """Lazily transform rows, yielding a Record or a RowFailure per row, in order."""
    for row in rows:
        try:
            yield transform_row(row, variant)
        except RecordValidationError as exc:
            yield RowFailure(time_id=row.get("TimeID"), error=exc)


def transform_rows(rows: Iterable[Mapping[str, Any]], variant: ExportVariant) -> TransformOutcome:
    """
    Partition rows into valid Records and logged failures, keeping input order.
    """
    outcome = TransformOutcome()
    for result in iter_results(rows, variant):
        if isinstance(result, RowFailure):
            log.warning(
                f"Failed to parse record {result.time_id!r}: {result.error}",
                extra={
                    "variant": variant.name,
                    "time_id": result.time_id,
                    "error_type": type(result.error).__name__,
                },
            )
            outcome.failures.append(result)
        else:
            outcome.records.append(result)
    return outcome


__all__ = [
    "RowFailure",
    "TransformOutcome",
    "iter_results",
    "transform_row",
    "transform_rows",
]

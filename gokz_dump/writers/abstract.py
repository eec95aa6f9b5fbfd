"""
Writer interfaces and result contracts for gokz-dump.

Concrete writers (CSV, JSON) implement the RecordWriter protocol and return a
WriteResult TypedDict so the orchestrator and reporter can treat them alike.
"""

from __future__ import annotations

import abc
from datetime import datetime, timezone
from pathlib import Path
from typing import IO, Optional, Protocol, Sequence, TypedDict, runtime_checkable

from gokz_dump.domain.errors import OutputError
from gokz_dump.domain.models import Record

DUMP_FILE_PREFIX = "gokz-dump"
DUMP_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


class WriteResult(TypedDict):
    """
    Outcome of writing one dump file.
    """

    path: str
    written: int
    skipped: int


@runtime_checkable
class RecordWriter(Protocol):
    """
    Common interface all dump writers implement.

    Attributes
    ----------
    name : str
        A short machine-friendly identifier.
    extension : str
        File extension of the produced dump, without the dot.
    """

    name: str
    extension: str

    def write(self, records: Sequence[Record], columns: Sequence[str], path: Path) -> WriteResult:
        """
        Serialize every record to a newly created file at `path`.

        Raises
        ------
        OutputError
            If the file cannot be created or the batch cannot be serialized.
        """
        ...


class AbstractRecordWriter(abc.ABC):
    """
    Optional ABC helper for class-based writers.

    Subclasses set `name` and `extension` and implement `write`.
    """

    name: str
    extension: str

    @abc.abstractmethod
    def write(
        self, records: Sequence[Record], columns: Sequence[str], path: Path
    ) -> WriteResult:  # pragma: no cover - interface only
        raise NotImplementedError


def dump_file_name(extension: str, now: Optional[datetime] = None) -> str:
    """
    Build `gokz-dump-<UTC timestamp>.<extension>`.
    """
    moment = now or datetime.now(timezone.utc)
    if moment.tzinfo is not None:
        moment = moment.astimezone(timezone.utc)
    return f"{DUMP_FILE_PREFIX}-{moment.strftime(DUMP_TIMESTAMP_FORMAT)}.{extension}"


def create_dump_file(path: Path) -> IO[str]:
    """
    Open a brand new text file for writing; never truncates an existing one.
    """
    try:
        return path.open("x", encoding="utf-8", newline="")
    except OSError as exc:
        raise OutputError(f"Failed to create dump file `{path}`: {exc}") from exc


__all__ = [
    "AbstractRecordWriter",
    "RecordWriter",
    "WriteResult",
    "create_dump_file",
    "dump_file_name",
]

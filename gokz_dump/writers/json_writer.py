"""
JSON dump writer.

The whole batch is serialized in memory first and written in one go, so a
serialization failure leaves no file behind.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Sequence

from gokz_dump.domain.errors import OutputError
from gokz_dump.domain.models import Record
from gokz_dump.writers.abstract import AbstractRecordWriter, WriteResult, create_dump_file


class JsonRecordWriter(AbstractRecordWriter):
    """
    Pretty-printed array of objects, one per record.
    """

    name: str = "json"
    extension: str = "json"

    def __init__(self, indent: int = 2) -> None:
        self.indent = indent

    def serialize(self, records: Sequence[Record], columns: Sequence[str]) -> str:
        try:
            return json.dumps(
                [record.to_row(columns) for record in records],
                indent=self.indent,
                ensure_ascii=False,
            )
        except (TypeError, ValueError) as exc:
            raise OutputError(f"Failed to serialize records as JSON: {exc}") from exc

    def write(self, records: Sequence[Record], columns: Sequence[str], path: Path) -> WriteResult:
        payload = self.serialize(records, columns)
        with create_dump_file(path) as f:
            f.write(payload)
            f.write("\n")
        return WriteResult(path=str(path), written=len(records), skipped=0)


__all__ = ["JsonRecordWriter"]

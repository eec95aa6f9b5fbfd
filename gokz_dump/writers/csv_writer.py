"""
CSV dump writer.

Streams one row per record after a header row. A record that fails to
serialize is logged and skipped; the rest of the file is still written.
"""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Sequence

from gokz_dump.domain.models import Record
from gokz_dump.utils.logging import get_logger
from gokz_dump.writers.abstract import AbstractRecordWriter, WriteResult, create_dump_file

log = get_logger(__name__)


class CsvRecordWriter(AbstractRecordWriter):
    """
    Comma-separated output with standard minimal quoting.
    """

    name: str = "csv"
    extension: str = "csv"

    def write(self, records: Sequence[Record], columns: Sequence[str], path: Path) -> WriteResult:
        written = 0
        skipped = 0

        with create_dump_file(path) as f:
            writer = csv.DictWriter(f, fieldnames=list(columns), extrasaction="raise")
            writer.writeheader()
            for record in records:
                try:
                    writer.writerow(record.to_row(columns))
                except (csv.Error, ValueError, TypeError) as exc:
                    skipped += 1
                    log.error(
                        f"Failed to serialize record {record.id} as CSV: {exc}",
                        extra={"time_id": record.id, "error": str(exc)},
                    )
                    continue
                written += 1

        return WriteResult(path=str(path), written=written, skipped=skipped)


__all__ = ["CsvRecordWriter"]

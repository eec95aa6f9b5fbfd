"""
Orchestrator for a gokz-dump run: connect, extract, transform, write.

Usage (example from CLI):
    from gokz_dump.orchestrator import export
    from gokz_dump.variants import get_variant

    summary = export("./gokz-sqlite.sq3", get_variant("csv"))
    print(summary.output_path, summary.written)

The dump lands in the current directory by default:
- `gokz-dump-<UTC timestamp>.csv` or `.json`, depending on the variant
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import List, Optional

import typer

from gokz_dump.domain.errors import OutputError
from gokz_dump.infrastructure.db_factory import fetch_raw_rows, open_connection
from gokz_dump.transformer import RowFailure, transform_rows
from gokz_dump.utils.logging import get_logger
from gokz_dump.utils.profiler import StageTimings
from gokz_dump.variants import ExportVariant
from gokz_dump.writers import dump_file_name

log = get_logger(__name__)


@dataclass
class ExportSummary:
    """What one run read, dropped and wrote."""

    variant: str
    db_path: str
    output_path: Optional[str] = None
    rows_read: int = 0
    records: int = 0
    written: int = 0
    skipped: int = 0
    failures: List[RowFailure] = field(default_factory=list)
    timings: StageTimings = field(default_factory=StageTimings)

    @property
    def dropped(self) -> int:
        return len(self.failures)


def _output_path(output_dir: Path | str, variant: ExportVariant, now: Optional[datetime]) -> Path:
    directory = Path(output_dir)
    try:
        directory.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise OutputError(f"Failed to create output directory `{directory}`: {exc}") from exc
    return directory / dump_file_name(variant.extension, now=now)


async def run_export(
    db_path: Path | str,
    variant: ExportVariant,
    output_dir: Path | str = ".",
    now: Optional[datetime] = None,
) -> ExportSummary:
    """
    Run one export end to end.

    Parameters
    ----------
    db_path : Path | str
        GOKZ SQLite database file; opened read-only.
    variant : ExportVariant
        Query, mapping and format to use.
    output_dir : Path | str
        Directory the dump file is created in.
    now : datetime | None
        Timestamp for the file name; defaults to the current UTC time.

    Returns
    -------
    ExportSummary

    Raises
    ------
    DumpError
        DatabaseConnectionError, QueryError or OutputError. Rows that fail
        validation are not errors; they are listed in `summary.failures`.
    """
    summary = ExportSummary(variant=variant.name, db_path=str(db_path))
    timings = summary.timings

    typer.echo(f"Connecting to `{db_path}`...")
    with timings.stage("extract"):
        async with open_connection(db_path) as conn:
            typer.echo("Connected!")
            typer.echo("Extracting records...")
            rows = await fetch_raw_rows(conn, variant.query)

    summary.rows_read = len(rows)
    log.info(
        f"Extracted {len(rows)} rows",
        extra={"variant": variant.name, "rows": len(rows)},
    )

    with timings.stage("transform"):
        outcome = transform_rows(rows, variant)
    summary.records = len(outcome.records)
    summary.failures = outcome.failures
    typer.echo("Successfully parsed records.")
    if outcome.failures:
        log.warning(
            f"Dropped {len(outcome.failures)} of {outcome.rows} rows",
            extra={"variant": variant.name, "dropped": len(outcome.failures)},
        )

    path = _output_path(output_dir, variant, now)
    writer = variant.make_writer()
    with timings.stage("write"):
        try:
            result = writer.write(outcome.records, variant.columns, path)
        except OSError as exc:
            raise OutputError(f"Failed to write dump file `{path}`: {exc}") from exc

    summary.output_path = result["path"]
    summary.written = result["written"]
    summary.skipped = result["skipped"]
    typer.echo(f"Wrote {summary.written} records to `{path}`.")
    log.info(
        "Export complete",
        extra={
            "variant": variant.name,
            "output": summary.output_path,
            "written": summary.written,
            "skipped": summary.skipped,
            "dropped": summary.dropped,
        },
    )
    return summary


def export(
    db_path: Path | str,
    variant: ExportVariant,
    output_dir: Path | str = ".",
    now: Optional[datetime] = None,
) -> ExportSummary:
    """Synchronous entry point around `run_export`."""
    return asyncio.run(run_export(db_path, variant, output_dir=output_dir, now=now))


__all__ = ["ExportSummary", "export", "run_export"]

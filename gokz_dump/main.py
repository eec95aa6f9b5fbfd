from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

import typer

from gokz_dump.config import get_settings
from gokz_dump.domain.errors import DumpError
from gokz_dump.orchestrator import export
from gokz_dump.reporter import print_summary
from gokz_dump.utils.logging import configure_logging, get_logger
from gokz_dump.variants import VARIANT_A, VARIANT_B, get_variant

log = get_logger(__name__)

csv_app = typer.Typer(help="Dump GOKZ times (joined with maps and players) to CSV.", add_completion=False)
json_app = typer.Typer(help="Dump the GOKZ Times table to JSON.", add_completion=False)

DB_PATH_HELP = "GOKZ SQLite database file (default: ./gokz-sqlite.sq3)."


def _run(variant_name: str, db_path: Optional[Path]) -> None:
    """
    Export with the named variant; fatal errors become exit code 1.
    """
    settings = get_settings()
    configure_logging(level=settings.log_level, json_logs=settings.json_logs)
    variant = get_variant(variant_name)
    path = db_path or Path(settings.default_db_path)

    try:
        summary = export(path, variant, output_dir=settings.output_dir)
    except DumpError as exc:
        log.debug("Export aborted", exc_info=True)
        typer.echo(f"Error: {exc}", err=True)
        raise typer.Exit(code=1) from exc

    print_summary(summary)


@csv_app.command()
def dump_csv(
    db_path: Optional[Path] = typer.Argument(None, help=DB_PATH_HELP, show_default=False),
) -> None:
    """
    Export every valid run to gokz-dump-<timestamp>.csv.
    """
    _run(VARIANT_A, db_path)


@json_app.command()
def dump_json(
    db_path: Optional[Path] = typer.Argument(None, help=DB_PATH_HELP, show_default=False),
) -> None:
    """
    Export every valid run to gokz-dump-<timestamp>.json.
    """
    _run(VARIANT_B, db_path)


def _invoke(app: typer.Typer) -> None:
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)


def main() -> None:
    _invoke(csv_app)


def main_json() -> None:
    _invoke(json_app)


if __name__ == "__main__":
    main()

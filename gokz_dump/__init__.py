"""
gokz-dump - one-shot export of a GOKZ SQLite database to CSV or JSON.

Reads the `Times` table (optionally joined with `MapCourses`, `Maps` and
`Players`), validates every run into a typed record and writes the batch to a
timestamped dump file:

- `csv` variant: joined query, millisecond run times, CSV output
- `json` variant: Times table only, 128-tick run times, JSON output

Rows that fail validation are logged and left out; only database and output
failures abort a run.
"""

from __future__ import annotations

__version__ = "0.1.0"
__license__ = "MIT"

# Public API exports
from gokz_dump.config import Settings, get_settings
from gokz_dump.domain import Mode, Record, SteamID
from gokz_dump.orchestrator import ExportSummary, export, run_export
from gokz_dump.transformer import TransformOutcome, transform_row, transform_rows
from gokz_dump.utils.logging import configure_logging, get_logger
from gokz_dump.variants import ExportVariant, available_variants, get_variant

__all__ = [
    # Version info
    "__version__",
    "__license__",
    # Configuration
    "Settings",
    "get_settings",
    # Domain
    "Mode",
    "Record",
    "SteamID",
    # Pipeline
    "ExportSummary",
    "ExportVariant",
    "TransformOutcome",
    "available_variants",
    "export",
    "get_variant",
    "run_export",
    "transform_row",
    "transform_rows",
    # Logging
    "configure_logging",
    "get_logger",
]

from __future__ import annotations

from typing import Optional

from rich import box
from rich.console import Console
from rich.table import Table

from gokz_dump.orchestrator import ExportSummary


def _format_mb(value: Optional[int]) -> str:
    if not value:
        return "N/A"
    return f"{value / (1024 * 1024):.2f}"


def print_summary(summary: ExportSummary, console: Optional[Console] = None) -> None:
    """
    Render an export summary as two rich tables: counts, then per-stage timing.

    Dropped rows are highlighted so a partial export is hard to miss.
    """
    console = console or Console()

    counts = Table(
        title=f"gokz-dump ({summary.variant})",
        box=box.ROUNDED,
        caption=summary.output_path or "no file written",
    )
    counts.add_column("Rows read", justify="right", style="magenta")
    counts.add_column("Valid", justify="right", style="green")
    counts.add_column("Dropped", justify="right", style="red" if summary.dropped else "dim")
    counts.add_column("Written", justify="right", style="bold green")
    counts.add_column("Skipped", justify="right", style="yellow" if summary.skipped else "dim")
    counts.add_row(
        f"{summary.rows_read:,}",
        f"{summary.records:,}",
        f"{summary.dropped:,}",
        f"{summary.written:,}",
        f"{summary.skipped:,}",
    )
    console.print(counts)

    stages = Table(box=box.SIMPLE, show_footer=True)
    stages.add_column("Stage", style="cyan", no_wrap=True, footer="total")
    stages.add_column(
        "Duration (s)",
        justify="right",
        style="green",
        footer=f"{summary.timings.total_seconds:.3f}",
    )
    stages.add_column(
        "Peak Memory (MB)",
        justify="right",
        style="yellow",
        footer=_format_mb(summary.timings.peak_rss_bytes),
    )
    for stats in summary.timings.stages:
        stages.add_row(stats.label, f"{stats.duration_seconds:.3f}", _format_mb(stats.peak_rss_bytes))
    console.print(stages)

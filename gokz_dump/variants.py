"""
Export variants for gokz-dump.

Each variant bundles everything that differs between the two supported
database generations: the query, the run-time unit, the mode code table, the
output columns and the file format. The transformer and orchestrator take a
variant instead of branching on it.

- `csv`: joined query over Times/MapCourses/Maps/Players, run times in
  milliseconds, written as CSV.
- `json`: Times table only, run times in 128-tick engine ticks, written as JSON.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Dict, List, Mapping, Tuple

from gokz_dump.domain.models import Mode
from gokz_dump.writers import CsvRecordWriter, JsonRecordWriter, RecordWriter

VARIANT_A = "csv"
VARIANT_B = "json"

JOINED_TIMES_QUERY = """
SELECT
  t.*,
  m.MapID AS MapID,
  m.Name AS MapName,
  c.Course AS Course,
  p.Alias AS PlayerName
FROM Times AS t
JOIN MapCourses AS c
ON c.MapCourseID = t.MapCourseID
JOIN Maps AS m
ON m.MapID = c.MapID
JOIN Players AS p
ON p.SteamID32 = t.SteamID32
"""

TIMES_QUERY = """
SELECT
  TimeID,
  SteamID32,
  MapCourseID,
  Mode,
  Style,
  RunTime,
  Teleports,
  Created
FROM Times
"""


@dataclass(frozen=True)
class ExportVariant:
    """
    Configuration of one export flavour.

    Attributes
    ----------
    name : str
        Registry key, also used in log lines.
    query : str
        The fixed extraction query.
    divisor : float
        Raw `RunTime` units per second.
    mode_codes : Mapping[int, Mode]
        Raw `Mode` column value to ruleset.
    columns : tuple[str, ...]
        Record fields written to the dump, in order.
    joined : bool
        Whether rows carry the map/course/player display columns.
    """

    name: str
    description: str
    query: str
    divisor: float
    mode_codes: Mapping[int, Mode]
    columns: Tuple[str, ...]
    joined: bool
    writer_factory: Callable[[], RecordWriter] = field(compare=False)

    @property
    def extension(self) -> str:
        return self.writer_factory().extension

    def make_writer(self) -> RecordWriter:
        return self.writer_factory()


CSV_VARIANT = ExportVariant(
    name=VARIANT_A,
    description="Joined Times/MapCourses/Maps/Players, millisecond run times, CSV output.",
    query=JOINED_TIMES_QUERY,
    divisor=1000.0,
    mode_codes=MappingProxyType({0: Mode.VANILLA, 1: Mode.SIMPLE_KZ, 2: Mode.KZ_TIMER}),
    columns=(
        "id",
        "steam_id",
        "player_name",
        "map_id",
        "map_name",
        "stage",
        "mode",
        "time",
        "teleports",
        "created_on",
    ),
    joined=True,
    writer_factory=CsvRecordWriter,
)

JSON_VARIANT = ExportVariant(
    name=VARIANT_B,
    description="Times table only, 128-tick run times, JSON output.",
    query=TIMES_QUERY,
    divisor=128.0,
    # Inverse of the csv variant's table; the source schema stores it this way.
    mode_codes=MappingProxyType({0: Mode.KZ_TIMER, 1: Mode.SIMPLE_KZ, 2: Mode.VANILLA}),
    columns=("id", "steam_id", "map_id", "mode", "time", "teleports", "created_on"),
    joined=False,
    writer_factory=JsonRecordWriter,
)


def _variant_registry() -> Dict[str, ExportVariant]:
    """Registry of available export variants."""
    return {
        CSV_VARIANT.name: CSV_VARIANT,
        JSON_VARIANT.name: JSON_VARIANT,
    }


def available_variants() -> List[str]:
    """List available variant names."""
    return sorted(_variant_registry().keys())


def get_variant(name: str) -> ExportVariant:
    registry = _variant_registry()
    if name not in registry:
        raise ValueError(f"Unknown variant '{name}'. Available: {', '.join(registry)}")
    return registry[name]


__all__ = [
    "CSV_VARIANT",
    "JSON_VARIANT",
    "VARIANT_A",
    "VARIANT_B",
    "ExportVariant",
    "available_variants",
    "get_variant",
]

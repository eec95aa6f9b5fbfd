"""
Domain models for gokz-dump.

`RawRow` is what the extraction query hands back, untyped. `Record` is the
validated, immutable shape that ends up in the dump file. Field names of
`Record` are the output column names.
"""
from __future__ import annotations

import enum
from typing import Any, Dict, Iterable, Optional, TypedDict

from pydantic import BaseModel, Field

from gokz_dump.domain.steam_id import SteamID

U8_MAX = 2**8 - 1
U16_MAX = 2**16 - 1
U32_MAX = 2**32 - 1


class Mode(str, enum.Enum):
    """GOKZ ruleset a run was played on."""

    VANILLA = "Vanilla"
    SIMPLE_KZ = "SimpleKZ"
    KZ_TIMER = "KZTimer"


class RawRow(TypedDict, total=False):
    """
    One row of the extraction query, keyed by column name.

    The `Times` columns are always present; the display columns only come
    with the joined query.
    """

    TimeID: Any
    SteamID32: Any
    MapCourseID: Any
    Mode: Any
    Style: Any
    RunTime: Any
    Teleports: Any
    Created: Any
    MapID: Any
    MapName: Any
    Course: Any
    PlayerName: Any


class Record(BaseModel):
    """
    A single validated run, ready to be serialized.
    """

    id: int = Field(..., ge=0, le=U32_MAX, description="TimeID.")
    steam_id: SteamID = Field(..., description="Player identity.")
    player_name: Optional[str] = Field(None, description="Player alias (joined query only).")
    map_id: int = Field(..., ge=0, le=U16_MAX, description="Map (or map course) id.")
    map_name: Optional[str] = Field(None, description="Map name (joined query only).")
    stage: Optional[int] = Field(None, ge=0, le=U8_MAX, description="Course number.")
    mode: Mode = Field(..., description="Ruleset of the run.")
    time: float = Field(..., description="Run duration in seconds.")
    teleports: int = Field(..., ge=0, le=U32_MAX, description="Teleports used.")
    created_on: str = Field(..., description="Canonical `YYYY-MM-DD HH:MM:SS` timestamp.")

    model_config = {"frozen": True}

    def to_row(self, columns: Iterable[str]) -> Dict[str, Any]:
        """
        Dump the given columns, in order, as JSON-compatible values.

        Both writers go through here so CSV and JSON carry identical values.
        """
        columns = list(columns)
        dumped = self.model_dump(mode="json", include=set(columns))
        return {name: dumped[name] for name in columns}


__all__ = ["Mode", "RawRow", "Record", "U8_MAX", "U16_MAX", "U32_MAX"]

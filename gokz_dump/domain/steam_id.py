"""
Steam community identifiers.

A Steam account is stored in the GOKZ database as a 32-bit account id
(`SteamID32`). The same account has a 64-bit community id and the familiar
`STEAM_1:Y:Z` text form; all three convert into each other without loss.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any

from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

# Community id of account 0 in the public universe.
ID64_BASE = 76561197960265728
MAX_ID32 = 2**32 - 1

_TEXT_PATTERN = re.compile(r"STEAM_[0-5]:([01]):(\d+)")


@dataclass(frozen=True, order=True)
class SteamID:
    """Immutable Steam account identity, stored as its 32-bit account id."""

    id32: int

    def __post_init__(self) -> None:
        if not isinstance(self.id32, int) or isinstance(self.id32, bool):
            raise ValueError(f"SteamID account id must be an int, got {self.id32!r}")
        if not 0 <= self.id32 <= MAX_ID32:
            raise ValueError(f"SteamID account id {self.id32} is out of 32-bit range")

    @classmethod
    def from_id32(cls, id32: int) -> "SteamID":
        return cls(id32)

    @classmethod
    def from_id64(cls, id64: int) -> "SteamID":
        if not ID64_BASE <= id64 <= ID64_BASE + MAX_ID32:
            raise ValueError(f"{id64} is not a public-universe community id")
        return cls(id64 - ID64_BASE)

    @classmethod
    def parse(cls, text: str) -> "SteamID":
        """Parse the `STEAM_X:Y:Z` text form."""
        match = _TEXT_PATTERN.fullmatch(text.strip())
        if match is None:
            raise ValueError(f"{text!r} is not a valid SteamID")
        auth_bit, account = int(match.group(1)), int(match.group(2))
        return cls((account << 1) | auth_bit)

    @property
    def id64(self) -> int:
        return ID64_BASE + self.id32

    def __str__(self) -> str:
        return f"STEAM_1:{self.id32 & 1}:{self.id32 >> 1}"

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source_type: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        # Models hold the instance as-is and dump it in text form.
        return core_schema.is_instance_schema(
            cls,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


__all__ = ["ID64_BASE", "MAX_ID32", "SteamID"]

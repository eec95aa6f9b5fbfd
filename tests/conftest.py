"""
Pytest configuration for gokz-dump.

Provides fixtures for:
- Throwaway GOKZ SQLite databases with known rows
- Raw row builders for transformer tests
- Settings isolation between tests
"""

from __future__ import annotations

import logging
import sqlite3
from pathlib import Path
from typing import Any, Callable, Dict

import pytest

from gokz_dump.config import get_settings
from scripts.generate_data import create_schema, insert_times, seed_lookups

PLAYERS = [(1, "alpha"), (123456789, "beta, the second")]

# (TimeID, SteamID32, MapCourseID, Mode, Style, RunTime, Teleports, Created)
VALID_TIMES = [
    (1, 1, 1, 0, 0, 5000, 0, "2023-01-15 10:30:00"),
    (2, 123456789, 2, 2, 0, 12345, 3, "2022-12-31 23:59:59"),
    (3, 1, 3, 1, 0, 640, 1, "2021-06-01 00:00:00"),
]
INVALID_TIMES = [
    (4, 1, 1, 3, 0, 1000, 0, "2023-01-15 10:30:00"),
    (5, 1, 1, 0, 0, 1000, 0, "2023-01-15T10:30:00Z"),
    (6, 1, 1, 0, 0, 1000, -1, "2023-01-15 10:30:00"),
]


@pytest.fixture(autouse=True)
def isolated_settings():
    """
    Drop cached settings around each test.
    """
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture(autouse=True)
def restore_root_logging():
    """
    Undo configure_logging() calls made by a test.

    CLI tests point the root handler at a capture stream that is closed once
    the test ends; only plain StreamHandlers are ours, pytest uses subclasses.
    """
    root = logging.getLogger()
    level = root.level
    yield
    for handler in [h for h in root.handlers if type(h) is logging.StreamHandler]:
        root.removeHandler(handler)
    root.setLevel(level)


@pytest.fixture
def make_gokz_db(tmp_path: Path) -> Callable[..., Path]:
    """
    Factory building a GOKZ database under tmp_path with the given Times rows.
    """

    def _make(name: str = "gokz-sqlite.sq3", times=None) -> Path:
        db_path = tmp_path / name
        conn = sqlite3.connect(db_path)
        try:
            create_schema(conn)
            seed_lookups(conn, PLAYERS)
            insert_times(conn, VALID_TIMES + INVALID_TIMES if times is None else times)
            conn.commit()
        finally:
            conn.close()
        return db_path

    return _make


@pytest.fixture
def gokz_db(make_gokz_db: Callable[..., Path]) -> Path:
    """Database with three valid and three invalid runs."""
    return make_gokz_db()


@pytest.fixture
def joined_row() -> Callable[..., Dict[str, Any]]:
    """Builder for a valid row of the joined query, with overrides."""

    def _build(**overrides: Any) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "TimeID": 1,
            "SteamID32": 1,
            "MapCourseID": 1,
            "Mode": 0,
            "Style": 0,
            "RunTime": 5000,
            "Teleports": 0,
            "Created": "2023-01-15 10:30:00",
            "MapID": 1,
            "MapName": "kz_beginnerblock_go",
            "Course": 0,
            "PlayerName": "alpha",
        }
        row.update(overrides)
        return row

    return _build


@pytest.fixture
def times_row() -> Callable[..., Dict[str, Any]]:
    """Builder for a valid row of the Times-only query, with overrides."""

    def _build(**overrides: Any) -> Dict[str, Any]:
        row: Dict[str, Any] = {
            "TimeID": 7,
            "SteamID32": 2,
            "MapCourseID": 300,
            "Mode": 0,
            "Style": 0,
            "RunTime": 640,
            "Teleports": 4,
            "Created": "2021-06-01 00:00:00",
        }
        row.update(overrides)
        return row

    return _build

"""
Database access for gokz-dump.

Opens the GOKZ SQLite snapshot read-only and runs the fixed extraction query.
One connection per run: no pooling, no retries, no reconnection. Any failure
here is fatal and surfaces as a `DumpError` subclass.
"""

from __future__ import annotations

import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator, List

import aiosqlite

from gokz_dump.domain.errors import DatabaseConnectionError, QueryError
from gokz_dump.domain.models import RawRow
from gokz_dump.utils.logging import get_logger

log = get_logger(__name__)


def database_uri(db_path: Path | str) -> str:
    """
    Read-only SQLite URI for `db_path`.

    `mode=ro` makes SQLite refuse a missing file instead of creating an empty
    database in its place.
    """
    return f"{Path(db_path).expanduser().resolve().as_uri()}?mode=ro"


@asynccontextmanager
async def open_connection(db_path: Path | str) -> AsyncIterator[aiosqlite.Connection]:
    """
    Async context manager yielding a read-only connection to `db_path`.

    Example
    -------
        async with open_connection("./gokz-sqlite.sq3") as conn:
            rows = await fetch_raw_rows(conn, query)

    Raises
    ------
    DatabaseConnectionError
        If the file does not exist or is not a readable SQLite database.
    """
    message = f"Failed to connect to database `{db_path}`. Did you specify the file?"
    try:
        conn = await aiosqlite.connect(database_uri(db_path), uri=True)
    except (sqlite3.Error, OSError) as exc:
        raise DatabaseConnectionError(f"{message} ({exc})") from exc

    try:
        # Opening is lazy; reading the schema forces the file header check.
        async with conn.execute("SELECT name FROM sqlite_master LIMIT 1") as cursor:
            await cursor.fetchone()
    except sqlite3.Error as exc:
        await conn.close()
        raise DatabaseConnectionError(f"{message} ({exc})") from exc

    conn.row_factory = aiosqlite.Row
    log.debug("Opened database", extra={"db_path": str(db_path)})
    try:
        yield conn
    finally:
        await conn.close()


async def fetch_raw_rows(conn: aiosqlite.Connection, query: str) -> List[RawRow]:
    """
    Run `query` and return every row as a column-name keyed dict.

    Raises
    ------
    QueryError
        If the statement fails, e.g. a table or column is missing.
    """
    try:
        async with conn.execute(query) as cursor:
            rows = await cursor.fetchall()
    except sqlite3.Error as exc:
        raise QueryError(f"Failed to get data: {exc}") from exc
    return [RawRow(**dict(row)) for row in rows]


__all__ = ["database_uri", "fetch_raw_rows", "open_connection"]

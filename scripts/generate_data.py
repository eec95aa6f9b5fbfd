"""
Synthetic GOKZ database generator for gokz-dump.

Builds a SQLite file with the GOKZ `Players`, `Maps`, `MapCourses` and `Times`
tables and fills it with deterministic pseudo-random runs. A share of the runs
can be deliberately broken (unknown mode, bad timestamp, negative teleports)
to exercise the per-row validation path.
"""

from __future__ import annotations

import random
import sqlite3
import sys
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Iterable, Iterator, Sequence, Tuple

import typer

app = typer.Typer(help="Generate a synthetic GOKZ SQLite database.")

SCHEMA = """
CREATE TABLE IF NOT EXISTS Players (
    SteamID32 INTEGER NOT NULL,
    Alias TEXT,
    Country TEXT,
    IP TEXT,
    Cheater INTEGER NOT NULL DEFAULT '0',
    LastPlayed TIMESTAMP NULL DEFAULT NULL,
    Created TIMESTAMP NULL DEFAULT CURRENT_TIMESTAMP,
    CONSTRAINT PK_Player PRIMARY KEY (SteamID32)
);
CREATE TABLE IF NOT EXISTS Maps (
    MapID INTEGER NOT NULL,
    Name VARCHAR(32) NOT NULL UNIQUE,
    LastPlayed TIMESTAMP NULL DEFAULT CURRENT_TIMESTAMP,
    Created TIMESTAMP NULL DEFAULT CURRENT_TIMESTAMP,
    CONSTRAINT PK_Maps PRIMARY KEY (MapID)
);
CREATE TABLE IF NOT EXISTS MapCourses (
    MapCourseID INTEGER NOT NULL,
    MapID INTEGER NOT NULL,
    Course INTEGER NOT NULL,
    Created TIMESTAMP NULL DEFAULT CURRENT_TIMESTAMP,
    CONSTRAINT PK_MapCourses PRIMARY KEY (MapCourseID),
    CONSTRAINT UQ_MapCourses_MapIDCourse UNIQUE (MapID, Course)
);
CREATE TABLE IF NOT EXISTS Times (
    TimeID INTEGER NOT NULL,
    SteamID32 INTEGER NOT NULL,
    MapCourseID INTEGER NOT NULL,
    Mode INTEGER NOT NULL,
    Style INTEGER NOT NULL,
    RunTime INTEGER NOT NULL,
    Teleports INTEGER NOT NULL,
    Created TIMESTAMP NULL DEFAULT CURRENT_TIMESTAMP,
    CONSTRAINT PK_Times PRIMARY KEY (TimeID)
);
"""

MAP_NAMES = ["kz_beginnerblock_go", "kz_lionharder", "kz_reach_v2", "bkz_apricity_v2", "kz_synergy_x"]
PLAYER_ALIASES = ["AlphaKeks", "GameChaos", "zer0.k", "Sikari", "Fenrir", "Ruben"]

# (TimeID, SteamID32, MapCourseID, Mode, Style, RunTime, Teleports, Created)
TimeRow = Tuple[int, int, int, int, int, int, int, str]

_BROKEN_KINDS = ("mode", "created", "teleports")


def create_schema(conn: sqlite3.Connection) -> None:
    conn.executescript(SCHEMA)


def seed_lookups(conn: sqlite3.Connection, players: Sequence[Tuple[int, str]]) -> None:
    """Insert players, maps and two courses (0 and 1) per map."""
    conn.executemany("INSERT INTO Players (SteamID32, Alias) VALUES (?, ?)", players)
    conn.executemany(
        "INSERT INTO Maps (MapID, Name) VALUES (?, ?)",
        [(map_id, name) for map_id, name in enumerate(MAP_NAMES, start=1)],
    )
    conn.executemany(
        "INSERT INTO MapCourses (MapCourseID, MapID, Course) VALUES (?, ?, ?)",
        [
            ((map_id - 1) * 2 + course + 1, map_id, course)
            for map_id in range(1, len(MAP_NAMES) + 1)
            for course in (0, 1)
        ],
    )


def insert_times(conn: sqlite3.Connection, rows: Iterable[TimeRow]) -> None:
    conn.executemany(
        """
        INSERT INTO Times
            (TimeID, SteamID32, MapCourseID, Mode, Style, RunTime, Teleports, Created)
        VALUES (?, ?, ?, ?, ?, ?, ?, ?)
        """,
        rows,
    )


def _generate_times(
    rng: random.Random,
    rows: int,
    players: Sequence[Tuple[int, str]],
    broken: int,
) -> Iterator[TimeRow]:
    start = datetime(2020, 1, 1)
    course_count = len(MAP_NAMES) * 2
    broken_ids = set(rng.sample(range(1, rows + 1), k=min(broken, rows)))

    for time_id in range(1, rows + 1):
        steam_id32 = rng.choice(players)[0]
        map_course_id = rng.randint(1, course_count)
        mode = rng.randint(0, 2)
        run_time = rng.randint(5_000, 3_600_000)
        teleports = rng.choice([0, 0, 0, rng.randint(1, 500)])
        created = (start + timedelta(seconds=rng.randint(0, 3 * 365 * 86400))).strftime(
            "%Y-%m-%d %H:%M:%S"
        )

        if time_id in broken_ids:
            kind = rng.choice(_BROKEN_KINDS)
            if kind == "mode":
                mode = rng.randint(3, 9)
            elif kind == "created":
                created = created.replace(" ", "T") + "Z"
            else:
                teleports = -rng.randint(1, 100)

        yield (time_id, steam_id32, map_course_id, mode, 0, run_time, teleports, created)


def build_database(db_path: Path, rows: int, seed: int, broken: int = 0) -> int:
    """
    Create `db_path` and fill it; returns the number of Times rows inserted.

    Refuses to touch an existing file.
    """
    if db_path.exists():
        raise FileExistsError(f"{db_path} already exists")

    rng = random.Random(seed)
    players = [
        (rng.randint(1, 2**31 - 1), alias) for alias in PLAYER_ALIASES
    ]

    conn = sqlite3.connect(db_path)
    try:
        create_schema(conn)
        seed_lookups(conn, players)
        insert_times(conn, _generate_times(rng, rows, players, broken))
        conn.commit()
        (count,) = conn.execute("SELECT COUNT(*) FROM Times").fetchone()
    finally:
        conn.close()
    return count


@app.command()
def main(
    output: Path = typer.Option(
        Path("gokz-sqlite.sq3"),
        "--output",
        "-o",
        help="Database file to create.",
    ),
    rows: int = typer.Option(
        10_000,
        "--rows",
        "-r",
        help="Number of Times rows to generate.",
    ),
    broken: int = typer.Option(
        0,
        "--broken",
        "-b",
        help="How many of those rows should fail validation.",
    ),
    seed: int = typer.Option(
        42,
        "--seed",
        help="Deterministic RNG seed.",
    ),
) -> None:
    """
    Generate a synthetic GOKZ database for trying out gokz-dump.
    """
    start = time.perf_counter()
    typer.echo(f"Generating {rows:,} times -> {output} (broken={broken}, seed={seed})")
    try:
        count = build_database(output, rows=rows, seed=seed, broken=broken)
    except FileExistsError as exc:
        typer.echo(str(exc), err=True)
        raise typer.Exit(code=1) from exc
    duration = time.perf_counter() - start
    typer.echo(f"Inserted {count:,} times in {duration:.2f}s.")


if __name__ == "__main__":
    try:
        app()
    except KeyboardInterrupt:
        typer.echo("Cancelled by user.", err=True)
        sys.exit(130)

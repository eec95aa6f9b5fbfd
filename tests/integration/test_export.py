"""
End-to-end tests for gokz-dump against real SQLite files.

These tests verify that:
1. Both variants read, validate and write the expected records
2. Invalid rows are dropped without failing the run
3. Fatal errors (missing database, missing tables) abort without a dump file
4. The CLI maps outcomes to exit codes
"""

from __future__ import annotations

import csv
import json
import sqlite3
from datetime import datetime, timezone
from pathlib import Path

import pytest
from typer.testing import CliRunner

from gokz_dump.domain.errors import (
    DatabaseConnectionError,
    QueryError,
    TimestampFormatError,
    UnknownModeError,
)
from gokz_dump.main import csv_app, json_app
from gokz_dump.orchestrator import export, run_export
from gokz_dump.variants import CSV_VARIANT, JSON_VARIANT
from scripts.generate_data import build_database

FIXED_NOW = datetime(2024, 3, 5, 7, 8, 9, tzinfo=timezone.utc)

# Test expectation constants
TOTAL_ROWS = 6
VALID_ROWS = 3

runner = CliRunner()


def _dumps(directory: Path) -> list[Path]:
    return sorted(directory.glob("gokz-dump-*"))


class TestCsvVariant:
    @pytest.mark.asyncio
    async def test_run_export_writes_valid_rows(self, gokz_db: Path, tmp_path: Path):
        out_dir = tmp_path / "out"

        summary = await run_export(gokz_db, CSV_VARIANT, output_dir=out_dir, now=FIXED_NOW)

        assert summary.rows_read == TOTAL_ROWS
        assert summary.records == VALID_ROWS
        assert summary.written == VALID_ROWS
        assert summary.dropped == TOTAL_ROWS - VALID_ROWS
        assert summary.output_path == str(out_dir / "gokz-dump-2024-03-05_07-08-09.csv")
        assert [stage.label for stage in summary.timings.stages] == ["extract", "transform", "write"]

        with open(summary.output_path, newline="", encoding="utf-8") as f:
            rows = {row["id"]: row for row in csv.DictReader(f)}
        assert sorted(rows) == ["1", "2", "3"]
        assert rows["1"] == {
            "id": "1",
            "steam_id": "STEAM_1:1:0",
            "player_name": "alpha",
            "map_id": "1",
            "map_name": "kz_beginnerblock_go",
            "stage": "0",
            "mode": "Vanilla",
            "time": "5.0",
            "teleports": "0",
            "created_on": "2023-01-15 10:30:00",
        }
        assert rows["2"]["player_name"] == "beta, the second"
        assert rows["2"]["stage"] == "1"
        assert rows["2"]["mode"] == "KZTimer"
        assert rows["2"]["time"] == "12.345"

    def test_dropped_rows_are_reported_with_reason(self, gokz_db: Path, tmp_path: Path):
        summary = export(gokz_db, CSV_VARIANT, output_dir=tmp_path, now=FIXED_NOW)

        failures = {f.time_id: f.error for f in summary.failures}
        assert sorted(failures) == [4, 5, 6]
        assert isinstance(failures[4], UnknownModeError)
        assert isinstance(failures[5], TimestampFormatError)


class TestJsonVariant:
    @pytest.mark.asyncio
    async def test_run_export_writes_times_only_records(self, gokz_db: Path, tmp_path: Path):
        summary = await run_export(gokz_db, JSON_VARIANT, output_dir=tmp_path, now=FIXED_NOW)

        assert summary.output_path == str(tmp_path / "gokz-dump-2024-03-05_07-08-09.json")
        payload = json.loads(Path(summary.output_path).read_text(encoding="utf-8"))
        by_id = {obj["id"]: obj for obj in payload}

        assert sorted(by_id) == [1, 2, 3]
        assert by_id[1] == {
            "id": 1,
            "steam_id": "STEAM_1:1:0",
            "map_id": 1,
            "mode": "KZTimer",
            "time": 39.0625,
            "teleports": 0,
            "created_on": "2023-01-15 10:30:00",
        }
        assert by_id[2]["mode"] == "Vanilla"
        assert by_id[3]["time"] == 5.0


class TestFatalErrors:
    @pytest.mark.asyncio
    async def test_missing_database_is_not_created(self, tmp_path: Path):
        missing = tmp_path / "missing.sq3"

        with pytest.raises(DatabaseConnectionError, match="Failed to connect"):
            await run_export(missing, CSV_VARIANT, output_dir=tmp_path)

        assert not missing.exists()
        assert _dumps(tmp_path) == []

    @pytest.mark.asyncio
    async def test_non_sqlite_file_fails_to_connect(self, tmp_path: Path):
        bogus = tmp_path / "bogus.sq3"
        bogus.write_bytes(b"definitely not sqlite" * 100)

        with pytest.raises(DatabaseConnectionError):
            await run_export(bogus, CSV_VARIANT, output_dir=tmp_path)
        assert _dumps(tmp_path) == []

    @pytest.mark.asyncio
    async def test_missing_tables_fail_the_query(self, tmp_path: Path):
        db_path = tmp_path / "empty.sq3"
        conn = sqlite3.connect(db_path)
        conn.execute("CREATE TABLE Unrelated (id INTEGER)")
        conn.commit()
        conn.close()

        with pytest.raises(QueryError, match="Failed to get data"):
            await run_export(db_path, CSV_VARIANT, output_dir=tmp_path)
        assert _dumps(tmp_path) == []

    @pytest.mark.asyncio
    async def test_times_only_database_fails_joined_query(
        self, make_gokz_db, tmp_path: Path
    ):
        db_path = make_gokz_db(times=[])
        conn = sqlite3.connect(db_path)
        conn.execute("DROP TABLE Players")
        conn.commit()
        conn.close()

        with pytest.raises(QueryError):
            await run_export(db_path, CSV_VARIANT, output_dir=tmp_path)

        summary = await run_export(db_path, JSON_VARIANT, output_dir=tmp_path)
        assert summary.written == 0
        assert json.loads(Path(summary.output_path).read_text(encoding="utf-8")) == []


def test_generated_database_drops_exactly_the_broken_rows(tmp_path: Path):
    db_path = tmp_path / "generated.sq3"
    build_database(db_path, rows=200, seed=7, broken=12)

    for variant in (CSV_VARIANT, JSON_VARIANT):
        out_dir = tmp_path / variant.name
        summary = export(db_path, variant, output_dir=out_dir)
        assert summary.rows_read == 200
        assert summary.dropped == 12
        assert summary.written == 188


class TestCli:
    def test_csv_cli_exits_zero_with_dropped_rows(self, gokz_db: Path, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(csv_app, [str(gokz_db)])

        assert result.exit_code == 0, result.output
        assert f"Connecting to `{gokz_db}`..." in result.output
        assert "Wrote 3 records to" in result.output
        dumps = _dumps(tmp_path)
        assert len(dumps) == 1
        assert dumps[0].suffix == ".csv"

    def test_json_cli_uses_default_database_path(self, gokz_db: Path, tmp_path: Path, monkeypatch):
        assert gokz_db.name == "gokz-sqlite.sq3"
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(json_app, [])

        assert result.exit_code == 0, result.output
        assert "Connecting to `gokz-sqlite.sq3`..." in result.output
        assert [p.suffix for p in _dumps(tmp_path)] == [".json"]

    def test_cli_ignores_environment_and_dotenv(self, gokz_db: Path, tmp_path: Path, monkeypatch):
        workdir = tmp_path / "work"
        elsewhere = tmp_path / "elsewhere"
        workdir.mkdir()
        elsewhere.mkdir()
        (workdir / ".env").write_text(
            f"GOKZ_DUMP_DB_PATH={gokz_db}\nGOKZ_DUMP_OUTPUT_DIR={elsewhere}\n"
        )
        monkeypatch.chdir(workdir)
        monkeypatch.setenv("GOKZ_DUMP_DB_PATH", str(gokz_db))
        monkeypatch.setenv("GOKZ_DUMP_OUTPUT_DIR", str(elsewhere))

        result = runner.invoke(csv_app, [])

        # Only ./gokz-sqlite.sq3 is tried, and it does not exist in workdir.
        assert result.exit_code == 1
        assert "Failed to connect to database `gokz-sqlite.sq3`" in result.output
        assert _dumps(workdir) == []
        assert _dumps(elsewhere) == []

    @pytest.mark.parametrize("app", [csv_app, json_app])
    def test_missing_database_exits_non_zero(self, app, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)

        result = runner.invoke(app, [str(tmp_path / "nope.sq3")])

        assert result.exit_code == 1
        assert "Failed to connect to database" in result.output
        assert _dumps(tmp_path) == []
        assert not (tmp_path / "nope.sq3").exists()

    def test_rejects_extra_arguments(self, gokz_db: Path):
        result = runner.invoke(csv_app, [str(gokz_db), "extra"])
        assert result.exit_code != 0

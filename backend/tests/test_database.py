"""
MoodJourney Backend — Database Gateway Tests
=============================================

What we test:
    ✅ connect() creates both tables, and running it again is harmless
    ✅ An unreachable database raises FatalStartupError
    ✅ from_settings() refuses to build a gateway without DB_* config
    ✅ The lifespan connects an injected gateway and disposes it on shutdown
    ✅ Timestamps load as UTC whatever the driver returns; row ids are bounded
"""

from datetime import datetime, timedelta, timezone

import pytest
from sqlalchemy import inspect

from moodjourney import main
from moodjourney.config import Settings
from moodjourney.database import Database
from moodjourney.exceptions import FatalStartupError
from moodjourney.models.mixins import UTCDateTime, parse_row_id


async def table_names(database: Database) -> set:
    async with database.engine.connect() as conn:
        return set(await conn.run_sync(lambda sync_conn: inspect(sync_conn).get_table_names()))


class TestConnect:

    @pytest.mark.asyncio
    async def test_creates_tables(self, database):
        assert {"users", "mood_entries"} <= await table_names(database)

    @pytest.mark.asyncio
    async def test_deleted_at_is_indexed(self, database):
        async with database.engine.connect() as conn:
            indexes = await conn.run_sync(
                lambda sync_conn: inspect(sync_conn).get_indexes("mood_entries")
            )
        indexed_columns = {col for index in indexes for col in index["column_names"]}
        assert "deleted_at" in indexed_columns

    @pytest.mark.asyncio
    async def test_connect_is_idempotent(self, database):
        database.connected = False
        await database.connect()
        assert database.connected is True
        assert {"users", "mood_entries"} <= await table_names(database)

    @pytest.mark.asyncio
    async def test_unreachable_database_is_fatal(self, tmp_path):
        missing_dir = tmp_path / "does" / "not" / "exist"
        db = Database(f"sqlite+aiosqlite:///{missing_dir / 'x.db'}")

        with pytest.raises(FatalStartupError):
            await db.connect()

        assert db.connected is False
        await db.dispose()


class TestFromSettings:

    def test_missing_config_is_fatal(self, monkeypatch):
        for name in ("DB_HOST", "DB_USER", "DB_PASSWORD", "DB_NAME", "DATABASE_URL"):
            monkeypatch.delenv(name, raising=False)

        with pytest.raises(FatalStartupError):
            Database.from_settings(Settings(_env_file=None))

    def test_builds_from_override(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'dev.db'}"
        db = Database.from_settings(Settings(_env_file=None, database_url=url))
        assert db.url == url


class TestLifespan:

    @pytest.mark.asyncio
    async def test_connects_and_disposes_injected_gateway(self, tmp_path, monkeypatch):
        monkeypatch.setattr(main, "setup_logging", lambda: None)
        db = Database(f"sqlite+aiosqlite:///{tmp_path / 'life.db'}")
        app = main.create_app(database=db, static_dir=str(tmp_path / "none"))

        async with main.lifespan(app):
            assert db.connected is True

        assert db.connected is False

    @pytest.mark.asyncio
    async def test_missing_config_aborts_startup(self, tmp_path, monkeypatch):
        monkeypatch.setattr(main, "setup_logging", lambda: None)
        for name in ("DB_HOST", "DB_USER", "DB_PASSWORD", "DB_NAME", "DATABASE_URL"):
            monkeypatch.delenv(name, raising=False)
        monkeypatch.setattr(main, "settings", Settings(_env_file=None))
        app = main.create_app(static_dir=str(tmp_path / "none"))

        with pytest.raises(FatalStartupError):
            async with main.lifespan(app):
                pass


class TestColumnTypes:

    def test_naive_value_loaded_as_utc(self):
        loaded = UTCDateTime().process_result_value(datetime(2024, 3, 1, 8, 0), dialect=None)

        assert loaded == datetime(2024, 3, 1, 8, 0, tzinfo=timezone.utc)
        assert loaded.tzinfo is timezone.utc

    def test_aware_value_bound_in_utc(self):
        plus_two = timezone(timedelta(hours=2))
        bound = UTCDateTime().process_bind_param(
            datetime(2024, 3, 1, 2, 0, tzinfo=plus_two), dialect=None
        )

        assert bound == datetime(2024, 3, 1, 0, 0, tzinfo=timezone.utc)
        assert bound.utcoffset() == timedelta(0)

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("42", 42),
            ("2147483647", 2147483647),
            ("2147483648", None),
            ("-2147483649", None),
            ("99999999999999999999", None),
            ("abc", None),
            ("", None),
        ],
    )
    def test_parse_row_id(self, raw, expected):
        assert parse_row_id(raw) == expected

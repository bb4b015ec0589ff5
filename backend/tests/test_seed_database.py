"""Tests for the seed_database script."""

import sys
from unittest.mock import patch

import pytest

from patientmock.database import Database
from patientmock.repositories import PatientRepository
from patientmock.scripts import seed_database as seed_module
from patientmock.services.query_planner import plan_query
from patientmock.versions import V1_QUERY


class TestSeedDatabaseModule:
    """Tests for seed_database module structure."""

    def test_module_exposes_entry_points(self):
        assert callable(seed_module.main)
        assert callable(seed_module.seed_database)


class TestSeedDatabase:
    """Tests for seeding a real SQLite file."""

    @pytest.mark.asyncio
    async def test_seed_and_clear(self, tmp_path):
        url = f"sqlite+aiosqlite:///{tmp_path / 'seed.db'}"

        stats = await seed_module.seed_database(url, 4)
        assert stats == {"deleted": 0, "generated": 4}

        stats = await seed_module.seed_database(url, 2, clear=True)
        assert stats == {"deleted": 4, "generated": 2}

        database = Database(url)
        await database.connect()
        try:
            async with database.session() as session:
                assert await PatientRepository(session).count(plan_query({}, V1_QUERY)) == 2
        finally:
            await database.dispose()

    def test_main_parses_arguments(self, tmp_path, capsys):
        url = f"sqlite+aiosqlite:///{tmp_path / 'cli.db'}"
        argv = ["seed_database", "--count", "3", "--database-url", url]
        with patch.object(sys, "argv", argv):
            seed_module.main()
        assert "Generated: 3 patient(s)" in capsys.readouterr().out

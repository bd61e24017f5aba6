"""
Pytest configuration and shared fixtures for dbprovision tests.

Every test runs with the test database environment variables cleared and
inside its own temporary working directory, so a developer's ``.env.test``
or exported ``DB_*`` variables never leak into the suite.
"""

import os
from collections.abc import Generator
from pathlib import Path
from typing import Any
from unittest.mock import MagicMock

import pytest
from sqlalchemy import create_engine, text
from sqlalchemy.pool import NullPool

from dbprovision.core.config import TestDatabaseConfig
from dbprovision.infrastructure.database.drivers import MySQLPlatform, SQLitePlatform
from dbprovision.infrastructure.events import subscribers


def pytest_configure(config):
    # Fixtures come from the pytest11 entry point once the package is installed.
    if not config.pluginmanager.has_plugin("dbprovision"):
        config.pluginmanager.import_plugin("dbprovision.testing.plugin")


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch, tmp_path: Path) -> None:
    for key in list(os.environ):
        if key.upper().startswith(("DB_", "TMPDB_")) or key.upper() == "EXPECT_DB_DRIVER":
            monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def subscriber_registry_cleanup() -> Generator[None, None, None]:
    """Restore the subscriber registry after tests that register their own."""
    saved = dict(subscribers.SUBSCRIBER_REGISTRY)
    yield
    subscribers.SUBSCRIBER_REGISTRY.clear()
    subscribers.SUBSCRIBER_REGISTRY.update(saved)


@pytest.fixture
def mysql_config() -> TestDatabaseConfig:
    return TestDatabaseConfig.from_mapping(
        {
            "db_driver": "pdo_mysql",
            "db_user": "root",
            "db_password": "secret",
            "db_host": "localhost",
            "db_dbname": "app_test",
        }
    )


class FakeDriverManager:
    """
    Stands in for ``DriverManager`` and records every connection it hands out.

    The first connection of a reset is the main one, the second the
    temporary one; both are ``MagicMock`` objects.
    """

    def __init__(self, platform: Any = None, dbname: str = "app_test"):
        self.platform = platform or MySQLPlatform()
        self.dbname = dbname
        self.calls: list[dict[str, Any]] = []
        self.connections: list[MagicMock] = []

    def get_connection(self, params: dict[str, Any]) -> MagicMock:
        self.calls.append(dict(params))
        conn = MagicMock(name=f"connection{len(self.connections)}")
        conn.database = params.get("dbname", self.dbname)
        conn.get_database_platform.return_value = self.platform
        self.connections.append(conn)
        return conn


@pytest.fixture
def fake_driver_manager() -> FakeDriverManager:
    return FakeDriverManager()


@pytest.fixture
def fake_sqlite_driver_manager() -> FakeDriverManager:
    return FakeDriverManager(platform=SQLitePlatform())


@pytest.fixture
def sqlite_file(tmp_path: Path) -> Path:
    """A SQLite database file with two related tables."""
    path = tmp_path / "populated.sqlite"
    engine = create_engine(f"sqlite:///{path}", poolclass=NullPool)
    with engine.begin() as conn:
        conn.execute(text("CREATE TABLE parent (id INTEGER PRIMARY KEY, name TEXT)"))
        conn.execute(
            text(
                "CREATE TABLE child (id INTEGER PRIMARY KEY, "
                "parent_id INTEGER REFERENCES parent (id))"
            )
        )
        conn.execute(text("INSERT INTO parent (id, name) VALUES (1, 'one')"))
    engine.dispose()
    return path


def table_names(path: Path) -> list[str]:
    engine = create_engine(f"sqlite:///{path}", poolclass=NullPool)
    with engine.connect() as conn:
        rows = conn.execute(
            text("SELECT name FROM sqlite_master WHERE type = 'table' ORDER BY name")
        )
        names = [row[0] for row in rows]
    engine.dispose()
    return names

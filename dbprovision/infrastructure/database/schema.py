"""
Schema introspection and database-level DDL.

``SchemaManager`` works on a live connection: it drops and creates whole
databases on platforms that allow it, and otherwise reflects the current
schema so every object in it can be dropped.
"""

import logging
from typing import TYPE_CHECKING

from sqlalchemy import MetaData, Sequence, inspect
from sqlalchemy.engine import Dialect
from sqlalchemy.schema import DropConstraint, DropSequence, DropTable

from dbprovision.core.exceptions import SchemaOperationError
from dbprovision.infrastructure.database.drivers import Platform

if TYPE_CHECKING:
    from dbprovision.infrastructure.database.connection import Connection

logger = logging.getLogger(__name__)


class Schema:
    """A reflected schema: tables (with their foreign keys) and sequences."""

    def __init__(self, metadata: MetaData, sequences: list[str] | None = None):
        self.metadata = metadata
        self.sequences = sequences or []

    @property
    def table_names(self) -> list[str]:
        return [table.name for table in self.metadata.sorted_tables]

    def to_drop_sql(self, platform: Platform, dialect: Dialect) -> list[str]:
        """
        Statements dropping every object in the schema, in execution order.

        Foreign keys go first where the platform can alter tables, then tables
        with dependents before the tables they reference, then sequences.
        """
        statements: list[str] = []
        tables = self.metadata.sorted_tables

        if platform.supports_foreign_key_alter():
            for table in tables:
                for constraint in table.foreign_key_constraints:
                    if constraint.name:
                        statements.append(_compile(DropConstraint(constraint), dialect))

        for table in reversed(tables):
            statements.append(_compile(DropTable(table), dialect))

        if platform.supports_sequences():
            # Sequences owned by a column are gone with their table already.
            for name in self.sequences:
                statements.append(
                    _compile(DropSequence(Sequence(name), if_exists=True), dialect)
                )

        return statements


class SchemaManager:
    def __init__(self, connection: "Connection") -> None:
        self._conn = connection

    @property
    def platform(self) -> Platform:
        return self._conn.get_database_platform()

    def _require_create_drop(self, operation: str) -> None:
        if not self.platform.supports_create_drop_database():
            raise SchemaOperationError(operation, self.platform.name)

    def _quote(self, name: str) -> str:
        return self._conn.dialect.identifier_preparer.quote(name)

    def drop_database(self, name: str) -> None:
        self._require_create_drop("drop_database")
        self._conn.set_autocommit(True)
        self._conn.exec(f"DROP DATABASE IF EXISTS {self._quote(name)}")
        logger.info(f"Dropped database {name}")

    def create_database(self, name: str) -> None:
        self._require_create_drop("create_database")
        self._conn.set_autocommit(True)
        self._conn.exec(f"CREATE DATABASE {self._quote(name)}")
        logger.info(f"Created database {name}")

    def drop_and_create_database(self, name: str) -> None:
        self.drop_database(name)
        self.create_database(name)

    def list_table_names(self) -> list[str]:
        return inspect(self._conn.get_wrapped_connection()).get_table_names()

    def list_sequence_names(self) -> list[str]:
        if not self.platform.supports_sequences():
            return []
        return inspect(self._conn.get_wrapped_connection()).get_sequence_names()

    def create_schema(self) -> Schema:
        """Reflect the schema of the database the connection points at."""
        metadata = MetaData()
        metadata.reflect(bind=self._conn.get_wrapped_connection())
        return Schema(metadata, self.list_sequence_names())


def _compile(element, dialect: Dialect) -> str:
    return str(element.compile(dialect=dialect)).strip()

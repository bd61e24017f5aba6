"""
Unpooled database connection wrapper.

Every ``Connection`` owns its own SQLAlchemy engine with ``NullPool`` so
closing it really closes the DBAPI connection. The connection is opened
lazily on first use, at which point ``post_connect`` is dispatched.
"""

import logging
from typing import Any

from sqlalchemy import create_engine, text
from sqlalchemy.engine import URL, CursorResult, Dialect, Engine
from sqlalchemy.engine import Connection as SAConnection
from sqlalchemy.pool import NullPool

from dbprovision.infrastructure.database.drivers import Driver, Platform
from dbprovision.infrastructure.database.schema import SchemaManager
from dbprovision.infrastructure.events.event_manager import (
    EventArgs,
    EventManager,
    Events,
)

logger = logging.getLogger(__name__)


class Connection:
    def __init__(
        self,
        params: dict[str, Any],
        driver: Driver,
        event_manager: EventManager | None = None,
    ) -> None:
        self._params = dict(params)
        self._driver = driver
        self._event_manager = event_manager or EventManager()
        self._platform: Platform | None = None
        self.url: URL = driver.build_url(self._params)
        self._engine: Engine = create_engine(
            self.url,
            poolclass=NullPool,
            connect_args=driver.build_connect_args(self._params),
        )
        self._connection: SAConnection | None = None

    @property
    def params(self) -> dict[str, Any]:
        return dict(self._params)

    @property
    def database(self) -> str | None:
        return self.url.database

    @property
    def dialect(self) -> Dialect:
        return self._engine.dialect

    @property
    def is_connected(self) -> bool:
        return self._connection is not None

    def get_driver(self) -> Driver:
        return self._driver

    def get_database_platform(self) -> Platform:
        if self._platform is None:
            self._platform = self._driver.get_database_platform()
        return self._platform

    def get_schema_manager(self) -> SchemaManager:
        return SchemaManager(self)

    def get_event_manager(self) -> EventManager:
        return self._event_manager

    def connect(self) -> bool:
        """Open the connection. Returns False when it was already open."""
        if self._connection is not None:
            return False

        self._connection = self._engine.connect()
        logger.debug(f"Opened connection to {self.url!r}")

        if self._event_manager.has_listeners(Events.POST_CONNECT):
            self._event_manager.dispatch_event(Events.POST_CONNECT, EventArgs(self))

        return True

    def get_wrapped_connection(self) -> SAConnection:
        self.connect()
        assert self._connection is not None
        return self._connection

    def exec(self, sql: str) -> int:
        """Execute a raw statement and commit. Returns the affected row count."""
        connection = self.get_wrapped_connection()
        result = connection.exec_driver_sql(sql)
        connection.commit()
        return result.rowcount

    def execute(self, sql: str, parameters: dict[str, Any] | None = None) -> CursorResult:
        return self.get_wrapped_connection().execute(text(sql), parameters or {})

    def set_autocommit(self, autocommit: bool) -> None:
        connection = self.get_wrapped_connection()
        if connection.in_transaction():
            connection.commit()
        isolation_level = (
            "AUTOCOMMIT" if autocommit else connection.default_isolation_level
        )
        connection.execution_options(isolation_level=isolation_level)

    def close(self) -> None:
        if self._connection is not None:
            self._connection.close()
            self._connection = None
            logger.debug(f"Closed connection to {self.url!r}")
        self._engine.dispose()

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def __repr__(self) -> str:
        return f"<Connection {self.url!r}>"

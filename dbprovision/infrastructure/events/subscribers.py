"""
Event subscriber registry.

Subscribers named in ``db_event_subscribers`` are looked up here and built
through their registered factory. Register custom subscribers with the
``register_subscriber`` decorator before the first connection is acquired.
"""

import logging
from collections.abc import Callable

from dbprovision.core.exceptions import SubscriberNotFoundError
from dbprovision.infrastructure.events.event_manager import (
    EventArgs,
    Events,
    EventSubscriber,
)

logger = logging.getLogger(__name__)

SubscriberFactory = Callable[[], EventSubscriber]

SUBSCRIBER_REGISTRY: dict[str, SubscriberFactory] = {}


def register_subscriber(
    name: str,
) -> Callable[[SubscriberFactory], SubscriberFactory]:
    """Register a subscriber factory under ``name``."""

    def decorator(factory: SubscriberFactory) -> SubscriberFactory:
        SUBSCRIBER_REGISTRY[name] = factory
        return factory

    return decorator


def unregister_subscriber(name: str) -> None:
    SUBSCRIBER_REGISTRY.pop(name, None)


def available_subscribers() -> list[str]:
    return sorted(SUBSCRIBER_REGISTRY)


def create_subscriber(name: str) -> EventSubscriber:
    try:
        factory = SUBSCRIBER_REGISTRY[name]
    except KeyError:
        raise SubscriberNotFoundError(name, available_subscribers()) from None
    return factory()


class SQLSessionInit(EventSubscriber):
    """Runs a statement on every new connection."""

    def __init__(self, sql: str = "SELECT 1") -> None:
        self.sql = sql

    def post_connect(self, args: EventArgs) -> None:
        args.connection.exec(self.sql)

    def get_subscribed_events(self) -> list[str]:
        return [Events.POST_CONNECT]


class MySQLSessionInit(SQLSessionInit):
    """Sets the connection character set and collation."""

    def __init__(self, charset: str = "utf8mb4", collation: str | None = None) -> None:
        sql = f"SET NAMES {charset}"
        if collation:
            sql += f" COLLATE {collation}"
        super().__init__(sql)


class SQLiteForeignKeys(SQLSessionInit):
    """Turns on foreign key enforcement, which SQLite leaves off by default."""

    def __init__(self) -> None:
        super().__init__("PRAGMA foreign_keys = ON")


class ConnectionLogger(EventSubscriber):
    def post_connect(self, args: EventArgs) -> None:
        logger.info(f"Connected to {args.connection.url!r}")

    def get_subscribed_events(self) -> list[str]:
        return [Events.POST_CONNECT]


register_subscriber("sql_session_init")(SQLSessionInit)
register_subscriber("mysql_session_init")(MySQLSessionInit)
register_subscriber("sqlite_foreign_keys")(SQLiteForeignKeys)
register_subscriber("log_connections")(ConnectionLogger)

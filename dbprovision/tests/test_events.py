"""
Connection Event Tests

Tests for the event manager, the subscriber registry and the built-in
subscribers.
"""

from unittest.mock import MagicMock

import pytest

from dbprovision.core.exceptions import SubscriberNotFoundError
from dbprovision.infrastructure.database.driver_manager import DriverManager
from dbprovision.infrastructure.events.event_manager import (
    EventArgs,
    EventManager,
    Events,
    EventSubscriber,
)
from dbprovision.infrastructure.events.subscribers import (
    MySQLSessionInit,
    available_subscribers,
    create_subscriber,
    register_subscriber,
    unregister_subscriber,
)


class RecordingSubscriber(EventSubscriber):
    def __init__(self):
        self.received = []

    def post_connect(self, args):
        self.received.append(args)

    def get_subscribed_events(self):
        return [Events.POST_CONNECT]


class TestEventManager:
    def test_dispatch_to_listener(self):
        manager = EventManager()
        subscriber = RecordingSubscriber()
        manager.add_event_subscriber(subscriber)
        args = EventArgs(connection="conn")

        manager.dispatch_event(Events.POST_CONNECT, args)

        assert subscriber.received == [args]

    def test_dispatch_without_listeners_is_noop(self):
        EventManager().dispatch_event(Events.POST_CONNECT, EventArgs(connection=None))

    def test_listener_registered_once(self):
        manager = EventManager()
        subscriber = RecordingSubscriber()

        manager.add_event_subscriber(subscriber)
        manager.add_event_subscriber(subscriber)

        assert manager.get_listeners(Events.POST_CONNECT) == [subscriber]

    def test_remove_subscriber(self):
        manager = EventManager()
        subscriber = RecordingSubscriber()
        manager.add_event_subscriber(subscriber)

        manager.remove_event_subscriber(subscriber)

        assert not manager.has_listeners(Events.POST_CONNECT)

    def test_listener_without_handler_is_rejected(self):
        with pytest.raises(TypeError, match="post_connect"):
            EventManager().add_event_listener(Events.POST_CONNECT, object())

    def test_listeners_called_in_order(self):
        manager = EventManager()
        calls = []
        first, second = MagicMock(), MagicMock()
        first.post_connect.side_effect = lambda args: calls.append("first")
        second.post_connect.side_effect = lambda args: calls.append("second")

        manager.add_event_listener(Events.POST_CONNECT, first)
        manager.add_event_listener([Events.POST_CONNECT], second)
        manager.dispatch_event(Events.POST_CONNECT)

        assert calls == ["first", "second"]


class TestSubscriberRegistry:
    def test_builtins_registered(self):
        assert {
            "sql_session_init",
            "mysql_session_init",
            "sqlite_foreign_keys",
            "log_connections",
        } <= set(available_subscribers())

    def test_unknown_subscriber(self):
        with pytest.raises(SubscriberNotFoundError) as exc_info:
            create_subscriber("NoSuchSubscriber")

        assert exc_info.value.name == "NoSuchSubscriber"
        assert "sqlite_foreign_keys" in exc_info.value.available

    def test_register_and_unregister(self):
        register_subscriber("recording")(RecordingSubscriber)

        assert isinstance(create_subscriber("recording"), RecordingSubscriber)

        unregister_subscriber("recording")
        assert "recording" not in available_subscribers()

    def test_mysql_session_init_statement(self):
        assert MySQLSessionInit().sql == "SET NAMES utf8mb4"
        assert (
            MySQLSessionInit("utf8", "utf8_unicode_ci").sql
            == "SET NAMES utf8 COLLATE utf8_unicode_ci"
        )


class TestPostConnect:
    def test_dispatched_once_on_first_use(self):
        conn = DriverManager.get_connection({"driver": "pdo_sqlite", "memory": True})
        subscriber = RecordingSubscriber()
        conn.get_event_manager().add_event_subscriber(subscriber)

        assert subscriber.received == []

        conn.execute("SELECT 1")
        conn.execute("SELECT 2")

        assert len(subscriber.received) == 1
        assert subscriber.received[0].connection is conn
        conn.close()

    def test_sqlite_foreign_keys_subscriber(self):
        conn = DriverManager.get_connection({"driver": "pdo_sqlite", "memory": True})
        conn.get_event_manager().add_event_subscriber(
            create_subscriber("sqlite_foreign_keys")
        )

        assert conn.execute("PRAGMA foreign_keys").scalar() == 1
        conn.close()

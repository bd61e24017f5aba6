"""Connection factory: resolves the driver named in the parameters."""

import logging
from typing import Any

from dbprovision.core.exceptions import DriverResolutionError
from dbprovision.infrastructure.database.connection import Connection
from dbprovision.infrastructure.database.drivers import DRIVER_MAP, Driver
from dbprovision.infrastructure.events.event_manager import EventManager

logger = logging.getLogger(__name__)


class DriverManager:
    driver_map: dict[str, type[Driver]] = DRIVER_MAP

    @classmethod
    def get_available_drivers(cls) -> list[str]:
        return list(cls.driver_map)

    @classmethod
    def get_driver(cls, name: str | None) -> Driver:
        driver_class = cls.driver_map.get(name) if name else None
        if driver_class is None:
            raise DriverResolutionError(name, cls.get_available_drivers())
        return driver_class()

    @classmethod
    def get_connection(
        cls,
        params: dict[str, Any],
        event_manager: EventManager | None = None,
    ) -> Connection:
        """
        Create a new connection for the given parameters.

        The connection is not opened until it is first used.

        Raises:
            DriverResolutionError: If ``params["driver"]`` is missing or unknown
        """
        driver = cls.get_driver(params.get("driver"))
        connection = Connection(params, driver, event_manager)
        logger.debug(f"Created {type(driver).__name__} connection for {connection.url!r}")
        return connection

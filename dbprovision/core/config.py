"""
Test Database Configuration

Typed configuration for the test database connections. Values come from an
ambient key/value map (environment variables, a ``.env.test`` file or a
mapping handed in by the test runner) using the ``db_*`` and ``tmpdb_*``
namespaces.
"""

import os
from collections.abc import Mapping
from typing import Annotated, Any

from dotenv import dotenv_values
from pydantic import BaseModel, BeforeValidator, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

MAIN_PREFIX = "db_"
TEMPORARY_PREFIX = "tmpdb_"
DRIVER_OPTION_KEY = "driver_option_"
ENV_FILE = ".env.test"

# Order matters: parameters are emitted in this order.
CONNECTION_PARAMETERS = (
    "driver",
    "user",
    "password",
    "host",
    "dbname",
    "port",
    "server",
    "ssl_key",
    "ssl_cert",
    "ssl_ca",
    "ssl_capath",
    "ssl_cipher",
    "unix_socket",
)


def parse_subscribers(v: Any) -> list[str]:
    if v is None:
        return []
    if isinstance(v, str):
        return [i.strip() for i in v.split(",") if i.strip()]
    elif isinstance(v, list | tuple):
        return [str(i).strip() for i in v if str(i).strip()]
    raise ValueError(v)


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_ignore_empty=True,
        extra="ignore",
    )

    DB_PATH: str | None = None
    DB_EVENT_SUBSCRIBERS: Annotated[
        list[str] | str, BeforeValidator(parse_subscribers)
    ] = []
    EXPECT_DB_DRIVER: str | None = None
    DB_LOG_LEVEL: str = "WARNING"


class ConnectionConfig(BaseModel):
    """Sparse parameters for a single connection."""

    # Runners may hand over numeric users or passwords.
    model_config = ConfigDict(coerce_numbers_to_str=True)

    driver: str | None = None
    user: str | None = None
    password: str | None = None
    host: str | None = None
    dbname: str | None = None
    port: int | str | None = None
    server: str | None = None
    ssl_key: str | None = None
    ssl_cert: str | None = None
    ssl_ca: str | None = None
    ssl_capath: str | None = None
    ssl_cipher: str | None = None
    unix_socket: str | None = None
    driver_options: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_mapping(
        cls, configuration: Mapping[str, Any], prefix: str
    ) -> "ConnectionConfig":
        """
        Build a connection config from the ``<prefix><parameter>`` keys of a map.

        Keys that are absent or set to None are left unset. Every
        ``<prefix>driver_option_<name>`` key lands in ``driver_options[name]``.
        """
        values: dict[str, Any] = {}
        for parameter in CONNECTION_PARAMETERS:
            value = configuration.get(prefix + parameter)
            if value is None:
                continue
            values[parameter] = value

        option_prefix = prefix + DRIVER_OPTION_KEY
        options = {
            key[len(option_prefix) :]: value
            for key, value in configuration.items()
            if key.startswith(option_prefix)
        }
        return cls(**values, driver_options=options)

    def to_params(self) -> dict[str, Any]:
        """Return the connection parameter map, omitting unset keys."""
        params: dict[str, Any] = {}
        for parameter in CONNECTION_PARAMETERS:
            value = getattr(self, parameter)
            if value is not None:
                params[parameter] = value
        if self.driver_options:
            params["driverOptions"] = dict(self.driver_options)
        return params


class TestDatabaseConfig(BaseModel):
    """Everything needed to provision and connect to the test database."""

    __test__ = False

    db: ConnectionConfig | None = None
    tmpdb: ConnectionConfig | None = None
    db_path: str | None = None
    event_subscribers: Annotated[list[str], BeforeValidator(parse_subscribers)] = []
    expect_db_driver: str | None = None

    @property
    def has_required_connection_params(self) -> bool:
        return self.db is not None and self.db.driver is not None

    @classmethod
    def from_mapping(
        cls,
        configuration: Mapping[str, Any],
        expect_db_driver: str | None = None,
    ) -> "TestDatabaseConfig":
        """
        Build the config from an ambient key/value map.

        The main connection is only configured when ``db_driver`` is present,
        the temporary one only when ``tmpdb_driver`` is present.
        """
        db = None
        if configuration.get(MAIN_PREFIX + "driver") is not None:
            db = ConnectionConfig.from_mapping(configuration, MAIN_PREFIX)

        tmpdb = None
        if configuration.get(TEMPORARY_PREFIX + "driver") is not None:
            tmpdb = ConnectionConfig.from_mapping(configuration, TEMPORARY_PREFIX)

        return cls(
            db=db,
            tmpdb=tmpdb,
            db_path=configuration.get("db_path"),
            event_subscribers=configuration.get("db_event_subscribers"),
            expect_db_driver=expect_db_driver,
        )

    @classmethod
    def from_environment(
        cls,
        environ: Mapping[str, str] | None = None,
        settings: Settings | None = None,
    ) -> "TestDatabaseConfig":
        """Build the config from environment variables and ``.env.test``."""
        settings = settings or Settings()
        configuration: dict[str, Any] = load_ambient_configuration(environ)
        configuration.setdefault("db_path", settings.DB_PATH)
        configuration.setdefault(
            "db_event_subscribers", settings.DB_EVENT_SUBSCRIBERS
        )
        return cls.from_mapping(
            configuration, expect_db_driver=settings.EXPECT_DB_DRIVER
        )

    def main_connection_params(self) -> dict[str, Any]:
        return self.db.to_params() if self.db is not None else {}

    def temporary_connection_params(self) -> dict[str, Any]:
        """
        Parameters for the administrative connection.

        Uses the ``tmpdb_*`` namespace when it names a driver, otherwise the
        main parameters without a database name so the connection targets
        the server itself.
        """
        if self.tmpdb is not None:
            return self.tmpdb.to_params()

        params = self.main_connection_params()
        params.pop("dbname", None)
        return params


def load_ambient_configuration(
    environ: Mapping[str, str | None] | None = None,
    env_file: str | os.PathLike[str] | None = ENV_FILE,
) -> dict[str, Any]:
    """
    Collect the ``db_*`` and ``tmpdb_*`` entries of the environment, lower-cased.

    Without an explicit ``environ``, the process environment is read on top of
    the values in ``env_file`` (when that file exists).
    """
    if environ is None:
        environ = {}
        if env_file is not None and os.path.isfile(env_file):
            environ.update(dotenv_values(env_file))
        environ.update(os.environ)
    configuration: dict[str, Any] = {}
    for key, value in environ.items():
        lowered = key.lower()
        if not lowered.startswith((MAIN_PREFIX, TEMPORARY_PREFIX)):
            continue
        if value is None or value == "":
            continue
        configuration[lowered] = value
    return configuration

"""
Database drivers and platforms.

A driver turns a connection parameter map into an SQLAlchemy URL plus DBAPI
connect arguments. A platform describes what the database server can do.
"""

from typing import Any

from sqlalchemy.engine import URL


class Platform:
    name = "generic"

    def supports_create_drop_database(self) -> bool:
        return True

    def supports_foreign_key_alter(self) -> bool:
        return True

    def supports_sequences(self) -> bool:
        return False

    def __repr__(self) -> str:
        return f"<{type(self).__name__}>"


class SQLitePlatform(Platform):
    name = "sqlite"

    def supports_create_drop_database(self) -> bool:
        # A SQLite database is a file; there is no server to create it on.
        return False

    def supports_foreign_key_alter(self) -> bool:
        return False


class MySQLPlatform(Platform):
    name = "mysql"


class PostgreSQLPlatform(Platform):
    name = "postgresql"

    def supports_sequences(self) -> bool:
        return True


class SQLServerPlatform(Platform):
    name = "mssql"

    def supports_sequences(self) -> bool:
        return True


class OraclePlatform(Platform):
    name = "oracle"

    def supports_create_drop_database(self) -> bool:
        return False

    def supports_sequences(self) -> bool:
        return True


class Driver:
    """Base driver: maps connection parameters to an SQLAlchemy URL."""

    drivername = ""
    platform_class: type[Platform] = Platform

    def get_database_platform(self) -> Platform:
        return self.platform_class()

    def build_url(self, params: dict[str, Any]) -> URL:
        return URL.create(
            self.drivername,
            username=params.get("user"),
            password=params.get("password"),
            host=params.get("host"),
            port=_port(params.get("port")),
            database=params.get("dbname"),
        )

    def build_connect_args(self, params: dict[str, Any]) -> dict[str, Any]:
        connect_args = self._ssl_connect_args(params)
        connect_args.update(params.get("driverOptions") or {})
        return connect_args

    def _ssl_connect_args(self, params: dict[str, Any]) -> dict[str, Any]:
        return {}


class SQLiteDriver(Driver):
    drivername = "sqlite+pysqlite"
    platform_class = SQLitePlatform

    def build_url(self, params: dict[str, Any]) -> URL:
        # A file path takes precedence over the in-memory flag.
        database = params.get("path")
        if database is None:
            database = ":memory:"
        return URL.create(self.drivername, database=database)


class MySQLDriver(Driver):
    drivername = "mysql+pymysql"
    platform_class = MySQLPlatform

    def build_url(self, params: dict[str, Any]) -> URL:
        url = super().build_url(params)
        if params.get("unix_socket"):
            url = url.update_query_dict({"unix_socket": params["unix_socket"]})
        return url

    def _ssl_connect_args(self, params: dict[str, Any]) -> dict[str, Any]:
        ssl = {}
        for parameter, key in (
            ("ssl_key", "key"),
            ("ssl_cert", "cert"),
            ("ssl_ca", "ca"),
            ("ssl_capath", "capath"),
            ("ssl_cipher", "cipher"),
        ):
            if params.get(parameter):
                ssl[key] = params[parameter]
        return {"ssl": ssl} if ssl else {}


class PostgreSQLDriver(Driver):
    drivername = "postgresql+psycopg"
    platform_class = PostgreSQLPlatform

    def build_url(self, params: dict[str, Any]) -> URL:
        url = super().build_url(params)
        if params.get("unix_socket") and not params.get("host"):
            url = url.update_query_dict({"host": params["unix_socket"]})
        return url

    def _ssl_connect_args(self, params: dict[str, Any]) -> dict[str, Any]:
        connect_args = {}
        for parameter, key in (
            ("ssl_key", "sslkey"),
            ("ssl_cert", "sslcert"),
            ("ssl_ca", "sslrootcert"),
        ):
            if params.get(parameter):
                connect_args[key] = params[parameter]
        if connect_args:
            connect_args.setdefault("sslmode", "verify-ca")
        return connect_args


class SQLServerDriver(Driver):
    drivername = "mssql+pyodbc"
    platform_class = SQLServerPlatform

    def build_url(self, params: dict[str, Any]) -> URL:
        host = params.get("host")
        if host and params.get("server"):
            # Named instance
            host = f"{host}\\{params['server']}"
        return URL.create(
            self.drivername,
            username=params.get("user"),
            password=params.get("password"),
            host=host,
            port=_port(params.get("port")),
            database=params.get("dbname"),
        )


class OracleDriver(Driver):
    drivername = "oracle+oracledb"
    platform_class = OraclePlatform

    def build_url(self, params: dict[str, Any]) -> URL:
        url = super().build_url(params)
        if params.get("server"):
            url = url.update_query_dict({"service_name": params["server"]})
        return url


DRIVER_MAP: dict[str, type[Driver]] = {
    "pdo_sqlite": SQLiteDriver,
    "sqlite3": SQLiteDriver,
    "pdo_mysql": MySQLDriver,
    "mysqli": MySQLDriver,
    "pdo_pgsql": PostgreSQLDriver,
    "pgsql": PostgreSQLDriver,
    "pdo_sqlsrv": SQLServerDriver,
    "sqlsrv": SQLServerDriver,
    "pdo_oci": OracleDriver,
    "oci8": OracleDriver,
}


def _port(value: Any) -> int | None:
    if value is None or value == "":
        return None
    return int(value)

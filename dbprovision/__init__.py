"""
dbprovision - test database provisioning.

Resolves test database connection parameters from the environment, falls
back to an in-memory SQLite database, and wipes the configured test
database once per test session.
"""

from dbprovision.core.config import ConnectionConfig, Settings, TestDatabaseConfig
from dbprovision.core.exceptions import (
    ConfigurationMismatchError,
    DriverResolutionError,
    ProvisioningError,
    SchemaOperationError,
    SubscriberNotFoundError,
)
from dbprovision.infrastructure.database.connection import Connection
from dbprovision.infrastructure.database.driver_manager import DriverManager
from dbprovision.testing.coordinator import TestDatabaseCoordinator

__version__ = "0.1.0"

__all__ = [
    "ConfigurationMismatchError",
    "Connection",
    "ConnectionConfig",
    "DriverManager",
    "DriverResolutionError",
    "ProvisioningError",
    "SchemaOperationError",
    "Settings",
    "SubscriberNotFoundError",
    "TestDatabaseConfig",
    "TestDatabaseCoordinator",
]

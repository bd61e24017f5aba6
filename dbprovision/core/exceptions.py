"""
Provisioning Exceptions

Errors raised while resolving connection parameters and preparing the test
database. Driver-level failures (bad credentials, unreachable hosts, failing
SQL) are not wrapped: they propagate as the SQLAlchemy exceptions raised by
the underlying DBAPI.
"""

from enum import Enum


class ErrorType(str, Enum):
    """Error type enumeration for discriminated unions."""

    CONFIGURATION = "configuration"
    DRIVER_RESOLUTION = "driver_resolution"
    SCHEMA_OPERATION = "schema_operation"


class ProvisioningError(Exception):
    """Base class for all provisioning errors with type discrimination."""

    def __init__(
        self,
        message: str,
        error_type: ErrorType,
        details: dict[str, str | int | bool | None] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.error_type = error_type
        self.details = details or {}

    def to_dict(self) -> dict[str, str | dict[str, str | int | bool | None]]:
        """Convert error to dictionary for reporting."""
        return {
            "type": self.error_type.value,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationMismatchError(ProvisioningError):
    """Raised when the resolved driver differs from ``EXPECT_DB_DRIVER``."""

    def __init__(self, expected: str, actual: str | None) -> None:
        self.expected = expected
        self.actual = actual
        message = (
            "Invalid test environment config\n"
            f" - EXPECT_DB_DRIVER = `{expected}`\n"
            f" - Actual driver    = `{actual}`"
        )
        super().__init__(
            message,
            ErrorType.CONFIGURATION,
            {"expected": expected, "actual": actual},
        )


class SubscriberNotFoundError(ProvisioningError):
    """Raised when a configured event subscriber is not registered."""

    def __init__(self, name: str, available: list[str]) -> None:
        self.name = name
        self.available = available
        message = (
            f"Unknown event subscriber '{name}'. "
            f"Registered subscribers: {', '.join(available) or 'none'}"
        )
        super().__init__(message, ErrorType.CONFIGURATION, {"subscriber": name})


class DriverResolutionError(ProvisioningError):
    """Raised when connection parameters name no known driver."""

    def __init__(self, driver: str | None, supported: list[str]) -> None:
        self.driver = driver
        self.supported = supported
        if driver is None:
            message = "The 'driver' connection parameter is mandatory"
        else:
            message = (
                f"The given 'driver' {driver} is unknown, "
                f"supported drivers are: {', '.join(supported)}"
            )
        super().__init__(message, ErrorType.DRIVER_RESOLUTION, {"driver": driver})


class SchemaOperationError(ProvisioningError):
    """Raised when a schema operation is not possible on the target platform."""

    def __init__(self, operation: str, platform: str) -> None:
        self.operation = operation
        self.platform = platform
        message = f"Operation '{operation}' is not supported by platform {platform}"
        super().__init__(
            message,
            ErrorType.SCHEMA_OPERATION,
            {"operation": operation, "platform": platform},
        )

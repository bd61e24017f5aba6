from .connection import Connection
from .driver_manager import DriverManager
from .schema import Schema, SchemaManager

__all__ = ["Connection", "DriverManager", "Schema", "SchemaManager"]

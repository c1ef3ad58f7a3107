"""Database package."""

from northwind.database.provider import (
    ConnectionProvider,
    create_db_engine,
    get_connection_provider,
)

__all__ = [
    "ConnectionProvider",
    "create_db_engine",
    "get_connection_provider",
]

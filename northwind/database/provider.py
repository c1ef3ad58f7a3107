"""
Connection Provider
===================

Creates SQLAlchemy engines for connection strings and hands out scoped
connections from them.
"""

import logging
import os
import threading
from contextlib import contextmanager
from functools import lru_cache
from typing import Any, Dict, Generator, Optional

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Connection, Engine, make_url
from sqlalchemy.pool import StaticPool

from northwind.config import settings

logger = logging.getLogger(__name__)


def _is_memory_database(database: Optional[str]) -> bool:
    return not database or database == ":memory:" or database.startswith("file::memory:")


def create_db_engine(database_url: str, echo: bool = False, **options: Any) -> Engine:
    """Create and configure a database engine for one connection string."""
    url = make_url(database_url)

    # SQLite-specific configuration
    if url.get_backend_name() == "sqlite":
        connect_args = dict(options.pop("connect_args", {}))
        connect_args.setdefault("check_same_thread", False)

        if _is_memory_database(url.database):
            # In-memory databases live on a single shared connection
            options.setdefault("poolclass", StaticPool)
        else:
            # Ensure data directory exists
            db_dir = os.path.dirname(url.database)
            if db_dir and not os.path.exists(db_dir):
                os.makedirs(db_dir, exist_ok=True)

        engine = create_engine(url, connect_args=connect_args, echo=echo, **options)

        @event.listens_for(engine, "connect")
        def set_sqlite_pragma(dbapi_conn, connection_record):
            cursor = dbapi_conn.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

    else:
        options.setdefault("pool_pre_ping", True)
        engine = create_engine(url, echo=echo, **options)

    logger.info("Created engine for %s", url.render_as_string(hide_password=True))
    return engine


class ConnectionProvider:
    """
    Supplies scoped database connections for connection strings.

    One engine (and therefore one connection pool) is created per
    connection string on first use and reused afterwards. Every call to
    ``connect`` checks out its own connection.

    Example:
        provider = ConnectionProvider()
        with provider.connect("sqlite:///./data/northwind.db") as conn:
            conn.execute(text("SELECT 1"))
    """

    def __init__(self, echo: bool = False, **engine_options: Any):
        self.echo = echo
        self.engine_options = engine_options
        self._engines: Dict[str, Engine] = {}
        self._lock = threading.Lock()

    def get_engine(self, connection_string: str) -> Engine:
        """Return the engine for a connection string, creating it if needed."""
        with self._lock:
            engine = self._engines.get(connection_string)
            if engine is None:
                engine = create_db_engine(
                    connection_string, echo=self.echo, **dict(self.engine_options)
                )
                self._engines[connection_string] = engine
            return engine

    @contextmanager
    def connect(self, connection_string: str) -> Generator[Connection, None, None]:
        """
        Context manager for one unit of work.

        Yields a connection inside a transaction. The transaction commits
        when the block exits normally, rolls back when it raises, and the
        connection is returned to the pool on every path.

        Usage:
            with provider.connect(url) as conn:
                conn.execute(statement, params)
        """
        engine = self.get_engine(connection_string)
        with engine.begin() as connection:
            yield connection

    def dispose(self) -> None:
        """Dispose every engine this provider created."""
        with self._lock:
            engines = list(self._engines.values())
            self._engines.clear()
        for engine in engines:
            engine.dispose()


@lru_cache(maxsize=1)
def get_connection_provider() -> ConnectionProvider:
    """Process-wide provider configured from settings."""
    return ConnectionProvider(echo=settings.app_debug)

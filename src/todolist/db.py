from __future__ import annotations

import logging
import os
from contextlib import contextmanager
from typing import Iterator

from sqlalchemy import Connection, create_engine
from sqlalchemy import exc as sa_exc
from sqlalchemy.engine import URL, make_url
from sqlalchemy.pool import QueuePool

from .errors import StorageConnectionError
from .models import metadata

log = logging.getLogger(__name__)


def _to_url(locator: str) -> URL:
    """
    Normalize a storage locator into a SQLAlchemy URL.
    - 'sqlite:///path/to.db' style URLs are parsed as-is
    - anything else is treated as a sqlite file path
    """
    value = locator.strip()
    if not value:
        raise StorageConnectionError("Database locator is empty")
    if "://" not in value:
        return URL.create("sqlite", database=value)
    try:
        return make_url(value)
    except sa_exc.ArgumentError as exc:
        raise StorageConnectionError(f"Invalid database locator: {value!r}") from exc


class StoragePool:
    """
    Bounded pool of connections to the SQLite backend.

    At most ``pool_size`` connections are open at once. A caller that finds the
    pool exhausted waits up to ``timeout`` seconds, then gets a
    StorageConnectionError. Nothing is retried here.
    """

    def __init__(self, locator: str, pool_size: int = 5, timeout: float = 5.0) -> None:
        self.url = _to_url(locator)
        if self.url.get_backend_name() != "sqlite":
            raise StorageConnectionError(f"Unsupported backend {self.url.get_backend_name()!r}; only sqlite is supported")
        database = self.url.database
        if not database or database == ":memory:":
            raise StorageConnectionError("A pooled backend needs a database file, not an in-memory database")
        try:
            os.makedirs(os.path.dirname(database) or ".", exist_ok=True)
        except OSError as exc:
            raise StorageConnectionError(f"Cannot create database directory for {database}") from exc

        self.pool_size = pool_size
        self.timeout = timeout
        self._engine = create_engine(
            self.url,
            poolclass=QueuePool,
            pool_size=pool_size,
            max_overflow=0,
            pool_timeout=timeout,
            pool_pre_ping=True,
            connect_args={"check_same_thread": False, "timeout": timeout},
        )

    def initialize(self) -> None:
        """
        Create the schema if it does not exist. Doubles as the startup reachability check.
        """
        try:
            metadata.create_all(self._engine)
        except sa_exc.SQLAlchemyError as exc:
            raise StorageConnectionError(f"Failed to initialize database at {self.url.database}") from exc
        log.info(
            "Storage pool ready: %s (size=%d, timeout=%.1fs)",
            self.url.render_as_string(hide_password=True),
            self.pool_size,
            self.timeout,
        )

    @contextmanager
    def connect(self) -> Iterator[Connection]:
        """
        Lend a pooled connection inside a transaction.

        Commits when the block exits normally, rolls back when it raises, and
        always returns the connection to the pool.
        """
        try:
            conn = self._engine.connect()
        except sa_exc.TimeoutError as exc:
            raise StorageConnectionError(
                f"Connection pool exhausted (size={self.pool_size}, waited {self.timeout}s)"
            ) from exc
        except sa_exc.DBAPIError as exc:
            raise StorageConnectionError("Failed to get DB connection from pool") from exc
        try:
            with conn.begin():
                yield conn
        finally:
            conn.close()

    def status(self) -> str:
        return self._engine.pool.status()

    def dispose(self) -> None:
        """Close every pooled connection."""
        self._engine.dispose()
        log.info("Storage pool disposed")

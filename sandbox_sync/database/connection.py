from collections.abc import Generator
from contextlib import contextmanager
from typing import Any

import psycopg
from psycopg_pool import ConnectionPool

from sandbox_sync.logging.logger import Log


class DatabasePool:
    """One connection pool per database (a run opens one for source, one for target)."""

    def __init__(
        self,
        conninfo: str,
        name: str,
        min_size: int = 1,
        max_size: int = 4,
    ) -> None:
        self.name = name
        self._conninfo = conninfo
        self._min_size = min_size
        self._max_size = max_size
        self._pool: ConnectionPool | None = None

    def open(self) -> None:
        """Open the pool and verify the database answers a trivial query."""
        if self._pool is not None:
            return
        self._pool = ConnectionPool(
            self._conninfo,
            min_size=self._min_size,
            max_size=self._max_size,
            open=False,
        )
        self._pool.open(wait=True)
        with self.connection() as conn:
            conn.execute("SELECT 1")
        Log.debug(f"Connection pool '{self.name}' opened")

    def close(self) -> None:
        """Close the pool. Safe to call more than once."""
        if self._pool is not None:
            self._pool.close()
            self._pool = None
            Log.debug(f"Connection pool '{self.name}' closed")

    @contextmanager
    def connection(self) -> Generator[psycopg.Connection[Any], None, None]:
        """Yield a connection from the pool. Caller manages commit/rollback."""
        if self._pool is None:
            raise RuntimeError(f"Connection pool '{self.name}' not opened. Call open() first.")
        with self._pool.connection() as conn:
            yield conn

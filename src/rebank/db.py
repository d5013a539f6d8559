"""
Database connection and query utilities.

Wraps a psycopg connection pool behind a small handle object that the
repository owns for its lifetime. Rows come back as plain tuples in column
order; mapping them into records is the repository's job.

For testing, use Database.attach() to wrap an existing connection. All
statements then run on that connection and the caller (the test fixture)
manages the transaction so it can be rolled back.
"""

from contextlib import contextmanager
from typing import Any, Optional

import psycopg
from psycopg_pool import ConnectionPool, PoolTimeout

from rebank.errors import DatabaseConnectionError
from rebank.logger import get_logger

logger = get_logger(__name__)


class Database:
    """Owns the connection pool (or a single borrowed connection)."""

    def __init__(
        self,
        pool: Optional[ConnectionPool] = None,
        connection: Optional[psycopg.Connection] = None,
    ):
        if pool is None and connection is None:
            raise ValueError("Database needs either a pool or a connection")
        self._pool = pool
        self._connection_override = connection

    # =========================================================================
    # Lifecycle
    # =========================================================================

    @classmethod
    def open(cls, conninfo: str, timeout: float = 10.0) -> "Database":
        """
        Ping the database once, then open a pool for conninfo.

        The ping uses a direct connection so an unreachable server fails
        straight away with the driver's own error instead of the pool's
        reconnect loop.

        Raises:
            DatabaseConnectionError: if the ping fails or the pool cannot
                fill within timeout seconds.
        """
        try:
            with psycopg.connect(conninfo) as conn:
                conn.execute("SELECT 1")
        except psycopg.Error as exc:
            logger.error("Database ping failed: %s", exc)
            raise DatabaseConnectionError(f"database ping failed: {exc}") from exc

        pool = ConnectionPool(conninfo, open=False)
        try:
            pool.open(wait=True, timeout=timeout)
        except (PoolTimeout, psycopg.Error) as exc:
            pool.close()
            logger.error("Could not open database pool: %s", exc)
            raise DatabaseConnectionError(f"could not open connection pool: {exc}") from exc

        logger.info("Database connection pool opened")
        return cls(pool=pool)

    @classmethod
    def attach(cls, connection: psycopg.Connection) -> "Database":

"""
Database connection management for RAGmonsters MCP.

Provides a bounded PostgreSQL connection pool and per-Action sessions.
Each Action acquires one pooled connection for its whole execution and
returns it on every exit path.
"""

import logging
import time
from collections.abc import Generator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import psycopg
from psycopg.conninfo import make_conninfo
from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool, PoolTimeout

from .errors import QueryTimeoutError, UpstreamUnavailableError

if TYPE_CHECKING:
    from ..queries.builder import Statement

logger = logging.getLogger(__name__)


class DatabaseSession:
    """Executes statements on a single borrowed connection."""

    def __init__(self, connection: Any, max_rows: int = 1000):
        """Initialize a session.

        Args:
            connection: psycopg connection borrowed from the pool.
            max_rows: Maximum rows fetched per statement.
        """
        self._connection = connection
        self.max_rows = max_rows

    def fetch_all(self, statement: "Statement") -> list[dict[str, Any]]:
        """Execute a statement and return its rows as dictionaries.

        Args:
            statement: Parameterized statement to run.

        Returns:
            List of result rows, at most max_rows long.
        """
        logger.debug(f"Executing query: {' '.join(statement.sql.split())}")
        logger.debug(f"Query params: {statement.params!r}")

        start_time = time.perf_counter()
        with self._connection.cursor() as cursor:
            cursor.execute(statement.sql, statement.params or None)
            rows = cursor.fetchmany(self.max_rows)
        duration_ms = (time.perf_counter() - start_time) * 1000

        logger.debug(f"Query executed in {duration_ms:.1f}ms, returned {len(rows)} rows")
        return [dict(row) for row in rows]

    def fetch_one(self, statement: "Statement") -> dict[str, Any] | None:
        """Execute a statement and return its first row, or None."""
        rows = self.fetch_all(statement)
        return rows[0] if rows else None


class DatabasePool:
    """Owns the process-wide PostgreSQL connection pool."""

    def __init__(self, name: str, config: dict[str, Any]):
        """Initialize the pool wrapper (the pool itself opens in open()).

        Args:
            name: Identifier for this database.
            config: Connection configuration from Config.get_database_config().
        """
        self.name = name
        self.config = config
        self._pool: ConnectionPool | None = None

    @property
    def schema(self) -> str:
        return self.config.get("schema", "ragmonsters")

    @property
    def statement_timeout(self) -> int:
        # Seconds
        return self.config.get("settings", {}).get("statement_timeout", 15)

    @property
    def pool_min_size(self) -> int:
        return self.config.get("settings", {}).get("pool_min_size", 1)

    @property
    def pool_max_size(self) -> int:
        return self.config.get("settings", {}).get("pool_max_size", 10)

    @property
    def pool_timeout(self) -> float:
        # Seconds to wait for a free connection
        return self.config.get("settings", {}).get("pool_timeout", 10)

    @property
    def max_rows(self) -> int:
        return self.config.get("settings", {}).get("max_rows", 1000)

    @property
    def is_open(self) -> bool:
        return self._pool is not None

    def conninfo(self) -> str:
        """Build the libpq connection string.

        A configured URL wins; otherwise the discrete fields are used.
        """
        if self.config.get("url"):
            return make_conninfo(self.config["url"])
        return make_conninfo(
            host=self.config.get("host") or None,
            port=self.config.get("port") or None,
            dbname=self.config.get("database") or None,
            user=self.config.get("user") or None,
            password=self.config.get("password") or None,
        )

    def _connection_kwargs(self) -> dict[str, Any]:
        return {
            "row_factory": dict_row,
            "options": f"-c statement_timeout={int(self.statement_timeout * 1000)}",
            "connect_timeout": int(self.pool_timeout),
        }

    @staticmethod
    def _configure_connection(connection: Any) -> None:
        """Make every pooled connection read-only."""
        connection.read_only = True

    def _create_pool(self) -> ConnectionPool:
        return ConnectionPool(
            self.conninfo(),
            min_size=self.pool_min_size,
            max_size=self.pool_max_size,
            timeout=self.pool_timeout,
            kwargs=self._connection_kwargs(),
            configure=self._configure_connection,
            check=ConnectionPool.check_connection,
            name=self.name,
            open=False,
        )

    def open(self) -> None:
        """Open the pool and wait for the minimum number of connections.

        Raises:
            UpstreamUnavailableError: If the database cannot be reached.
        """
        if self._pool is not None:
            return

        logger.info(
            f"Opening connection pool for {self.name} "
            f"(min={self.pool_min_size}, max={self.pool_max_size})"
        )
        pool = self._create_pool()
        try:
            pool.open(wait=True, timeout=self.pool_timeout)
        except PoolTimeout as e:
            pool.close()
            raise UpstreamUnavailableError(
                f"Could not connect to database '{self.name}': {e}"
            ) from e
        self._pool = pool

    def close(self) -> None:
        """Close the pool and all its connections."""
        if self._pool is not None:
            try:
                self._pool.close()
            except Exception as e:
                logger.warning(f"Error closing connection pool: {e}")
            finally:
                self._pool = None

    @contextmanager
    def session(self) -> Generator[DatabaseSession, None, None]:
        """Borrow one pooled connection for the duration of the block.

        Yields:
            DatabaseSession bound to the borrowed connection.

        Raises:
            QueryTimeoutError: If a statement or the connection wait timed out.
            UpstreamUnavailableError: On any other data-store failure.
        """
        if self._pool is None:
            raise UpstreamUnavailableError(f"Connection pool for '{self.name}' is not open")

        try:
            with self._pool.connection() as connection:
                yield DatabaseSession(connection, self.max_rows)
        except psycopg.errors.QueryCanceled as e:
            logger.warning(f"Query cancelled on {self.name}: {e}")
            raise QueryTimeoutError(
                f"Query exceeded the {self.statement_timeout}s statement timeout"
            ) from e
        except PoolTimeout as e:
            logger.warning(f"No connection available on {self.name}: {e}")
            raise QueryTimeoutError(
                f"No database connection available within {self.pool_timeout}s"
            ) from e
        except psycopg.Error as e:
            logger.error(f"Database error on {self.name}: {e}")
            raise UpstreamUnavailableError(f"Database error: {e}") from e

    def ping(self) -> bool:
        """Check database health.

        Returns:
            True if a trivial query succeeds.
        """
        from ..queries.builder import Statement

        try:
            with self.session() as session:
                return session.fetch_one(Statement("SELECT 1 AS ok")) is not None
        except UpstreamUnavailableError:
            return False

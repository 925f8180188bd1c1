"""SQLite connection pool and statement execution."""

import logging
import queue
import sqlite3
import threading
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Generator, Sequence

from .models import QueryResult
from .schema import DROP_SCHEMA_SQL, SCHEMA_SQL
from .search import stem_text

logger = logging.getLogger(__name__)

_WAIT_SLICE = 0.05


class DriverError(Exception):
    """Any failure reported by the database engine, message passed through."""


class Database:
    """Pooled SQLite access for the links catalog.

    Connections are opened lazily up to ``pool_size`` and handed out one per
    statement. ``create_schema`` and ``destroy_schema`` are bootstrap and test
    helpers; they must not run while other statements are in flight.
    """

    def __init__(self, db_path: Path | str, pool_size: int = 5, timeout: float = 5.0):
        if pool_size < 1:
            raise ValueError("pool_size must be at least 1")
        self.db_path = Path(db_path)
        self.pool_size = pool_size
        self.timeout = timeout
        self._idle: queue.LifoQueue[sqlite3.Connection] = queue.LifoQueue()
        self._created = 0
        self._lock = threading.Lock()
        self._closed = False

    @classmethod
    def from_config(cls, config) -> "Database":
        return cls(
            config.database_path,
            pool_size=config.pool_size,
            timeout=config.timeout_seconds,
        )

    def __enter__(self) -> "Database":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ---- Pool lifecycle ----

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(
            self.db_path, timeout=self.timeout, check_same_thread=False
        )
        conn.row_factory = sqlite3.Row
        # Used by the FTS triggers; rows written without it cannot be indexed
        conn.create_function("stem_text", 2, stem_text, deterministic=True)
        return conn

    def _checkout(self) -> sqlite3.Connection:
        if self._closed:
            raise DriverError("connection pool is closed")
        try:
            return self._idle.get_nowait()
        except queue.Empty:
            pass

        with self._lock:
            if self._closed:
                raise DriverError("connection pool is closed")
            if self._created < self.pool_size:
                self._created += 1
                try:
                    return self._connect()
                except sqlite3.Error as e:
                    self._created -= 1
                    raise DriverError(str(e)) from e

        # Wait in short slices so a concurrent close() is noticed promptly
        deadline = time.monotonic() + self.timeout
        while True:
            if self._closed:
                raise DriverError("connection pool is closed")
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                raise DriverError("connection pool exhausted")
            try:
                return self._idle.get(timeout=min(remaining, _WAIT_SLICE))
            except queue.Empty:
                continue

    def _checkin(self, conn: sqlite3.Connection) -> None:
        with self._lock:
            if not self._closed:
                self._idle.put(conn)
                return
            self._created -= 1
        conn.close()

    @contextmanager
    def acquire(self) -> Generator[sqlite3.Connection, None, None]:
        """Borrow a connection from the pool for the duration of the block."""
        conn = self._checkout()
        try:
            yield conn
        finally:
            self._checkin(conn)

    def close(self) -> None:
        """Close idle connections; busy ones are closed when released."""
        idle = []
        with self._lock:
            self._closed = True
            while True:
                try:
                    idle.append(self._idle.get_nowait())
                except queue.Empty:
                    break
            self._created -= len(idle)
        for conn in idle:
            conn.close()
        logger.debug(f"Closed connection pool for {self.db_path}")

    @property
    def closed(self) -> bool:
        return self._closed

    # ---- Statement execution ----

    def query(self, sql: str, params: Sequence[Any] = ()) -> QueryResult:
        """Execute one parameterized statement and return its rows."""
        logger.debug(f"Executing: {' '.join(sql.split())} {tuple(params)!r}")
        with self.acquire() as conn:
            try:
                cursor = conn.execute(sql, tuple(params))
                rows = cursor.fetchall()
                row_count = len(rows) if cursor.description else cursor.rowcount
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                logger.warning(f"Statement failed: {e}")
                raise DriverError(str(e)) from e

        return QueryResult(rows=[dict(row) for row in rows], row_count=row_count)

    # ---- Schema lifecycle ----

    def _run_script(self, script: str) -> None:
        with self.acquire() as conn:
            try:
                conn.executescript(script)
                conn.commit()
            except sqlite3.Error as e:
                conn.rollback()
                raise DriverError(str(e)) from e

    def create_schema(self, ddl: str = SCHEMA_SQL) -> None:
        """Apply a DDL script."""
        self._run_script(ddl)
        logger.info(f"Created schema in {self.db_path}")

    def destroy_schema(self) -> None:
        """Drop the links table and its search indexes."""
        self._run_script(DROP_SCHEMA_SQL)
        logger.info(f"Dropped schema in {self.db_path}")

"""
TaskLedger — Database Module

Provides database connection, transactions, and query helpers.
"""

import logging
import sqlite3
import threading
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

# Seconds a writer waits on a locked database before giving up
BUSY_TIMEOUT = 30.0


class Database:
    """
    Database connection and query manager.

    Each thread gets its own sqlite connection, so a transaction opened by one
    request is never joined or ended by another request running on a
    different worker thread. Writers on separate connections serialize on the
    database lock. A ":memory:" database is private to the thread that opens
    it.
    """

    def __init__(self, db_path: str):
        """
        Initialize database manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = str(db_path)
        self._local = threading.local()
        self._connections: list[sqlite3.Connection] = []
        self._lock = threading.Lock()

        if self.db_path != ":memory:":
            Path(self.db_path).parent.mkdir(parents=True, exist_ok=True)

    def get_connection(self) -> sqlite3.Connection:
        """
        Get the calling thread's database connection.

        Opens one on first use in a thread and reuses it afterwards. Uses dict
        row factory for convenient column access. The same-thread check is
        disabled only so close() can shut every thread's connection down.
        """
        conn = getattr(self._local, "connection", None)
        if conn is None:
            conn = sqlite3.connect(self.db_path, timeout=BUSY_TIMEOUT, check_same_thread=False)
            conn.row_factory = self._dict_factory
            conn.execute("PRAGMA foreign_keys = ON")
            if self.db_path != ":memory:":
                conn.execute("PRAGMA journal_mode = WAL")
            self._local.connection = conn
            with self._lock:
                self._connections.append(conn)
        return conn

    @staticmethod
    def _dict_factory(cursor: sqlite3.Cursor, row: tuple) -> dict[str, Any]:
        """Row factory that returns dicts instead of tuples."""
        return {col[0]: row[idx] for idx, col in enumerate(cursor.description)}

    @property
    def connection_count(self) -> int:
        """Number of open per-thread connections."""
        with self._lock:
            return len(self._connections)

    def close(self) -> None:
        """Close every thread's connection."""
        with self._lock:
            connections, self._connections = self._connections, []
            self._local = threading.local()
        for conn in connections:
            conn.close()

    @contextmanager
    def transaction(self, immediate: bool = False) -> Generator[sqlite3.Connection, None, None]:
        """
        Context manager for database transactions.

        Commits on success, rolls back on exception. With immediate=True the
        write lock is taken up front (BEGIN IMMEDIATE), so concurrent writers
        queue behind each other instead of interleaving. A transaction already
        open on this thread's connection is joined rather than restarted.

        Usage:
            with db.transaction() as conn:
                conn.execute("INSERT INTO ...")
        """
        conn = self.get_connection()
        if immediate and not conn.in_transaction:
            conn.execute("BEGIN IMMEDIATE")
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    # =========================================================================
    # Query Helpers
    # =========================================================================

    def execute(self, sql: str, params: tuple | dict | None = None) -> sqlite3.Cursor:
        """
        Execute a SQL statement.

        Args:
            sql: SQL statement
            params: Query parameters (tuple for ?, dict for :name)

        Returns:
            Cursor for the executed query
        """
        conn = self.get_connection()
        if params is None:
            return conn.execute(sql)
        return conn.execute(sql, params)

    def executescript(self, script: str) -> None:
        """Run a multi-statement SQL script (schema creation)."""
        conn = self.get_connection()
        conn.executescript(script)
        conn.commit()

    def fetch_one(self, sql: str, params: tuple | dict | None = None) -> dict[str, Any] | None:
        """
        Execute query and return first row as dict.

        Returns:
            First row as dict, or None if no results
        """
        cursor = self.execute(sql, params)
        return cursor.fetchone()

    def fetch_all(self, sql: str, params: tuple | dict | None = None) -> list[dict[str, Any]]:
        """
        Execute query and return all rows as list of dicts.
        """
        cursor = self.execute(sql, params)
        return cursor.fetchall()

    def fetch_value(self, sql: str, params: tuple | dict | None = None) -> Any:
        """
        Execute query and return single value from first row.

        Returns:
            First column of first row, or None
        """
        row = self.fetch_one(sql, params)
        if row is None:
            return None
        return next(iter(row.values())) if row else None

    def insert(self, table: str, data: dict[str, Any]) -> Any:
        """
        Insert a row and return the ID.

        Args:
            table: Table name
            data: Dict of column names to values

        Returns:
            data["id"] when provided, otherwise the new rowid
        """
        columns = list(data.keys())
        placeholders = ", ".join(["?" for _ in columns])
        column_names = ", ".join(columns)
        sql = f"INSERT INTO {table} ({column_names}) VALUES ({placeholders})"

        with self.transaction() as conn:
            cursor = conn.execute(sql, tuple(data.values()))

        return data.get("id", cursor.lastrowid)

    def update(
        self,
        table: str,
        data: dict[str, Any],
        where: str,
        where_params: tuple | list = (),
    ) -> int:
        """
        Update rows matching condition.

        Args:
            table: Table name
            data: Dict of column names to new values
            where: WHERE clause (without 'WHERE' keyword)
            where_params: Parameters for WHERE clause

        Returns:
            Number of rows updated
        """
        set_clause = ", ".join([f"{col} = ?" for col in data])
        sql = f"UPDATE {table} SET {set_clause} WHERE {where}"

        params = list(data.values()) + list(where_params)

        with self.transaction() as conn:
            cursor = conn.execute(sql, params)
            return cursor.rowcount

    def exists(self, table: str, where: str, where_params: tuple | list = ()) -> bool:
        """Check if any rows match condition."""
        sql = f"SELECT 1 FROM {table} WHERE {where} LIMIT 1"
        result = self.fetch_one(sql, tuple(where_params))
        return result is not None

    def count(self, table: str, where: str = "1=1", where_params: tuple | list = ()) -> int:
        """Count rows matching condition."""
        sql = f"SELECT COUNT(*) as cnt FROM {table} WHERE {where}"
        result = self.fetch_one(sql, tuple(where_params))
        return result["cnt"] if result else 0

    # =========================================================================
    # Schema Inspection
    # =========================================================================

    def table_exists(self, table: str) -> bool:
        """Check if a table exists."""
        sql = "SELECT 1 FROM sqlite_master WHERE type='table' AND name=?"
        result = self.fetch_one(sql, (table,))
        return result is not None


# Global database instance (can be overridden)
_db: Database | None = None


def get_db(db_path: str | None = None) -> Database:
    """
    Get the global database instance.

    Args:
        db_path: Optional path to database (only used on first call)

    Returns:
        Database instance
    """
    global _db
    if _db is None:
        if db_path is None:
            from .config import get_settings

            db_path = get_settings().db_path
        _db = Database(db_path)
        logger.debug(f"Opened database at {_db.db_path}")
    return _db


def get_database() -> Database:
    """FastAPI dependency returning the global database."""
    return get_db()


def set_db(db: Database | None) -> None:
    """
    Set the global database instance.

    Args:
        db: Database instance to use globally
    """
    global _db
    _db = db


def close_db() -> None:
    """Close the global database connection."""
    global _db
    if _db is not None:
        _db.close()
        _db = None

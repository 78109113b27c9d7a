"""Shared SQLite connection handling for the database clients."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Generator, Optional

from sow_presenter.db.schema import ALL_SCHEMA_STATEMENTS, ALL_TABLES


class SQLiteClient:
    """Base client owning a lazily opened SQLite connection.

    The service shares one connection per client across requests on a single
    event loop, so the connection is opened with ``check_same_thread=False``.

    Attributes:
        db_path: Path to the SQLite database file
        connection: Active database connection
    """

    def __init__(self, db_path: Path):
        """Initialize the client.

        Args:
            db_path: Path to the SQLite database file
        """
        self.db_path = Path(db_path)
        self._connection: Optional[sqlite3.Connection] = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Get or create database connection.

        Returns:
            Active SQLite connection
        """
        if self._connection is None:
            # Ensure directory exists
            self.db_path.parent.mkdir(parents=True, exist_ok=True)

            self._connection = sqlite3.connect(
                self.db_path,
                detect_types=sqlite3.PARSE_DECLTYPES,
                check_same_thread=False,
            )
            self._connection.row_factory = sqlite3.Row

            # Enable foreign keys
            self._connection.execute("PRAGMA foreign_keys = ON")

        return self._connection

    def close(self) -> None:
        """Close the database connection."""
        if self._connection:
            self._connection.close()
            self._connection = None

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit."""
        self.close()

    @contextmanager
    def transaction(self) -> Generator[sqlite3.Connection, None, None]:
        """Context manager for database transactions.

        Commits when the block succeeds, rolls back everything written in
        the block when it raises.

        Yields:
            SQLite connection with active transaction
        """
        conn = self.connection
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise

    def initialize_schema(self) -> None:
        """Create all tables, indexes and triggers if they don't exist."""
        with self.transaction() as conn:
            cursor = conn.cursor()
            for statement in ALL_SCHEMA_STATEMENTS:
                cursor.execute(statement)

    def get_table_counts(self) -> dict[str, int]:
        """Row count for every presenter table.

        Returns:
            Mapping of table name to row count
        """
        cursor = self.connection.cursor()
        counts = {}
        for table in ALL_TABLES:
            cursor.execute(f"SELECT COUNT(*) FROM {table}")
            counts[table] = cursor.fetchone()[0]
        return counts

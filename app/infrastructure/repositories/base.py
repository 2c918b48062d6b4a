"""Base repository protocol and utilities.

This module defines the interface that all repositories must implement.
"""
from contextlib import contextmanager
from typing import Iterator, Protocol
import sqlite3

import bcrypt


def is_unique_violation(exc: sqlite3.IntegrityError) -> bool:
    """True when the integrity error comes from a UNIQUE or primary key constraint."""
    message = str(exc)
    return message.startswith(("UNIQUE constraint failed", "PRIMARY KEY constraint failed"))


class ConnectionProtocol(Protocol):
    """Protocol for database connection."""

    def execute(self, sql: str, parameters: tuple = ...) -> sqlite3.Cursor: ...
    def executemany(self, sql: str, parameters: list[tuple]) -> sqlite3.Cursor: ...
    def commit(self) -> None: ...
    def rollback(self) -> None: ...


class Repository:
    """Base repository class.

    All repositories should inherit from this class.

    Example:
        class ElectionRepository(Repository):
            def get_by_id(self, election_id: int) -> dict | None:
                return self._fetchone("SELECT * FROM elections WHERE id = ?", (election_id,))
    """

    def __init__(self, connection: ConnectionProtocol):
        """Initialize repository with database connection.

        Args:
            connection: Database connection (sqlite3.Connection or compatible)
        """
        self._conn = connection

    def _execute(self, sql: str, parameters: tuple = ()) -> sqlite3.Cursor:
        """Execute SQL query with parameters.

        Args:
            sql: SQL query string
            parameters: Query parameters (prevents SQL injection)

        Returns:
            sqlite3.Cursor with results
        """
        return self._conn.execute(sql, parameters)

    def _execute_many(self, sql: str, parameters_list: list[tuple]) -> sqlite3.Cursor:
        """Execute SQL query multiple times.

        Args:
            sql: SQL query string
            parameters_list: List of parameter tuples

        Returns:
            sqlite3.Cursor
        """
        return self._conn.executemany(sql, parameters_list)

    def _commit(self) -> None:
        """Commit current transaction."""
        self._conn.commit()

    def _rollback(self) -> None:
        """Discard current transaction."""
        self._conn.rollback()

    @contextmanager
    def _transaction(self) -> Iterator[None]:
        """Run the enclosed statements as one all-or-nothing unit.

        Commits when the block finishes, rolls back and re-raises on any error.
        """
        try:
            yield
            self._commit()
        except Exception:
            self._rollback()
            raise

    def _row_to_dict(self, row: sqlite3.Row | None) -> dict | None:
        """Convert sqlite3.Row to dictionary.

        Args:
            row: Database row or None

        Returns:
            Dictionary representation or None
        """
        return dict(row) if row else None

    def _fetchone(self, sql: str, parameters: tuple = ()) -> dict | None:
        """Fetch single row and return as dict."""
        return self._row_to_dict(self._execute(sql, parameters).fetchone())

    def _fetchall(self, sql: str, parameters: tuple = ()) -> list[dict]:
        """Fetch all rows and return as list of dicts."""
        return [dict(row) for row in self._execute(sql, parameters).fetchall()]

    # Credential helpers shared by administrator and voter repositories

    def _hash_password(self, password: str) -> str:
        """Hash password using bcrypt."""
        hashed = bcrypt.hashpw(password.encode('utf-8'), bcrypt.gensalt())
        return hashed.decode('utf-8')

    def _verify_password(self, password: str, hashed: str) -> bool:
        """Verify password against a stored bcrypt hash."""
        if not hashed.startswith(("$2b$", "$2a$")):
            return False
        return bcrypt.checkpw(password.encode('utf-8'), hashed.encode('utf-8'))

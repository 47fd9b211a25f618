"""
SQLite connection manager.
Provides thread-local connections for concurrent access.
"""
import sqlite3
import threading
from pathlib import Path
from typing import Optional
from contextlib import contextmanager

from citemark.utils.logger import step_logger


class SQLiteConnection:
    """
    Thread-safe SQLite connection manager.

    Uses thread-local storage to provide separate connections per thread,
    enabling safe concurrent access from multiple API requests.
    """

    _instance: Optional['SQLiteConnection'] = None
    _lock = threading.Lock()

    def __init__(self, db_path: str = "data/citemark.db"):
        """
        Initialize SQLite connection manager.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = db_path
        self._local = threading.local()

        # Ensure directory exists
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)

        step_logger.info(f"[SQLite] Connection manager initialized: {db_path}")

    @classmethod
    def get_instance(cls, db_path: str = "data/citemark.db") -> 'SQLiteConnection':
        """
        Get singleton instance of connection manager.

        Args:
            db_path: Path to SQLite database file

        Returns:
            SQLiteConnection singleton
        """
        if cls._instance is None:
            with cls._lock:
                if cls._instance is None:
                    cls._instance = cls(db_path)
        return cls._instance

    def get_connection(self) -> sqlite3.Connection:
        """Get thread-local database connection."""
        if getattr(self._local, 'connection', None) is None:
            self._local.connection = sqlite3.connect(
                self.db_path,
                check_same_thread=False,
                timeout=30.0
            )
            # Return rows as dictionaries
            self._local.connection.row_factory = sqlite3.Row

        return self._local.connection

    @contextmanager
    def cursor(self):
        """
        Context manager for database cursor with auto-commit.

        Yields:
            Database cursor
        """
        conn = self.get_connection()
        cursor = conn.cursor()
        try:
            yield cursor
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            step_logger.error(f"[SQLite] Transaction failed: {e}")
            raise
        finally:
            cursor.close()

    def fetchall(self, query: str, params: tuple = ()) -> list:
        """
        Execute query and fetch all results.

        Args:
            query: SQL query
            params: Query parameters

        Returns:
            List of rows
        """
        conn = self.get_connection()
        cursor = conn.cursor()
        cursor.execute(query, params)
        return cursor.fetchall()

    def close_thread_connection(self):
        """Close the connection for the current thread."""
        if getattr(self._local, 'connection', None) is not None:
            self._local.connection.close()
            self._local.connection = None

"""
SQLite database schema initialization.
Creates the sources table used for citation metadata lookup.
"""
from datetime import datetime

from citemark.infrastructure.sqlite.connection import SQLiteConnection
from citemark.utils.logger import step_logger


# Database schema version for migrations
SCHEMA_VERSION = 1

SCHEMA_SQL = """
-- Notebook sources that assistant messages can cite
CREATE TABLE IF NOT EXISTS sources (
    id TEXT NOT NULL,
    notebook_id TEXT NOT NULL,
    title TEXT,
    type TEXT,
    content TEXT,
    summary TEXT,
    url TEXT,
    created_at TEXT NOT NULL,
    PRIMARY KEY (notebook_id, id)
);

-- Schema version tracking
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at TEXT NOT NULL
);
"""


def init_database(conn_manager: SQLiteConnection) -> SQLiteConnection:
    """
    Initialize the database with schema.

    Creates all tables if they don't exist.

    Args:
        conn_manager: Connection manager for the target database

    Returns:
        The same SQLiteConnection, ready for use
    """
    connection = conn_manager.get_connection()

    step_logger.info("[SQLite] Initializing database schema...")
    connection.executescript(SCHEMA_SQL)

    cursor = connection.cursor()
    cursor.execute("SELECT version FROM schema_version ORDER BY version DESC LIMIT 1")
    row = cursor.fetchone()

    if row is None:
        cursor.execute(
            "INSERT INTO schema_version (version, applied_at) VALUES (?, ?)",
            (SCHEMA_VERSION, datetime.now().isoformat())
        )
        connection.commit()
        step_logger.info(f"[SQLite] Schema version {SCHEMA_VERSION} applied")
    else:
        step_logger.info(f"[SQLite] Database schema version: {row[0]}")

    return conn_manager

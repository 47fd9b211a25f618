"""
SQLite infrastructure package.
Provides database connection, schema, and the source repository.
"""
from citemark.infrastructure.sqlite.connection import SQLiteConnection
from citemark.infrastructure.sqlite.base import init_database
from citemark.infrastructure.sqlite.source_repository import SQLiteSourceRepository

__all__ = ["SQLiteConnection", "init_database", "SQLiteSourceRepository"]

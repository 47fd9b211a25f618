"""
Source repository for SQLite persistence.
Stores notebook sources and resolves cited source ids to their metadata.
"""
from datetime import datetime
from typing import Dict, List, Optional

from citemark.domain.interfaces.source_metadata_provider import SourceMetadataProvider
from citemark.domain.models.citation import SourceMetadata, DEFAULT_SOURCE_KIND
from citemark.infrastructure.sqlite.connection import SQLiteConnection
from citemark.utils.logger import step_logger

UNTITLED_SOURCE_TITLE = "Untitled Source"


class SQLiteSourceRepository(SourceMetadataProvider):
    """
    Repository for notebook sources in SQLite.

    Source ids are stored lowercase so lookups match markers regardless of
    the hex case the assistant used.
    """

    def __init__(self, connection: SQLiteConnection):
        """
        Initialize repository with connection manager.

        Args:
            connection: SQLite connection manager
        """
        self.connection = connection

    def add_source(
        self,
        notebook_id: str,
        source_id: str,
        title: Optional[str] = None,
        kind: Optional[str] = None,
        content: Optional[str] = None,
        summary: Optional[str] = None,
        url: Optional[str] = None
    ) -> None:
        """Insert or replace a single source row."""
        self.add_sources(notebook_id, [{
            "id": source_id,
            "title": title,
            "kind": kind,
            "content": content,
            "summary": summary,
            "url": url
        }])

    def add_sources(self, notebook_id: str, sources: List[Dict[str, Optional[str]]]) -> int:
        """
        Insert or replace several sources of a notebook.

        Args:
            notebook_id: Owning notebook
            sources: Dicts with "id" and optional title/kind/content/summary/url

        Returns:
            Number of rows written
        """
        now = datetime.now().isoformat()
        rows = [
            (
                source["id"].lower(),
                notebook_id,
                source.get("title"),
                source.get("kind"),
                source.get("content"),
                source.get("summary"),
                source.get("url"),
                now
            )
            for source in sources
        ]

        with self.connection.cursor() as cursor:
            cursor.executemany(
                """
                INSERT OR REPLACE INTO sources
                    (id, notebook_id, title, type, content, summary, url, created_at)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                rows
            )

        step_logger.info(f"[SourceRepo] Stored {len(rows)} sources for notebook: {notebook_id}")
        return len(rows)

    def lookup(
        self,
        notebook_id: Optional[str],
        source_ids: List[str]
    ) -> Dict[str, SourceMetadata]:
        """
        Resolve source ids of a notebook to metadata.

        Args:
            notebook_id: Notebook owning the sources
            source_ids: Source ids as they appear in message text

        Returns:
            Mapping keyed by the requested ids; unknown ids are absent
        """
        if not notebook_id or not source_ids:
            return {}

        requested: Dict[str, List[str]] = {}
        for source_id in source_ids:
            requested.setdefault(source_id.lower(), []).append(source_id)

        placeholders = ", ".join("?" for _ in requested)
        rows = self.connection.fetchall(
            f"""
            SELECT id, title, type, content, summary, url
            FROM sources
            WHERE notebook_id = ? AND id IN ({placeholders})
            """,
            (notebook_id, *requested.keys())
        )

        metadata_map: Dict[str, SourceMetadata] = {}
        for row in rows:
            metadata = SourceMetadata(
                title=row['title'] or UNTITLED_SOURCE_TITLE,
                kind=row['type'] or DEFAULT_SOURCE_KIND,
                content=row['content'] or "",
                summary=row['summary'] or "",
                url=row['url'] or ""
            )
            for source_id in requested.get(row['id'], []):
                metadata_map[source_id] = metadata

        step_logger.info(
            f"[SourceRepo] Resolved {len(metadata_map)}/{len(source_ids)} sources for notebook: {notebook_id}"
        )
        return metadata_map

    def delete_notebook_sources(self, notebook_id: str) -> int:
        """
        Delete every source of a notebook.

        Returns:
            Number of rows deleted
        """
        with self.connection.cursor() as cursor:
            cursor.execute("DELETE FROM sources WHERE notebook_id = ?", (notebook_id,))
            deleted = cursor.rowcount

        step_logger.info(f"[SourceRepo] Deleted {deleted} sources for notebook: {notebook_id}")
        return deleted

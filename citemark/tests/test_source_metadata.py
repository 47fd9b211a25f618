"""
Tests for the SQLite source repository and the metadata freshness cache.
"""
import sqlite3
from typing import Dict, List, Optional

import pytest

from citemark.domain.interfaces.source_metadata_provider import SourceMetadataProvider
from citemark.domain.models.citation import SourceMetadata
from citemark.infrastructure.cache import CachedMetadataProvider
from citemark.infrastructure.sqlite import SQLiteConnection, SQLiteSourceRepository, init_database

U1 = "11111111-2222-3333-4444-555555555555"
U2 = "aaaaaaaa-bbbb-cccc-dddd-eeeeeeeeeeee"


@pytest.fixture
def repository(tmp_path):
    connection = init_database(SQLiteConnection(str(tmp_path / "sources.db")))
    yield SQLiteSourceRepository(connection)
    connection.close_thread_connection()


class CountingProvider(SourceMetadataProvider):
    """In-memory provider that records how often it is called."""

    def __init__(self, data: Dict[str, SourceMetadata]):
        self.data = data
        self.calls = 0

    def lookup(self, notebook_id: Optional[str], source_ids: List[str]) -> Dict[str, SourceMetadata]:
        self.calls += 1
        return {sid: self.data[sid] for sid in source_ids if sid in self.data}


class FakeClock:
    def __init__(self):
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


class TestSQLiteSourceRepository:

    def test_lookup_returns_stored_metadata(self, repository):
        repository.add_source(
            "nb-1", U1, title="Weather Report", kind="pdf",
            content="Full text", summary="Short", url="https://example.org/report"
        )

        result = repository.lookup("nb-1", [U1])

        assert result == {
            U1: SourceMetadata(
                title="Weather Report", kind="pdf", content="Full text",
                summary="Short", url="https://example.org/report"
            )
        }

    def test_missing_columns_use_defaults(self, repository):
        repository.add_source("nb-1", U1)

        metadata = repository.lookup("nb-1", [U1])[U1]

        assert metadata.title == "Untitled Source"
        assert metadata.kind == "text"
        assert metadata.content == metadata.summary == metadata.url == ""

    def test_unknown_ids_are_absent(self, repository):
        repository.add_source("nb-1", U1, title="One")
        assert set(repository.lookup("nb-1", [U1, U2])) == {U1}

    def test_notebook_isolation(self, repository):
        repository.add_source("nb-1", U1, title="One")
        assert repository.lookup("nb-2", [U1]) == {}

    def test_case_insensitive_ids(self, repository):
        repository.add_source("nb-1", U2.upper(), title="Upper")

        result = repository.lookup("nb-1", [U2, U2.upper()])

        assert result[U2].title == "Upper"
        assert result[U2.upper()].title == "Upper"

    @pytest.mark.parametrize("notebook_id, source_ids", [(None, [U1]), ("", [U1]), ("nb-1", [])])
    def test_empty_lookup(self, repository, notebook_id, source_ids):
        repository.add_source("nb-1", U1, title="One")
        assert repository.lookup(notebook_id, source_ids) == {}

    def test_add_sources_replaces_rows(self, repository):
        repository.add_sources("nb-1", [{"id": U1, "title": "Old"}])
        stored = repository.add_sources("nb-1", [{"id": U1, "title": "New"}, {"id": U2, "title": "Two"}])

        assert stored == 2
        assert repository.lookup("nb-1", [U1])[U1].title == "New"

    def test_delete_notebook_sources(self, repository):
        repository.add_sources("nb-1", [{"id": U1}, {"id": U2}])
        repository.add_source("nb-2", U1)

        assert repository.delete_notebook_sources("nb-1") == 2
        assert repository.lookup("nb-1", [U1, U2]) == {}
        assert set(repository.lookup("nb-2", [U1])) == {U1}

    def test_same_id_in_two_notebooks(self, repository):
        repository.add_source("nb-1", U1, title="One")
        repository.add_source("nb-2", U1, title="Two")

        assert repository.lookup("nb-1", [U1])[U1].title == "One"
        assert repository.lookup("nb-2", [U1])[U1].title == "Two"

    def test_replace_stays_within_notebook(self, repository):
        repository.add_source("nb-1", U1, title="One")
        repository.add_source("nb-2", U1, title="Two")
        repository.add_source("nb-2", U1, title="Two again")

        assert repository.lookup("nb-1", [U1])[U1].title == "One"
        assert repository.lookup("nb-2", [U1])[U1].title == "Two again"
        assert repository.delete_notebook_sources("nb-2") == 1
        assert repository.lookup("nb-1", [U1])[U1].title == "One"

    def test_init_database_is_repeatable(self, tmp_path):
        connection = SQLiteConnection(str(tmp_path / "again.db"))
        init_database(connection)
        init_database(connection)
        rows = connection.fetchall("SELECT version FROM schema_version")
        assert len(rows) == 1
        connection.close_thread_connection()

    def test_missing_table_raises(self, tmp_path):
        repository = SQLiteSourceRepository(SQLiteConnection(str(tmp_path / "empty.db")))
        with pytest.raises(sqlite3.OperationalError):
            repository.lookup("nb-1", [U1])


class TestCachedMetadataProvider:

    def setup_method(self):
        self.inner = CountingProvider({U1: SourceMetadata(title="One"), U2: SourceMetadata(title="Two")})
        self.clock = FakeClock()
        self.cache = CachedMetadataProvider(self.inner, ttl_seconds=300, clock=self.clock)

    def test_fresh_entries_are_served_from_cache(self):
        first = self.cache.lookup("nb-1", [U1])
        self.clock.now += 299
        second = self.cache.lookup("nb-1", [U1])

        assert first == second == {U1: SourceMetadata(title="One")}
        assert self.inner.calls == 1

    def test_stale_entries_are_refetched(self):
        self.cache.lookup("nb-1", [U1])
        self.clock.now += 300
        self.cache.lookup("nb-1", [U1])
        assert self.inner.calls == 2

    def test_key_includes_notebook_and_source_list(self):
        self.cache.lookup("nb-1", [U1])
        self.cache.lookup("nb-1", [U1, U2])
        self.cache.lookup("nb-2", [U1])
        assert self.inner.calls == 3

    def test_invalidate_notebook(self):
        self.cache.lookup("nb-1", [U1])
        self.cache.lookup("nb-2", [U1])

        self.cache.invalidate("nb-1")
        self.cache.lookup("nb-1", [U1])
        self.cache.lookup("nb-2", [U1])

        assert self.inner.calls == 3

    def test_invalidate_all(self):
        self.cache.lookup("nb-1", [U1])
        self.cache.invalidate()
        self.cache.lookup("nb-1", [U1])
        assert self.inner.calls == 2

    def test_empty_lookup_skips_provider(self):
        assert self.cache.lookup(None, [U1]) == {}
        assert self.cache.lookup("nb-1", []) == {}
        assert self.inner.calls == 0

    def test_callers_cannot_mutate_cached_entry(self):
        result = self.cache.lookup("nb-1", [U1])
        result.clear()
        assert self.cache.lookup("nb-1", [U1]) == {U1: SourceMetadata(title="One")}

    def test_stale_entries_are_pruned(self):
        for i in range(1000):
            self.cache.lookup(f"nb-{i}", [U1])
            self.clock.now += 400

        assert self.cache.size == 1
        assert self.inner.calls == 1000

    def test_fresh_entries_survive_pruning(self):
        self.cache.lookup("nb-1", [U1])
        self.clock.now += 100
        self.cache.lookup("nb-2", [U1])
        self.clock.now += 250
        self.cache.lookup("nb-3", [U1])

        assert self.cache.size == 2
        self.cache.lookup("nb-2", [U1])
        assert self.inner.calls == 3

    def test_invalidate_during_lookup_discards_result(self):
        cache = None

        class InvalidatingProvider(CountingProvider):
            def lookup(self, notebook_id, source_ids):
                result = super().lookup(notebook_id, source_ids)
                cache.invalidate(notebook_id)
                return result

        inner = InvalidatingProvider({U1: SourceMetadata(title="One")})
        cache = CachedMetadataProvider(inner, ttl_seconds=300, clock=self.clock)

        assert cache.lookup("nb-1", [U1]) == {U1: SourceMetadata(title="One")}
        assert cache.size == 0
        cache.lookup("nb-1", [U1])
        assert inner.calls == 2

    def test_invalidate_all_during_lookup_discards_result(self):
        cache = None

        class InvalidatingProvider(CountingProvider):
            def lookup(self, notebook_id, source_ids):
                result = super().lookup(notebook_id, source_ids)
                cache.invalidate()
                return result

        cache = CachedMetadataProvider(InvalidatingProvider({}), ttl_seconds=300, clock=self.clock)
        cache.lookup("nb-1", [U1])
        assert cache.size == 0

    def test_other_notebook_invalidation_keeps_result(self):
        self.cache.invalidate("nb-2")
        self.cache.lookup("nb-1", [U1])
        assert self.cache.size == 1

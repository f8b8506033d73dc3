"""Unit tests for memory domain models."""

from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from agentmem.memory.enums import MemoryCategory, MemoryEventType
from agentmem.memory.models import (
    MemoryEntry,
    MemoryEvent,
    MemoryMetadata,
    MemoryOperationResult,
    MemorySearchParams,
    MemorySearchResult,
    MemoryStats,
    PageLocation,
    TimeRange,
    site_from_url,
)


class TestMemoryMetadata:
    """Tests for MemoryMetadata model."""

    def test_agent_id_required(self) -> None:
        """Should reject metadata without an owner."""
        with pytest.raises(ValidationError):
            MemoryMetadata(agent_id="")

    def test_importance_bounds(self) -> None:
        """Should reject importance outside [0, 1]."""
        with pytest.raises(ValidationError):
            MemoryMetadata(agent_id="a", importance=1.2)
        assert MemoryMetadata(agent_id="a", importance=0.0).importance == 0.0

    def test_category_from_string(self) -> None:
        """Should accept category values as strings."""
        metadata = MemoryMetadata(agent_id="a", category="search_result")
        assert metadata.category is MemoryCategory.SEARCH_RESULT

    def test_unknown_category_rejected(self) -> None:
        with pytest.raises(ValidationError):
            MemoryMetadata(agent_id="a", category="gossip")

    def test_naive_expiry_treated_as_utc(self) -> None:
        metadata = MemoryMetadata(agent_id="a", expires_at=datetime(2030, 1, 1))
        assert metadata.expires_at == datetime(2030, 1, 1, tzinfo=UTC)

    def test_tag_order_preserved(self) -> None:
        metadata = MemoryMetadata(agent_id="a", tags=["z", "a", "m"])
        assert metadata.tags == ["z", "a", "m"]


class TestMemoryEntry:
    """Tests for MemoryEntry model."""

    def test_updated_at_defaults_to_created_at(self) -> None:
        """Should default updated_at to the creation time."""
        entry = MemoryEntry(content="x", metadata=MemoryMetadata(agent_id="a"))
        assert entry.updated_at == entry.created_at

    def test_explicit_created_at(self) -> None:
        created = datetime(2024, 5, 1, 12, 0, tzinfo=UTC)
        entry = MemoryEntry(content="x", metadata={"agent_id": "a"}, created_at=created)
        assert entry.created_at == created
        assert entry.updated_at == created

    def test_unpersisted_entry(self) -> None:
        """Should report entries without an id as not persisted."""
        entry = MemoryEntry(content="x", metadata=MemoryMetadata(agent_id="a"))
        assert entry.id is None
        assert entry.is_persisted is False

    def test_touch_updates_timestamp(self) -> None:
        created = datetime(2024, 5, 1, tzinfo=UTC)
        entry = MemoryEntry(id="m1", content="x", metadata={"agent_id": "a"}, created_at=created)
        entry.touch()
        assert entry.updated_at is not None
        assert entry.updated_at > created
        assert entry.created_at == created


class TestSearchModels:
    """Tests for search parameter and result models."""

    def test_defaults(self) -> None:
        params = MemorySearchParams()
        assert params.query == ""
        assert params.limit == 10

    @pytest.mark.parametrize("limit", [0, 101])
    def test_limit_bounds(self, limit: int) -> None:
        with pytest.raises(ValidationError):
            MemorySearchParams(limit=limit)

    def test_time_range_contains(self) -> None:
        now = datetime.now(UTC)
        window = TimeRange(start=now - timedelta(hours=1), end=now)
        assert window.contains(now - timedelta(minutes=30))
        assert not window.contains(now - timedelta(hours=2))
        assert TimeRange().contains(now)

    def test_empty_result(self) -> None:
        result = MemorySearchResult.empty()
        assert result.entries == []
        assert result.total == 0
        assert result.has_more is False

    def test_operation_results(self) -> None:
        assert MemoryOperationResult.ok("done", data=3).data == 3
        failure = MemoryOperationResult.fail("nope")
        assert failure.success is False
        assert failure.message == "nope"
        assert failure.data is None


class TestMemoryStats:
    """Tests for MemoryStats model."""

    def test_empty_seeds_every_category(self) -> None:
        """Should include every category at zero."""
        stats = MemoryStats.empty()
        assert set(stats.entries_by_category) == set(MemoryCategory)
        assert all(count == 0 for count in stats.entries_by_category.values())
        assert stats.total_entries == 0
        assert stats.storage_used == 0


class TestMemoryEvent:
    def test_type_coerced(self) -> None:
        event = MemoryEvent(type="memory_added", data={"entry_id": "m1"})
        assert event.type is MemoryEventType.MEMORY_ADDED
        assert event.timestamp.tzinfo is not None


class TestPageLocation:
    """Tests for PageLocation and site derivation."""

    def test_site_is_host(self) -> None:
        location = PageLocation(tab_id=3, url="https://news.example.com/a?b=c")
        assert location.site == "news.example.com"

    @pytest.mark.parametrize("url", ["", None, "not a url"])
    def test_site_absent(self, url: str | None) -> None:
        assert site_from_url(url) is None

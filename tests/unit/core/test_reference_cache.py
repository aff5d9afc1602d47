"""Tests for reference cache module."""

from typing import Any

import pytest

from ragmonsters_mcp.core.errors import NotInitializedError
from ragmonsters_mcp.core.reference_cache import ReferenceCache
from ragmonsters_mcp.queries.builder import QueryBuilder


class TestReferenceCache:
    """Test ReferenceCache functionality."""

    @pytest.fixture
    def cache(self, fake_db: Any, builder: QueryBuilder) -> ReferenceCache:
        return ReferenceCache(fake_db, builder)

    # =========================================================================
    # Before initialization
    # =========================================================================

    @pytest.mark.parametrize("attribute", ["categories", "subcategories", "habitats", "biomes"])
    def test_access_before_initialize(self, cache: ReferenceCache, attribute: str) -> None:
        """Reading any list before start-up should raise not_initialized."""
        with pytest.raises(NotInitializedError) as exc_info:
            getattr(cache, attribute)

        assert exc_info.value.kind == "not_initialized"
        assert exc_info.value.retryable is True

    def test_subcategories_for_before_initialize(self, cache: ReferenceCache) -> None:
        with pytest.raises(NotInitializedError):
            cache.subcategories_for("Aquatic")

    # =========================================================================
    # Loading
    # =========================================================================

    def test_initialize_loads_lists(
        self,
        cache: ReferenceCache,
        fake_db: Any,
        reference_rows: list[list[dict[str, Any]]],
    ) -> None:
        """initialize() should run four queries on one connection."""
        fake_db.queue(*reference_rows)
        cache.initialize()

        assert cache.is_ready
        assert fake_db.sessions_opened == 1
        assert len(fake_db.executed) == 4
        assert cache.categories == ("Aquatic", "Elemental", "Mythical")
        assert cache.habitats == ("Abyssal Trench", "Volcanic Mountains")
        assert cache.biomes == ("Ocean", "Volcanic")

    def test_subcategories_grouped(
        self,
        cache: ReferenceCache,
        fake_db: Any,
        reference_rows: list[list[dict[str, Any]]],
    ) -> None:
        """Subcategories should be grouped by parent category."""
        fake_db.queue(*reference_rows)
        cache.initialize()

        assert cache.subcategories["Aquatic"] == ("Deep Sea Dwellers", "Reef Guardians")
        assert cache.subcategories_for("Mythical") == ("Dragons",)
        assert cache.subcategories_for("Celestial") == ()

    def test_snapshot_is_read_only(
        self,
        cache: ReferenceCache,
        fake_db: Any,
        reference_rows: list[list[dict[str, Any]]],
    ) -> None:
        """The subcategory mapping should not be mutable by callers."""
        fake_db.queue(*reference_rows)
        cache.initialize()

        with pytest.raises(TypeError):
            cache.subcategories["Aquatic"] = ("Hacked",)  # type: ignore[index]

    def test_reinitialize_is_noop(
        self,
        cache: ReferenceCache,
        fake_db: Any,
        reference_rows: list[list[dict[str, Any]]],
    ) -> None:
        """A second initialize() should not query again."""
        fake_db.queue(*reference_rows)
        cache.initialize()
        cache.initialize()

        assert len(fake_db.executed) == 4

    def test_failed_load_stays_uninitialized(self, cache: ReferenceCache, fake_db: Any) -> None:
        """A failing load should propagate and leave the cache unusable."""
        fake_db.error = RuntimeError("connection refused")

        with pytest.raises(RuntimeError):
            cache.initialize()

        assert not cache.is_ready
        with pytest.raises(NotInitializedError):
            cache.categories

    def test_categories_come_from_data(self, cache: ReferenceCache, fake_db: Any) -> None:
        """Whatever categories the dataset holds should be served unchanged."""
        fake_db.queue([{"category_name": "Fungal"}], [], [], [])
        cache.initialize()

        assert cache.categories == ("Fungal",)
        assert cache.subcategories_for("Fungal") == ()

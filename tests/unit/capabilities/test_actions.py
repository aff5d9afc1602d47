"""Tests for monster Actions."""

from collections.abc import Callable
from typing import Any

import pytest

from ragmonsters_mcp.capabilities.actions import SOURCE_CACHE, SOURCE_DATABASE, MonsterActions
from ragmonsters_mcp.core.errors import NotFoundError, ValidationError
from ragmonsters_mcp.core.reference_cache import ReferenceCache
from ragmonsters_mcp.models import (
    CompareMonstersArgs,
    GetMonsterByHabitatArgs,
    GetMonsterByIdArgs,
    GetMonsterByNameArgs,
    GetMonstersArgs,
    GetSubcategoriesArgs,
    NoArgs,
)
from ragmonsters_mcp.queries.builder import QueryBuilder


class TestGetMonsters:
    """Test the getMonsters Action."""

    def test_default_page(self, actions: MonsterActions, fake_db: Any, abyssalurk_row: dict[str, Any]) -> None:
        """A default call should return summaries and the applied policy."""
        fake_db.queue([abyssalurk_row])

        result = actions.get_monsters(GetMonstersArgs())

        assert result["source"] == SOURCE_DATABASE
        assert result["data"][0]["name"] == "Abyssalurk"
        assert result["policy"] == {
            "limit": 10,
            "offset": 0,
            "requestedLimit": None,
            "limitAdjusted": False,
            "sortField": "name",
            "sortDirection": "asc",
            "sortFallback": False,
        }
        assert result["summary"].startswith("Found 1 monster")
        assert result["next"][0]["action"] == "getMonsterById"
        assert result["next"][0]["arguments"] == {"monsterId": 1}

    def test_limit_clamped(self, actions: MonsterActions, fake_db: Any) -> None:
        """A limit of 500 should run with 50 and report the adjustment."""
        fake_db.queue([])

        result = actions.get_monsters(GetMonstersArgs(limit=500))

        assert fake_db.executed[0].params[-2:] == (50, 0)
        assert result["policy"]["limit"] == 50
        assert result["policy"]["requestedLimit"] == 500
        assert result["policy"]["limitAdjusted"] is True

    def test_full_page_suggests_next_page(
        self, actions: MonsterActions, fake_db: Any, make_row: Callable[..., dict[str, Any]]
    ) -> None:
        """A full page should hint the following offset with the same filters."""
        fake_db.queue([make_row(monster_id=i, name=f"M{i}") for i in range(2)])

        result = actions.get_monsters(
            GetMonstersArgs(filters={"rarity": "rare"}, limit=2, offset=4, sort={"field": "rarity"})
        )

        page_hint = result["next"][-1]
        assert page_hint["action"] == "getMonsters"
        assert page_hint["arguments"] == {
            "limit": 2,
            "offset": 6,
            "filters": {"rarity": "Rare"},
            "sort": {"field": "rarity", "direction": "asc"},
        }

    def test_habitat_filter(
        self, actions: MonsterActions, fake_db: Any, volcanic_rows: list[dict[str, Any]]
    ) -> None:
        """A habitat filter should return its creatures in name order with the identity tie-break."""
        fake_db.queue(volcanic_rows)

        result = actions.get_monsters(GetMonstersArgs(filters={"habitat": "Volcanic Mountains"}))

        statement = fake_db.executed[0]
        assert "ORDER BY m.name ASC, m.monster_id ASC" in " ".join(statement.sql.split())
        assert statement.params == ("Volcanic Mountains", 10, 0)
        assert [m["name"] for m in result["data"]] == ["Cinderhorn", "Magmaclaw", "Pyrowyrm"]
        assert "habitat=Volcanic Mountains" in result["summary"]

    def test_sort_fallback_reported(self, actions: MonsterActions, fake_db: Any) -> None:
        """An unknown sort field should sort by name and say so."""
        fake_db.queue([])

        result = actions.get_monsters(GetMonstersArgs(sort={"field": "height"}))

        assert result["policy"]["sortField"] == "name"
        assert result["policy"]["sortFallback"] is True

    def test_empty_filtered_result_hints_discovery(self, actions: MonsterActions, fake_db: Any) -> None:
        """No results for a filter should point at the reference lists."""
        fake_db.queue([])

        result = actions.get_monsters(GetMonstersArgs(filters={"habitat": "Moon"}))

        assert result["data"] == []
        assert {hint["action"] for hint in result["next"]} == {"getHabitats", "getCategories"}

    def test_category_filter_canonicalised(self, actions: MonsterActions, fake_db: Any) -> None:
        """A category filter should bind the spelling from the reference cache."""
        fake_db.queue([])

        result = actions.get_monsters(GetMonstersArgs(filters={"category": "aquatic"}))

        assert fake_db.executed[0].params[0] == "Aquatic"
        assert "category=Aquatic" in result["summary"]

    def test_unknown_category_runs_no_query(self, actions: MonsterActions, fake_db: Any) -> None:
        """A category missing from the cache should fail before any statement."""
        with pytest.raises(ValidationError) as exc_info:
            actions.get_monsters(GetMonstersArgs(filters={"category": "Dragons"}))

        assert exc_info.value.field == "category"
        assert "Aquatic, Elemental, Mythical" in exc_info.value.message
        assert fake_db.sessions_opened == 0

    def test_listed_category_is_filterable(
        self, fake_db: Any, builder: QueryBuilder, make_row: Callable[..., dict[str, Any]]
    ) -> None:
        """Every category getCategories lists should be accepted by the filter."""
        cache = ReferenceCache(fake_db, builder)
        fake_db.queue(
            [{"category_name": "Spirit"}],
            [{"subcategory_name": "Wraiths", "category_name": "Spirit"}],
            [],
            [],
        )
        cache.initialize()
        fake_db.reset()
        spirit_actions = MonsterActions(fake_db, cache, builder)
        fake_db.queue([make_row(category_name="Spirit", subcategory_name="Wraiths")])

        listed = spirit_actions.get_categories(NoArgs())["data"]
        result = spirit_actions.get_monsters(GetMonstersArgs(filters={"category": listed[0]}))
        subcategories = spirit_actions.get_subcategories(GetSubcategoriesArgs(categoryName="spirit"))

        assert listed == ["Spirit"]
        assert result["data"][0]["category"] == "Spirit"
        assert subcategories["data"] == ["Wraiths"]

    def test_one_connection_per_call(self, actions: MonsterActions, fake_db: Any) -> None:
        """The Action should borrow exactly one connection and return it."""
        fake_db.queue([])
        actions.get_monsters(GetMonstersArgs())

        assert fake_db.sessions_opened == 1
        assert fake_db.sessions_closed == 1


class TestGetMonsterById:
    """Test the getMonsterById Action."""

    def test_detail(
        self,
        actions: MonsterActions,
        fake_db: Any,
        detail_base_row: dict[str, Any],
        keyword_rows: list[dict[str, Any]],
        advantage_rows: list[dict[str, Any]],
        disadvantage_rows: list[dict[str, Any]],
    ) -> None:
        """All five queries should run on one connection and fold into one record."""
        fake_db.queue([detail_base_row], keyword_rows, [], advantage_rows, disadvantage_rows)

        result = actions.get_monster_by_id(GetMonsterByIdArgs(monsterId=1))

        assert len(fake_db.executed) == 5
        assert fake_db.sessions_opened == 1
        data = result["data"]
        assert data["name"] == "Abyssalurk"
        assert data["flaws"] == []
        assert [k["name"] for k in data["keywords"]] == ["Deep Sense", "Pressure Mastery"]
        assert data["strengths"][1] == {"target": "Reef Stalker", "modifier": 5}
        assert "0 flaws" in result["summary"]

    def test_idempotent(
        self,
        actions: MonsterActions,
        fake_db: Any,
        detail_base_row: dict[str, Any],
        keyword_rows: list[dict[str, Any]],
    ) -> None:
        """Identical lookups should return identical payloads."""
        fake_db.queue([detail_base_row], keyword_rows, [], [], [])
        fake_db.queue([detail_base_row], list(reversed(keyword_rows)), [], [], [])

        first = actions.get_monster_by_id(GetMonsterByIdArgs(monsterId=1))
        second = actions.get_monster_by_id(GetMonsterByIdArgs(monsterId=1))

        assert first == second

    def test_unknown_id(self, actions: MonsterActions, fake_db: Any) -> None:
        """An unknown identity should raise not_found without the child queries."""
        fake_db.queue([])

        with pytest.raises(NotFoundError, match="999"):
            actions.get_monster_by_id(GetMonsterByIdArgs(monsterId=999))

        assert len(fake_db.executed) == 1
        assert fake_db.sessions_closed == 1


class TestNameLookups:
    """Test getMonsterByName and compareMonsters."""

    def test_partial_match(self, actions: MonsterActions, fake_db: Any, abyssalurk_row: dict[str, Any]) -> None:
        """'abyss' should find Abyssalurk."""
        fake_db.queue([abyssalurk_row])

        result = actions.get_monster_by_name(GetMonsterByNameArgs(name="abyss"))

        assert result["found"] is True
        assert result["count"] == 1
        assert result["monsters"][0]["name"] == "Abyssalurk"
        assert fake_db.executed[0].params == ("%abyss%", 5)

    def test_no_match_is_success(self, actions: MonsterActions, fake_db: Any) -> None:
        """Zero matches should be a successful response with found false."""
        fake_db.queue([])

        result = actions.get_monster_by_name(GetMonsterByNameArgs(name="zzz"))

        assert result["found"] is False
        assert result["monsters"] == []
        assert "zzz" in result["message"]

    def test_compare(
        self,
        actions: MonsterActions,
        fake_db: Any,
        abyssalurk_row: dict[str, Any],
        volcanic_rows: list[dict[str, Any]],
    ) -> None:
        """Two resolved names should be compared field by field."""
        fake_db.queue([abyssalurk_row], [volcanic_rows[1]])

        result = actions.compare_monsters(
            CompareMonstersArgs(monsterNameA="Abyssalurk", monsterNameB="Magmaclaw")
        )

        assert [m["name"] for m in result["monsters"]] == ["Abyssalurk", "Magmaclaw"]
        assert result["comparison"]["rarity"] == {"a": "Rare", "b": "Rare", "match": True}
        assert result["comparison"]["habitat"]["match"] is False
        assert "rarity" in result["summary"]
        assert fake_db.sessions_opened == 1
        assert fake_db.sessions_closed == 1

    def test_compare_partial_fallback(
        self, actions: MonsterActions, fake_db: Any, abyssalurk_row: dict[str, Any], volcanic_rows: list[dict[str, Any]]
    ) -> None:
        """A name with no exact match should resolve to the first partial match."""
        fake_db.queue([], [abyssalurk_row], [volcanic_rows[0]])

        result = actions.compare_monsters(
            CompareMonstersArgs(monsterNameA="abyss", monsterNameB="Cinderhorn")
        )

        assert result["monsters"][0]["name"] == "Abyssalurk"
        assert fake_db.executed[1].params == ("%abyss%", 1)
        assert fake_db.sessions_opened == 1

    def test_compare_unknown(self, actions: MonsterActions, fake_db: Any, abyssalurk_row: dict[str, Any]) -> None:
        """An unresolved name should raise not_found naming it."""
        fake_db.queue([abyssalurk_row], [], [])

        with pytest.raises(NotFoundError, match="Unknown"):
            actions.compare_monsters(CompareMonstersArgs(monsterNameA="Abyssalurk", monsterNameB="Unknown"))

        assert fake_db.sessions_closed == 1


class TestHabitat:
    """Test getMonsterByHabitat."""

    def test_volcanic_mountains(
        self, actions: MonsterActions, fake_db: Any, volcanic_rows: list[dict[str, Any]]
    ) -> None:
        """All three Volcanic Mountains creatures should be returned."""
        fake_db.queue(volcanic_rows)

        result = actions.get_monster_by_habitat(GetMonsterByHabitatArgs(habitat="Volcanic Mountains"))

        assert result["count"] == 3
        assert result["habitat"] == "Volcanic Mountains"
        assert {m["habitat"] for m in result["data"]} == {"Volcanic Mountains"}
        assert result["monsters"] == result["data"]
        assert fake_db.executed[0].params == ("Volcanic Mountains", 10, 0)

    def test_unknown_habitat_is_empty(self, actions: MonsterActions, fake_db: Any) -> None:
        fake_db.queue([])

        result = actions.get_monster_by_habitat(GetMonsterByHabitatArgs(habitat="Moon"))

        assert result["data"] == []
        assert result["next"][0]["action"] == "getHabitats"


class TestReferenceActions:
    """Test Actions served from the reference cache."""

    def test_categories_from_cache(self, actions: MonsterActions, fake_db: Any) -> None:
        """Categories should come from the cache without a query."""
        result = actions.get_categories(NoArgs())

        assert result["data"] == ["Aquatic", "Elemental", "Mythical"]
        assert result["count"] == 3
        assert result["source"] == SOURCE_CACHE
        assert fake_db.executed == []

    def test_rarities(self, actions: MonsterActions) -> None:
        result = actions.get_rarities(NoArgs())
        assert result["data"][0] == "Common"
        assert result["count"] == 5

    def test_habitats_and_biomes(self, actions: MonsterActions) -> None:
        assert actions.get_habitats(NoArgs())["data"] == ["Abyssal Trench", "Volcanic Mountains"]
        assert actions.get_biomes(NoArgs())["data"] == ["Ocean", "Volcanic"]

    def test_subcategories_for_category(self, actions: MonsterActions) -> None:
        result = actions.get_subcategories(GetSubcategoriesArgs(categoryName="aquatic"))

        assert result["category"] == "Aquatic"
        assert result["data"] == ["Deep Sea Dwellers", "Reef Guardians"]

    def test_unknown_subcategory_parent_rejected(self, actions: MonsterActions) -> None:
        with pytest.raises(ValidationError) as exc_info:
            actions.get_subcategories(GetSubcategoriesArgs(categoryName="Fungal"))

        assert exc_info.value.field == "categoryName"

    def test_all_subcategories(self, actions: MonsterActions) -> None:
        result = actions.get_subcategories(GetSubcategoriesArgs())

        assert result["count"] == 4
        assert {"name": "Dragons", "category": "Mythical"} in result["data"]

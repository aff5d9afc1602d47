"""Tests for the query builder."""

import pytest

from ragmonsters_mcp.core.guardrails import clamp_limit, resolve_sort
from ragmonsters_mcp.models import MonsterFilters
from ragmonsters_mcp.queries.builder import QueryBuilder, escape_like


def _normalize(sql: str) -> str:
    return " ".join(sql.split())


class TestListMonsters:
    """Test the filtered list statement."""

    def test_no_filters(self, builder: QueryBuilder) -> None:
        """Without filters there should be no WHERE clause."""
        statement = builder.list_monsters(MonsterFilters(), resolve_sort(None, None), clamp_limit(None))
        sql = _normalize(statement.sql)

        assert "WHERE" not in sql
        assert "ORDER BY m.name ASC, m.monster_id ASC" in sql
        assert sql.endswith("LIMIT %s OFFSET %s")
        assert statement.params == (10, 0)

    def test_filters_are_parameters(self, builder: QueryBuilder) -> None:
        """Filter values should be bound, never interpolated."""
        filters = MonsterFilters(category="Elemental", habitat="Volcanic Mountains", rarity="rare")
        statement = builder.list_monsters(filters, resolve_sort(None, None), clamp_limit(5, 10))
        sql = _normalize(statement.sql)

        assert "c.category_name = %s" in sql
        assert "m.habitat = %s" in sql
        assert "m.rarity = %s" in sql
        assert "Volcanic" not in sql
        assert statement.params == ("Elemental", "Volcanic Mountains", "Rare", 5, 10)

    def test_rarity_sort_descending(self, builder: QueryBuilder) -> None:
        """Rarity sort should order by rank with the identity tie-break."""
        statement = builder.list_monsters(
            MonsterFilters(), resolve_sort("rarity", "desc"), clamp_limit(None)
        )
        assert "ORDER BY rarity_rank DESC, m.monster_id ASC" in _normalize(statement.sql)

    def test_unknown_sort_never_reaches_sql(self, builder: QueryBuilder) -> None:
        """A rejected sort field should not appear in the statement."""
        statement = builder.list_monsters(
            MonsterFilters(), resolve_sort("weight; DROP TABLE x", "asc"), clamp_limit(None)
        )
        assert "DROP" not in statement.sql

    def test_schema_qualified_tables(self) -> None:
        """Tables should be qualified with the configured schema."""
        statement = QueryBuilder("demo").list_monsters(
            MonsterFilters(), resolve_sort(None, None), clamp_limit(None)
        )
        assert "FROM demo.monsters m" in _normalize(statement.sql)

    def test_invalid_schema_rejected(self) -> None:
        with pytest.raises(ValueError):
            QueryBuilder("demo; DROP")


class TestNameQueries:
    """Test name lookups."""

    def test_search_escapes_wildcards(self, builder: QueryBuilder) -> None:
        """LIKE wildcards in user input should match literally."""
        statement = builder.search_by_name("50%_off")
        assert statement.params == ("%50\\%\\_off%", 5)
        assert "ILIKE %s" in statement.sql

    def test_search_cap(self, builder: QueryBuilder) -> None:
        assert builder.search_by_name("abyss", 1).params == ("%abyss%", 1)

    def test_exact_name(self, builder: QueryBuilder) -> None:
        statement = builder.exact_name("Abyssalurk")
        sql = _normalize(statement.sql)
        assert "LOWER(m.name) = LOWER(%s)" in sql
        assert sql.endswith("LIMIT 1")

    def test_escape_like_backslash(self) -> None:
        assert escape_like("a\\b") == "a\\\\b"


class TestDetailStatements:
    """Test the five detail statements."""

    def test_all_bound_to_identity(self, builder: QueryBuilder) -> None:
        """Every detail statement should take only the creature identity."""
        statements = builder.monster_detail(42)
        for statement in statements:
            assert statement.params == (42,)

    def test_keywords_left_join_abilities(self, builder: QueryBuilder) -> None:
        """Keywords without abilities should still be returned."""
        sql = _normalize(builder.monster_detail(1).keywords.sql)
        assert "LEFT JOIN ragmonsters.abilities a" in sql

    def test_flaws_ordered_by_rating(self, builder: QueryBuilder) -> None:
        sql = _normalize(builder.monster_detail(1).flaws.sql)
        assert "ORDER BY f.rating DESC, f.flaw_name ASC, f.flaw_id ASC" in sql

    def test_edges_from_augments_and_hindrances(self, builder: QueryBuilder) -> None:
        statements = builder.monster_detail(1)
        assert "ragmonsters.augments" in statements.advantages.sql
        assert "ragmonsters.hindrances" in statements.disadvantages.sql


class TestReferenceStatements:
    """Test reference-cache statements."""

    def test_habitats_distinct_non_null(self, builder: QueryBuilder) -> None:
        sql = _normalize(builder.habitats().sql)
        assert "SELECT DISTINCT habitat" in sql
        assert "habitat IS NOT NULL" in sql

    def test_subcategories_join_categories(self, builder: QueryBuilder) -> None:
        sql = _normalize(builder.subcategories().sql)
        assert "s.subcategory_name, c.category_name" in sql

"""
Parameterized statement construction for the fixed RAGmonsters access patterns.

Only allow-listed column expressions, the closed rarity constants and the
sanitised schema name are written into SQL text. Every caller-supplied
value is bound through a %s placeholder.
"""

from typing import Any, NamedTuple

from ..core.guardrails import (
    NAME_MATCH_CAP,
    PageWindow,
    SortPlan,
    rarity_rank_case,
    sanitize_identifier,
)
from ..models import MonsterFilters

DEFAULT_SCHEMA = "ragmonsters"


class Statement(NamedTuple):
    """A SQL statement with its positional parameters."""

    sql: str
    params: tuple[Any, ...] = ()


class DetailStatements(NamedTuple):
    """The five statements behind a single detail lookup."""

    base: Statement
    keywords: Statement
    flaws: Statement
    advantages: Statement
    disadvantages: Statement


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class QueryBuilder:
    """Builds statements against the normalized creature schema."""

    def __init__(self, schema: str = DEFAULT_SCHEMA):
        """Initialize the builder.

        Args:
            schema: PostgreSQL schema holding the RAGmonsters tables.
        """
        self.schema = sanitize_identifier(schema)

    def _table(self, name: str) -> str:
        return f"{self.schema}.{name}"

    def _summary_select(self) -> str:
        return f"""
            SELECT
                m.monster_id,
                m.name,
                c.category_name,
                s.subcategory_name,
                m.habitat,
                m.biome,
                m.rarity,
                m.primary_power,
                m.secondary_power,
                m.special_ability,
                {rarity_rank_case()} AS rarity_rank
            FROM {self._table("monsters")} m
            JOIN {self._table("subcategories")} s ON m.subcategory_id = s.subcategory_id
            JOIN {self._table("categories")} c ON s.category_id = c.category_id"""

    # =========================================================================
    # List queries
    # =========================================================================

    def list_monsters(
        self, filters: MonsterFilters, sort: SortPlan, window: PageWindow
    ) -> Statement:
        """Build the filtered, sorted, paginated creature list.

        The identity column is always appended to the ORDER BY so page
        boundaries are reproducible across identical calls.
        """
        clauses: list[str] = []
        params: list[Any] = []

        if filters.category is not None:
            clauses.append("c.category_name = %s")
            params.append(filters.category)
        if filters.habitat is not None:
            clauses.append("m.habitat = %s")
            params.append(filters.habitat)
        if filters.biome is not None:
            clauses.append("m.biome = %s")
            params.append(filters.biome)
        if filters.rarity is not None:
            clauses.append("m.rarity = %s")
            params.append(filters.rarity)

        sql = self._summary_select()
        if clauses:
            sql += "\n            WHERE " + "\n              AND ".join(clauses)

        direction = "DESC" if sort.descending else "ASC"
        sql += f"\n            ORDER BY {sort.expression} {direction}, m.monster_id ASC"
        sql += "\n            LIMIT %s OFFSET %s"
        params.extend([window.limit, window.offset])

        return Statement(sql, tuple(params))

    def monsters_by_habitat(self, habitat: str, window: PageWindow) -> Statement:
        """Build the exact-match habitat list."""
        sql = self._summary_select() + """
            WHERE m.habitat = %s
            ORDER BY m.name ASC, m.monster_id ASC
            LIMIT %s OFFSET %s"""
        return Statement(sql, (habitat, window.limit, window.offset))

    def search_by_name(self, name: str, cap: int = NAME_MATCH_CAP) -> Statement:
        """Build the case-insensitive partial name match, capped for disambiguation."""
        sql = self._summary_select() + """
            WHERE m.name ILIKE %s
            ORDER BY m.name ASC, m.monster_id ASC
            LIMIT %s"""
        return Statement(sql, (f"%{escape_like(name)}%", cap))

    def exact_name(self, name: str) -> Statement:
        """Build a case-insensitive exact name match."""
        sql = self._summary_select() + """
            WHERE LOWER(m.name) = LOWER(%s)
            ORDER BY m.monster_id ASC
            LIMIT 1"""
        return Statement(sql, (name,))

    # =========================================================================
    # Detail queries
    # =========================================================================

    def monster_detail(self, monster_id: int) -> DetailStatements:
        """Build the five statements that make up a detail lookup."""
        base = Statement(
            f"""
            SELECT
                m.monster_id,
                m.name,
                c.category_name,
                s.subcategory_name,
                m.monster_type,
                m.habitat,
                m.biome,
                m.rarity,
                m.discovery,
                m.height,
                m.weight,
                m.appearance,
                m.primary_power,
                m.secondary_power,
                m.special_ability,
                m.weakness,
                m.behavior_ecology,
                m.notable_specimens
            FROM {self._table("monsters")} m
            JOIN {self._table("subcategories")} s ON m.subcategory_id = s.subcategory_id
            JOIN {self._table("categories")} c ON s.category_id = c.category_id
            WHERE m.monster_id = %s""",
            (monster_id,),
        )

        keywords = Statement(
            f"""
            SELECT
                k.keyword_name,
                k.rating,
                a.ability_name,
                a.mastery_value
            FROM {self._table("questworlds_stats")} qs
            JOIN {self._table("keywords")} k ON qs.stats_id = k.stats_id
            LEFT JOIN {self._table("abilities")} a ON k.keyword_id = a.keyword_id
            WHERE qs.monster_id = %s
            ORDER BY k.keyword_name ASC, a.ability_name ASC NULLS FIRST""",
            (monster_id,),
        )

        flaws = Statement(
            f"""
            SELECT
                f.flaw_name,
                f.rating
            FROM {self._table("questworlds_stats")} qs
            JOIN {self._table("flaws")} f ON qs.stats_id = f.stats_id
            WHERE qs.monster_id = %s
            ORDER BY f.rating DESC, f.flaw_name ASC, f.flaw_id ASC""",
            (monster_id,),
        )

        advantages = Statement(
            f"""
            SELECT target_name, modifier
            FROM {self._table("augments")}
            WHERE monster_id = %s
            ORDER BY target_name ASC, augment_id ASC""",
            (monster_id,),
        )

        disadvantages = Statement(
            f"""
            SELECT target_name, modifier
            FROM {self._table("hindrances")}
            WHERE monster_id = %s
            ORDER BY target_name ASC, hindrance_id ASC""",
            (monster_id,),
        )

        return DetailStatements(base, keywords, flaws, advantages, disadvantages)

    # =========================================================================
    # Reference queries
    # =========================================================================

    def categories(self) -> Statement:
        return Statement(
            f"SELECT category_name FROM {self._table('categories')} ORDER BY category_name ASC"
        )

    def subcategories(self) -> Statement:
        return Statement(
            f"""
            SELECT s.subcategory_name, c.category_name
            FROM {self._table("subcategories")} s
            JOIN {self._table("categories")} c ON s.category_id = c.category_id
            ORDER BY c.category_name ASC, s.subcategory_name ASC"""
        )

    def habitats(self) -> Statement:
        return Statement(
            f"SELECT DISTINCT habitat FROM {self._table('monsters')} "
            "WHERE habitat IS NOT NULL ORDER BY habitat ASC"
        )

    def biomes(self) -> Statement:
        return Statement(
            f"SELECT DISTINCT biome FROM {self._table('monsters')} "
            "WHERE biome IS NOT NULL ORDER BY biome ASC"
        )

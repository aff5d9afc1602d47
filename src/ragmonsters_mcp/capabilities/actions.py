"""
Monster Actions for RAGmonsters MCP.

Each Action takes a validated argument model, runs a fixed access pattern
through the query builder on one pooled connection, reshapes the rows and
returns a self-describing payload: data, a one-line summary, a provenance
tag and, for list-style Actions, hints about what to call next.
"""

import logging
from typing import Any

from ..core.database import DatabasePool, DatabaseSession
from ..core.errors import NotFoundError
from ..core.guardrails import (
    NAME_MATCH_CAP,
    RARITIES,
    PageWindow,
    SortPlan,
    clamp_limit,
    resolve_sort,
    validate_category,
)
from ..core.reference_cache import ReferenceCache
from ..models import (
    CompareMonstersArgs,
    Creature,
    GetMonsterByHabitatArgs,
    GetMonsterByIdArgs,
    GetMonsterByNameArgs,
    GetMonstersArgs,
    GetSubcategoriesArgs,
    NoArgs,
)
from ..queries.assembler import assemble_detail, assemble_summary
from ..queries.builder import QueryBuilder

logger = logging.getLogger(__name__)

SOURCE_DATABASE = "ragmonsters-db"
SOURCE_CACHE = "reference-cache"
SOURCE_ENUM = "closed-enumeration"

COMPARED_FIELDS = ("category", "subcategory", "habitat", "biome", "rarity")


def _hint(action: str, arguments: dict[str, Any], reason: str) -> dict[str, Any]:
    return {"action": action, "arguments": arguments, "reason": reason}


def _policy(window: PageWindow, sort: SortPlan | None = None) -> dict[str, Any]:
    policy: dict[str, Any] = {
        "limit": window.limit,
        "offset": window.offset,
        "requestedLimit": window.requested_limit,
        "limitAdjusted": window.adjusted,
    }
    if sort is not None:
        policy["sortField"] = sort.field
        policy["sortDirection"] = sort.direction
        policy["sortFallback"] = sort.fell_back
    return policy


def _plural(count: int, word: str, plural: str | None = None) -> str:
    if count == 1:
        return f"{count} {word}"
    return f"{count} {plural or word + 's'}"


class MonsterActions:
    """Read-only operations over the creature dataset."""

    def __init__(self, database: DatabasePool, cache: ReferenceCache, builder: QueryBuilder):
        """Initialize the Actions.

        Args:
            database: Pool each Action borrows one connection from.
            cache: Start-up reference data.
            builder: Statement builder bound to the dataset schema.
        """
        self._database = database
        self._cache = cache
        self._builder = builder

    # =========================================================================
    # Creature lookups
    # =========================================================================

    def get_monsters(self, args: GetMonstersArgs) -> dict[str, Any]:
        """List creatures with optional filters, sorting and pagination."""
        sort = resolve_sort(
            args.sort.field if args.sort else None,
            args.sort.direction if args.sort else None,
        )
        window = clamp_limit(args.limit, args.offset)
        filters = args.filters
        if filters.category is not None:
            filters = filters.model_copy(
                update={"category": validate_category(filters.category, self._cache.categories)}
            )
        statement = self._builder.list_monsters(filters, sort, window)

        with self._database.session() as session:
            rows = session.fetch_all(statement)
        monsters = [assemble_summary(row) for row in rows]

        active_filters = filters.model_dump(exclude_none=True)
        logger.info(f"getMonsters returning {len(monsters)} monsters (filters={active_filters})")

        if active_filters:
            described = ", ".join(f"{k}={v}" for k, v in active_filters.items())
            summary = f"Found {_plural(len(monsters), 'monster')} matching {described}"
        else:
            summary = f"Found {_plural(len(monsters), 'monster')}"
        summary += f", sorted by {sort.field} {sort.direction}."

        next_hints = []
        if monsters:
            first = monsters[0]
            next_hints.append(
                _hint("getMonsterById", {"monsterId": first.id}, f"Full details for {first.name}")
            )
        if len(monsters) == window.limit:
            page_args: dict[str, Any] = {"limit": window.limit, "offset": window.offset + window.limit}
            if active_filters:
                page_args["filters"] = active_filters
            if args.sort:
                page_args["sort"] = {"field": sort.field, "direction": sort.direction}
            next_hints.append(_hint("getMonsters", page_args, "Next page of results"))
        if not monsters and active_filters:
            next_hints.append(_hint("getHabitats", {}, "Check valid habitat values"))
            next_hints.append(_hint("getCategories", {}, "Check valid category values"))

        return {
            "data": [m.to_payload() for m in monsters],
            "summary": summary,
            "source": SOURCE_DATABASE,
            "next": next_hints,
            "policy": _policy(window, sort),
        }

    def get_monster_by_id(self, args: GetMonsterByIdArgs) -> dict[str, Any]:
        """Fetch the full nested record for one creature.

        Raises:
            NotFoundError: If no creature has this identity.
        """
        statements = self._builder.monster_detail(args.monster_id)

        with self._database.session() as session:
            base = session.fetch_one(statements.base)
            if base is None:
                raise NotFoundError(f"Monster with ID {args.monster_id} not found")
            keyword_rows = session.fetch_all(statements.keywords)
            flaw_rows = session.fetch_all(statements.flaws)
            advantage_rows = session.fetch_all(statements.advantages)
            disadvantage_rows = session.fetch_all(statements.disadvantages)

        detail = assemble_detail(base, keyword_rows, flaw_rows, advantage_rows, disadvantage_rows)
        logger.info(f"getMonsterById returning {detail.name} ({detail.id})")

        summary = (
            f"{detail.name} is a {detail.rarity or 'unranked'} {detail.category or 'uncategorized'} "
            f"creature from {detail.habitat or 'an unknown habitat'} with "
            f"{_plural(len(detail.keywords), 'keyword')}, {_plural(len(detail.flaws), 'flaw')}, "
            f"{_plural(len(detail.strengths), 'strength')} and "
            f"{_plural(len(detail.weaknesses), 'weakness', 'weaknesses')}."
        )

        return {
            "data": detail.to_payload(),
            "summary": summary,
            "source": SOURCE_DATABASE,
        }

    def _search_by_name(self, name: str) -> list[Creature]:
        with self._database.session() as session:
            rows = session.fetch_all(self._builder.search_by_name(name, NAME_MATCH_CAP))
        return [assemble_summary(row) for row in rows]

    def get_monster_by_name(self, args: GetMonsterByNameArgs) -> dict[str, Any]:
        """Case-insensitive partial name lookup, capped for disambiguation."""
        monsters = self._search_by_name(args.name)
        logger.info(f"getMonsterByName found {len(monsters)} monsters matching '{args.name}'")

        if not monsters:
            return {
                "found": False,
                "count": 0,
                "monsters": [],
                "message": f"No monsters found with name: {args.name}",
                "summary": f"No monster name contains '{args.name}'.",
                "source": SOURCE_DATABASE,
                "next": [_hint("getMonsters", {}, "Browse monsters to find the right name")],
            }

        names = ", ".join(m.name for m in monsters)
        if len(monsters) == 1:
            summary = f"Found {monsters[0].name}."
        else:
            summary = f"Found {len(monsters)} monsters matching '{args.name}': {names}."

        return {
            "found": True,
            "count": len(monsters),
            "monsters": [m.to_payload() for m in monsters],
            "summary": summary,
            "source": SOURCE_DATABASE,
            "next": [
                _hint("getMonsterById", {"monsterId": m.id}, f"Full details for {m.name}")
                for m in monsters
            ],
        }

    def get_monster_by_habitat(self, args: GetMonsterByHabitatArgs) -> dict[str, Any]:
        """List creatures living in exactly the given habitat."""
        window = clamp_limit(args.limit)
        with self._database.session() as session:
            rows = session.fetch_all(self._builder.monsters_by_habitat(args.habitat, window))
        monsters = [assemble_summary(row) for row in rows]
        logger.info(f"getMonsterByHabitat returning {len(monsters)} monsters for '{args.habitat}'")

        next_hints = []
        if monsters:
            next_hints.append(
                _hint(
                    "getMonsterById",
                    {"monsterId": monsters[0].id},
                    f"Full details for {monsters[0].name}",
                )
            )
        else:
            next_hints.append(_hint("getHabitats", {}, "List valid habitat names"))

        data = [m.to_payload() for m in monsters]
        return {
            "data": data,
            "monsters": data,
            "habitat": args.habitat,
            "count": len(monsters),
            "summary": f"Found {_plural(len(monsters), 'monster')} in {args.habitat}.",
            "source": SOURCE_DATABASE,
            "next": next_hints,
            "policy": _policy(window),
        }

    def _resolve_name(self, session: DatabaseSession, name: str) -> Creature:
        """Resolve a name to one creature: exact match first, then first partial match."""
        row = session.fetch_one(self._builder.exact_name(name))
        if row is None:
            row = session.fetch_one(self._builder.search_by_name(name, 1))
        if row is None:
            raise NotFoundError(f"Monster '{name}' not found")
        return assemble_summary(row)

    def compare_monsters(self, args: CompareMonstersArgs) -> dict[str, Any]:
        """Compare two creatures field by field.

        Raises:
            NotFoundError: Naming the first name that does not resolve.
        """
        with self._database.session() as session:
            a = self._resolve_name(session, args.monster_name_a)
            b = self._resolve_name(session, args.monster_name_b)

        comparison = {}
        for field in COMPARED_FIELDS:
            value_a = getattr(a, field)
            value_b = getattr(b, field)
            comparison[field] = {"a": value_a, "b": value_b, "match": value_a == value_b}

        shared = [f for f in COMPARED_FIELDS if comparison[f]["match"]]
        if shared:
            summary = (
                f"{a.name} and {b.name} share {len(shared)} of {len(COMPARED_FIELDS)} "
                f"attributes ({', '.join(shared)})."
            )
        else:
            summary = f"{a.name} and {b.name} share none of the compared attributes."

        return {
            "monsters": [a.to_payload(), b.to_payload()],
            "comparison": comparison,
            "summary": summary,
            "source": SOURCE_DATABASE,
            "next": [
                _hint("getMonsterById", {"monsterId": a.id}, f"Strengths and weaknesses of {a.name}"),
                _hint("getMonsterById", {"monsterId": b.id}, f"Strengths and weaknesses of {b.name}"),
            ],
        }

    # =========================================================================
    # Reference lists
    # =========================================================================

    @staticmethod
    def _reference(data: list[Any], summary: str, source: str = SOURCE_CACHE) -> dict[str, Any]:
        return {
            "data": data,
            "count": len(data),
            "summary": summary,
            "source": source,
        }

    def get_categories(self, args: NoArgs) -> dict[str, Any]:
        categories = list(self._cache.categories)
        return self._reference(
            categories, f"{_plural(len(categories), 'category', 'categories')} available."
        )

    def get_rarities(self, args: NoArgs) -> dict[str, Any]:
        return self._reference(
            list(RARITIES),
            f"{len(RARITIES)} rarities, from most to least common.",
            SOURCE_ENUM,
        )

    def get_biomes(self, args: NoArgs) -> dict[str, Any]:
        biomes = list(self._cache.biomes)
        return self._reference(biomes, f"{_plural(len(biomes), 'biome')} available.")

    def get_habitats(self, args: NoArgs) -> dict[str, Any]:
        habitats = list(self._cache.habitats)
        return self._reference(habitats, f"{_plural(len(habitats), 'habitat')} available.")

    def get_subcategories(self, args: GetSubcategoriesArgs) -> dict[str, Any]:
        """List subcategories, optionally restricted to one category."""
        if args.category_name is not None:
            category = validate_category(args.category_name, self._cache.categories, "categoryName")
            names = list(self._cache.subcategories_for(category))
            payload = self._reference(
                names,
                f"{_plural(len(names), 'subcategory', 'subcategories')} in {category}.",
            )
            payload["category"] = category
            return payload

        grouped = self._cache.subcategories
        data = [
            {"name": name, "category": category}
            for category, names in grouped.items()
            for name in names
        ]
        return self._reference(
            data,
            f"{_plural(len(data), 'subcategory', 'subcategories')} across "
            f"{_plural(len(grouped), 'category', 'categories')}.",
        )

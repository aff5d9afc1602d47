"""Shared test fixtures for RAGmonsters MCP tests.

This module provides a scripted stand-in for the connection pool, sample
creature rows, and ready-made cache, Actions and registry instances.
"""

from collections.abc import Callable, Generator, Iterator
from contextlib import contextmanager
from decimal import Decimal
from typing import Any

import pytest

from ragmonsters_mcp.capabilities.actions import MonsterActions
from ragmonsters_mcp.capabilities.registry import CapabilityRegistry, build_capabilities
from ragmonsters_mcp.core.reference_cache import ReferenceCache
from ragmonsters_mcp.queries.builder import QueryBuilder, Statement

# =============================================================================
# Scripted database
# =============================================================================


class FakeSession:
    """Session that answers each statement with the next queued result set."""

    def __init__(self, database: "FakeDatabase"):
        self._database = database

    def fetch_all(self, statement: Statement) -> list[dict[str, Any]]:
        self._database.executed.append(statement)
        if self._database.error is not None:
            raise self._database.error
        if not self._database.responses:
            return []
        return list(self._database.responses.pop(0))

    def fetch_one(self, statement: Statement) -> dict[str, Any] | None:
        rows = self.fetch_all(statement)
        return rows[0] if rows else None


class FakeDatabase:
    """Stand-in for DatabasePool that records statements and sessions."""

    schema = "ragmonsters"

    def __init__(self, responses: list[list[dict[str, Any]]] | None = None):
        self.responses = list(responses or [])
        self.executed: list[Statement] = []
        self.sessions_opened = 0
        self.sessions_closed = 0
        self.error: Exception | None = None

    def queue(self, *results: list[dict[str, Any]]) -> None:
        self.responses.extend(results)

    def reset(self) -> None:
        self.responses.clear()
        self.executed.clear()
        self.sessions_opened = 0
        self.sessions_closed = 0

    @contextmanager
    def session(self) -> Iterator[FakeSession]:
        self.sessions_opened += 1
        try:
            yield FakeSession(self)
        finally:
            self.sessions_closed += 1


# =============================================================================
# Sample rows
# =============================================================================


def make_monster_row(**overrides: Any) -> dict[str, Any]:
    """Build a list-query row, overriding any column."""
    row = {
        "monster_id": 1,
        "name": "Abyssalurk",
        "category_name": "Aquatic",
        "subcategory_name": "Deep Sea Dwellers",
        "habitat": "Abyssal Trench",
        "biome": "Ocean",
        "rarity": "Rare",
        "primary_power": "Pressure Crush",
        "secondary_power": "Bioluminescent Lure",
        "special_ability": "Abyssal Roar",
        "rarity_rank": 3,
    }
    row.update(overrides)
    return row


@pytest.fixture
def make_row() -> Callable[..., dict[str, Any]]:
    """Provide the list-row factory."""
    return make_monster_row


@pytest.fixture
def abyssalurk_row() -> dict[str, Any]:
    return make_monster_row()


@pytest.fixture
def volcanic_rows() -> list[dict[str, Any]]:
    """The three creatures living in Volcanic Mountains."""
    return [
        make_monster_row(
            monster_id=7,
            name="Cinderhorn",
            category_name="Elemental",
            subcategory_name="Fire Elementals",
            habitat="Volcanic Mountains",
            biome="Volcanic",
            rarity="Uncommon",
        ),
        make_monster_row(
            monster_id=12,
            name="Magmaclaw",
            category_name="Elemental",
            subcategory_name="Fire Elementals",
            habitat="Volcanic Mountains",
            biome="Volcanic",
            rarity="Rare",
        ),
        make_monster_row(
            monster_id=19,
            name="Pyrowyrm",
            category_name="Mythical",
            subcategory_name="Dragons",
            habitat="Volcanic Mountains",
            biome="Volcanic",
            rarity="Very Rare",
        ),
    ]


@pytest.fixture
def detail_base_row() -> dict[str, Any]:
    """Base row of the detail lookup for Abyssalurk."""
    return {
        "monster_id": 1,
        "name": "Abyssalurk",
        "category_name": "Aquatic",
        "subcategory_name": "Deep Sea Dwellers",
        "monster_type": "Leviathan",
        "habitat": "Abyssal Trench",
        "biome": "Ocean",
        "rarity": "Rare",
        "discovery": "First sighted by a bathysphere crew.",
        "height": Decimal("12.50"),
        "weight": "8 tons",
        "appearance": "An eel-like body lined with glowing spines.",
        "primary_power": "Pressure Crush",
        "secondary_power": "Bioluminescent Lure",
        "special_ability": "Abyssal Roar",
        "weakness": "Bright sunlight",
        "behavior_ecology": "Solitary ambush predator.",
        "notable_specimens": "The Trench King",
    }


@pytest.fixture
def keyword_rows() -> list[dict[str, Any]]:
    """Keyword/ability join rows, deliberately out of order."""
    return [
        {"keyword_name": "Pressure Mastery", "rating": 18, "ability_name": "Crush", "mastery_value": "3"},
        {"keyword_name": "Deep Sense", "rating": 15, "ability_name": None, "mastery_value": None},
        {"keyword_name": "Pressure Mastery", "rating": 18, "ability_name": "Anchor", "mastery_value": "2"},
    ]


@pytest.fixture
def advantage_rows() -> list[dict[str, Any]]:
    return [
        {"target_name": "Coral Sprite", "modifier": 5},
        {"target_name": "Reef Stalker", "modifier": None},
    ]


@pytest.fixture
def disadvantage_rows() -> list[dict[str, Any]]:
    return [{"target_name": "Sunwing", "modifier": -10}]


@pytest.fixture
def reference_rows() -> list[list[dict[str, Any]]]:
    """Result sets for the four reference-cache queries, in load order."""
    return [
        [{"category_name": "Aquatic"}, {"category_name": "Elemental"}, {"category_name": "Mythical"}],
        [
            {"subcategory_name": "Deep Sea Dwellers", "category_name": "Aquatic"},
            {"subcategory_name": "Reef Guardians", "category_name": "Aquatic"},
            {"subcategory_name": "Fire Elementals", "category_name": "Elemental"},
            {"subcategory_name": "Dragons", "category_name": "Mythical"},
        ],
        [{"habitat": "Abyssal Trench"}, {"habitat": "Volcanic Mountains"}],
        [{"biome": "Ocean"}, {"biome": "Volcanic"}],
    ]


# =============================================================================
# Component fixtures
# =============================================================================


@pytest.fixture
def fake_db() -> FakeDatabase:
    return FakeDatabase()


@pytest.fixture
def builder() -> QueryBuilder:
    return QueryBuilder("ragmonsters")


@pytest.fixture
def ready_cache(
    fake_db: FakeDatabase, builder: QueryBuilder, reference_rows: list[list[dict[str, Any]]]
) -> ReferenceCache:
    """A cache loaded from the reference rows; the fake database is reset afterwards."""
    cache = ReferenceCache(fake_db, builder)
    fake_db.queue(*reference_rows)
    cache.initialize()
    fake_db.reset()
    return cache


@pytest.fixture
def actions(
    fake_db: FakeDatabase, ready_cache: ReferenceCache, builder: QueryBuilder
) -> MonsterActions:
    return MonsterActions(fake_db, ready_cache, builder)


@pytest.fixture
def registry(actions: MonsterActions, ready_cache: ReferenceCache) -> CapabilityRegistry:
    return CapabilityRegistry(build_capabilities(actions, ready_cache))


# =============================================================================
# Configuration Fixtures
# =============================================================================


@pytest.fixture
def mock_databases_yaml() -> dict[str, Any]:
    """Provide mock databases.yaml content."""
    return {
        "default_database": "ragmonsters",
        "global_settings": {
            "statement_timeout": 5,
            "max_rows": 200,
        },
        "databases": {
            "ragmonsters": {
                "type": "postgresql",
                "env_prefix": "TEST_RM_DB",
                "schema": "ragmonsters",
                "description": "Test dataset",
            },
        },
    }


# =============================================================================
# Singleton Reset Fixtures
# =============================================================================


@pytest.fixture(autouse=True)
def reset_singletons() -> Generator[None, None, None]:
    """Reset singleton instances between tests.

    This ensures test isolation by clearing global state.
    """
    import ragmonsters_mcp.config as config_module
    import ragmonsters_mcp.core.audit as audit_module

    orig_config = config_module._config
    orig_audit = audit_module._audit_logger

    config_module._config = None
    audit_module._audit_logger = None

    yield

    config_module._config = orig_config
    audit_module._audit_logger = orig_audit

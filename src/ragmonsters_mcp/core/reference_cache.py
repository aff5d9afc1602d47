"""
Reference data cache for RAGmonsters MCP.

Loads the taxonomy, habitat and biome lists once during start-up and serves
read-only snapshots afterwards. The cache is never refreshed; restarting the
process is the only refresh path.
"""

import logging
import threading
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from .errors import NotInitializedError

if TYPE_CHECKING:
    from ..queries.builder import QueryBuilder
    from .database import DatabasePool

logger = logging.getLogger(__name__)


class ReferenceCache:
    """Process-lifetime snapshot of derived lookup lists."""

    def __init__(self, database: "DatabasePool", builder: "QueryBuilder"):
        """Initialize an empty cache.

        Args:
            database: Pool used for the one-time load.
            builder: Statement builder for the reference queries.
        """
        self._database = database
        self._builder = builder
        self._lock = threading.Lock()
        self._ready = False
        self._categories: tuple[str, ...] = ()
        self._subcategories: Mapping[str, tuple[str, ...]] = MappingProxyType({})
        self._habitats: tuple[str, ...] = ()
        self._biomes: tuple[str, ...] = ()

    @property
    def is_ready(self) -> bool:
        return self._ready

    def initialize(self) -> None:
        """Load every reference list in one blocking phase.

        Calling it again after a successful load is a no-op. A failed load
        leaves the cache uninitialised and propagates the error.
        """
        with self._lock:
            if self._ready:
                logger.warning("Reference cache already initialized, ignoring re-entry")
                return

            with self._database.session() as session:
                category_rows = session.fetch_all(self._builder.categories())
                subcategory_rows = session.fetch_all(self._builder.subcategories())
                habitat_rows = session.fetch_all(self._builder.habitats())
                biome_rows = session.fetch_all(self._builder.biomes())

            categories = tuple(row["category_name"] for row in category_rows)

            grouped: dict[str, list[str]] = {name: [] for name in categories}
            for row in subcategory_rows:
                grouped.setdefault(row["category_name"], []).append(row["subcategory_name"])

            self._categories = categories
            self._subcategories = MappingProxyType(
                {name: tuple(sorted(subs)) for name, subs in sorted(grouped.items())}
            )
            self._habitats = tuple(row["habitat"] for row in habitat_rows)
            self._biomes = tuple(row["biome"] for row in biome_rows)
            self._ready = True

        logger.info(
            f"Reference cache initialized: {len(self._categories)} categories, "
            f"{sum(len(s) for s in self._subcategories.values())} subcategories, "
            f"{len(self._habitats)} habitats, {len(self._biomes)} biomes"
        )

    def _require_ready(self, what: str) -> None:
        if not self._ready:
            raise NotInitializedError(
                f"{what} are not loaded yet; the server is still starting up"
            )

    @property
    def categories(self) -> tuple[str, ...]:
        self._require_ready("Categories")
        return self._categories

    @property
    def subcategories(self) -> Mapping[str, tuple[str, ...]]:
        """Subcategory names grouped by parent category."""
        self._require_ready("Subcategories")
        return self._subcategories

    def subcategories_for(self, category: str) -> tuple[str, ...]:
        self._require_ready("Subcategories")
        return self._subcategories.get(category, ())

    @property
    def habitats(self) -> tuple[str, ...]:
        self._require_ready("Habitats")
        return self._habitats

    @property
    def biomes(self) -> tuple[str, ...]:
        self._require_ready("Biomes")
        return self._biomes

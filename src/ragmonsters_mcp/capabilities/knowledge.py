"""
Knowledge documents for RAGmonsters MCP.

Renders the cached reference lists and the static documents as addressable
text, plus a per-creature image placeholder.
"""

from ..core.guardrails import RARITIES, require_non_negative_int
from ..core.reference_cache import ReferenceCache
from .data.knowledge_docs import IMAGE_PLACEHOLDER_SVG, QUERY_TIPS, SCHEMA_DESCRIPTION

URI_PREFIX = "ragmonsters://"


def render_list(title: str, items: list[str] | tuple[str, ...]) -> str:
    """Render a heading and a bullet list as markdown."""
    lines = [f"# {title}", ""]
    lines.extend(f"- {item}" for item in items)
    lines.append("")
    lines.append(f"Total: {len(items)}")
    return "\n".join(lines)


class MonsterKnowledge:
    """Loaders behind the ragmonsters:// Knowledge identifiers."""

    def __init__(self, cache: ReferenceCache):
        self._cache = cache

    def schema(self) -> str:
        return SCHEMA_DESCRIPTION

    def query_tips(self) -> str:
        return QUERY_TIPS

    def categories(self) -> str:
        return render_list("Monster Categories", self._cache.categories)

    def subcategories(self) -> str:
        """Subcategories grouped under their parent category headings."""
        lines = ["# Monster Subcategories", ""]
        total = 0
        for category, names in self._cache.subcategories.items():
            lines.append(f"## {category}")
            lines.extend(f"- {name}" for name in names)
            lines.append("")
            total += len(names)
        lines.append(f"Total: {total}")
        return "\n".join(lines)

    def habitats(self) -> str:
        return render_list("Monster Habitats", self._cache.habitats)

    def biomes(self) -> str:
        return render_list("Monster Biomes", self._cache.biomes)

    def rarities(self) -> str:
        return render_list("Monster Rarities (most to least common)", RARITIES)

    def monster_image(self, monster_id: str) -> bytes:
        """Return the SVG placeholder for a creature.

        Args:
            monster_id: Creature identity taken from the URI.

        Raises:
            ValidationError: If the identity is not a non-negative integer.
        """
        identity = require_non_negative_int(monster_id, "monster_id")
        return IMAGE_PLACEHOLDER_SVG.format(monster_id=identity).encode("utf-8")

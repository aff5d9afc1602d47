"""
Monster tools for RAGmonsters MCP.

Thin FastMCP bindings over the capability registry. Each tool forwards its
raw arguments to the registry, which validates them, runs the Action and
audits the call. Parameters are typed as Any so that FastMCP passes every
value through and the argument models report bad input with its error tag.
Capability errors come back as error results whose text is the JSON error.
"""

import json
from typing import Any

from mcp.server.fastmcp import FastMCP
from mcp.types import CallToolResult, TextContent

from ..capabilities.registry import CapabilityRegistry
from ..core.errors import CapabilityError


def _text_result(text: str, is_error: bool = False) -> CallToolResult:
    return CallToolResult(content=[TextContent(type="text", text=text)], isError=is_error)


def to_error_result(error: CapabilityError) -> CallToolResult:
    """Render a capability error as an MCP tool error result."""
    return _text_result(json.dumps({"error": error.to_dict()}), is_error=True)


async def invoke_action(
    registry: CapabilityRegistry, name: str, arguments: dict[str, Any]
) -> CallToolResult:
    """Invoke an Action and return its payload as JSON text.

    Arguments left as None are dropped so the argument model applies its
    defaults. A capability error is returned as an error result instead of
    raised, since FastMCP prefixes the text of raised errors.
    """
    supplied = {key: value for key, value in arguments.items() if value is not None}
    try:
        result = await registry.invoke(name, supplied)
    except CapabilityError as e:
        return to_error_result(e)
    return _text_result(result.to_json())


def register_monster_tools(mcp: FastMCP, registry: CapabilityRegistry) -> None:
    """Register the monster Actions as MCP tools.

    Args:
        mcp: The FastMCP server instance.
        registry: Capability registry the tools delegate to.
    """

    # =========================================================================
    # Creature lookups
    # =========================================================================

    @mcp.tool(name="getMonsters")
    async def get_monsters(
        filters: Any = None,
        sort: Any = None,
        limit: Any = None,
        offset: Any = None,
    ) -> CallToolResult:
        """Get a list of monsters with optional filtering, sorting, and pagination.

        Args:
            filters: Optional filters: category, habitat, biome, rarity.
                Category and rarity must come from getCategories / getRarities;
                habitat and biome are exact matches.
            sort: Optional {"field": name|category|habitat|rarity, "direction": asc|desc}.
            limit: Maximum number of results (default 10, clamped to 1-50).
            offset: Number of results to skip for pagination (default 0).

        Returns:
            JSON with data, summary, source, next hints and the applied policy.
        """
        return await invoke_action(
            registry,
            "getMonsters",
            {"filters": filters, "sort": sort, "limit": limit, "offset": offset},
        )

    @mcp.tool(name="getMonsterById")
    async def get_monster_by_id(monsterId: Any = None) -> CallToolResult:
        """Get detailed information about a specific monster by ID.

        Includes powers, physical attributes, ecology, keywords with their
        abilities, flaws, strengths and weaknesses.

        Args:
            monsterId: ID of the monster to retrieve.

        Returns:
            JSON with the full monster record.
        """
        return await invoke_action(registry, "getMonsterById", {"monsterId": monsterId})

    @mcp.tool(name="getMonsterByName")
    async def get_monster_by_name(name: Any = None) -> CallToolResult:
        """Find monsters by full or partial name.

        Matching is case-insensitive and returns at most 5 monsters; when more
        than one comes back, ask the user which one they meant.

        Args:
            name: Full or partial monster name.

        Returns:
            JSON with found, count, monsters and next hints.
        """
        return await invoke_action(registry, "getMonsterByName", {"name": name})

    @mcp.tool(name="getMonsterByHabitat")
    async def get_monster_by_habitat(habitat: Any = None, limit: Any = None) -> CallToolResult:
        """Get monsters living in a habitat.

        Args:
            habitat: Exact habitat name (see getHabitats).
            limit: Maximum number of results (default 10, clamped to 1-50).

        Returns:
            JSON with the monsters found in the habitat.
        """
        return await invoke_action(
            registry, "getMonsterByHabitat", {"habitat": habitat, "limit": limit}
        )

    @mcp.tool(name="compareMonsters")
    async def compare_monsters(
        monsterNameA: Any = None, monsterNameB: Any = None
    ) -> CallToolResult:
        """Compare two monsters side by side.

        Args:
            monsterNameA: Name of the first monster.
            monsterNameB: Name of the second monster.

        Returns:
            JSON with both monsters and a per-attribute comparison.
        """
        return await invoke_action(
            registry,
            "compareMonsters",
            {"monsterNameA": monsterNameA, "monsterNameB": monsterNameB},
        )

    # =========================================================================
    # Reference lists
    # =========================================================================

    @mcp.tool(name="getCategories")
    async def get_categories() -> CallToolResult:
        """Get all monster categories."""
        return await invoke_action(registry, "getCategories", {})

    @mcp.tool(name="getSubcategories")
    async def get_subcategories(categoryName: Any = None) -> CallToolResult:
        """Get monster subcategories.

        Args:
            categoryName: Optional category to restrict the list to.
        """
        return await invoke_action(registry, "getSubcategories", {"categoryName": categoryName})

    @mcp.tool(name="getHabitats")
    async def get_habitats() -> CallToolResult:
        """Get all habitats where monsters can be found."""
        return await invoke_action(registry, "getHabitats", {})

    @mcp.tool(name="getBiomes")
    async def get_biomes() -> CallToolResult:
        """Get all biomes where monsters can be found."""
        return await invoke_action(registry, "getBiomes", {})

    @mcp.tool(name="getRarities")
    async def get_rarities() -> CallToolResult:
        """Get all rarity levels, from most to least common."""
        return await invoke_action(registry, "getRarities", {})

"""
MCP Resources for RAGmonsters.

Resources expose the registry's Knowledge so MCP clients can load reference
lists and documentation without making tool calls.
"""

import logging

from mcp.server.fastmcp import FastMCP
from mcp.server.fastmcp.exceptions import ResourceError

from ..capabilities.registry import CapabilityRegistry, Knowledge
from ..core.errors import CapabilityError

logger = logging.getLogger(__name__)


def _read(registry: CapabilityRegistry, uri: str) -> str | bytes:
    try:
        return registry.read(uri).body
    except CapabilityError as e:
        raise ResourceError(f"{e.kind}: {e.message}") from e


def _register_static(mcp: FastMCP, registry: CapabilityRegistry, knowledge: Knowledge) -> None:
    uri = knowledge.uri

    @mcp.resource(
        uri,
        name=knowledge.name,
        description=knowledge.description,
        mime_type=knowledge.mime_type,
    )
    async def read_knowledge() -> str | bytes:
        return _read(registry, uri)


def register_monster_resources(mcp: FastMCP, registry: CapabilityRegistry) -> None:
    """Register Knowledge entries as MCP resources.

    Args:
        mcp: The FastMCP server instance.
        registry: Capability registry serving the documents.
    """
    for knowledge in registry.list_knowledge():
        if knowledge.is_template:
            continue
        _register_static(mcp, registry, knowledge)
        logger.debug(f"Registered resource {knowledge.uri}")

    @mcp.resource(
        "ragmonsters://images/{monster_id}",
        name="Monster Image",
        description="Placeholder image for a monster",
        mime_type="image/svg+xml",
    )
    async def monster_image(monster_id: str) -> bytes:
        """SVG placeholder for one monster."""
        body = _read(registry, f"ragmonsters://images/{monster_id}")
        return body if isinstance(body, bytes) else body.encode("utf-8")

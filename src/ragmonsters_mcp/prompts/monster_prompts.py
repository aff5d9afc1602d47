"""
MCP Prompts for RAGmonsters.

Each Guidance template is published as an argument-free prompt.
"""

from mcp.server.fastmcp import FastMCP

from ..capabilities.registry import CapabilityRegistry, Guidance


def _register_prompt(mcp: FastMCP, registry: CapabilityRegistry, guidance: Guidance) -> None:
    name = guidance.name

    @mcp.prompt(name=name, description=guidance.description)
    def render_guidance() -> str:
        return registry.guidance(name)


def register_monster_prompts(mcp: FastMCP, registry: CapabilityRegistry) -> None:
    """Register Guidance templates as MCP prompts.

    Args:
        mcp: The FastMCP server instance.
        registry: Capability registry holding the templates.
    """
    for guidance in registry.list_guidance():
        _register_prompt(mcp, registry, guidance)

"""
MCP Resources for RAGmonsters.

Resources provide context information that can be loaded by MCP clients.
"""

from .monster_resources import register_monster_resources

__all__ = [
    "register_monster_resources",
]

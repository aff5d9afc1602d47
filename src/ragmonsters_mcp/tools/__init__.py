"""
MCP Tools for RAGmonsters.

- monsters: Creature lookups and reference lists backed by the capability registry
"""

from .monsters import register_monster_tools

__all__ = [
    "register_monster_tools",
]

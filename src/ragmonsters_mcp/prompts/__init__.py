"""
MCP Prompts for RAGmonsters.
"""

from .monster_prompts import register_monster_prompts

__all__ = [
    "register_monster_prompts",
]

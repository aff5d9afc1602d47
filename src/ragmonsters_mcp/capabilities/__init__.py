"""
Capabilities exposed by RAGmonsters MCP.

- actions: Validated, read-only operations over the creature dataset
- knowledge: Addressable reference documents
- guidance: Workflow templates
- registry: The closed capability catalog, discovery and invocation
"""

from .actions import MonsterActions
from .registry import (
    Action,
    ActionResult,
    Capability,
    CapabilityRegistry,
    Guidance,
    Knowledge,
    build_capabilities,
)

__all__ = [
    "Action",
    "ActionResult",
    "Capability",
    "CapabilityRegistry",
    "Guidance",
    "Knowledge",
    "MonsterActions",
    "build_capabilities",
]

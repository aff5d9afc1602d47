"""
Guidance templates for RAGmonsters MCP.

Guidance is fixed text describing how to combine Actions for a task.
"""

from ..core.errors import NotFoundError
from .data.guidance_templates import GUIDANCE_DESCRIPTIONS, GUIDANCE_TEMPLATES


def list_guidance_names() -> list[str]:
    """Names of every available template, in catalog order."""
    return list(GUIDANCE_TEMPLATES)


def get_guidance_template(name: str) -> str:
    """Look up a template by name.

    Raises:
        NotFoundError: If no template has this name.
    """
    template = GUIDANCE_TEMPLATES.get(name)
    if template is None:
        available = ", ".join(GUIDANCE_TEMPLATES)
        raise NotFoundError(f"Unknown guidance '{name}'. Available: {available}")
    return template


def get_guidance_description(name: str) -> str:
    return GUIDANCE_DESCRIPTIONS.get(name, "")

"""
Static content for RAGmonsters MCP.

Guidance templates and the fixed Knowledge documents.
"""

from .guidance_templates import GUIDANCE_DESCRIPTIONS, GUIDANCE_TEMPLATES
from .knowledge_docs import IMAGE_PLACEHOLDER_SVG, QUERY_TIPS, SCHEMA_DESCRIPTION

__all__ = [
    "GUIDANCE_DESCRIPTIONS",
    "GUIDANCE_TEMPLATES",
    "IMAGE_PLACEHOLDER_SVG",
    "QUERY_TIPS",
    "SCHEMA_DESCRIPTION",
]

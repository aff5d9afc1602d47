"""
Statement construction and row reshaping for RAGmonsters MCP.
"""

from .assembler import assemble_detail, assemble_summary, group_keywords
from .builder import DetailStatements, QueryBuilder, Statement

__all__ = [
    "DetailStatements",
    "QueryBuilder",
    "Statement",
    "assemble_detail",
    "assemble_summary",
    "group_keywords",
]

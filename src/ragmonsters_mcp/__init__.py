"""
RAGmonsters MCP - Model Context Protocol server for the RAGmonsters dataset.

This package provides an MCP server that lets AI assistants explore a
fictional creature dataset through validated, read-only capabilities.
"""

__version__ = "0.1.0"

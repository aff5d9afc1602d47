"""
Core infrastructure modules for RAGmonsters MCP.

- errors: Error taxonomy shared by every capability
- guardrails: Input bounds (closed enums, page clamping, sort allow-list)
- database: Connection pool management
- reference_cache: Start-up snapshot of reference lists
- audit: Capability invocation logging
"""

from .audit import AuditLogger, get_audit_logger
from .database import DatabasePool, DatabaseSession
from .errors import (
    CapabilityError,
    NotFoundError,
    NotInitializedError,
    QueryTimeoutError,
    UpstreamUnavailableError,
    ValidationError,
)
from .reference_cache import ReferenceCache

__all__ = [
    "AuditLogger",
    "CapabilityError",
    "DatabasePool",
    "DatabaseSession",
    "NotFoundError",
    "NotInitializedError",
    "QueryTimeoutError",
    "ReferenceCache",
    "UpstreamUnavailableError",
    "ValidationError",
    "get_audit_logger",
]

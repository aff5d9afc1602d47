"""
Error taxonomy for RAGmonsters MCP.

Every failure that reaches the capability boundary is one of these, so the
calling agent gets a stable kind tag it can reason about (retry on
upstream_unavailable, rephrase on validation_error) instead of a traceback.
"""

from typing import Any


class CapabilityError(Exception):
    """Base exception for all capability-level errors."""

    kind = "capability_error"
    retryable = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_dict(self) -> dict[str, Any]:
        """Serialise the error for the caller."""
        return {
            "kind": self.kind,
            "message": self.message,
            "retryable": self.retryable,
        }


class ValidationError(CapabilityError, ValueError):
    """Malformed or out-of-enum arguments, rejected before any query runs."""

    kind = "validation_error"

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    def to_dict(self) -> dict[str, Any]:
        data = super().to_dict()
        if self.field:
            data["field"] = self.field
        return data


class NotFoundError(CapabilityError):
    """A specific identity (or capability name) does not resolve."""

    kind = "not_found"


class UpstreamUnavailableError(CapabilityError):
    """The data store could not be reached or the query failed."""

    kind = "upstream_unavailable"
    retryable = True


class QueryTimeoutError(UpstreamUnavailableError):
    """A query or connection acquisition exceeded its time budget."""

    kind = "timeout"


class NotInitializedError(CapabilityError):
    """Reference data was requested before start-up finished loading it."""

    kind = "not_initialized"
    retryable = True

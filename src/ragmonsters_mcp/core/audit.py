"""
Audit logging for RAGmonsters MCP.

Logs every capability invocation for debugging agent behaviour.
"""

import json
import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class AuditLogger:
    """Logs capability invocations to a JSON-lines file."""

    def __init__(self, log_dir: Path | None = None):
        """Initialize the audit logger.

        Args:
            log_dir: Directory for audit logs. Defaults to RAGMONSTERS_AUDIT_DIR
                or project logs/.
        """
        if log_dir is None:
            env_dir = os.environ.get("RAGMONSTERS_AUDIT_DIR")
            if env_dir:
                log_dir = Path(env_dir)
            else:
                project_root = Path(__file__).parent.parent.parent.parent
                log_dir = project_root / "logs"

        self.log_dir = log_dir
        self.log_dir.mkdir(parents=True, exist_ok=True)
        self.log_file = self.log_dir / "audit.jsonl"

    def log_operation(
        self,
        kind: str,
        name: str,
        params: dict[str, Any],
        result_summary: str | None = None,
        success: bool = True,
        error_kind: str | None = None,
        error: str | None = None,
        duration_ms: float | None = None,
    ) -> None:
        """Log a capability invocation.

        Args:
            kind: Capability kind (action, knowledge, guidance).
            name: Capability name or URI.
            params: Arguments passed by the caller.
            result_summary: Brief summary of the result.
            success: Whether the invocation succeeded.
            error_kind: Error taxonomy tag if it failed.
            error: Error message if it failed.
            duration_ms: Invocation duration in milliseconds.
        """
        entry: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "kind": kind,
            "name": name,
            "params": self._sanitize_params(params),
            "success": success,
        }

        if result_summary:
            entry["result_summary"] = result_summary
        if error_kind:
            entry["error_kind"] = error_kind
        if error:
            entry["error"] = error
        if duration_ms is not None:
            entry["duration_ms"] = round(duration_ms, 2)

        self._write_entry(entry)

    def _sanitize_params(self, params: dict[str, Any]) -> dict[str, Any]:
        """Truncate oversized string arguments."""
        sanitized = {}
        for key, value in params.items():
            if isinstance(value, str) and len(value) > 500:
                sanitized[key] = value[:500] + "... [truncated]"
            else:
                sanitized[key] = value
        return sanitized

    def _write_entry(self, entry: dict[str, Any]) -> None:
        try:
            with open(self.log_file, "a") as f:
                f.write(json.dumps(entry, default=str) + "\n")
        except OSError as e:
            logger.error(f"Failed to write audit log: {e}")

    def get_recent_entries(self, limit: int = 100) -> list[dict[str, Any]]:
        """Get recent audit log entries.

        Args:
            limit: Maximum number of entries to return.

        Returns:
            List of recent log entries (newest first).
        """
        if not self.log_file.exists():
            return []

        entries = []
        try:
            with open(self.log_file) as f:
                for line in f:
                    line = line.strip()
                    if line:
                        entries.append(json.loads(line))
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to read audit log: {e}")
            return []

        return list(reversed(entries[-limit:]))


# Global audit logger instance
_audit_logger: AuditLogger | None = None


def get_audit_logger() -> AuditLogger:
    """Get the global audit logger instance.

    Returns:
        The AuditLogger singleton instance.
    """
    global _audit_logger
    if _audit_logger is None:
        _audit_logger = AuditLogger()
    return _audit_logger

"""
Configuration loading for RAGmonsters MCP.

Loads YAML configuration files and environment variables.

Connection details are resolved with the following priority:
1. RAGMONSTERS_DB_URL (or <env_prefix>_URL) connection string - highest priority
2. POSTGRESQL_ADDON_URI connection string (hosted add-on convention)
3. <env_prefix>_HOST/_PORT/_NAME/_USERNAME/_PASSWORD variables - lowest priority
"""

import logging
import os
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

logger = logging.getLogger(__name__)

DEFAULT_GLOBAL_SETTINGS: dict[str, Any] = {
    "statement_timeout": 15,
    "pool_min_size": 1,
    "pool_max_size": 10,
    "pool_timeout": 10,
    "max_rows": 1000,
}

DEFAULT_DATABASE: dict[str, Any] = {
    "type": "postgresql",
    "env_prefix": "RAGMONSTERS_DB",
    "schema": "ragmonsters",
    "description": "RAGmonsters dataset",
}


class Config:
    """Configuration manager for RAGmonsters MCP.

    The server reads a single database definition from databases.yaml; its
    credentials always come from the environment (via env_prefix) so that
    the YAML file can be committed.
    """

    def __init__(self, config_dir: Path | None = None):
        """Initialize configuration from YAML files and environment.

        Args:
            config_dir: Path to config directory. Defaults to project config/.
        """
        load_dotenv()

        if config_dir is None:
            # __file__ = src/ragmonsters_mcp/config.py -> project root is three levels up
            project_root = Path(__file__).parent.parent.parent
            config_dir = project_root / "config"

        self.config_dir = config_dir
        self._databases: dict[str, Any] = self._load_yaml("databases.yaml")

    def _load_yaml(self, filename: str) -> dict[str, Any]:
        """Load a YAML file from the config directory.

        Args:
            filename: Name of the YAML file to load.

        Returns:
            Parsed YAML content as a dictionary.
        """
        filepath = self.config_dir / filename
        if not filepath.exists():
            logger.info(f"{filepath} not found, using built-in defaults")
            return {}

        with filepath.open() as f:
            return yaml.safe_load(f) or {}

    @property
    def databases(self) -> dict[str, Any]:
        """Get configured database definitions (from databases.yaml)."""
        return self._databases.get("databases", {}) or {"ragmonsters": DEFAULT_DATABASE}

    @property
    def default_database(self) -> str:
        """Get the default database name."""
        return self._databases.get("default_database", "ragmonsters")

    @property
    def global_settings(self) -> dict[str, Any]:
        """Get global database settings merged over the defaults."""
        return {**DEFAULT_GLOBAL_SETTINGS, **self._databases.get("global_settings", {})}

    @property
    def audit_enabled(self) -> bool:
        """Whether capability invocations are written to the audit log."""
        return os.getenv("RAGMONSTERS_AUDIT_LOG", "true").lower() in ("1", "true", "yes")

    @property
    def log_level(self) -> str:
        return os.getenv("RAGMONSTERS_LOG_LEVEL", "INFO").upper()

    @property
    def log_file(self) -> str | None:
        return os.getenv("RAGMONSTERS_LOG_FILE") or None

    def get_database_config(self, name: str | None = None) -> dict[str, Any]:
        """Get configuration for a database.

        Args:
            name: Database name from config. Defaults to default_database.

        Returns:
            Database configuration dictionary with a libpq conninfo or
            discrete connection fields, the schema and pool settings.

        Raises:
            ValueError: If database not found in config.
        """
        name = name or self.default_database
        db_config = self.databases.get(name)
        if not db_config:
            raise ValueError(f"Database '{name}' not found in configuration")

        db_type = db_config.get("type", "postgresql").lower()
        if db_type not in ("postgresql", "postgres"):
            raise ValueError(f"Unsupported database type: {db_type}")

        env_prefix = db_config.get("env_prefix", "RAGMONSTERS_DB")
        url = os.getenv(f"{env_prefix}_URL") or os.getenv("POSTGRESQL_ADDON_URI", "")

        return {
            "name": name,
            "type": "postgresql",
            "url": url,
            "host": os.getenv(f"{env_prefix}_HOST", ""),
            "port": int(os.getenv(f"{env_prefix}_PORT", "5432")),
            "database": os.getenv(f"{env_prefix}_NAME", ""),
            "user": os.getenv(f"{env_prefix}_USERNAME", ""),
            "password": os.getenv(f"{env_prefix}_PASSWORD", ""),
            "schema": db_config.get("schema", "ragmonsters"),
            "description": db_config.get("description", ""),
            "settings": {
                **self.global_settings,
                **db_config.get("settings", {}),
            },
        }


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance.

    Returns:
        The Config singleton instance.
    """
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config() -> Config:
    """Reload configuration from files.

    Returns:
        Fresh Config instance.
    """
    global _config
    _config = Config()
    return _config

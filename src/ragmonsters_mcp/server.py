"""
RAGmonsters MCP - Main entry point.

This module wires the database pool, reference cache and capability registry
together and runs the MCP server with all registered tools, resources and
prompts.
"""

import logging

import anyio
from mcp.server.fastmcp import FastMCP

from .capabilities.actions import MonsterActions
from .capabilities.registry import CapabilityRegistry, build_capabilities
from .config import Config, get_config
from .core.audit import get_audit_logger
from .core.database import DatabasePool
from .core.reference_cache import ReferenceCache
from .prompts import register_monster_prompts
from .queries.builder import QueryBuilder
from .resources import register_monster_resources
from .tools import register_monster_tools

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

logger = logging.getLogger(__name__)


def configure_logging(config: Config) -> None:
    """Configure root logging once, on stderr so stdio transport stays clean.

    Args:
        config: Configuration providing the level and optional log file.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    if config.log_file:
        handlers.append(logging.FileHandler(config.log_file))

    logging.basicConfig(
        level=getattr(logging, config.log_level, logging.INFO),
        format=LOG_FORMAT,
        handlers=handlers,
    )


def build_registry(database: DatabasePool, config: Config) -> CapabilityRegistry:
    """Load reference data and assemble the capability registry.

    Args:
        database: An open connection pool.
        config: Configuration deciding whether invocations are audited.

    Returns:
        Registry over the full catalog.
    """
    builder = QueryBuilder(database.schema)

    logger.info("Loading reference data...")
    cache = ReferenceCache(database, builder)
    cache.initialize()

    actions = MonsterActions(database, cache, builder)
    audit = get_audit_logger() if config.audit_enabled else None
    return CapabilityRegistry(build_capabilities(actions, cache), audit=audit)


def create_server(config: Config | None = None) -> tuple[FastMCP, DatabasePool]:
    """Create and configure the MCP server.

    Opens the connection pool and loads the reference cache before anything
    is registered, so no capability is served before start-up completes.

    Args:
        config: Configuration to use. Defaults to the global configuration.

    Returns:
        The configured FastMCP server and the pool it owns.

    Raises:
        UpstreamUnavailableError: If the database cannot be reached.
    """
    config = config or get_config()
    db_config = config.get_database_config()

    database = DatabasePool(db_config["name"], db_config)
    database.open()

    try:
        registry = build_registry(database, config)
    except Exception:
        database.close()
        raise

    mcp = FastMCP("ragmonsters-mcp")

    logger.info("Registering monster tools...")
    register_monster_tools(mcp, registry)

    logger.info("Registering resources...")
    register_monster_resources(mcp, registry)

    logger.info("Registering prompts...")
    register_monster_prompts(mcp, registry)

    logger.info("RAGmonsters MCP initialized")
    return mcp, database


def run(transport: str = "stdio", host: str = "0.0.0.0", port: int = 8080) -> None:
    """Entry point for running the server.

    Args:
        transport: Transport type - "stdio" (default) or "sse" for HTTP.
        host: Host to bind to when using SSE transport.
        port: Port to bind to when using SSE transport.
    """
    config = get_config()
    configure_logging(config)

    mcp, database = create_server(config)
    try:
        if transport == "sse":
            import uvicorn

            logger.info(f"Starting SSE server on http://{host}:{port}")
            logger.info("SSE endpoint: /sse")
            logger.info("Messages endpoint: /messages/")
            app = mcp.sse_app()
            uvicorn.run(app, host=host, port=port)
        else:
            anyio.run(mcp.run_stdio_async)
    finally:
        logger.info("Closing connection pool")
        database.close()


def main():
    """CLI entry point with argument parsing."""
    import argparse

    parser = argparse.ArgumentParser(description="RAGmonsters MCP Server")
    parser.add_argument(
        "--transport",
        choices=["stdio", "sse"],
        default="stdio",
        help="Transport type (default: stdio)"
    )
    parser.add_argument(
        "--host",
        default="0.0.0.0",
        help="Host to bind to for SSE transport (default: 0.0.0.0)"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=8080,
        help="Port for SSE transport (default: 8080)"
    )

    args = parser.parse_args()
    run(transport=args.transport, host=args.host, port=args.port)


if __name__ == "__main__":
    main()

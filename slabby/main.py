"""
Main entry point for Slabby MCP Server.

This module provides the main() function and server initialization.
"""

import asyncio
import sys

import httpx
import structlog
from mcp.server.stdio import stdio_server

from .client import create_client
from .config import Settings, load_settings
from .logging import configure_logging
from .tools import create_server
from .utils import ConfigurationError

logger = structlog.get_logger(__name__)


async def run(settings: Settings) -> None:
    """Serve the Slab tools over stdio until the client disconnects."""
    async with httpx.AsyncClient(timeout=settings.request_timeout) as http_client:
        server = create_server(create_client(settings, http_client))
        logger.info("server_starting", team=settings.team, graphql_url=settings.graphql_url)
        async with stdio_server() as (read_stream, write_stream):
            await server.run(read_stream, write_stream, server.create_initialization_options())


def main():
    """Main entry point."""
    try:
        settings = load_settings()
    except ConfigurationError as e:
        print(f"Error: {e.message}", file=sys.stderr)
        sys.exit(1)

    configure_logging(settings.log_level)
    asyncio.run(run(settings))


if __name__ == "__main__":
    main()

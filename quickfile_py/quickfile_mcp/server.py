"""QuickFile MCP server (stdio)."""
from __future__ import annotations

import asyncio
import logging
import os
import sys
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from mcp import types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from .client import get_api_client
from .credentials import credentials_path, load_credentials, validate_credentials_format
from .exceptions import ConfigError
from .tools import TOOL_REGISTRY, handle_tool_call, list_tools

SERVER_NAME = "quickfile-mcp"
SERVER_VERSION = "1.0.0"

logger = logging.getLogger(__name__)

server = Server(SERVER_NAME, version=SERVER_VERSION)


class ToolCallFailed(Exception):
    pass


def configure_logging() -> None:
    # stdout carries the MCP protocol; logs go to stderr.
    logging.basicConfig(
        level=logging.DEBUG if os.environ.get("QUICKFILE_DEBUG") else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )


@server.list_tools()
async def _list_tools() -> List[types.Tool]:
    return list_tools()


@server.call_tool(validate_input=False)
async def _call_tool(name: str, arguments: Optional[Dict[str, Any]]) -> List[types.TextContent]:
    logger.info("Tool called: %s", name)
    result = await handle_tool_call(get_api_client(), name, arguments or {})
    if result.isError:
        # The low-level server reports raised exceptions as isError results.
        raise ToolCallFailed(result.content[0].text)
    return list(result.content)


async def serve() -> None:
    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    load_dotenv()
    configure_logging()

    try:
        credentials = load_credentials()
    except ConfigError as exc:
        logger.error("Failed to load credentials: %s", exc)
        logger.error("Please ensure credentials are configured at %s", credentials_path())
        sys.exit(1)

    if not validate_credentials_format(credentials):
        logger.warning("Credential format validation failed. API calls may fail.")

    get_api_client(credentials=credentials)
    logger.info(
        "%s v%s starting for account ****%s with %d tools",
        SERVER_NAME,
        SERVER_VERSION,
        credentials.account_number[-4:],
        len(TOOL_REGISTRY),
    )
    asyncio.run(serve())


if __name__ == "__main__":
    main()

#!/usr/bin/env python3
"""
MCP HTTP/SSE Server - Hexagonal Architecture

HTTP/SSE server using dependency injection and hexagonal architecture.

Run with: poetry run uvicorn mcp_find_replace.server_http:app --host 127.0.0.1 --port 5003

Configuration:
- PORT: Server port (default: 5003)
- HOST: Bind address (default: 127.0.0.1)
- VAULT_DIR: Vault directory (default: .)
- VAULT_GLOB: Document glob inside the vault (default: **/*.md)
"""

import json
import logging
import os
import signal
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

from mcp.server import Server
from mcp.server.sse import SseServerTransport
from mcp.types import TextContent, Tool
from starlette.applications import Starlette
from starlette.requests import Request
from starlette.responses import JSONResponse, Response
from starlette.routing import Mount, Route

from .container import Container
from .adapters.mcp import TOOL_SCHEMAS, MCPHandlers
from .formatters import (
    format_validate_pattern,
    format_search_vault,
    format_replace_all,
    format_replace_one,
)

# Configure logging with millisecond precision
logging.basicConfig(
    level=logging.INFO,
    format="[%(asctime)s] [%(levelname)s] %(message)s",
    datefmt="%Y/%m/%d %H:%M:%S"
)


class MillisecondFormatter(logging.Formatter):
    """Custom formatter with milliseconds as :XXXX format"""
    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:  # noqa: N802
        """Override formatTime to include milliseconds with : separator"""
        ct = datetime.fromtimestamp(record.created, tz=timezone.utc)
        if datefmt:
            s = ct.strftime("%Y/%m/%d %H:%M:%S")
            ms = int((record.created % 1) * 10000)
            return f"{s}:{ms:04d}"
        return super().formatTime(record, datefmt)


# Apply custom formatter to root logger
for handler in logging.root.handlers:
    handler.setFormatter(MillisecondFormatter(
        "[%(asctime)s] [%(levelname)s] %(message)s",
        datefmt="%Y/%m/%d %H:%M:%S"
    ))

logger = logging.getLogger(__name__)

# Configuration
DEFAULT_PORT = 5003
DEFAULT_HOST = "127.0.0.1"
DEFAULT_VAULT_DIR = "."
DEFAULT_GLOB = "**/*.md"

FORMATTERS = {
    "validate_pattern": format_validate_pattern,
    "search_vault": format_search_vault,
    "replace_all": format_replace_all,
    "replace_one": format_replace_one,
}


def get_port() -> int:
    """Get server port from environment or use default"""
    port_str = os.environ.get("PORT", str(DEFAULT_PORT))
    try:
        return int(port_str)
    except ValueError:
        msg = f"Invalid PORT value: {port_str}"
        raise ValueError(msg) from None


def get_host() -> str:
    """Get bind address from environment or use default"""
    return os.environ.get("HOST", DEFAULT_HOST)


def get_vault_dir() -> Path:
    """Get vault directory from environment or use default"""
    return Path(os.environ.get("VAULT_DIR", DEFAULT_VAULT_DIR))


def get_glob() -> str:
    """Get document glob from environment or use default"""
    return os.environ.get("VAULT_GLOB", DEFAULT_GLOB)


# Initialize dependency injection container
container = Container(
    vault_dir=get_vault_dir(),
    glob=get_glob()
)

# Initialize MCP handlers
handlers = MCPHandlers(container)

# MCP Server instance
mcp_server = Server("find-replace-mcp")

# SSE transport for multi-client support
sse_transport = SseServerTransport("/messages/")


@mcp_server.list_tools()  # type: ignore[misc,no-untyped-call]
async def list_tools() -> list[Tool]:
    """List available MCP tools"""
    return [Tool(**schema) for schema in TOOL_SCHEMAS.values()]


@mcp_server.call_tool()  # type: ignore[misc,no-untyped-call]
async def call_tool(name: str, arguments: dict[str, Any]) -> list[TextContent]:
    """Handle tool calls"""
    logger.info(f"call_tool: {name} args={arguments}")

    try:
        result = await dispatch_tool(name, arguments)
    except Exception as e:
        logger.error(f"call_tool: {name} FAILED: {e}")
        raise

    formatter = FORMATTERS.get(name)
    if formatter:
        formatted_text = formatter(result)
    else:
        formatted_text = json.dumps(result, indent=2)

    logger.info(f"call_tool: {name} returning {len(formatted_text)} chars")
    return [TextContent(type="text", text=formatted_text)]


async def dispatch_tool(name: str, arguments: dict[str, Any]) -> Any:
    """Dispatch tool call to appropriate handler"""
    if name == "validate_pattern":
        return await handlers.validate_pattern(
            pattern=arguments["pattern"],
            flags=arguments.get("flags", "g")
        )

    elif name == "search_vault":
        return await handlers.search_vault(
            pattern=arguments["pattern"],
            replacement=arguments.get("replacement", ""),
            flags=arguments.get("flags", "g"),
            adjust_case=arguments.get("adjust_case", False),
            max_results=arguments.get("max_results", 50),
            offset=arguments.get("offset", 0)
        )

    elif name == "replace_all":
        return await handlers.replace_all(
            pattern=arguments["pattern"],
            replacement=arguments["replacement"],
            flags=arguments.get("flags", "g"),
            adjust_case=arguments.get("adjust_case", False),
            dry_run=arguments.get("dry_run", False)
        )

    elif name == "replace_one":
        return await handlers.replace_one(
            path=arguments["path"],
            line_number=arguments["line_number"],
            start=arguments["start"],
            match=arguments["match"],
            replacement=arguments["replacement"],
            adjust_case=arguments.get("adjust_case", False)
        )

    else:
        raise ValueError(f"Unknown tool: {name}")


# HTTP routes
async def handle_ping(request: Request) -> Response:
    """Health check endpoint"""
    return JSONResponse({"status": "ok", "vault_dir": str(container.vault_dir)})


async def handle_sse(request: Request) -> Response:
    """SSE endpoint for MCP communication"""
    client_addr = request.client.host if request.client else "unknown"
    logger.info(f"SSE connect from {client_addr}")
    async with sse_transport.connect_sse(
        request.scope, request.receive, request._send
    ) as streams:
        logger.info(f"SSE session started for {client_addr}")
        await mcp_server.run(
            streams[0], streams[1], mcp_server.create_initialization_options()
        )
        logger.info(f"SSE disconnect from {client_addr}")
    return Response()


routes = [
    Route("/ping", handle_ping),
    Route("/sse", handle_sse),
    Mount("/messages/", app=sse_transport.handle_post_message),
]

app = Starlette(routes=routes)


# Graceful shutdown on SIGTERM
def handle_sigterm(signum, frame):
    logger.info("Received SIGTERM, shutting down gracefully...")
    sys.exit(0)


def main():
    """Run the HTTP/SSE server with uvicorn"""
    import uvicorn

    signal.signal(signal.SIGTERM, handle_sigterm)
    port = get_port()
    host = get_host()
    logger.info(f"Starting MCP HTTP server on {host}:{port} (vault: {container.vault_dir})")
    uvicorn.run(app, host=host, port=port)


if __name__ == "__main__":
    main()

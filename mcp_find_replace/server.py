"""
find-replace MCP Server

MCP delivery layer - wraps the handlers as FastMCP tools.
Separation of concerns: this file only handles MCP protocol.
"""
import argparse
import logging
import os
from pathlib import Path
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .adapters.mcp import MCPHandlers
from .container import Container

# Suppress INFO logs
logging.getLogger("mcp").setLevel(logging.WARNING)

# Default vault directory (can be overridden via env var or CLI arg)
VAULT_DIR = Path(os.getenv("VAULT_DIR", "."))
VAULT_GLOB = os.getenv("VAULT_GLOB", "**/*.md")

# Get port from env or default
HTTP_PORT = int(os.getenv("FIND_REPLACE_HTTP_PORT", "6661"))
HTTP_HOST = os.getenv("FIND_REPLACE_HTTP_HOST", "0.0.0.0")

# Initialize MCP server with HTTP config
mcp = FastMCP("find-replace", host=HTTP_HOST, port=HTTP_PORT)

_handlers: Optional[MCPHandlers] = None


def get_handlers() -> MCPHandlers:
    """Handlers bound to the configured vault, created on first use"""
    global _handlers
    if _handlers is None:
        _handlers = MCPHandlers(Container(vault_dir=VAULT_DIR, glob=VAULT_GLOB))
    return _handlers


@mcp.tool()
async def validate_pattern(pattern: str, flags: str = "g") -> dict:
    """
    Check that a regex pattern and its flags compile.

    Args:
        pattern: Regular expression (Python re syntax)
        flags: Flag letters - g (always on), i, m, s, u

    Returns:
        Dictionary with "valid" and the compiler's message when invalid
    """
    return await get_handlers().validate_pattern(pattern=pattern, flags=flags)


@mcp.tool()
async def search_vault(
    pattern: str,
    replacement: str = "",
    flags: str = "g",
    adjust_case: bool = False,
    max_results: int = 50,
    offset: int = 0
) -> dict:
    """
    Search every note in the vault for a regex (line by line).

    Args:
        pattern: Regular expression. Empty pattern searches nothing.
        replacement: Template to preview ($1, $<name>, $&, $$)
        flags: Flag letters - g (always on), i ignore case, m multiline, s dotall, u
        adjust_case: Make replacements follow each match's casing (TEST/test/Test)
        max_results: Maximum matches to return (default: 50)
        offset: Number of matches to skip for pagination (default: 0)

    Returns:
        Dictionary with matches (path, line_number, start, end, before, after,
        context, replacement), match_count and affected files

    Examples:
        search_vault("colou?r")
        search_vault("(\\w+)@example\\.com", replacement="$1@example.org")
    """
    return await get_handlers().search_vault(
        pattern=pattern,
        replacement=replacement,
        flags=flags,
        adjust_case=adjust_case,
        max_results=max_results,
        offset=offset
    )


@mcp.tool()
async def replace_all(
    pattern: str,
    replacement: str,
    flags: str = "g",
    adjust_case: bool = False,
    dry_run: bool = False
) -> dict:
    """
    Replace every match in every note. Only changed notes are written.

    Args:
        pattern: Regular expression
        replacement: Template ($1, $<name>, $&, $$)
        flags: Flag letters - g (always on), i, m, s, u
        adjust_case: Make replacements follow each match's casing
        dry_run: List the notes that would change without writing

    Returns:
        Dictionary with changed_files, written and failed paths
    """
    return await get_handlers().replace_all(
        pattern=pattern,
        replacement=replacement,
        flags=flags,
        adjust_case=adjust_case,
        dry_run=dry_run
    )


@mcp.tool()
async def replace_one(
    path: str,
    line_number: int,
    start: int,
    match: str,
    replacement: str,
    adjust_case: bool = False
) -> dict:
    """
    Replace one match returned by search_vault.

    The note is re-read first. If the matched text is no longer at
    line_number/start the call reports a conflict and writes nothing.

    Args:
        path: Note path from search_vault
        line_number: 1-based line number from search_vault
        start: Start offset within the line from search_vault
        match: Matched text from search_vault
        replacement: Replacement text from search_vault
        adjust_case: Make the replacement follow the match's casing
    """
    return await get_handlers().replace_one(
        path=path,
        line_number=line_number,
        start=start,
        match=match,
        replacement=replacement,
        adjust_case=adjust_case
    )


def main():
    """Main entry point for the MCP server."""
    global VAULT_DIR, VAULT_GLOB, _handlers

    parser = argparse.ArgumentParser(
        description="find-replace: regex find and replace across a markdown vault."
    )
    parser.add_argument(
        "--transport",
        default="stdio",
        choices=["stdio", "streamable-http"],
        help="Transport method (default: stdio)"
    )
    parser.add_argument(
        "--host",
        default=HTTP_HOST,
        help=f"Host to bind to for HTTP transport (default: {HTTP_HOST})"
    )
    parser.add_argument(
        "--port",
        type=int,
        default=HTTP_PORT,
        help=f"Port to bind to for HTTP transport (default: {HTTP_PORT})"
    )
    parser.add_argument(
        "--vault-dir",
        default=None,
        help=f"Vault directory (default: {VAULT_DIR}, or set VAULT_DIR env var)"
    )
    parser.add_argument(
        "--glob",
        default=None,
        help=f"Document glob (default: {VAULT_GLOB}, or set VAULT_GLOB env var)"
    )
    args = parser.parse_args()

    # Override vault settings if specified
    if args.vault_dir:
        VAULT_DIR = Path(args.vault_dir)
    if args.glob:
        VAULT_GLOB = args.glob
    _handlers = None

    # Run the server
    if args.transport == "streamable-http":
        mcp.settings.host = args.host
        mcp.settings.port = args.port
        print(f"Starting find-replace on http://{args.host}:{args.port}")
        print(f"Vault directory: {VAULT_DIR}")
        mcp.run(transport="streamable-http")
    else:
        mcp.run(transport="stdio")


if __name__ == "__main__":
    main()

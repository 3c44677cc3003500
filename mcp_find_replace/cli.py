#!/usr/bin/env python3
"""
CLI for find-replace MCP - run tools without an MCP client

Usage:
  ./cli list-tools                           # Show MCP tool definitions
  ./cli validate "(todo"                     # Check a pattern compiles
  ./cli search "colou?r"                     # Search the vault (uses env VAULT_DIR or .)
  ./cli search "colour" --replace color -i   # Preview replacements, ignoring case
  ./cli replace "colour" color --dry-run     # List notes that would change
  ./cli replace "colour" color --adjust-case # Replace everywhere, keeping TEST/test/Test casing
  ./cli replace-one notes/a.md 3 7 colour color

Fast iteration: Uses hexagonal core directly (no MCP layer)
"""

import argparse
import asyncio
import json
import os
import sys

from .container import Container
from .adapters.mcp import TOOL_SCHEMAS, MCPHandlers
from .formatters import (
    format_validate_pattern,
    format_search_vault,
    format_replace_all,
    format_replace_one,
)


def get_default_vault_dir() -> str:
    """Get default vault directory from env or use fallback"""
    return os.environ.get("VAULT_DIR", ".")


def get_default_glob() -> str:
    """Get default document glob from env or use fallback"""
    return os.environ.get("VAULT_GLOB", "**/*.md")


def build_flags(flags: str, ignore_case: bool = False, multiline: bool = False) -> str:
    """Merge -i/-m switches into a flag string"""
    if ignore_case and "i" not in flags:
        flags += "i"
    if multiline and "m" not in flags:
        flags += "m"
    return flags


async def list_tools_command() -> int:
    """Show MCP tool definitions"""
    print("=" * 80)
    print("MCP TOOL DEFINITIONS")
    print("=" * 80)
    print()

    for tool_schema in TOOL_SCHEMAS.values():
        print(f"Tool: {tool_schema['name']}")
        print()
        print("Description:")
        print(tool_schema['description'])
        print()
        print("Input Schema:")
        print(json.dumps(tool_schema['inputSchema'], indent=2))
        print()
        print("-" * 80)
        print()

    return 0


async def validate_command(handlers: MCPHandlers, pattern: str, flags: str) -> int:
    """Validate a pattern"""
    result = await handlers.validate_pattern(pattern=pattern, flags=flags)
    print(format_validate_pattern(result))

    if not result["success"] or not result["valid"]:
        return 1
    return 0


async def search_command(
    handlers: MCPHandlers,
    pattern: str,
    replacement: str,
    flags: str,
    adjust_case: bool,
    max_results: int,
    offset: int,
) -> int:
    """Search the vault"""
    result = await handlers.search_vault(
        pattern=pattern,
        replacement=replacement,
        flags=flags,
        adjust_case=adjust_case,
        max_results=max_results,
        offset=offset
    )
    print(format_search_vault(result))

    if not result["success"]:
        return 1
    return 0


async def replace_command(
    handlers: MCPHandlers,
    pattern: str,
    replacement: str,
    flags: str,
    adjust_case: bool,
    dry_run: bool,
) -> int:
    """Replace every match in the vault"""
    # An invalid pattern would otherwise look like "no changes"
    check = await handlers.validate_pattern(pattern=pattern, flags=flags)
    if check["success"] and not check["valid"]:
        print(format_validate_pattern(check))
        return 1

    result = await handlers.replace_all(
        pattern=pattern,
        replacement=replacement,
        flags=flags,
        adjust_case=adjust_case,
        dry_run=dry_run
    )
    print(format_replace_all(result))

    if not result["success"]:
        return 1
    return 0


async def replace_one_command(
    handlers: MCPHandlers,
    path: str,
    line_number: int,
    start: int,
    match: str,
    replacement: str,
    adjust_case: bool,
) -> int:
    """Replace one match"""
    result = await handlers.replace_one(
        path=path,
        line_number=line_number,
        start=start,
        match=match,
        replacement=replacement,
        adjust_case=adjust_case
    )
    print(format_replace_one(result))

    if not result["success"] or not result["applied"]:
        return 1
    return 0


def _add_pattern_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--flags", default="g", help="Flag letters, e.g. gi (default: g)")
    parser.add_argument("-i", "--ignore-case", action="store_true", help="Add the i flag")
    parser.add_argument("-m", "--multiline", action="store_true", help="Add the m flag")
    parser.add_argument("--adjust-case", action="store_true",
                        help="Match replacement casing to each original (TEST/test/Test)")


def main():
    parser = argparse.ArgumentParser(
        description="find-replace CLI - Run MCP tools without a server"
    )
    parser.add_argument(
        "--vault-dir",
        default=get_default_vault_dir(),
        help="Vault directory (default: $VAULT_DIR or .)"
    )
    parser.add_argument(
        "--glob",
        default=get_default_glob(),
        help="Document glob inside the vault (default: $VAULT_GLOB or **/*.md)"
    )

    subparsers = parser.add_subparsers(dest="command", help="Command to run")

    # list-tools command
    subparsers.add_parser("list-tools", help="Show MCP tool definitions")

    # validate command
    validate_parser = subparsers.add_parser("validate", help="Check a pattern compiles")
    validate_parser.add_argument("pattern", help="Regular expression")
    validate_parser.add_argument("--flags", default="g", help="Flag letters (default: g)")

    # search command
    search_parser = subparsers.add_parser("search", help="Search the vault")
    search_parser.add_argument("pattern", help="Regular expression")
    search_parser.add_argument("--replace", default="", help="Replacement template to preview")
    _add_pattern_options(search_parser)
    search_parser.add_argument("--max", type=int, default=50, help="Max results (default: 50)")
    search_parser.add_argument("--offset", type=int, default=0, help="Results to skip (default: 0)")

    # replace command
    replace_parser = subparsers.add_parser("replace", help="Replace every match")
    replace_parser.add_argument("pattern", help="Regular expression")
    replace_parser.add_argument("replacement", help="Replacement template ($1, $<name>, $&, $$)")
    _add_pattern_options(replace_parser)
    replace_parser.add_argument("--dry-run", action="store_true", help="Only list files that would change")

    # replace-one command
    one_parser = subparsers.add_parser("replace-one", help="Replace a single match from search")
    one_parser.add_argument("path", help="Vault-relative note path")
    one_parser.add_argument("line_number", type=int, help="1-based line number")
    one_parser.add_argument("start", type=int, help="Start offset within the line")
    one_parser.add_argument("match", help="Matched text")
    one_parser.add_argument("replacement", help="Replacement text")
    one_parser.add_argument("--adjust-case", action="store_true",
                            help="Match replacement casing to the original")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return 1

    if args.command == "list-tools":
        return asyncio.run(list_tools_command())

    try:
        container = Container(vault_dir=args.vault_dir, glob=args.glob)
        handlers = MCPHandlers(container)

        # Run command
        if args.command == "validate":
            return asyncio.run(validate_command(handlers, args.pattern, args.flags))
        elif args.command == "search":
            return asyncio.run(search_command(
                handlers,
                pattern=args.pattern,
                replacement=args.replace,
                flags=build_flags(args.flags, args.ignore_case, args.multiline),
                adjust_case=args.adjust_case,
                max_results=args.max,
                offset=args.offset
            ))
        elif args.command == "replace":
            return asyncio.run(replace_command(
                handlers,
                pattern=args.pattern,
                replacement=args.replacement,
                flags=build_flags(args.flags, args.ignore_case, args.multiline),
                adjust_case=args.adjust_case,
                dry_run=args.dry_run
            ))
        elif args.command == "replace-one":
            return asyncio.run(replace_one_command(
                handlers,
                path=args.path,
                line_number=args.line_number,
                start=args.start,
                match=args.match,
                replacement=args.replacement,
                adjust_case=args.adjust_case
            ))
        else:
            parser.print_help()
            return 1
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        return 1


if __name__ == "__main__":
    sys.exit(main())

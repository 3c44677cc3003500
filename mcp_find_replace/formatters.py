"""
Text formatters for MCP tool results

Format handler results as compact terminal-style text.
Used by both CLI and MCP adapters for consistent presentation.
"""

from typing import Any

MAX_MATCHES_PER_FILE = 10


def _plural(count: int, word: str, suffix: str = "s") -> str:
    return f"{count} {word}{'' if count == 1 else suffix}"


def format_validate_pattern(result: dict[str, Any]) -> str:
    """Format validate_pattern result.

    Example output:
        PATTERN "(todo" | flags "g" | INVALID

        missing ), unterminated subpattern at position 0
    """
    if not result.get("success"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    header = f'PATTERN "{result["pattern"]}" | flags "{result["flags"]}"'
    if result["valid"]:
        return f"{header} | VALID"
    return f"{header} | INVALID\n\n{result.get('message') or 'Pattern does not compile'}"


def format_search_vault(result: dict[str, Any]) -> str:
    """Format search_vault result.

    Example output:
        SEARCH "colour" → "color" | 3 matches in 2 files

        notes/paint.md (2 matches)
        ──────────────────────────────────────────────────────────────────────
            4:7   the [colour|color] wheel
           12:0   [Colour|Color] theory

        notes/todo.md (1 match)
        ──────────────────────────────────────────────────────────────────────
            1:9   pick a [colour|color]

        Try: replace_all(...) | replace_one(path, line_number, start, match, replacement)
    """
    if not result.get("success"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    pattern = result["pattern"]
    replacement = result.get("replacement") or ""
    match_count = result["match_count"]
    file_count = result["file_count"]

    target = f' → "{replacement}"' if replacement else ""
    header = f'SEARCH "{pattern}"{target}'

    if match_count == 0:
        return f"""{header} | NO MATCHES

Try: validate_pattern("{pattern}") | Different pattern or flags
"""

    lines = []
    lines.append(f"{header} | {_plural(match_count, 'match', 'es')} in {_plural(file_count, 'file')}")

    returned = len(result["matches"])
    offset = result.get("offset", 0)
    if match_count > returned:
        lines.append(f"(showing {offset + 1}-{offset + returned})")

    # Group the page of matches by file, preserving order
    groups: dict[str, list[dict[str, Any]]] = {}
    for match in result["matches"]:
        groups.setdefault(match["path"], []).append(match)

    for path, file_matches in groups.items():
        lines.append("")
        lines.append(f"{path} ({_plural(len(file_matches), 'match', 'es')})")
        lines.append("─" * 70)

        for match in file_matches[:MAX_MATCHES_PER_FILE]:
            shown = match["match"]
            if replacement and match["replacement"] != match["match"]:
                shown = f"{match['match']}|{match['replacement']}"
            position = f"{match['line_number']}:{match['start']}"
            lines.append(f"  {position:>8}   {match['before']}[{shown}]{match['after']}")

        if len(file_matches) > MAX_MATCHES_PER_FILE:
            lines.append(f"  +{len(file_matches) - MAX_MATCHES_PER_FILE} more")

    lines.append("")
    if match_count > offset + returned:
        lines.append(f"More: search_vault(..., offset={offset + returned})")
    else:
        lines.append("Try: replace_all(...) | replace_one(path, line_number, start, match, replacement)")

    return "\n".join(lines)


def format_replace_all(result: dict[str, Any]) -> str:
    """Format replace_all result.

    Example output:
        REPLACE "colour" → "color" | 2 files updated

          notes/paint.md
          notes/todo.md
    """
    if not result.get("success") and not result.get("failed"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    pattern = result["pattern"]
    replacement = result["replacement"]
    changed = result["changed_files"]
    header = f'REPLACE "{pattern}" → "{replacement}"'

    if not changed:
        return f"{header} | NO CHANGES"

    lines = []
    if result.get("dry_run"):
        lines.append(f"{header} | DRY RUN: {_plural(len(changed), 'file')} would change")
        lines.append("")
        lines.extend(f"  {path}" for path in changed)
        return "\n".join(lines)

    written = result["written"]
    failed = result["failed"]
    lines.append(f"{header} | {_plural(len(written), 'file')} updated")
    lines.append("")
    lines.extend(f"  {path}" for path in written)

    if failed:
        lines.append("")
        lines.append(f"FAILED ({len(failed)})")
        lines.extend(f"  {path}" for path in failed)

    return "\n".join(lines)


def format_replace_one(result: dict[str, Any]) -> str:
    """Format replace_one result.

    Example output:
        REPLACED notes/paint.md:4

        CONFLICT notes/paint.md:4
        text at the recorded position has changed (expected "colour", found "color ")
        Try: search_vault(...) again
    """
    if not result.get("success"):
        return f"ERROR: {result.get('error', 'Unknown error')}"

    location = f"{result['path']}:{result['line_number']}"
    if result["applied"]:
        return f"REPLACED {location}"

    conflict = result.get("conflict") or {}
    return (
        f"CONFLICT {location}\n"
        f"{conflict.get('reason', 'document changed')} "
        f"(expected \"{conflict.get('expected', '')}\", found \"{conflict.get('found', '')}\")\n"
        f"Try: search_vault(...) again"
    )

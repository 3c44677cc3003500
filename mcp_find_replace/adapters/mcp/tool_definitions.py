"""
MCP Tool Definitions

Single source of truth for tool schemas and descriptions.
Used by both stdio and HTTP/SSE servers.
"""

_PATTERN_PROPERTIES = {
    "pattern": {
        "type": "string",
        "description": "Regular expression (Python re syntax)"
    },
    "replacement": {
        "type": "string",
        "description": "Replacement template. $1..$99 groups, $<name> named groups, $& whole match, $$ literal $",
        "default": ""
    },
    "flags": {
        "type": "string",
        "description": "Flag letters: g (always on), i ignore case, m multiline anchors, s dot matches newline, u unicode",
        "default": "g"
    },
    "adjust_case": {
        "type": "boolean",
        "description": "Make each replacement follow the casing of the text it replaces (TEST/test/Test)",
        "default": False
    },
}

# Tool schemas for MCP
TOOL_SCHEMAS = {
    "validate_pattern": {
        "name": "validate_pattern",
        "description": """Check that a regex pattern and flags compile. Use before search/replace to tell "invalid" from "no matches".

validate_pattern("(todo") → invalid: missing ), unterminated subpattern
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "pattern": _PATTERN_PROPERTIES["pattern"],
                "flags": _PATTERN_PROPERTIES["flags"],
            },
            "required": ["pattern"]
        }
    },
    "search_vault": {
        "name": "search_vault",
        "description": """Search every note in the vault for a regex. Returns each match with line number, offsets, context and the replacement preview.

search_vault("TODO (\\w+)", replacement="DONE $1") → matches grouped by file
search_vault("colour", flags="gi", replacement="color", adjust_case=true)
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                **_PATTERN_PROPERTIES,
                "max_results": {
                    "type": "integer",
                    "description": "Maximum matches to return",
                    "default": 50
                },
                "offset": {
                    "type": "integer",
                    "description": "Matches to skip for pagination",
                    "default": 0
                }
            },
            "required": ["pattern"]
        }
    },
    "replace_all": {
        "name": "replace_all",
        "description": """Replace every match in every note. Only notes whose content changes are written. Use dry_run to list them first.

replace_all("colour", "color", flags="gi", adjust_case=true, dry_run=true)
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                **_PATTERN_PROPERTIES,
                "dry_run": {
                    "type": "boolean",
                    "description": "Compute changes without writing them",
                    "default": False
                }
            },
            "required": ["pattern", "replacement"]
        }
    },
    "replace_one": {
        "name": "replace_one",
        "description": """Replace one match from search_vault. Fails with a conflict if the note changed since the search; search again.

replace_one("notes/a.md", line_number=3, start=7, match="colour", replacement="color")
""",
        "inputSchema": {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "Vault-relative note path from search_vault"
                },
                "line_number": {
                    "type": "integer",
                    "description": "1-based line number from search_vault"
                },
                "start": {
                    "type": "integer",
                    "description": "Start offset within the line from search_vault"
                },
                "match": {
                    "type": "string",
                    "description": "Matched text from search_vault"
                },
                "replacement": {
                    "type": "string",
                    "description": "Text to put in place of the match (already expanded)"
                },
                "adjust_case": _PATTERN_PROPERTIES["adjust_case"],
            },
            "required": ["path", "line_number", "start", "match", "replacement"]
        }
    },
}

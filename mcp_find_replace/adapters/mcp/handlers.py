"""
MCP Tool Handlers

Shared handlers for MCP tools that use the hexagonal core.
"""
import asyncio
import logging
from typing import Any, Optional

from ...container import Container
from ...core.batching import ProgressCallback
from ...core.domain import MatchRecord

logger = logging.getLogger(__name__)


def log_progress(current: int, total: int, message: str) -> None:
    logger.info(f"[{current}/{total}] {message}")


def _match_to_dict(match: MatchRecord) -> dict[str, Any]:
    return {
        "path": match.path,
        "line_number": match.line_number,
        "match": match.match,
        "replacement": match.replacement,
        "before": match.before,
        "after": match.after,
        "start": match.start,
        "end": match.end,
        "context": match.context,
    }


class MCPHandlers:
    """Handlers for MCP tools using dependency injection"""

    def __init__(self, container: Container, progress: Optional[ProgressCallback] = None):
        self.container = container
        self.progress = progress if progress is not None else log_progress

    async def validate_pattern(self, pattern: str, flags: str = "g") -> dict[str, Any]:
        """Check pattern and flags compile"""
        try:
            valid, message = await asyncio.to_thread(
                self.container.validate_pattern.execute,
                pattern=pattern,
                flags=flags
            )

            return {
                "success": True,
                "pattern": pattern,
                "flags": flags,
                "valid": valid,
                "message": message
            }

        except Exception as e:
            return {
                "success": False,
                "error": f"Failed to validate pattern: {str(e)}"
            }

    async def search_vault(
        self,
        pattern: str,
        replacement: str = "",
        flags: str = "g",
        adjust_case: bool = False,
        max_results: int = 50,
        offset: int = 0
    ) -> dict[str, Any]:
        """Search for pattern across the vault"""
        if max_results < 0 or offset < 0:
            return {
                "success": False,
                "error": "max_results and offset must not be negative"
            }

        try:
            result = await self.container.scan_vault.execute(
                pattern=pattern,
                replacement=replacement,
                flags=flags,
                adjust_case=adjust_case,
                progress=self.progress
            )

            page = result.matches[offset:offset + max_results]

            return {
                "success": True,
                "pattern": pattern,
                "replacement": replacement,
                "flags": flags,
                "matches": [_match_to_dict(m) for m in page],
                "match_count": result.total_matches,
                "file_count": len(result.affected_paths),
                "files": result.affected_paths,
                "offset": offset,
                "max_results": max_results,
                "vault_dir": str(self.container.vault_dir)
            }

        except Exception as e:
            return {
                "success": False,
                "error": f"Failed to search vault: {str(e)}"
            }

    async def replace_all(
        self,
        pattern: str,
        replacement: str,
        flags: str = "g",
        adjust_case: bool = False,
        dry_run: bool = False
    ) -> dict[str, Any]:
        """Replace every match across the vault"""
        try:
            result = await self.container.replace_all.execute(
                pattern=pattern,
                replacement=replacement,
                flags=flags,
                adjust_case=adjust_case,
                dry_run=dry_run,
                progress=self.progress
            )

            return {
                "success": not result.failed,
                "pattern": pattern,
                "replacement": replacement,
                "dry_run": result.dry_run,
                "changed_files": [r.path for r in result.replacements],
                "written": result.written,
                "failed": result.failed,
                "error": f"Failed to write {len(result.failed)} file(s)" if result.failed else None
            }

        except Exception as e:
            return {
                "success": False,
                "error": f"Failed to replace: {str(e)}"
            }

    async def replace_one(
        self,
        path: str,
        line_number: int,
        start: int,
        match: str,
        replacement: str,
        adjust_case: bool = False
    ) -> dict[str, Any]:
        """Replace a single match previously returned by search_vault"""
        try:
            record = MatchRecord(
                path=path,
                line_number=line_number,
                match=match,
                replacement=replacement,
                context="",
                before="",
                after="",
                start=start,
                end=start + len(match)
            )

            result = await asyncio.to_thread(
                self.container.replace_one.execute,
                match=record,
                adjust_case=adjust_case
            )

            response: dict[str, Any] = {
                "success": True,
                "path": result.path,
                "line_number": line_number,
                "applied": result.applied,
                "conflict": None
            }
            if result.conflict:
                response["conflict"] = {
                    "expected": result.conflict.expected,
                    "found": result.conflict.found,
                    "reason": result.conflict.reason
                }
            return response

        except Exception as e:
            return {
                "success": False,
                "error": f"Failed to replace match in {path}: {str(e)}"
            }

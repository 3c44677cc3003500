"""
Application Services - Use cases that orchestrate domain logic

These are the entry points to the core. They coordinate between
the document store port and the pure scanner / replacement engine,
but contain no infrastructure concerns.
"""
import asyncio
import logging
from typing import Optional

from .batching import (
    BATCH_SIZE,
    ProgressCallback,
    apply_all_batched,
    load_documents,
    scan_batched,
)
from .domain import (
    Conflict,
    Document,
    MatchRecord,
    PatternSpec,
    ReplaceAllResult,
    ReplaceOneResult,
    ScanResult,
)
from .patterns import PatternCompileError, compile_pattern
from .ports import DocumentStore
from .replacer import apply_single

logger = logging.getLogger(__name__)


class ValidatePatternService:
    """Use case: Check a pattern before running it"""

    def execute(self, pattern: str, flags: str = "g") -> tuple[bool, Optional[str]]:
        """
        Compile pattern with flags.

        Returns:
            (ok, error_message) - error_message is None when ok
        """
        try:
            compile_pattern(pattern, flags)
        except PatternCompileError as e:
            return False, e.message
        return True, None


class ScanVaultService:
    """Use case: Preview every match in the vault"""

    def __init__(self, store: DocumentStore, batch_size: int = BATCH_SIZE):
        self.store = store
        self.batch_size = batch_size

    async def execute(
        self,
        pattern: str,
        replacement: str = "",
        flags: str = "g",
        adjust_case: bool = False,
        progress: Optional[ProgressCallback] = None
    ) -> ScanResult:
        """Scan the store's current documents, a chunk at a time"""
        spec = PatternSpec(pattern, flags, replacement, adjust_case)
        documents = await load_documents(self.store, progress, self.batch_size)
        result = await scan_batched(documents, spec, progress, self.batch_size)

        logger.info(
            f"scan {pattern!r}: {result.total_matches} matches in "
            f"{len(result.affected_paths)} of {len(documents)} documents"
        )
        return result


class ReplaceAllService:
    """Use case: Replace every match in the vault"""

    def __init__(self, store: DocumentStore, batch_size: int = BATCH_SIZE):
        self.store = store
        self.batch_size = batch_size

    async def execute(
        self,
        pattern: str,
        replacement: str = "",
        flags: str = "g",
        adjust_case: bool = False,
        dry_run: bool = False,
        progress: Optional[ProgressCallback] = None
    ) -> ReplaceAllResult:
        """
        Compute new content for every changed document and write it.

        Writes are independent: a failed document is reported in `failed`
        and the others still go through.
        """
        spec = PatternSpec(pattern, flags, replacement, adjust_case)
        documents = await load_documents(self.store, progress, self.batch_size)
        replacements = await apply_all_batched(documents, spec, progress, self.batch_size)

        if dry_run or not replacements:
            return ReplaceAllResult(
                replacements=replacements,
                written=[],
                failed=[],
                dry_run=dry_run
            )

        written = []
        failed = []
        for path, ok in await asyncio.to_thread(self.store.write_batch, replacements):
            (written if ok else failed).append(path)

        logger.info(f"replace {pattern!r}: wrote {len(written)} documents, {len(failed)} failed")
        return ReplaceAllResult(
            replacements=replacements,
            written=written,
            failed=failed,
            dry_run=False
        )


class ReplaceOneService:
    """Use case: Replace a single previously scanned match"""

    def __init__(self, store: DocumentStore):
        self.store = store

    def execute(self, match: MatchRecord, adjust_case: bool = False) -> ReplaceOneResult:
        """
        Re-read the document and replace the match if it is still there.

        A Conflict means the document changed since it was scanned; nothing
        is written and the caller should scan again.
        """
        current = Document(path=match.path, content=self.store.read(match.path))
        outcome = apply_single(current, match, adjust_case)

        if isinstance(outcome, Conflict):
            logger.info(f"replace_one {match.path}:{match.line_number} conflict: {outcome.reason}")
            return ReplaceOneResult(path=match.path, applied=False, conflict=outcome)

        if not self.store.write(match.path, outcome):
            raise RuntimeError(f"Failed to write {match.path}")

        return ReplaceOneResult(path=match.path, applied=True)

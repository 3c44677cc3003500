"""
Match Scanner

Scans documents line by line and reports every occurrence of a pattern with
its surrounding context and the text that would replace it.
"""
import logging
import re
from typing import Iterable

from .casing import adjust_case as harmonize_case
from .domain import Document, MatchRecord, ScanResult
from .patterns import PatternCompileError, compile_pattern, expand_template, iter_matches

logger = logging.getLogger(__name__)

CONTEXT_LINES = 2
SNIPPET_LENGTH = 200
TRUNCATION_MARKER = "..."


def get_context(lines: list[str], index: int, context_lines: int = CONTEXT_LINES) -> list[str]:
    """Lines around lines[index], each clipped to SNIPPET_LENGTH characters"""
    start = max(0, index - context_lines)
    end = min(len(lines) - 1, index + context_lines)

    context = []
    for line in lines[start:end + 1]:
        if len(line) > SNIPPET_LENGTH:
            line = line[:SNIPPET_LENGTH] + TRUNCATION_MARKER
        context.append(line)
    return context


def compute_replacement(match: re.Match, template: str, adjust_case: bool = False) -> str:
    """Expand the template for one match, optionally following its casing"""
    replacement = expand_template(match, template)
    if adjust_case:
        replacement = harmonize_case(match.group(0), replacement)
    return replacement


def scan_document(
    regex: re.Pattern,
    document: Document,
    replacement: str = "",
    adjust_case: bool = False
) -> list[MatchRecord]:
    """Every occurrence in one document, in line then offset order"""
    records = []
    lines = document.content.split("\n")

    for index, line in enumerate(lines):
        # Context is only built for lines that match
        context = None
        for match in iter_matches(regex, line):
            if context is None:
                context = "\n".join(get_context(lines, index))

            records.append(MatchRecord(
                path=document.path,
                line_number=index + 1,
                match=match.group(0),
                replacement=compute_replacement(match, replacement, adjust_case),
                context=context,
                before=line[:match.start()],
                after=line[match.end():],
                start=match.start(),
                end=match.end()
            ))

    return records


def scan(
    documents: Iterable[Document],
    pattern: str,
    replacement: str = "",
    flags: str = "g",
    adjust_case: bool = False
) -> ScanResult:
    """
    Scan documents for pattern.

    An empty pattern means no search is active and an invalid one is
    reported as an empty result; call validate() first to tell the two
    apart from "no matches".
    """
    if not pattern:
        return ScanResult.empty()

    try:
        regex = compile_pattern(pattern, flags)
    except PatternCompileError as e:
        logger.debug(f"scan: {e}")
        return ScanResult.empty()

    matches: list[MatchRecord] = []
    affected: list[str] = []
    seen = set()

    for document in documents:
        records = scan_document(regex, document, replacement, adjust_case)
        if not records:
            continue
        matches.extend(records)
        if document.path not in seen:
            seen.add(document.path)
            affected.append(document.path)

    return ScanResult(
        matches=matches,
        affected_paths=affected,
        total_matches=len(matches)
    )

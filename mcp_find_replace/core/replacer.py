"""
Replacement Engine

Computes new document content, either for every occurrence in every
document or for one previously scanned occurrence.
"""
import logging
import re
from typing import Iterable, Union

from .casing import adjust_case as harmonize_case
from .domain import Conflict, Document, MatchRecord, Replacement
from .patterns import PatternCompileError, compile_pattern, iter_matches
from .scanner import compute_replacement

logger = logging.getLogger(__name__)


def replace_content(
    regex: re.Pattern,
    content: str,
    replacement: str,
    adjust_case: bool = False
) -> str:
    """Substitute every occurrence of regex in content"""
    parts = []
    last = 0
    for match in iter_matches(regex, content):
        parts.append(content[last:match.start()])
        parts.append(compute_replacement(match, replacement, adjust_case))
        last = match.end()

    if not parts:
        return content

    parts.append(content[last:])
    return "".join(parts)


def apply_all(
    documents: Iterable[Document],
    pattern: str,
    replacement: str = "",
    flags: str = "g",
    adjust_case: bool = False
) -> list[Replacement]:
    """
    New content for each document that changes under substitution.

    Documents left identical are not in the batch. Empty or invalid
    patterns give an empty batch.
    """
    if not pattern:
        return []

    try:
        regex = compile_pattern(pattern, flags)
    except PatternCompileError as e:
        logger.debug(f"apply_all: {e}")
        return []

    batch = []
    for document in documents:
        new_content = replace_content(regex, document.content, replacement, adjust_case)
        if new_content != document.content:
            batch.append(Replacement(path=document.path, new_content=new_content))
    return batch


def apply_single(
    document: Document,
    match: MatchRecord,
    adjust_case: bool = False
) -> Union[str, Conflict]:
    """
    Replace one scanned occurrence in the document's current content.

    The offsets in match are only trusted if the line still holds the
    matched text at that exact position; otherwise a Conflict comes back
    and nothing is changed.
    """
    lines = document.content.split("\n")
    index = match.line_number - 1

    if index < 0 or index >= len(lines):
        return Conflict(
            path=document.path,
            line_number=match.line_number,
            expected=match.match,
            found="",
            reason=f"line {match.line_number} no longer exists ({len(lines)} lines)"
        )

    line = lines[index]
    found = line[match.start:match.end]
    if match.start < 0 or match.end > len(line) or found != match.match:
        return Conflict(
            path=document.path,
            line_number=match.line_number,
            expected=match.match,
            found=found,
            reason="text at the recorded position has changed"
        )

    replacement = match.replacement
    if adjust_case:
        replacement = harmonize_case(match.match, replacement)

    lines[index] = line[:match.start] + replacement + line[match.end:]
    return "\n".join(lines)

"""
Domain Models - Pure business entities

No external dependencies. These represent the core find/replace concepts.
All of them are created fresh per scan or replace call.
"""
from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Document:
    """A text document in the vault"""
    path: str
    content: str


@dataclass(frozen=True)
class PatternSpec:
    """What to search for and what to put in its place"""
    pattern: str
    flags: str = "g"
    replacement: str = ""
    adjust_case: bool = False


@dataclass(frozen=True)
class MatchRecord:
    """A single occurrence of the pattern on one line of a document"""
    path: str
    line_number: int  # 1-based
    match: str
    replacement: str
    context: str  # up to 2 lines either side, joined with "\n"
    before: str
    after: str
    start: int  # offset within the line
    end: int


@dataclass(frozen=True)
class ScanResult:
    """Results from scanning a set of documents"""
    matches: list[MatchRecord] = field(default_factory=list)
    affected_paths: list[str] = field(default_factory=list)
    total_matches: int = 0

    @classmethod
    def empty(cls) -> "ScanResult":
        return cls()

    def by_path(self) -> dict[str, list[MatchRecord]]:
        """Group matches per document, keeping document order"""
        groups: dict[str, list[MatchRecord]] = {}
        for match in self.matches:
            groups.setdefault(match.path, []).append(match)
        return groups


@dataclass(frozen=True)
class Replacement:
    """New content computed for a document that changed"""
    path: str
    new_content: str


@dataclass(frozen=True)
class Conflict:
    """The text a match pointed at is no longer where the scan saw it"""
    path: str
    line_number: int
    expected: str
    found: str
    reason: str


@dataclass(frozen=True)
class ReplaceAllResult:
    """Outcome of replacing every occurrence across the vault"""
    replacements: list[Replacement]
    written: list[str]
    failed: list[str]
    dry_run: bool = False


@dataclass(frozen=True)
class ReplaceOneResult:
    """Outcome of replacing one scanned occurrence"""
    path: str
    applied: bool
    conflict: Optional[Conflict] = None

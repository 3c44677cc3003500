"""
Pattern compilation, validation and the explicit match loop

Flags use the single-letter style of the note-taking hosts the patterns come
from ("g", "gi", "gm", ...). Replacement templates use the same hosts'
"$1" / "$&" tokens rather than Python's "\\1".
"""
import logging
import re
from typing import Iterator, Optional

logger = logging.getLogger(__name__)

# "g" and "u" are always on in Python: every scan is global and str patterns
# are unicode-aware by default.
FLAG_MAP = {
    "g": 0,
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "u": 0,
}

_TEMPLATE_TOKEN = re.compile(r"\$(?:(\$)|(&)|(`)|(')|(\d{1,2})|<([^>]*)>)")


class PatternCompileError(ValueError):
    """Raised when a pattern or its flags cannot be compiled"""

    def __init__(self, pattern: str, message: str):
        super().__init__(f"Invalid pattern {pattern!r}: {message}")
        self.pattern = pattern
        self.message = message


def parse_flags(flags: str) -> int:
    """Translate a flag string like "gi" into re module flags"""
    value = 0
    for letter in flags or "":
        if letter not in FLAG_MAP:
            raise PatternCompileError("", f"unknown flag {letter!r}")
        value |= FLAG_MAP[letter]
    return value


def compile_pattern(pattern: str, flags: str = "g") -> re.Pattern:
    """
    Compile pattern with the caller's flags.

    Global matching is implied; every other flag passes through.

    Raises:
        PatternCompileError: unbalanced groups, bad escapes, unknown flags...
    """
    try:
        re_flags = parse_flags(flags)
    except PatternCompileError as e:
        raise PatternCompileError(pattern, e.message) from None

    try:
        return re.compile(pattern, re_flags)
    except re.error as e:
        raise PatternCompileError(pattern, str(e)) from e


def validate(pattern: str) -> bool:
    """Check that pattern compiles with default flags. Never raises."""
    try:
        compile_pattern(pattern, "")
    except PatternCompileError as e:
        logger.debug(f"validate: {e}")
        return False
    return True


def next_match(regex: re.Pattern, text: str, pos: int) -> tuple[Optional[re.Match], int]:
    """
    Find the next occurrence at or after pos.

    Returns (match, next_pos). A zero-width match moves next_pos one past its
    start so the loop always makes progress and never reports the same
    position twice.
    """
    if pos > len(text):
        return None, pos

    match = regex.search(text, pos)
    if match is None:
        return None, len(text) + 1

    if match.end() == match.start():
        return match, match.start() + 1
    return match, match.end()


def iter_matches(regex: re.Pattern, text: str) -> Iterator[re.Match]:
    """Yield every occurrence in text, left to right"""
    pos = 0
    while True:
        match, pos = next_match(regex, text, pos)
        if match is None:
            return
        yield match


def expand_template(match: re.Match, template: str) -> str:
    """
    Expand "$" tokens in template against match.

    $$ literal dollar, $& whole match, $` text before, $' text after,
    $1..$99 numbered groups, $<name> named groups. Unknown group references
    stay as written; groups that did not participate expand to "".
    """
    if "$" not in template:
        return template

    group_count = match.re.groups
    named = match.re.groupindex

    def _group(index) -> str:
        return match.group(index) or ""

    def _token(token: re.Match) -> str:
        dollar, whole, prefix, suffix, digits, name = token.groups()
        if dollar:
            return "$"
        if whole:
            return match.group(0)
        if prefix:
            return match.string[:match.start()]
        if suffix:
            return match.string[match.end():]
        if digits:
            if len(digits) == 2 and 1 <= int(digits) <= group_count:
                return _group(int(digits))
            if 1 <= int(digits[0]) <= group_count:
                return _group(int(digits[0])) + digits[1:]
            return token.group(0)
        if name in named:
            return _group(name)
        return token.group(0)

    return _TEMPLATE_TOKEN.sub(_token, template)

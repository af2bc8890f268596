"""
codeguard - Per-line pattern matching.

Applies match rules to a single line, after skip rules, and turns a match
into a Hit through an optional extractor. Matching runs on the
string-stripped line, so tokens inside string literals never match.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Mapping, Optional, Union

from .config import ConfigurationError
from .scanner import COMMENT_LINE_PATTERNS, strip_strings, to_lines

PatternLike = Union[str, "re.Pattern[str]"]
PatternSpec = Union[PatternLike, Iterable[PatternLike]]

# (line, line_number, match, path) -> extracted data, or None to drop the match
Extractor = Callable[[str, int, "re.Match[str]", str], Optional[Mapping[str, Any]]]


@dataclass(frozen=True)
class Hit:
    """A matched source line."""
    file: str
    line_number: int
    line_text: str
    extracted: Optional[Mapping[str, Any]] = None

    @property
    def location(self) -> str:
        return f"{self.file}:{self.line_number}"


@dataclass(frozen=True)
class PatternMatch:
    match: "re.Match[str]"
    pattern: "re.Pattern[str]"


def _compile_all(patterns: PatternSpec) -> tuple["re.Pattern[str]", ...]:
    if isinstance(patterns, (str, re.Pattern)):
        patterns = [patterns]
    return tuple(p if isinstance(p, re.Pattern) else re.compile(p) for p in patterns)


def compile_patterns(patterns: PatternSpec) -> tuple["re.Pattern[str]", ...]:
    """Compile one pattern or a sequence of patterns. At least one is required."""
    compiled = _compile_all(patterns)
    if not compiled:
        raise ConfigurationError("No pattern supplied")
    return compiled


def matches_any(patterns: PatternSpec) -> Callable[[str], Optional[PatternMatch]]:
    """Curried matcher: returns the first pattern that matches, or None."""
    compiled = compile_patterns(patterns)

    def first_match(text: str) -> Optional[PatternMatch]:
        for pattern in compiled:
            match = pattern.search(text)
            if match:
                return PatternMatch(match=match, pattern=pattern)
        return None

    return first_match


def match_line(
    line: str,
    line_number: int,
    path: str,
    patterns: PatternSpec,
    skip_patterns: PatternSpec = COMMENT_LINE_PATTERNS,
    extract: Optional[Extractor] = None,
) -> Optional[Hit]:
    """
    Match one line, producing at most one Hit.

    Skip patterns are tested first, against the trimmed raw line, and
    suppress matching entirely. Match patterns see only the string-stripped
    line. The extractor gets the raw line; returning None drops the hit.
    """
    trimmed = line.strip()
    if any(p.search(trimmed) for p in _compile_all(skip_patterns)):
        return None

    cleaned = strip_strings(line)
    for pattern in compile_patterns(patterns):
        match = pattern.search(cleaned)
        if match:
            break
    else:
        return None

    extracted: Optional[Mapping[str, Any]] = {}
    if extract is not None:
        extracted = extract(line, line_number, match, path)
        if extracted is None:
            return None
    return Hit(file=path, line_number=line_number, line_text=trimmed, extracted=extracted)


class LineMatcher:
    """A compiled rule: match patterns, skip patterns and an extractor."""

    def __init__(
        self,
        patterns: PatternSpec,
        skip_patterns: PatternSpec = COMMENT_LINE_PATTERNS,
        extract: Optional[Extractor] = None,
    ) -> None:
        self.patterns = compile_patterns(patterns)
        self.skip_patterns = _compile_all(skip_patterns)
        self.extract = extract

    def match(self, line: str, line_number: int, path: str = "") -> Optional[Hit]:
        return match_line(line, line_number, path, self.patterns, self.skip_patterns, self.extract)

    def find(self, source: str, path: str = "") -> list[Hit]:
        """Return the hits of one file, in line order."""
        hits: list[Hit] = []
        for line_number, line in enumerate(to_lines(source), start=1):
            hit = self.match(line, line_number, path)
            if hit is not None:
                hits.append(hit)
        return hits


def create_pattern_matcher(
    patterns: PatternSpec,
    to_result: Callable[[str, int, "re.Match[str]", str], Any],
) -> Callable[[str, int, str, str], Any]:
    """
    Build a per-line callable for scan_files_for_violations().

    to_result receives (trimmed_line, line_number, match, path).
    """
    first_match = matches_any(patterns)

    def line_matcher(line: str, line_number: int, _source: str, path: str) -> Any:
        result = first_match(strip_strings(line))
        if result is None:
            return None
        return to_result(line.strip(), line_number, result.match, path)

    return line_matcher

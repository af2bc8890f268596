"""
codeguard - Allowlist classification and staleness checks.

An allowlist is a set of "path" (whole file) and "path:line" entries for
grandfathered code. classify() splits hits into violations and allowed hits;
validate_exceptions() reports entries that no longer point at a real,
still-matching line.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import AbstractSet, Callable, Iterable, Optional

from .config import ConfigurationError
from .matcher import Hit, PatternSpec, compile_patterns
from .patterns import FUNCTION_DEFINITION_TEMPLATES
from .scanner import Reader, to_lines

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Violation:
    """A hit not covered by the allowlist, with the reason it was flagged."""
    hit: Hit
    reason: str = ""

    @property
    def file(self) -> str:
        return self.hit.file

    @property
    def line_number(self) -> int:
        return self.hit.line_number

    @property
    def line_text(self) -> str:
        return self.hit.line_text

    @property
    def location(self) -> str:
        return self.hit.location


@dataclass(frozen=True)
class Classification:
    violations: tuple[Violation, ...]
    allowed: tuple[Hit, ...]


@dataclass(frozen=True)
class StaleEntry:
    entry: str
    reason: str

    def __str__(self) -> str:
        return f"{self.entry}: {self.reason}"


def parse_entry(entry: str) -> tuple[str, Optional[int]]:
    """Split "path:line" into (path, line); a plain "path" gives (path, None)."""
    path, sep, suffix = entry.rpartition(":")
    if sep and re.fullmatch(r"-?\d+", suffix):
        return path, int(suffix)
    return entry, None


def is_allowlisted(hit: Hit, allowlist: AbstractSet[str]) -> bool:
    return hit.file in allowlist or hit.location in allowlist


def default_reason(hit: Hit) -> str:
    if hit.extracted and "reason" in hit.extracted:
        return str(hit.extracted["reason"])
    return ""


def classify(
    hits: Iterable[Hit],
    allowlist: AbstractSet[str] = frozenset(),
    reason: Callable[[Hit], str] = default_reason,
) -> Classification:
    """Partition hits; every hit lands in exactly one bucket, order kept."""
    violations: list[Violation] = []
    allowed: list[Hit] = []
    for hit in hits:
        if is_allowlisted(hit, allowlist):
            allowed.append(hit)
        else:
            violations.append(Violation(hit=hit, reason=reason(hit)))
    return Classification(violations=tuple(violations), allowed=tuple(allowed))


def create_violation(reason_fn: Callable[[Hit], str]) -> Callable[[Hit], Violation]:
    """
    Curried violation factory.

        vague_name = create_violation(lambda h: f"Vague test name {h.extracted['name']!r}")
        violation = vague_name(hit)
    """
    def to_violation(hit: Hit) -> Violation:
        return Violation(hit=hit, reason=reason_fn(hit))
    return to_violation


# =============================================================================
# Staleness
# =============================================================================

def _read_lines(reader: Reader, path: str) -> Optional[list[str]]:
    """Lines of path, or None when the file does not exist."""
    try:
        return to_lines(reader(path))
    except FileNotFoundError:
        return None
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read allowlisted file {path}: {exc}") from exc


def _validate_line_entry(
    entry: str,
    path: str,
    line_no: int,
    patterns: tuple["re.Pattern[str]", ...],
    reader: Reader,
) -> Optional[StaleEntry]:
    lines = _read_lines(reader, path)
    if lines is None:
        return StaleEntry(entry, f"File not found: {path}")
    if line_no < 1 or line_no > len(lines):
        return StaleEntry(entry, f"Line {line_no} doesn't exist (file has {len(lines)} lines)")
    line = lines[line_no - 1]
    if not any(p.search(line) for p in patterns):
        return StaleEntry(entry, f'Line no longer matches pattern: "{line.strip()[:50]}..."')
    return None


def _validate_file_entry(
    entry: str,
    patterns: tuple["re.Pattern[str]", ...],
    reader: Reader,
) -> Optional[StaleEntry]:
    lines = _read_lines(reader, entry)
    if lines is None:
        return StaleEntry(entry, f"File not found: {entry}")
    if not any(p.search(line) for line in lines for p in patterns):
        return StaleEntry(entry, "File contains no lines matching pattern")
    return None


def validate_exceptions(
    allowlist: AbstractSet[str],
    patterns: PatternSpec,
    reader: Reader,
    check_file_entries: bool = False,
) -> list[StaleEntry]:
    """
    Return every allowlist entry that no longer points at a matching line.

    Whole-file entries are skipped unless check_file_entries is set, in which
    case they must still contain at least one matching line. A file that
    exists but cannot be read raises ConfigurationError.
    """
    compiled = compile_patterns(patterns)
    stale: list[StaleEntry] = []

    for entry in sorted(allowlist):
        path, line_no = parse_entry(entry)
        if line_no is not None:
            found = _validate_line_entry(entry, path, line_no, compiled, reader)
        elif check_file_entries:
            found = _validate_file_entry(entry, compiled, reader)
        else:
            continue
        if found is not None:
            logger.debug("Stale allowlist entry %s", found)
            stale.append(found)

    return stale


def is_function_defined(name: str, source: str) -> bool:
    """Check for const/let/var/function definitions or destructuring of name."""
    escaped = re.escape(name)
    return any(
        re.search(template.format(name=escaped), source)
        for template in FUNCTION_DEFINITION_TEMPLATES
    )


def validate_function_allowlist(allowlist: AbstractSet[str], combined_source: str) -> list[StaleEntry]:
    """Return function-name entries no longer defined anywhere in combined_source."""
    return [
        StaleEntry(name, "Function is not defined in any file")
        for name in sorted(allowlist)
        if not is_function_defined(name, combined_source)
    ]

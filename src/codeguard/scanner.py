"""
codeguard - Source loading and line normalization.

Handles:
- Directory walking with exclusions
- Source file loading through a reader callable
- String-literal stripping and comment-line detection
- Export listings
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Iterable, Iterator, Optional, Sequence

from .config import LintConfig, should_exclude_path
from .patterns import (
    EXPORT_ALIAS_SEPARATOR,
    EXPORT_BRACE_START,
    EXPORT_DEFAULT_PATTERN,
    EXPORT_FUNCTION_PATTERN,
    EXPORT_VAR_PATTERN,
    IDENTIFIER_PATTERN,
)

# (relative_path) -> file text
Reader = Callable[[str], str]


@dataclass(frozen=True)
class SourceFile:
    """A loaded source file with content."""
    path: str
    text: str
    lines: tuple[str, ...]

    @classmethod
    def from_text(cls, path: str, text: str) -> "SourceFile":
        return cls(path=path, text=text, lines=tuple(to_lines(text)))


def to_lines(source: str) -> list[str]:
    """
    Split source into lines; index i holds line i + 1.

    Only a line feed ends a line (a trailing carriage return is dropped), so
    form feeds and Unicode separators inside a line never shift line
    numbers. A final newline does not add an empty last line.
    """
    lines = [line[:-1] if line.endswith("\r") else line for line in source.split("\n")]
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def get_line(lines: Sequence[str], line_no: int) -> str:
    """Get line by 1-based line number."""
    if line_no <= 0 or line_no > len(lines):
        return ""
    return lines[line_no - 1]


def load_source(root: Path, relative_path: str) -> str:
    """Read a file relative to root. Raises OSError when it cannot be read."""
    return (root / relative_path).read_text(encoding="utf-8")


def read_source(root: Path) -> Reader:
    """Build a reader bound to root."""
    def reader(relative_path: str) -> str:
        return load_source(root, relative_path)
    return reader


def iter_files(cfg: LintConfig) -> Iterator[str]:
    """Yield relative posix paths of all relevant files under root, sorted."""
    if cfg.explicit_files is not None:
        yield from exclude_files(cfg.explicit_files, cfg.exclude_files)
        return

    found: list[str] = []
    for path in cfg.root.rglob("*"):
        if not path.is_file():
            continue
        rel = path.relative_to(cfg.root)
        if should_exclude_path(cfg, rel):
            continue
        if path.suffix in cfg.source_exts:
            found.append(rel.as_posix())
    yield from exclude_files(sorted(found), cfg.exclude_files)


def exclude_files(files: Iterable[str], exclude: Iterable[str] = ()) -> list[str]:
    """Filter a file list, keeping order, dropping excluded paths."""
    excluded = frozenset(exclude)
    return [f for f in files if f not in excluded]


def combine_file_lists(file_lists: Iterable[Iterable[str]], exclude: Iterable[str] = ()) -> list[str]:
    """Concatenate several file lists, then drop excluded paths."""
    return exclude_files((f for files in file_lists for f in files), exclude)


# =============================================================================
# Line normalization
# =============================================================================

_QUOTES = frozenset("'\"`")


def strip_strings(line: str) -> str:
    """
    Remove the contents of quoted regions, keeping the quote characters.

    'obj["x"] = "a {b}"' -> 'obj[""] = ""'

    Backslash escapes are honored. An unterminated string runs to the end of
    the line.
    """
    out: list[str] = []
    quote = ""
    escaped = False
    for ch in line:
        if not quote:
            out.append(ch)
            if ch in _QUOTES:
                quote = ch
            continue
        if escaped:
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch == quote:
            out.append(ch)
            quote = ""
    return "".join(out)


COMMENT_LINE_PATTERNS: tuple[re.Pattern[str], ...] = (
    re.compile(r"^\s*//"),               # // ...
    re.compile(r"^\s*/\*"),              # /* ...
    re.compile(r"^\s*\*"),               # * ... (block continuation)
    re.compile(r"^\s*\*/"),              # */
    re.compile(r"^\s*/\*.*\*/\s*$"),     # /* ... */
)


def is_comment_line(line: str) -> bool:
    """Check if a line is a comment (single-line, block start, continuation, or end)."""
    trimmed = line.strip()
    return any(p.search(trimmed) for p in COMMENT_LINE_PATTERNS)


# =============================================================================
# Exports
# =============================================================================

def parse_export_list(content: str) -> list[str]:
    """Names from the inside of an export list: "a, b as c" -> ["a", "b"]."""
    names = (EXPORT_ALIAS_SEPARATOR.split(part.strip())[0].strip() for part in content.split(","))
    return [name for name in names if name and IDENTIFIER_PATTERN.match(name)]


def extract_exports(source: str) -> list[str]:
    """
    Named exports of a source file, in first-seen order.

    Handles export function / const / let / var declarations, export lists
    (single- or multi-line, with "as" renames) and export default.
    """
    exported: dict[str, None] = {}
    buffer: Optional[str] = None

    for line in to_lines(source):
        if is_comment_line(line):
            continue

        if buffer is not None:
            close = line.find("}")
            if close == -1:
                buffer += line
                continue
            exported.update(dict.fromkeys(parse_export_list(buffer + line[:close])))
            buffer = None
            continue

        match = EXPORT_FUNCTION_PATTERN.match(line) or EXPORT_VAR_PATTERN.match(line)
        if match:
            exported[match.group(1)] = None
            continue

        if EXPORT_BRACE_START.match(line):
            start, close = line.find("{"), line.find("}")
            if close == -1:
                buffer = line[start + 1:]
            else:
                exported.update(dict.fromkeys(parse_export_list(line[start + 1:close])))
            continue

        match = EXPORT_DEFAULT_PATTERN.match(line)
        if match:
            exported[match.group(1)] = None

    return list(exported)

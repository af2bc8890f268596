"""
codeguard - File-set analysis.

Runs a finder over an ordered list of files and concatenates the hits in
file-then-line order. The caller's file order is kept, so reports are stable
across runs.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable

from .config import ConfigurationError
from .matcher import Hit
from .scanner import Reader, SourceFile

logger = logging.getLogger(__name__)

# (source, path) -> hits for that file
Finder = Callable[[str, str], list[Hit]]


def _read(reader: Reader, path: str) -> SourceFile:
    try:
        text = reader(path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigurationError(f"Cannot read listed file {path}: {exc}") from exc
    return SourceFile.from_text(path, text)


def analyze(files: Iterable[str], finder: Finder, reader: Reader) -> list[Hit]:
    """
    Scan every file with finder.

    A file that cannot be read raises ConfigurationError: a stale file list
    is a configuration bug.
    """
    hits: list[Hit] = []
    scanned = 0
    for path in files:
        src = _read(reader, path)
        found = finder(src.text, src.path)
        logger.debug("%s: %d lines, %d hits", src.path, len(src.lines), len(found))
        hits.extend(found)
        scanned += 1
    logger.info("Analyzed %d files, %d hits", scanned, len(hits))
    return hits


def scan_files_for_violations(
    files: Iterable[str],
    line_matcher: Callable[[str, int, str, str], Any],
    reader: Reader,
) -> list[Any]:
    """
    Scan files line by line with a per-line callable.

    line_matcher receives (line, line_number, source, path) and returns a
    result or None.
    """
    results: list[Any] = []
    for path in files:
        src = _read(reader, path)
        for line_number, line in enumerate(src.lines, start=1):
            result = line_matcher(line, line_number, src.text, src.path)
            if result is not None:
                results.append(result)
    return results

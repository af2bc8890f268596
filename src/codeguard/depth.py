"""
codeguard - Brace-depth scanning.

Walks a file line by line carrying a ScanState: one boolean per open brace,
true when that brace was opened on an iteration-context line (.map(,
.reduce(, ...). A pattern match counts only when the state before the line
is inside a function body (FUNCTION_BODY) or inside an iteration callback
(ITERATION).

The state is evaluated before the line's own braces are counted, so
`items.map((x) => {` is never inside its own callback.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional

from .matcher import Extractor, Hit, PatternSpec, compile_patterns
from .patterns import ITERATION_CONTEXT_PATTERNS
from .scanner import is_comment_line, strip_strings, to_lines


class ScanMode(enum.Enum):
    FUNCTION_BODY = "function_body"  # depth > 0
    ITERATION = "iteration"          # some enclosing brace opened by an iteration line


@dataclass(frozen=True)
class ScanState:
    """Open braces of the current position; depth is the stack length."""
    stack: tuple[bool, ...] = ()

    @property
    def depth(self) -> int:
        return len(self.stack)

    @property
    def in_iteration(self) -> bool:
        return any(self.stack)

    def advance(self, cleaned_line: str, is_iteration: bool) -> "ScanState":
        """Apply one string-stripped line: push per '{', then pop per '}'."""
        stack = self.stack + (is_iteration,) * cleaned_line.count("{")
        closes = cleaned_line.count("}")
        if closes:
            stack = stack[:max(0, len(stack) - closes)]
        return ScanState(stack)


def fold_lines(
    lines: Iterable[str],
    iteration_patterns: PatternSpec = ITERATION_CONTEXT_PATTERNS,
    skip_line: Callable[[str], bool] = is_comment_line,
    state: Optional[ScanState] = None,
) -> ScanState:
    """Fold lines into the final ScanState."""
    compiled = compile_patterns(iteration_patterns)
    state = state or ScanState()
    for line in lines:
        if skip_line(line):
            continue
        cleaned = strip_strings(line)
        state = state.advance(cleaned, any(p.search(cleaned) for p in compiled))
    return state


class BraceDepthScanner:
    """
    Find pattern matches by lexical context.

    Hits carry {"brace_depth": <depth before the line>, "match": <text>}
    merged with the extractor's mapping. `for` / `for...of` bodies are not
    iteration contexts; only the callback methods in ITERATION_CONTEXT_PATTERNS
    are.
    """

    def __init__(
        self,
        pattern: PatternSpec,
        mode: ScanMode = ScanMode.FUNCTION_BODY,
        iteration_patterns: PatternSpec = ITERATION_CONTEXT_PATTERNS,
        skip_line: Callable[[str], bool] = is_comment_line,
        extract: Optional[Extractor] = None,
    ) -> None:
        self.patterns = compile_patterns(pattern)
        self.mode = mode
        self.iteration_patterns = compile_patterns(iteration_patterns)
        self.skip_line = skip_line
        self.extract = extract

    def in_scope(self, state: ScanState) -> bool:
        if self.mode is ScanMode.ITERATION:
            return state.in_iteration
        return state.depth > 0

    def _first_match(self, cleaned: str) -> Optional["re.Match[str]"]:
        for pattern in self.patterns:
            match = pattern.search(cleaned)
            if match:
                return match
        return None

    def find(self, source: str, path: str = "") -> list[Hit]:
        hits: list[Hit] = []
        state = ScanState()

        for line_number, line in enumerate(to_lines(source), start=1):
            if self.skip_line(line):
                continue
            cleaned = strip_strings(line)

            # Classify against the state before this line's braces
            match = self._first_match(cleaned) if self.in_scope(state) else None
            if match is not None:
                hit = self._to_hit(line, line_number, match, path, state)
                if hit is not None:
                    hits.append(hit)

            is_iteration = any(p.search(cleaned) for p in self.iteration_patterns)
            state = state.advance(cleaned, is_iteration)

        return hits

    def _to_hit(
        self,
        line: str,
        line_number: int,
        match: "re.Match[str]",
        path: str,
        state: ScanState,
    ) -> Optional[Hit]:
        data: dict[str, Any] = {
            "brace_depth": state.depth,
            "match": match.group(1) if match.re.groups else match.group(0),
        }
        if self.extract is not None:
            extra = self.extract(line, line_number, match, path)
            if extra is None:
                return None
            data.update(extra)
        return Hit(file=path, line_number=line_number, line_text=line.strip(), extracted=data)

"""
codeguard - Rule implementations.

This module binds patterns (from patterns.py) to a LineMatcher or a
BraceDepthScanner. Each Rule knows how to find hits in one file, how to word
a violation, and how to describe itself in a report.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import AbstractSet, Any, Callable, Iterable, Mapping, Optional, Union

from .allowlist import Classification, StaleEntry, classify, validate_exceptions
from .analysis import analyze
from .config import ConfigurationError
from .depth import BraceDepthScanner, ScanMode
from .matcher import Hit, LineMatcher
from .patterns import (
    ALLOWED_LET_PATTERNS,
    BUILTIN_IDENTIFIERS,
    DESTRUCTURING_SKIP_PATTERNS,
    MEMOIZE_PATTERNS,
    MUTABLE_DECLARATION_PATTERNS,
    NESTED_LOOKUP_PATTERNS,
    OBJECT_MUTATION_PATTERNS,
    OR_FALLBACK_DETAIL,
    OR_FALLBACK_PATTERNS,
    VARIABLE_ALIAS_PATTERNS,
)
from .reporting import Report, format_violation_report
from .scanner import COMMENT_LINE_PATTERNS, Reader


@dataclass(frozen=True)
class Rule:
    """A named check over a set of files."""
    rule_id: str
    description: str
    engine: Union[LineMatcher, BraceDepthScanner]
    reason: Callable[[Hit], str]
    singular: str
    plural: Optional[str] = None
    fix_hint: str = ""
    allowlist_name: str = ""

    @property
    def patterns(self) -> tuple["re.Pattern[str]", ...]:
        return self.engine.patterns

    def find(self, source: str, path: str = "") -> list[Hit]:
        return self.engine.find(source, path)


# =============================================================================
# Extractors
# =============================================================================

def _extract_let(line: str, _line_number: int, _match: "re.Match[str]", _path: str) -> Optional[Mapping[str, Any]]:
    """Skip lazy `let x = null;` slots."""
    trimmed = line.strip()
    if any(p.search(trimmed) for p in ALLOWED_LET_PATTERNS):
        return None
    return {}


def _extract_fallback(line: str, _line_number: int, _match: "re.Match[str]", _path: str) -> Optional[Mapping[str, Any]]:
    """Confirm on the raw line; `|| "text"` only looks empty once strings are stripped."""
    detail = OR_FALLBACK_DETAIL.search(line)
    if detail is None:
        return None
    return {"fallback": detail.group(1)}


def _extract_alias(_line: str, _line_number: int, match: "re.Match[str]", _path: str) -> Optional[Mapping[str, Any]]:
    alias, target = match.group(1), match.group(2)
    if target in BUILTIN_IDENTIFIERS:
        return None
    return {"alias": alias, "target": target}


def _extract_lookup(_line: str, _line_number: int, match: "re.Match[str]", _path: str) -> Mapping[str, Any]:
    return {"method": match.group(1)}


# =============================================================================
# Built-in rules
# =============================================================================

MUTABLE_DECLARATION = Rule(
    rule_id="mutable-declaration",
    description="let declarations outside lazy-loading slots",
    engine=LineMatcher(MUTABLE_DECLARATION_PATTERNS, extract=_extract_let),
    reason=lambda hit: "Mutable variable declaration",
    singular="mutable variable declaration",
    fix_hint="use const with functional patterns (map, filter, reduce) instead of let",
    allowlist_name="ALLOWED_LET_USAGE",
)

OBJECT_MUTATION = Rule(
    rule_id="object-mutation",
    description="object mutation via bracket assignment",
    engine=LineMatcher(
        OBJECT_MUTATION_PATTERNS,
        skip_patterns=COMMENT_LINE_PATTERNS + DESTRUCTURING_SKIP_PATTERNS,
    ),
    reason=lambda hit: "Object mutation via bracket assignment",
    singular="object mutation via bracket assignment",
    plural="object mutations via bracket assignment",
    fix_hint="use functional patterns (reduce with spread, Object.fromEntries)",
    allowlist_name="ALLOWED_OBJECT_MUTATIONS",
)

OR_FALLBACK = Rule(
    rule_id="or-fallback",
    description="|| fallbacks to empty defaults",
    engine=LineMatcher(OR_FALLBACK_PATTERNS, extract=_extract_fallback),
    reason=lambda hit: f"|| {hit.extracted['fallback']} fallback masks missing data",
    singular="|| fallback",
    fix_hint="set defaults early in the data chain, or let missing data fail loudly",
    allowlist_name="ALLOWED_OR_FALLBACKS",
)

VARIABLE_ALIAS = Rule(
    rule_id="variable-alias",
    description="const aliases of another name or property",
    engine=LineMatcher(VARIABLE_ALIAS_PATTERNS, extract=_extract_alias),
    reason=lambda hit: f"{hit.extracted['alias']} only aliases {hit.extracted['target']}",
    singular="variable alias",
    plural="variable aliases",
    fix_hint="use the original name directly, or rename at the import site",
    allowlist_name="ALLOWED_ALIASES",
)

NESTED_LOOKUP = Rule(
    rule_id="nested-lookup",
    description=".find()/.filter() inside an iteration callback",
    engine=BraceDepthScanner(NESTED_LOOKUP_PATTERNS, mode=ScanMode.ITERATION, extract=_extract_lookup),
    reason=lambda hit: f"nested .{hit.extracted['method']}() inside iteration - likely O(n*m)",
    singular="nested array lookup",
    fix_hint="build an index first for O(1) lookups instead of nested .find()/.filter()",
    allowlist_name="ALLOWED_NESTED_LOOKUPS",
)

MEMOIZE_IN_FUNCTION = Rule(
    rule_id="memoize-in-function",
    description="memoize() created inside a function body",
    engine=BraceDepthScanner(MEMOIZE_PATTERNS, mode=ScanMode.FUNCTION_BODY),
    reason=lambda hit: (
        f"memoize() called at brace depth {hit.extracted['brace_depth']}"
        " - cache won't persist between calls"
    ),
    singular="memoize() call inside function",
    fix_hint="move memoized functions to module level so the cache persists across calls",
    allowlist_name="ALLOWED_MEMOIZE",
)

RULES: dict[str, Rule] = {
    rule.rule_id: rule
    for rule in (
        MUTABLE_DECLARATION,
        OBJECT_MUTATION,
        OR_FALLBACK,
        VARIABLE_ALIAS,
        NESTED_LOOKUP,
        MEMOIZE_IN_FUNCTION,
    )
}


def get_rule(rule_id: str) -> Rule:
    try:
        return RULES[rule_id]
    except KeyError:
        known = ", ".join(sorted(RULES))
        raise ConfigurationError(f"Unknown rule {rule_id!r} (known: {known})") from None


def select_rules(rule_ids: Iterable[str] = ()) -> list[Rule]:
    """Rules by id, in the order given; every rule when no ids are given."""
    ids = list(rule_ids)
    if not ids:
        return list(RULES.values())
    return [get_rule(rule_id) for rule_id in ids]


def check(
    rule: Rule,
    files: Iterable[str],
    reader: Reader,
    allowlist: AbstractSet[str] = frozenset(),
) -> Classification:
    """Analyze files with rule and split the hits by allowlist."""
    return classify(analyze(files, rule.find, reader), allowlist, rule.reason)


def report(rule: Rule, result: Classification, limit: int = 10) -> Report:
    return format_violation_report(
        result.violations,
        limit=limit,
        singular=rule.singular,
        plural=rule.plural,
        fix_hint=rule.fix_hint,
    )


def find_stale(rule: Rule, allowlist: AbstractSet[str], reader: Reader) -> list[StaleEntry]:
    """Allowlist entries for rule that no longer point at a matching line."""
    return validate_exceptions(allowlist, rule.patterns, reader)

"""
codeguard - pytest assertions.

Turn violation lists and stale allowlist entries into test failures whose
message is the rendered report.
"""

from __future__ import annotations

from typing import AbstractSet, Iterable, Optional, Sequence

import pytest

from .allowlist import StaleEntry, validate_exceptions
from .matcher import PatternSpec
from .reporting import Reportable, format_stale_entries, format_violation_report
from .scanner import Reader


def assert_no_violations(
    violations: Sequence[Reportable],
    limit: int = 10,
    singular: Optional[str] = None,
    plural: Optional[str] = None,
    fix_hint: str = "",
) -> None:
    result = format_violation_report(
        violations, limit=limit, singular=singular, plural=plural, fix_hint=fix_hint
    )
    if result.count:
        pytest.fail(result.report, pytrace=False)


def assert_no_stale_entries(stale: Iterable[StaleEntry], label: str) -> None:
    text = format_stale_entries(stale, label)
    if text:
        pytest.fail(text, pytrace=False)


def expect_no_stale_exceptions(
    allowlist: AbstractSet[str],
    patterns: PatternSpec,
    reader: Reader,
    label: str,
) -> None:
    """Validate allowlist against patterns and fail listing every stale entry."""
    assert_no_stale_entries(validate_exceptions(allowlist, patterns, reader), label)

"""
codeguard - Reporting and output formatting.

Handles:
- Truncated violation reports for test failure messages
- Stale allowlist listings
- JSON output
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Protocol, Sequence


class Reportable(Protocol):
    file: str
    line_number: int
    line_text: str


@dataclass(frozen=True)
class Report:
    """count is the true total, whatever the report shows."""
    count: int
    report: str


def pluralize(singular: str, plural: Optional[str] = None) -> Callable[[int], str]:
    """Count formatter: pluralize("file")(2) -> "2 files"."""
    plural_form = plural or (f"{singular}es" if singular.endswith("s") else f"{singular}s")

    def format_count(count: int) -> str:
        return f"1 {singular}" if count == 1 else f"{count} {plural_form}"

    return format_count


def format_violation_report(
    violations: Sequence[Reportable],
    limit: int = 10,
    singular: Optional[str] = None,
    plural: Optional[str] = None,
    fix_hint: str = "",
) -> Report:
    """
    Render violations for a failure message.

    Shows at most `limit` entries, then "... and K more".
    """
    if not violations:
        return Report(count=0, report="")

    count = len(violations)
    format_count = pluralize(singular, plural) if singular else pluralize("violation")

    lines = ["", f"  Found {format_count(count)}:"]
    for v in violations[:limit]:
        lines.append(f"     - {v.file}:{v.line_number}")
        if v.line_text:
            lines.append(f"       {v.line_text}")
    if count > limit:
        lines.append(f"     ... and {count - limit} more")
    if fix_hint:
        lines.extend(["", f"  To fix: {fix_hint}", ""])

    return Report(count=count, report="\n".join(lines))


def format_stale_entries(stale: Iterable[Any], label: str) -> str:
    """List stale allowlist entries with their reasons; empty when none."""
    items = [f"    - {s}" for s in stale]
    if not items:
        return ""
    return "\n".join(["", f"  Stale {label} entries:", *items])


def render_json(payload: Any) -> str:
    """Render a payload of dataclasses / dicts as JSON."""
    return json.dumps(payload, indent=2, default=str)

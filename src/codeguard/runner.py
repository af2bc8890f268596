"""
codeguard - Main runner and CLI.

Runs the selected rules over a source tree and prints one report per rule.
"""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional

from . import __version__
from .allowlist import Classification, StaleEntry
from .config import ConfigurationError, LintConfig, load_allowlists, load_config
from .reporting import format_stale_entries, render_json
from .rules import Rule, check, find_stale, report, select_rules
from .scanner import iter_files, read_source

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuleResult:
    rule: Rule
    result: Classification
    stale: tuple[StaleEntry, ...] = ()

    def to_dict(self) -> dict:
        return {
            "rule": self.rule.rule_id,
            "violations": [
                {"location": v.location, "code": v.line_text, "reason": v.reason}
                for v in self.result.violations
            ],
            "allowed": [hit.location for hit in self.result.allowed],
            "stale": [{"entry": s.entry, "reason": s.reason} for s in self.stale],
        }


def run(cfg: LintConfig, check_stale: bool = False) -> list[RuleResult]:
    """Run every enabled rule over the configured files."""
    files = list(iter_files(cfg))
    reader = read_source(cfg.root)
    allowlists = load_allowlists(cfg.allowlist_path) if cfg.allowlist_path else {}

    results: list[RuleResult] = []
    for rule in select_rules(cfg.enabled_rules):
        allowlist = allowlists.get(rule.allowlist_name, frozenset())
        result = check(rule, files, reader, allowlist)
        stale = tuple(find_stale(rule, allowlist, reader)) if check_stale else ()
        logger.info(
            "%s: %d violations, %d allowed, %d stale",
            rule.rule_id, len(result.violations), len(result.allowed), len(stale),
        )
        results.append(RuleResult(rule=rule, result=result, stale=stale))
    return results


def render_human(results: list[RuleResult], limit: int) -> str:
    sections = []
    for item in results:
        text = report(item.rule, item.result, limit=limit).report
        if text:
            sections.append(f"[{item.rule.rule_id}]{text}")
        stale = format_stale_entries(item.stale, item.rule.allowlist_name)
        if stale:
            sections.append(f"[{item.rule.rule_id}]{stale}")
    if not sections:
        return f"codeguard v{__version__}: OK - no violations"
    return "\n".join(sections)


def _failed(results: list[RuleResult]) -> bool:
    return any(item.result.violations or item.stale for item in results)


def main(argv: Optional[list[str]] = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        description=f"codeguard v{__version__} - line-based code quality checks"
    )
    parser.add_argument(
        "root",
        nargs="?",
        default=".",
        help="Root directory to scan (default: current directory)",
    )
    parser.add_argument(
        "--config",
        metavar="FILE",
        help="YAML configuration file",
    )
    parser.add_argument(
        "--allowlists",
        metavar="FILE",
        help="YAML file of named allowlists",
    )
    parser.add_argument(
        "--rules",
        nargs="*",
        metavar="RULE",
        help="Run only these rules",
    )
    parser.add_argument(
        "--files",
        nargs="*",
        metavar="FILE",
        help="Scan only these files, relative to root (disables directory scan)",
    )
    parser.add_argument(
        "--limit",
        type=int,
        help="Violations shown per rule (default: 10)",
    )
    parser.add_argument(
        "--check-stale",
        action="store_true",
        help="Also report allowlist entries that no longer match",
    )
    parser.add_argument(
        "--json",
        action="store_true",
        help="Output as JSON",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Log each scanned file",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    root = Path(args.root).resolve()
    try:
        cfg = load_config(args.config, root=root) if args.config else LintConfig(root=root)
        overrides: dict = {"json_output": args.json or cfg.json_output}
        if args.allowlists:
            overrides["allowlist_path"] = Path(args.allowlists)
        if args.rules:
            overrides["enabled_rules"] = tuple(args.rules)
        if args.files:
            overrides["explicit_files"] = tuple(args.files)
        if args.limit is not None:
            overrides["report_limit"] = args.limit
        cfg = replace(cfg, **overrides)

        results = run(cfg, check_stale=args.check_stale)
    except ConfigurationError as exc:
        print(f"codeguard: {exc}", file=sys.stderr)
        return 2

    if cfg.json_output:
        print(render_json([item.to_dict() for item in results]))
    else:
        print(render_human(results, cfg.report_limit))

    return 1 if _failed(results) else 0


if __name__ == "__main__":
    raise SystemExit(main())

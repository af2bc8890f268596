"""
codeguard - Line-based code quality checks for test suites.

Detects disallowed constructs in brace-language sources:
- Mutable variable declarations (let)
- Object mutation via bracket assignment
- Nested O(n*m) lookups inside iteration callbacks
- Fallback operators (|| [], || {}, ...)
- Unnecessary aliasing
- memoize() created inside function bodies

Hits are split into violations and grandfathered exceptions using
allowlists, and rendered as truncated reports for test failure messages.

Usage:
    python -m codeguard [root]
    python -m codeguard --json
    python -m codeguard --check-stale --allowlists allowlists.yaml
"""

__version__ = "0.1.0"

from codeguard.allowlist import (
    Classification,
    StaleEntry,
    Violation,
    classify,
    create_violation,
    validate_exceptions,
    validate_function_allowlist,
)
from codeguard.analysis import analyze, scan_files_for_violations
from codeguard.config import ConfigurationError, LintConfig
from codeguard.depth import BraceDepthScanner, ScanMode, ScanState
from codeguard.matcher import Hit, LineMatcher, match_line, matches_any
from codeguard.reporting import Report, format_violation_report
from codeguard.scanner import extract_exports, is_comment_line, strip_strings, to_lines

__all__ = [
    "BraceDepthScanner",
    "Classification",
    "ConfigurationError",
    "Hit",
    "LineMatcher",
    "LintConfig",
    "Report",
    "ScanMode",
    "ScanState",
    "StaleEntry",
    "Violation",
    "analyze",
    "classify",
    "create_violation",
    "extract_exports",
    "format_violation_report",
    "is_comment_line",
    "match_line",
    "matches_any",
    "scan_files_for_violations",
    "strip_strings",
    "to_lines",
    "validate_exceptions",
    "validate_function_allowlist",
]

"""
codeguard - Configuration.

Runtime configuration, YAML loading and allowlist files.
For pattern definitions, see patterns.py.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Any, Optional

import yaml

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """A scan cannot run as configured (missing file, no pattern, bad YAML)."""


# Environment overrides applied by load_config()
ENV_OVERRIDES = {
    "CODEGUARD_ROOT": "root",
    "CODEGUARD_ALLOWLISTS": "allowlist_path",
    "CODEGUARD_REPORT_LIMIT": "report_limit",
}


@dataclass(frozen=True)
class LintConfig:
    """Runtime configuration for codeguard."""

    root: Path

    # File extensions
    source_exts: tuple[str, ...] = (".js", ".mjs", ".cjs", ".jsx", ".ts", ".tsx")

    # Directory exclusions
    exclude_dirs: tuple[str, ...] = (
        ".git",
        "node_modules",
        "dist",
        "build",
        "_site",
        "coverage",
        ".venv",
        "__pycache__",
    )

    # Paths (relative to root) never scanned
    exclude_files: tuple[str, ...] = ()

    # Explicit file list; disables the directory walk when set
    explicit_files: Optional[tuple[str, ...]] = None

    # Rule selection; empty means every built-in rule
    enabled_rules: tuple[str, ...] = ()

    # Allowlist YAML file (name -> list of "path" / "path:line")
    allowlist_path: Optional[Path] = None

    # Output settings
    report_limit: int = 10
    json_output: bool = False


def should_exclude_path(cfg: LintConfig, path: Path) -> bool:
    """Check if path should be excluded from scanning."""
    return any(d in path.parts for d in cfg.exclude_dirs)


def _read_yaml(path: Path) -> Any:
    if not path.exists():
        raise ConfigurationError(f"Config file not found: {path}")
    try:
        with path.open("r", encoding="utf-8") as handle:
            return yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ConfigurationError(f"Invalid YAML in {path}: {exc}") from exc


def _string_tuple(value: Any, key: str) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str) or not isinstance(value, list):
        raise ConfigurationError(f"'{key}' must be a list of strings")
    return tuple(str(item) for item in value)


def load_config(path: str | Path, root: Optional[Path] = None) -> LintConfig:
    """
    Load a LintConfig from a YAML file.

    Relative paths inside the file are resolved against the file's directory.
    Environment variables in ENV_OVERRIDES win over file values.
    """
    config_path = Path(path)
    raw = _read_yaml(config_path) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Config file must contain a mapping: {config_path}")

    base = config_path.parent
    cfg = LintConfig(root=root or base)
    values: dict[str, Any] = {}

    if "root" in raw:
        values["root"] = base / str(raw["root"])
    if "source_exts" in raw:
        values["source_exts"] = _string_tuple(raw["source_exts"], "source_exts")
    if "exclude_dirs" in raw:
        values["exclude_dirs"] = _string_tuple(raw["exclude_dirs"], "exclude_dirs")
    if "exclude_files" in raw:
        values["exclude_files"] = _string_tuple(raw["exclude_files"], "exclude_files")
    if "files" in raw:
        values["explicit_files"] = _string_tuple(raw["files"], "files")
    if "rules" in raw:
        values["enabled_rules"] = _string_tuple(raw["rules"], "rules")
    if "allowlists" in raw:
        values["allowlist_path"] = base / str(raw["allowlists"])
    if "report_limit" in raw:
        values["report_limit"] = _positive_int(raw["report_limit"], "report_limit")

    for env_var, key in ENV_OVERRIDES.items():
        if env_var not in os.environ:
            continue
        value = os.environ[env_var]
        if key == "report_limit":
            values[key] = _positive_int(value, env_var)
        else:
            values[key] = Path(value)

    logger.debug("Loaded config from %s (%d keys)", config_path, len(values))
    return replace(cfg, **values)


def _positive_int(value: Any, key: str) -> int:
    try:
        number = int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"'{key}' must be an integer, got {value!r}") from exc
    if number < 1:
        raise ConfigurationError(f"'{key}' must be at least 1, got {number}")
    return number


def load_allowlists(path: str | Path) -> dict[str, frozenset[str]]:
    """
    Load named allowlists from YAML.

    Expected shape:

        ALLOWED_LET_USAGE:
          - src/lib/cache.js:12
          - src/lib/legacy.js
    """
    allowlist_path = Path(path)
    raw = _read_yaml(allowlist_path) or {}
    if not isinstance(raw, dict):
        raise ConfigurationError(f"Allowlist file must contain a mapping: {allowlist_path}")

    allowlists: dict[str, frozenset[str]] = {}
    for name, entries in raw.items():
        allowlists[str(name)] = frozenset(_string_tuple(entries, str(name)))
    logger.debug("Loaded %d allowlists from %s", len(allowlists), allowlist_path)
    return allowlists

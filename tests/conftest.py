"""
Pytest configuration and shared fixtures.
"""

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from codeguard.scanner import read_source


# =============================================================================
# PATH FIXTURES
# =============================================================================

@pytest.fixture
def fixtures_dir():
    """Path to test fixtures directory."""
    return Path(__file__).parent / "fixtures"


@pytest.fixture
def sample_project(fixtures_dir):
    """Path to the sample JS project."""
    return fixtures_dir / "sample_project"


@pytest.fixture
def write_tree(tmp_path):
    """Write {relative_path: text} under tmp_path and return tmp_path."""
    def _write(files: dict) -> Path:
        for rel, text in files.items():
            path = tmp_path / rel
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(text, encoding="utf-8")
        return tmp_path
    return _write


# =============================================================================
# READER FIXTURES
# =============================================================================

@pytest.fixture
def memory_reader():
    """Build a reader over an in-memory {path: text} mapping."""
    def _make(files: dict):
        def reader(path: str) -> str:
            try:
                return files[path]
            except KeyError:
                raise FileNotFoundError(path) from None
        return reader
    return _make


@pytest.fixture
def sample_reader(sample_project):
    return read_source(sample_project)

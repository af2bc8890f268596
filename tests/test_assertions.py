"""
Assertion Helper Tests

The pytest helpers fail with the rendered report as the message.
"""

import pytest

from codeguard.allowlist import StaleEntry, Violation
from codeguard.assertions import (
    assert_no_stale_entries,
    assert_no_violations,
    expect_no_stale_exceptions,
)
from codeguard.matcher import Hit
from codeguard.patterns import MUTABLE_DECLARATION_PATTERNS


class TestAssertNoViolations:

    def test_passes_when_empty(self):
        assert_no_violations([])

    def test_fails_with_report(self):
        violation = Violation(hit=Hit(file="a.js", line_number=3, line_text="let x = 1;"))
        with pytest.raises(pytest.fail.Exception) as excinfo:
            assert_no_violations([violation], singular="mutable variable declaration", fix_hint="use const")
        message = str(excinfo.value)
        assert "Found 1 mutable variable declaration:" in message
        assert "a.js:3" in message
        assert "To fix: use const" in message


class TestStaleAssertions:

    def test_passes_when_no_stale(self):
        assert_no_stale_entries([], "ALLOWED_LET_USAGE")

    def test_fails_listing_entries(self):
        with pytest.raises(pytest.fail.Exception, match="Stale ALLOWED_LET_USAGE entries"):
            assert_no_stale_entries([StaleEntry("a.js:1", "gone")], "ALLOWED_LET_USAGE")

    def test_expect_no_stale_exceptions(self, memory_reader):
        reader = memory_reader({"a.js": "let x = 1;\nconst y = 2;\n"})
        expect_no_stale_exceptions({"a.js:1"}, MUTABLE_DECLARATION_PATTERNS, reader, "ALLOWED_LET_USAGE")
        with pytest.raises(pytest.fail.Exception, match="a.js:2: Line no longer matches pattern"):
            expect_no_stale_exceptions({"a.js:2"}, MUTABLE_DECLARATION_PATTERNS, reader, "ALLOWED_LET_USAGE")

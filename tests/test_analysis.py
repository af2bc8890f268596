"""
File-Set Analysis Tests
"""

import pytest

from codeguard.analysis import analyze, scan_files_for_violations
from codeguard.config import ConfigurationError
from codeguard.matcher import LineMatcher, create_pattern_matcher
from codeguard.patterns import OR_FALLBACK_PATTERNS


FILES = {
    "b.js": "const a = x || [];\nconst b = 1;\n",
    "a.js": "const c = y || {};\nconst d = z || null;\n",
}


class TestAnalyze:

    def test_hits_in_file_then_line_order(self, memory_reader):
        finder = LineMatcher(OR_FALLBACK_PATTERNS).find
        hits = analyze(["b.js", "a.js"], finder, memory_reader(FILES))
        assert [h.location for h in hits] == ["b.js:1", "a.js:1", "a.js:2"]

    def test_deterministic(self, memory_reader):
        finder = LineMatcher(OR_FALLBACK_PATTERNS).find
        reader = memory_reader(FILES)
        assert analyze(["a.js", "b.js"], finder, reader) == analyze(["a.js", "b.js"], finder, reader)

    def test_empty_file_list(self, memory_reader):
        finder = LineMatcher(OR_FALLBACK_PATTERNS).find
        assert analyze([], finder, memory_reader({})) == []

    def test_missing_listed_file_is_configuration_error(self, memory_reader):
        finder = LineMatcher(OR_FALLBACK_PATTERNS).find
        with pytest.raises(ConfigurationError, match="gone.js"):
            analyze(["a.js", "gone.js"], finder, memory_reader(FILES))

    def test_reads_from_disk(self, sample_reader):
        finder = LineMatcher(OR_FALLBACK_PATTERNS).find
        hits = analyze(["src/lib/cache.js"], finder, sample_reader)
        assert [h.line_number for h in hits] == [8]


class TestScanFilesForViolations:

    def test_per_line_callable(self, memory_reader):
        line_matcher = create_pattern_matcher(
            OR_FALLBACK_PATTERNS,
            lambda line, n, match, path: (path, n, match.group(0)),
        )
        results = scan_files_for_violations(["a.js", "b.js"], line_matcher, memory_reader(FILES))
        assert results == [
            ("a.js", 1, "|| {}"),
            ("a.js", 2, "|| null"),
            ("b.js", 1, "|| []"),
        ]

    def test_source_passed_through(self, memory_reader):
        seen = []

        def line_matcher(line, line_number, source, path):
            seen.append(source)

        scan_files_for_violations(["b.js"], line_matcher, memory_reader(FILES))
        assert seen == [FILES["b.js"], FILES["b.js"]]

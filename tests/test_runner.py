"""
Runner Tests

run() over the sample project and the command-line entry point.
"""

import json

import pytest

from codeguard.config import LintConfig
from codeguard.runner import main, render_human, run


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("CODEGUARD_ROOT", "CODEGUARD_ALLOWLISTS", "CODEGUARD_REPORT_LIMIT"):
        monkeypatch.delenv(name, raising=False)


class TestRun:

    def test_all_rules_with_allowlists(self, sample_project):
        cfg = LintConfig(root=sample_project, allowlist_path=sample_project / "allowlists.yaml")
        results = {item.rule.rule_id: item for item in run(cfg)}

        assert len(results) == 6
        assert results["mutable-declaration"].result.violations == ()
        assert [h.location for h in results["object-mutation"].result.allowed] == ["src/lib/cache.js:6"]
        assert len(results["or-fallback"].result.violations) == 1
        assert len(results["variable-alias"].result.violations) == 2

    def test_rule_selection(self, sample_project):
        cfg = LintConfig(root=sample_project, enabled_rules=("nested-lookup",))
        results = run(cfg)
        assert [item.rule.rule_id for item in results] == ["nested-lookup"]
        assert results[0].stale == ()

    def test_stale_only_when_asked(self, sample_project, write_tree):
        base = write_tree({"allow.yaml": "ALLOWED_MEMOIZE:\n  - src/lib/cache.js:5\n"})
        cfg = LintConfig(
            root=sample_project,
            enabled_rules=("memoize-in-function",),
            allowlist_path=base / "allow.yaml",
        )
        assert run(cfg)[0].stale == ()
        stale = run(cfg, check_stale=True)[0].stale
        assert [s.entry for s in stale] == ["src/lib/cache.js:5"]

    def test_to_dict(self, sample_project):
        cfg = LintConfig(root=sample_project, enabled_rules=("or-fallback",))
        payload = run(cfg)[0].to_dict()
        assert payload["rule"] == "or-fallback"
        assert payload["violations"] == [{
            "location": "src/lib/cache.js:8",
            "code": "const items = getItems() || [];",
            "reason": "|| [] fallback masks missing data",
        }]
        assert payload["allowed"] == []
        assert payload["stale"] == []

    def test_render_clean(self, tmp_path):
        results = run(LintConfig(root=tmp_path))
        assert render_human(results, 10).endswith("OK - no violations")


class TestMain:
    """Command-line entry point and exit codes."""

    def test_violations_exit_1(self, sample_project, capsys):
        code = main([str(sample_project), "--allowlists", str(sample_project / "allowlists.yaml")])
        out = capsys.readouterr().out
        assert code == 1
        assert "[or-fallback]" in out
        assert "Found 1 || fallback:" in out
        assert "[mutable-declaration]" not in out

    def test_config_file_clean_exit_0(self, sample_project, capsys):
        code = main([
            str(sample_project),
            "--config", str(sample_project / "codeguard.yaml"),
            "--check-stale",
        ])
        assert code == 0
        assert "OK - no violations" in capsys.readouterr().out

    def test_json_output(self, sample_project, capsys):
        code = main([str(sample_project), "--rules", "variable-alias", "--json"])
        payload = json.loads(capsys.readouterr().out)
        assert code == 1
        assert [v["location"] for v in payload[0]["violations"]] == [
            "src/lib/alias.js:3",
            "src/lib/alias.js:4",
        ]

    def test_limit(self, sample_project, capsys):
        main([str(sample_project), "--rules", "variable-alias", "--limit", "1"])
        assert "... and 1 more" in capsys.readouterr().out

    def test_explicit_files(self, sample_project, capsys):
        code = main([str(sample_project), "--rules", "variable-alias", "--files", "src/lib/cache.js"])
        assert code == 0

    def test_stale_entries_exit_1(self, sample_project, write_tree, capsys):
        base = write_tree({"allow.yaml": "ALLOWED_MEMOIZE:\n  - src/lib/cache.js:4\n  - src/lib/gone.js:3\n"})
        code = main([
            str(sample_project),
            "--rules", "memoize-in-function",
            "--allowlists", str(base / "allow.yaml"),
            "--check-stale",
        ])
        out = capsys.readouterr().out
        assert code == 1
        assert "Stale ALLOWED_MEMOIZE entries:" in out
        assert "src/lib/gone.js:3: File not found: src/lib/gone.js" in out

    @pytest.mark.parametrize("args", [
        ["--rules", "no-such-rule"],
        ["--allowlists", "does-not-exist.yaml"],
        ["--files", "src/lib/gone.js"],
    ])
    def test_configuration_error_exit_2(self, sample_project, capsys, args):
        code = main([str(sample_project), *args])
        assert code == 2
        assert capsys.readouterr().err.startswith("codeguard: ")

"""
Tests for the wcag-engine command line interface.
"""

import csv
import io
import json
import logging

import pytest

from wcag_engine import cli
from wcag_engine.cli import EXIT_CLEAN, EXIT_ERROR, EXIT_ISSUES, main
from wcag_engine.monitoring.logger import logger
from wcag_engine.reporting import CSV_COLUMNS


DIRTY = '<h1>Team</h1><img src="hero.jpg"><table><tr><td>A</td><td>B</td></tr></table>'
CLEAN = '<h1>Team</h1><img src="hero.jpg" alt="Our team">'


@pytest.fixture(autouse=True)
def restore_engine_logger(capsys):
    """main() points the engine handler at the captured stderr; undo it before capture closes."""
    level = logger.level
    handlers = [h for h in logger.handlers if isinstance(h, logging.StreamHandler)]
    streams = [h.stream for h in handlers]
    yield
    logger.setLevel(level)
    for handler, stream in zip(handlers, streams):
        # capsys has already closed the captured stream by teardown, so
        # setStream() (which flushes the old stream) cannot be used here
        handler.stream = stream


@pytest.fixture
def page(tmp_path):
    def _page(content, name="page.html"):
        path = tmp_path / name
        path.write_text(content, encoding="utf-8")
        return str(path)
    return _page


class TestScanCommand:
    def test_issues_exit_one(self, page, capsys):
        assert main(["scan", page(DIRTY)]) == EXIT_ISSUES
        out = capsys.readouterr().out
        assert out.startswith("Score: ")
        assert "missing-alt-text" in out
        assert "Fixable: " in out

    def test_clean_exit_zero(self, page, capsys):
        assert main(["scan", page(CLEAN)]) == EXIT_CLEAN
        assert capsys.readouterr().out.startswith("Score: 100/100 (0 issue(s))")

    def test_json_format(self, page, capsys):
        main(["scan", page(DIRTY), "--format", "json", "--rules", "alt-text,table-header"])
        data = json.loads(capsys.readouterr().out)
        assert data["rules_run"] == ["missing-alt-text", "table-header"]
        assert [issue["rule_id"] for issue in data["issues"]] == ["missing-alt-text", "table-header"]

    def test_csv_format(self, page, capsys):
        main(["scan", page(DIRTY), "--format", "csv", "--rules", "missing-alt-text"])
        rows = list(csv.reader(io.StringIO(capsys.readouterr().out)))
        assert rows[0] == CSV_COLUMNS
        assert rows[1][0] == "missing-alt-text"

    def test_site_url_enables_external_links(self, page, capsys):
        path = page('<a href="https://partner.org">Partner</a>')
        assert main(["scan", path, "--rules", "external-link"]) == EXIT_CLEAN
        assert main(["scan", path, "--rules", "external-link", "--site-url", "https://example.com"]) == EXIT_ISSUES

    def test_missing_file(self, tmp_path, capsys):
        assert main(["scan", str(tmp_path / "missing.html")]) == EXIT_ERROR
        assert "Cannot read" in capsys.readouterr().err

    def test_unknown_rule(self, page, capsys):
        assert main(["scan", page(DIRTY), "--rules", "no-such-rule"]) == EXIT_ERROR
        assert "Unknown rule id: 'no-such-rule'" in capsys.readouterr().err


class TestFixCommand:
    def test_fix_to_stdout(self, page, capsys):
        assert main(["fix", page(DIRTY), "--rules", "missing-alt-text,table-header"]) == EXIT_CLEAN
        captured = capsys.readouterr()
        assert captured.out.strip() == (
            '<h1>Team</h1><img src="hero.jpg" alt="Hero"/>'
            '<table><tr><th scope="col">A</th><th scope="col">B</th></tr></table>'
        )
        assert "Fixed 3 instance(s)" in captured.err

    def test_fix_to_file(self, page, tmp_path, capsys):
        output = tmp_path / "fixed.html"
        main(["fix", page(DIRTY), "--rules", "missing-alt-text", "--output", str(output)])
        assert 'alt="Hero"' in output.read_text(encoding="utf-8")
        assert capsys.readouterr().out == ""

    def test_inert_rules_reported_as_manual(self, page, capsys):
        main(["fix", page(DIRTY), "--rules", "contrast"])
        assert "Manual remediation: text-color-contrast" in capsys.readouterr().err

    def test_rule_without_fixer(self, page, capsys):
        assert main(["fix", page(DIRTY), "--rules", "duplicate-link-text"]) == EXIT_ERROR

    def test_verbose_logs_stay_off_stdout(self, page, capsys, monkeypatch):
        monkeypatch.setattr(cli.settings, "LOG_LEVEL", "INFO")
        assert main(["-v", "fix", page(DIRTY), "--rules", "missing-alt-text"]) == EXIT_CLEAN
        captured = capsys.readouterr()
        assert captured.out.strip() == (
            '<h1>Team</h1><img src="hero.jpg" alt="Hero"/>'
            '<table><tr><td>A</td><td>B</td></tr></table>'
        )
        assert "remediation_completed" in captured.err


class TestRulesCommand:
    def test_lists_every_rule_with_status(self, registry, capsys):
        assert main(["rules"]) == EXIT_CLEAN
        lines = capsys.readouterr().out.splitlines()
        assert len(lines) == len(registry)

        status = {line.split()[0]: line.split()[-1] for line in lines}
        assert status["missing-alt-text"] == "fixable"
        assert status["keyboard-trap"] == "inert"
        assert status["duplicate-link-text"] == "manual"

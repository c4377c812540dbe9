"""Tests for outdated report rendering and export."""

import io
import json

import pytest

from constants import Constants
from merging.models import OutdatedDependency, OutdatedReport
from reporting.reporter import (
    ALL_CURRENT_MESSAGE,
    generate_report,
    render_console,
    render_markdown,
    report_to_dict,
)


@pytest.fixture
def reports():
    return [
        OutdatedReport("/repos/a", [
            OutdatedDependency("lodash", "^4.17.0", "^4.17.21"),
            OutdatedDependency("jest", "^28.0.0", "^29.0.0"),
        ]),
        OutdatedReport("/repos/c", [OutdatedDependency("lodash", "^4.16.0", "^4.17.21")]),
    ]


class TestRendering:
    """Pure rendering helpers."""

    def test_report_to_dict(self, reports):
        data = report_to_dict(reports, generated="2024-01-01T00:00:00Z")
        assert data["generated"] == "2024-01-01T00:00:00Z"
        assert data["summary"] == {"totalRepositories": 2, "totalOutdatedDeps": 3}
        assert data["reports"][0] == {
            "repoPath": "/repos/a",
            "outdatedDeps": [
                {"name": "lodash", "currentVersion": "^4.17.0", "selectedVersion": "^4.17.21"},
                {"name": "jest", "currentVersion": "^28.0.0", "selectedVersion": "^29.0.0"},
            ],
        }

    def test_markdown_tables(self, reports):
        text = render_markdown(reports, generated="2024-01-01T00:00:00Z")
        assert text.startswith("# Outdated Dependencies Report\n")
        assert "Generated: 2024-01-01T00:00:00Z" in text
        assert "- **Repositories with outdated dependencies:** 2" in text
        assert "- **Total outdated dependencies:** 3" in text
        assert "## /repos/a" in text
        assert "| Package | Current | Selected |" in text
        assert "| lodash | ^4.16.0 | ^4.17.21 |" in text

    def test_markdown_when_everything_current(self):
        text = render_markdown([], generated="now")
        assert ALL_CURRENT_MESSAGE in text
        assert "## Summary" not in text

    def test_console_text(self, reports):
        text = render_console(reports)
        assert "Found 3 outdated dependencies across 2 repositories" in text
        assert "   lodash: ^4.17.0 -> ^4.17.21" in text
        assert f"JSON report saved to: {Constants.REPORT_JSON_FILE}" in text

    def test_console_when_everything_current(self):
        assert ALL_CURRENT_MESSAGE in render_console([])


class TestGenerateReport:
    """File output per report mode."""

    def test_console_mode_writes_json_only(self, tmp_path, reports):
        out = io.StringIO()
        written = generate_report(reports, "console", output_dir=str(tmp_path), stream=out)

        assert written == [str(tmp_path / Constants.REPORT_JSON_FILE)]
        assert not (tmp_path / Constants.REPORT_MARKDOWN_FILE).exists()
        data = json.loads((tmp_path / Constants.REPORT_JSON_FILE).read_text(encoding="utf-8"))
        assert data["summary"]["totalOutdatedDeps"] == 3
        assert data["generated"].endswith("Z")
        assert "Outdated Dependencies Report" in out.getvalue()

    def test_file_mode_writes_markdown(self, tmp_path, reports):
        out = io.StringIO()
        written = generate_report(reports, "file", output_dir=str(tmp_path / "reports"), stream=out)

        md_path = tmp_path / "reports" / Constants.REPORT_MARKDOWN_FILE
        assert written[1] == str(md_path)
        assert "| jest | ^28.0.0 | ^29.0.0 |" in md_path.read_text(encoding="utf-8")
        assert f"  - {Constants.REPORT_MARKDOWN_FILE}" in out.getvalue()

    def test_defaults_to_cwd(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        generate_report([], "console", stream=io.StringIO())
        data = json.loads((tmp_path / Constants.REPORT_JSON_FILE).read_text(encoding="utf-8"))
        assert data["reports"] == []
        assert data["summary"] == {"totalRepositories": 0, "totalOutdatedDeps": 0}

"""Outdated dependency reports.

The JSON report is always written. In console mode a narrative report is also
printed; in file mode a Markdown report is written next to the JSON one.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence, TextIO

from constants import Constants, ReportModes
from merging.models import OutdatedReport

logger = logging.getLogger(__name__)

ALL_CURRENT_MESSAGE = "All repositories are using the latest dependency versions."


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def _total_outdated(reports: Sequence[OutdatedReport]) -> int:
    return sum(len(r.outdated_deps) for r in reports)


def report_to_dict(reports: Sequence[OutdatedReport], generated: Optional[str] = None) -> Dict[str, Any]:
    """Build the machine-readable report document."""
    return {
        "generated": generated or _timestamp(),
        "summary": {
            "totalRepositories": len(reports),
            "totalOutdatedDeps": _total_outdated(reports),
        },
        "reports": [
            {
                "repoPath": r.repo_path,
                "outdatedDeps": [
                    {
                        "name": d.name,
                        "currentVersion": d.current_version,
                        "selectedVersion": d.selected_version,
                    }
                    for d in r.outdated_deps
                ],
            }
            for r in reports
        ],
    }


def render_markdown(reports: Sequence[OutdatedReport], generated: Optional[str] = None) -> str:
    lines: List[str] = [
        "# Outdated Dependencies Report",
        "",
        f"Generated: {generated or _timestamp()}",
        "",
    ]
    if not reports:
        lines.append(ALL_CURRENT_MESSAGE)
        return "\n".join(lines) + "\n"

    lines += [
        "## Summary",
        "",
        f"- **Repositories with outdated dependencies:** {len(reports)}",
        f"- **Total outdated dependencies:** {_total_outdated(reports)}",
        "",
    ]
    for report in reports:
        lines += [
            f"## {report.repo_path}",
            "",
            "| Package | Current | Selected |",
            "|---------|---------|----------|",
        ]
        for dep in report.outdated_deps:
            lines.append(f"| {dep.name} | {dep.current_version} | {dep.selected_version} |")
        lines.append("")
    return "\n".join(lines)


def render_console(reports: Sequence[OutdatedReport]) -> str:
    lines: List[str] = ["", "Outdated Dependencies Report", ""]
    if not reports:
        lines.append(ALL_CURRENT_MESSAGE)
        return "\n".join(lines) + "\n"

    lines += [
        f"Found {_total_outdated(reports)} outdated dependencies across {len(reports)} repositories",
        "",
    ]
    for report in reports:
        lines.append(report.repo_path)
        for dep in report.outdated_deps:
            lines.append(f"   {dep.name}: {dep.current_version} -> {dep.selected_version}")
        lines.append("")
    lines.append(f"JSON report saved to: {Constants.REPORT_JSON_FILE}")
    return "\n".join(lines) + "\n"


def _write(path: str, content: str) -> None:
    with open(path, "w", encoding="utf-8") as file:
        file.write(content)


def generate_report(
    reports: Sequence[OutdatedReport],
    mode: str,
    output_dir: Optional[str] = None,
    stream: Optional[TextIO] = None,
) -> List[str]:
    """Write the outdated dependency report.

    Args:
        reports: Outdated reports from the merge.
        mode: "console" or "file".
        output_dir: Directory for report files (defaults to cwd).
        stream: Where console output goes (defaults to stdout).

    Returns:
        Paths of the files written.

    Raises:
        OSError: If a report file cannot be written.
    """
    out = stream or sys.stdout
    directory = os.path.abspath(output_dir or os.getcwd())
    os.makedirs(directory, exist_ok=True)
    generated = _timestamp()

    json_path = os.path.join(directory, Constants.REPORT_JSON_FILE)
    _write(json_path, json.dumps(report_to_dict(reports, generated), indent=2, ensure_ascii=False) + "\n")
    logger.info("JSON report has been successfully exported at: %s", json_path)
    written = [json_path]

    if mode == ReportModes.CONSOLE.value:
        out.write(render_console(reports))
        return written

    md_path = os.path.join(directory, Constants.REPORT_MARKDOWN_FILE)
    _write(md_path, render_markdown(reports, generated))
    written.append(md_path)
    out.write(f"Reports written to {directory}\n")
    out.write(f"  - {Constants.REPORT_JSON_FILE}\n")
    out.write(f"  - {Constants.REPORT_MARKDOWN_FILE}\n")
    return written

"""Repository scanner: validates configured paths and reads their package.json."""

from __future__ import annotations

import json
import logging
import os
from typing import Any, Dict, List, Sequence

from common.logging_utils import extra_context, is_debug_enabled
from constants import Constants
from merging.models import RepositoryRecord

logger = logging.getLogger(__name__)


class ScanError(ValueError):
    """Raised when one or more repositories cannot be scanned."""


def _find_invalid(repo_paths: Sequence[str]) -> List[str]:
    """Return a description of every path that is missing or lacks a manifest."""
    invalid: List[str] = []
    for repo_path in repo_paths:
        absolute_path = os.path.abspath(repo_path)
        if not os.path.exists(absolute_path):
            invalid.append(absolute_path)
            continue
        if not os.path.isfile(os.path.join(absolute_path, Constants.PACKAGE_JSON_FILE)):
            invalid.append(f"{absolute_path} (missing package.json)")
    return invalid


def _read_mapping(manifest: Dict[str, Any], key: str, manifest_path: str) -> Dict[str, str]:
    section = manifest.get(key)
    if section is None:
        return {}
    if not isinstance(section, dict):
        raise ScanError(f"'{key}' in {manifest_path} must be an object")
    for name, spec in section.items():
        if not isinstance(spec, str):
            raise ScanError(f"Version of '{name}' in {manifest_path} ({key}) must be a string")
    return dict(section)


def _parse_package_json(repo_path: str) -> RepositoryRecord:
    manifest_path = os.path.join(repo_path, Constants.PACKAGE_JSON_FILE)
    try:
        with open(manifest_path, "r", encoding="utf-8") as file:
            manifest = json.load(file)
    except (OSError, json.JSONDecodeError) as e:
        raise ScanError(f"Failed to parse {manifest_path}: {e}") from e
    if not isinstance(manifest, dict):
        raise ScanError(f"{manifest_path} does not contain a JSON object")

    name = manifest.get("name")
    return RepositoryRecord(
        path=repo_path,
        dependencies=_read_mapping(manifest, "dependencies", manifest_path),
        dev_dependencies=_read_mapping(manifest, "devDependencies", manifest_path),
        name=name if isinstance(name, str) else None,
    )


def scan_repositories(repo_paths: Sequence[str]) -> List[RepositoryRecord]:
    """Scan repositories and extract their dependency declarations.

    Every path is validated before any manifest is read, and all invalid
    entries are reported together.

    Args:
        repo_paths: Repository directories in configuration order.

    Returns:
        One RepositoryRecord per path, in the same order.

    Raises:
        ScanError: If any path is invalid or a manifest cannot be parsed.
    """
    invalid = _find_invalid(repo_paths)
    if invalid:
        raise ScanError(
            "Configuration error - the following repositories are invalid:\n"
            + "\n".join(f"  - {p}" for p in invalid)
        )

    records: List[RepositoryRecord] = []
    for repo_path in repo_paths:
        record = _parse_package_json(os.path.abspath(repo_path))
        if is_debug_enabled(logger):
            logger.debug(
                "Scanned repository",
                extra=extra_context(
                    event="scan",
                    component="scanner",
                    action="parse_manifest",
                    target=record.path,
                    dependencies=len(record.dependencies),
                    dev_dependencies=len(record.dev_dependencies),
                ),
            )
        records.append(record)
    return records


def get_scan_summary(records: Sequence[RepositoryRecord]) -> str:
    lines: List[str] = []
    for record in records:
        lines.append(f"  {record.name or 'unnamed'} ({record.path})")
        lines.append(
            f"    dependencies: {len(record.dependencies)}, devDependencies: {len(record.dev_dependencies)}"
        )
    return "\n".join(lines)

"""pnpm-lock.yaml inspection.

Used after the install step to confirm the lockfile is readable and to log
how many packages ended up in the cache. Handles the lockfile layouts of
pnpm 7 (v5.x), pnpm 8 (v6.x) and pnpm 9 (v9.x).
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

import yaml

logger = logging.getLogger(__name__)

_PEER_SUFFIX_RE = re.compile(r'\(.*\)$')


@dataclass
class LockfileSummary:
    """What the archive is about to ship."""

    lockfile_version: Optional[str]
    package_names: List[str] = field(default_factory=list)
    importer_count: int = 0

    @property
    def package_count(self) -> int:
        return len(self.package_names)


def package_name_from_key(key: str) -> Optional[str]:
    """Extract the package name from a ``packages`` key.

    Examples:
        "/lodash/4.17.21"            (v5) -> "lodash"
        "/@babel/core@7.24.0"        (v6) -> "@babel/core"
        "react-dom@18.2.0(react@18)" (v9) -> "react-dom"
    """
    key = _PEER_SUFFIX_RE.sub("", key.strip()).lstrip("/")
    if not key:
        return None

    parts = key.split("/")
    head = parts[:2] if key.startswith("@") else parts[:1]
    if key.startswith("@") and len(head) < 2:
        return None

    last = head[-1]
    at = last.find("@")
    if at > 0:
        last = last[:at]
    return "/".join(head[:-1] + [last]) or None


def summarize_pnpm_lock(lockfile_path: str) -> LockfileSummary:
    """Read a pnpm lockfile and summarize it.

    Args:
        lockfile_path: Path to pnpm-lock.yaml.

    Returns:
        LockfileSummary; missing sections count as empty.

    Raises:
        OSError: If the file cannot be read.
        yaml.YAMLError: If the file is not valid YAML.
    """
    with open(lockfile_path, "r", encoding="utf-8") as fh:
        data: Any = yaml.safe_load(fh) or {}
    if not isinstance(data, dict):
        logger.warning("Unexpected lockfile layout in %s", lockfile_path)
        return LockfileSummary(lockfile_version=None)

    version = data.get("lockfileVersion")
    packages: Dict[str, Any] = data.get("packages") or {}
    importers: Dict[str, Any] = data.get("importers") or {}

    names: Set[str] = set()
    for key in packages:
        name = package_name_from_key(str(key))
        if name:
            names.add(name)

    # Single-project v5 lockfiles have no importers section
    importer_count = len(importers) if importers else (1 if packages or data.get("dependencies") else 0)

    return LockfileSummary(
        lockfile_version=str(version) if version is not None else None,
        package_names=sorted(names),
        importer_count=importer_count,
    )

"""Data models for dependency merging across repositories."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from versioning.models import DependencyClass


@dataclass(frozen=True)
class RepositoryRecord:
    """Dependency declarations read from one repository's package.json.

    ``path`` is the unique identifier of the repository; ``name`` is the
    manifest's own name and is only used for display.
    """
    path: str
    dependencies: Dict[str, str] = field(default_factory=dict)
    dev_dependencies: Dict[str, str] = field(default_factory=dict)
    name: Optional[str] = None

    def declarations(self, dep_class: DependencyClass) -> Dict[str, str]:
        if dep_class == DependencyClass.NORMAL:
            return self.dependencies
        return self.dev_dependencies


@dataclass
class SelectionEntry:
    """Running choice for one package name within one dependency class."""
    selected: str
    sources: Dict[str, str] = field(default_factory=dict)


@dataclass(frozen=True)
class OutdatedDependency:
    """A declaration that resolves lower than the merged selection."""
    name: str
    current_version: str
    selected_version: str


@dataclass(frozen=True)
class OutdatedReport:
    """Outdated declarations of a single repository, in declaration order."""
    repo_path: str
    outdated_deps: List[OutdatedDependency]


@dataclass(frozen=True)
class MergeResult:
    """Merged manifests plus per-repository outdated reports.

    ``sources`` maps each dependency class to name -> {repository: specifier}
    for every declaration seen, so a selection can be explained.
    """
    merged_dependencies: Dict[str, str]
    merged_dev_dependencies: Dict[str, str]
    outdated_reports: List[OutdatedReport]
    sources: Dict[DependencyClass, Dict[str, Dict[str, str]]] = field(default_factory=dict)


@dataclass(frozen=True)
class MergeStats:
    """Counts used for progress output."""
    dependency_count: int
    dev_dependency_count: int
    outdated_repository_count: int
    outdated_dependency_count: int

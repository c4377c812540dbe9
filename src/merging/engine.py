"""Merge dependency declarations from many repositories into one manifest.

For every package name the highest version wins (see
versioning.comparator.select_higher). Ties are broken by first-seen order, so
callers must pass repositories in a fixed order, normally the order in which
they were configured; the same input order always yields the same output.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, List, Optional, Sequence

from common.logging_utils import extra_context, is_debug_enabled
from versioning.comparator import is_lower, select_higher
from versioning.models import DependencyClass

from .models import (
    MergeResult,
    OutdatedDependency,
    OutdatedReport,
    RepositoryRecord,
    SelectionEntry,
)

logger = logging.getLogger(__name__)

SelectionMap = Dict[str, SelectionEntry]


def _process_package(
    selections: SelectionMap,
    dep_class: DependencyClass,
    name: str,
    spec: str,
    repo_path: str,
) -> None:
    """Record one declaration, replacing the selection when it is higher."""
    entry = selections.get(name)
    if entry is None:
        selections[name] = SelectionEntry(selected=spec, sources={repo_path: spec})
        return

    entry.sources[repo_path] = spec
    choice = select_higher(entry.selected, spec)
    if choice.preferred_is_a:
        return

    if is_debug_enabled(logger):
        logger.debug(
            "Selection changed",
            extra=extra_context(
                event="decision",
                component="merger",
                action="select_higher",
                target=name,
                dep_class=dep_class.value,
                previous=entry.selected,
                selected=choice.selected,
                repo=repo_path,
            ),
        )
    entry.selected = choice.selected


def _collect_selections(repositories: Sequence[RepositoryRecord]) -> Dict[DependencyClass, SelectionMap]:
    selections: Dict[DependencyClass, SelectionMap] = {
        DependencyClass.NORMAL: {},
        DependencyClass.DEVELOPMENT: {},
    }
    for repo in repositories:
        for dep_class in DependencyClass:
            for name, spec in repo.declarations(dep_class).items():
                _process_package(selections[dep_class], dep_class, name, spec, repo.path)
    return selections


def _find_outdated(
    repo: RepositoryRecord,
    dep_class: DependencyClass,
    lookup: Callable[[str], Optional[str]],
) -> List[OutdatedDependency]:
    outdated: List[OutdatedDependency] = []
    for name, spec in repo.declarations(dep_class).items():
        selected = lookup(name)
        if selected is None or selected == spec:
            continue
        if is_lower(spec, selected):
            outdated.append(OutdatedDependency(name=name, current_version=spec, selected_version=selected))
    return outdated


def _build_outdated_reports(
    repositories: Sequence[RepositoryRecord],
    selections: Dict[DependencyClass, SelectionMap],
    merged_dev: Dict[str, str],
) -> List[OutdatedReport]:
    normal = selections[DependencyClass.NORMAL]
    dev = selections[DependencyClass.DEVELOPMENT]

    def normal_lookup(name: str) -> Optional[str]:
        entry = normal.get(name)
        return entry.selected if entry else None

    def dev_lookup(name: str) -> Optional[str]:
        # Names folded into dependencies compare against the normal selection.
        if name in merged_dev:
            return dev[name].selected
        return normal_lookup(name)

    reports: List[OutdatedReport] = []
    for repo in repositories:
        outdated = _find_outdated(repo, DependencyClass.NORMAL, normal_lookup)
        outdated.extend(_find_outdated(repo, DependencyClass.DEVELOPMENT, dev_lookup))
        if outdated:
            reports.append(OutdatedReport(repo_path=repo.path, outdated_deps=outdated))
    return reports


def merge_dependencies(repositories: Sequence[RepositoryRecord]) -> MergeResult:
    """Merge the dependencies of all repositories, selecting the highest versions.

    A package that is a normal dependency in any repository is never listed as
    a dev dependency in the result. Input records are not modified.

    Args:
        repositories: Repository records in canonical (configuration) order.

    Returns:
        MergeResult with merged mappings and per-repository outdated reports.
    """
    selections = _collect_selections(repositories)

    merged_dependencies = {
        name: entry.selected for name, entry in selections[DependencyClass.NORMAL].items()
    }
    merged_dev_dependencies = {
        name: entry.selected
        for name, entry in selections[DependencyClass.DEVELOPMENT].items()
        if name not in merged_dependencies
    }

    reports = _build_outdated_reports(repositories, selections, merged_dev_dependencies)

    sources = {
        dep_class: {name: dict(entry.sources) for name, entry in class_map.items()}
        for dep_class, class_map in selections.items()
    }

    logger.debug(
        "Merged %d repositories into %d dependencies and %d devDependencies",
        len(repositories),
        len(merged_dependencies),
        len(merged_dev_dependencies),
    )
    return MergeResult(
        merged_dependencies=merged_dependencies,
        merged_dev_dependencies=merged_dev_dependencies,
        outdated_reports=reports,
        sources=sources,
    )

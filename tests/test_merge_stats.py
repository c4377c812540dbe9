"""Tests for merge summary counts."""

from merging.engine import merge_dependencies
from merging.models import MergeResult, MergeStats, OutdatedDependency, OutdatedReport, RepositoryRecord
from merging.stats import compute_merge_stats, format_merge_stats


def test_compute_merge_stats_counts_everything():
    result = MergeResult(
        merged_dependencies={"a": "1.0.0", "b": "2.0.0"},
        merged_dev_dependencies={"c": "3.0.0"},
        outdated_reports=[
            OutdatedReport("/r1", [OutdatedDependency("a", "0.9.0", "1.0.0"), OutdatedDependency("c", "2.0.0", "3.0.0")]),
            OutdatedReport("/r2", [OutdatedDependency("b", "1.0.0", "2.0.0")]),
        ],
    )
    assert compute_merge_stats(result) == MergeStats(
        dependency_count=2,
        dev_dependency_count=1,
        outdated_repository_count=2,
        outdated_dependency_count=3,
    )


def test_format_merge_stats_lines():
    result = merge_dependencies([
        RepositoryRecord("/a", {"lodash": "^4.17.0"}, {"jest": "^29.0.0"}),
        RepositoryRecord("/b", {"lodash": "^4.17.21"}),
    ])
    assert format_merge_stats(result).splitlines() == [
        "Merged dependencies: 1",
        "Merged devDependencies: 1",
        "Repositories with outdated deps: 1",
        "Total outdated dependencies: 1",
    ]


def test_empty_result_is_all_zero():
    stats = compute_merge_stats(merge_dependencies([]))
    assert stats == MergeStats(0, 0, 0, 0)

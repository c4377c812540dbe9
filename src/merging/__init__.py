"""Cross-repository dependency merging."""

from .engine import merge_dependencies
from .models import (
    MergeResult,
    MergeStats,
    OutdatedDependency,
    OutdatedReport,
    RepositoryRecord,
)
from .stats import compute_merge_stats, format_merge_stats

__all__ = [
    "MergeResult",
    "MergeStats",
    "OutdatedDependency",
    "OutdatedReport",
    "RepositoryRecord",
    "compute_merge_stats",
    "format_merge_stats",
    "merge_dependencies",
]

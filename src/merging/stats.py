"""Summary counts for a merge result."""

from .models import MergeResult, MergeStats


def compute_merge_stats(result: MergeResult) -> MergeStats:
    return MergeStats(
        dependency_count=len(result.merged_dependencies),
        dev_dependency_count=len(result.merged_dev_dependencies),
        outdated_repository_count=len(result.outdated_reports),
        outdated_dependency_count=sum(len(r.outdated_deps) for r in result.outdated_reports),
    )


def format_merge_stats(result: MergeResult) -> str:
    """Render the merge counts as the four-line block shown after a merge."""
    stats = compute_merge_stats(result)
    return "\n".join([
        f"Merged dependencies: {stats.dependency_count}",
        f"Merged devDependencies: {stats.dev_dependency_count}",
        f"Repositories with outdated deps: {stats.outdated_repository_count}",
        f"Total outdated dependencies: {stats.outdated_dependency_count}",
    ])

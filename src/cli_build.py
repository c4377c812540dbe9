"""CLI handlers for building and extracting cache archives.

Build pipeline: load configuration -> scan repositories -> merge -> report ->
install and archive. Configuration and scan errors abort before the merge.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Optional, TextIO

from archive.builder import build_archive, extract_archive
from common.logging_utils import extra_context, is_debug_enabled
from constants import ExitCodes
from merging.engine import merge_dependencies
from merging.stats import format_merge_stats
from reporting.reporter import generate_report
from repository.config import ConfigError, load_config
from repository.scanner import get_scan_summary, scan_repositories

logger = logging.getLogger(__name__)


def run_build(args: Any, stream: Optional[TextIO] = None) -> int:
    """Build the cache archive from the configured repositories.

    Returns:
        Exit code; EXIT_WARNINGS when outdated dependencies were found and
        --error-on-warnings is set.

    Raises:
        ConfigError: No output path or no repositories configured.
        ScanError: A configured repository is invalid.
        ArchiveError: pnpm install or packaging failed.
    """
    out = stream or sys.stdout

    logger.info("Loading configuration...")
    config = load_config(args.CONFIG)
    output = args.OUTPUT or config.default_output
    if not output:
        raise ConfigError(
            "No output path given. Use --output or set one with \"nodecache config --set-output <path>\"."
        )
    report_mode = args.REPORT_MODE or config.report_mode
    if not config.repositories:
        raise ConfigError(
            'No repositories configured. Use "nodecache add <path>" to add repositories first.'
        )
    logger.info("Loaded %d repositories", len(config.repositories))

    logger.info("Scanning repositories...")
    records = scan_repositories(config.repositories)
    out.write(get_scan_summary(records) + "\n")

    logger.info("Merging dependencies...")
    result = merge_dependencies(records)
    out.write(format_merge_stats(result) + "\n")
    if is_debug_enabled(logger):
        logger.debug(
            "Merge complete",
            extra=extra_context(
                event="function_exit",
                component="cli",
                action="merge",
                outcome="outdated" if result.outdated_reports else "current",
                count=len(result.merged_dependencies) + len(result.merged_dev_dependencies),
            ),
        )

    generate_report(result.outdated_reports, report_mode, output_dir=args.REPORT_DIR, stream=out)

    logger.info("Building archive...")
    archive_path = build_archive(result, output)
    out.write(f"\nBuild completed successfully! Archive: {archive_path}\n")

    if result.outdated_reports:
        logger.warning("One or more repositories use outdated dependency versions.")
        if getattr(args, "ERROR_ON_WARNINGS", False):
            logger.error("Warnings present, exiting with non-zero status code.")
            return ExitCodes.EXIT_WARNINGS.value
    return ExitCodes.SUCCESS.value


def run_extract(args: Any, stream: Optional[TextIO] = None) -> int:
    out = stream or sys.stdout
    target = extract_archive(args.ARCHIVE, args.TARGET_DIR)
    out.write(f"Extracted {os.path.abspath(args.ARCHIVE)} into {target}\n")
    return ExitCodes.SUCCESS.value

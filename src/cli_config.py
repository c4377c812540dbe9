"""CLI handlers for the repository list and configuration commands.

Each handler returns the process exit code; configuration errors propagate as
ConfigError and are turned into exit codes by the entry point.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from typing import Any, Optional, TextIO

from constants import ExitCodes
from repository.config import (
    add_repository,
    list_repositories,
    load_config,
    remove_repository,
    update_config,
)

logger = logging.getLogger(__name__)


def _out(stream: Optional[TextIO]) -> TextIO:
    return stream or sys.stdout


def run_add(args: Any, stream: Optional[TextIO] = None) -> int:
    config = add_repository(args.REPO_PATH, args.CONFIG)
    out = _out(stream)
    out.write(f"Added repository: {os.path.abspath(args.REPO_PATH)}\n")
    out.write(f"Total repositories: {len(config.repositories)}\n")
    return ExitCodes.SUCCESS.value


def run_remove(args: Any, stream: Optional[TextIO] = None) -> int:
    config = remove_repository(args.REPO_PATH, args.CONFIG)
    out = _out(stream)
    out.write(f"Removed repository: {args.REPO_PATH}\n")
    out.write(f"Remaining repositories: {len(config.repositories)}\n")
    return ExitCodes.SUCCESS.value


def run_list(args: Any, stream: Optional[TextIO] = None) -> int:
    repositories = list_repositories(args.CONFIG)
    out = _out(stream)
    if not repositories:
        out.write("No repositories configured.\n")
        out.write('Use "nodecache add <path>" to add repositories.\n')
        return ExitCodes.SUCCESS.value

    out.write("Configured repositories:\n")
    for repo in repositories:
        out.write(f"  - {repo}\n")
    out.write(f"\nTotal: {len(repositories)} repositories\n")
    return ExitCodes.SUCCESS.value


def run_config(args: Any, stream: Optional[TextIO] = None) -> int:
    out = _out(stream)
    modified = bool(args.SET_OUTPUT or args.SET_REPORT_MODE)
    if modified:
        config = update_config(
            default_output=args.SET_OUTPUT,
            report_mode=args.SET_REPORT_MODE,
            config_path=args.CONFIG,
        )
        if args.SET_OUTPUT:
            out.write(f"Set default output: {args.SET_OUTPUT}\n")
        if args.SET_REPORT_MODE:
            out.write(f"Set report mode: {args.SET_REPORT_MODE}\n")
    else:
        config = load_config(args.CONFIG)

    if args.SHOW or not modified:
        out.write("\nCurrent configuration:\n")
        out.write(json.dumps(config.to_dict(), indent=2) + "\n")
        if config.path:
            logger.info("Configuration file: %s", config.path)
    return ExitCodes.SUCCESS.value

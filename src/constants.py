"""Constants used in the project."""

import os
from enum import Enum


class ExitCodes(Enum):
    """Exit codes for the program.

    Args:
        Enum (int): Exit codes for the program.
    """

    SUCCESS = 0
    FILE_ERROR = 1
    INSTALL_ERROR = 2
    EXIT_WARNINGS = 3


class ReportModes(Enum):
    """Where the outdated dependency report goes besides the JSON file.

    Args:
        Enum (string): Report modes supported by the program.
    """

    CONSOLE = "console"
    FILE = "file"


class Constants:  # pylint: disable=too-few-public-methods
    """General constants used in the project.
    Data holder for configuration constants; not intended to provide behavior.
    """

    PROGRAM_NAME = "node-cache-builder"
    VERSION = "1.0.0"

    # Configuration discovery, in search order within each directory
    CONFIG_FILE = ".nodecacherc.json"
    CONFIG_SEARCH_PLACES = [
        ".nodecacherc.json",
        ".nodecacherc.yml",
        ".nodecacherc.yaml",
        "nodecache.config.json",
        "nodecache.config.yml",
        "nodecache.config.yaml",
        ".node-cache-builderrc.json",
        "node-cache-builder.config.json",
    ]
    YAML_EXTENSIONS = (".yml", ".yaml")
    REPORT_MODES = [ReportModes.CONSOLE.value, ReportModes.FILE.value]
    DEFAULT_REPORT_MODE = ReportModes.CONSOLE.value

    PACKAGE_JSON_FILE = "package.json"
    PNPM_LOCK_FILE = "pnpm-lock.yaml"
    NODE_MODULES_DIR = "node_modules"
    ARCHIVE_MEMBERS = [NODE_MODULES_DIR, PNPM_LOCK_FILE, PACKAGE_JSON_FILE]

    AGGREGATE_PACKAGE_NAME = "node-cache-builder-aggregate"
    AGGREGATE_PACKAGE_VERSION = "1.0.0"
    AGGREGATE_PACKAGE_DESCRIPTION = "Aggregated dependencies from multiple repositories"
    TEMP_DIR_PREFIX = "node-cache-builder-"

    PNPM_COMMAND = os.environ.get("NODECACHE_PNPM", "pnpm")
    INSTALL_TIMEOUT_SEC = 1800
    INSTALL_STDERR_TAIL_LINES = 20

    REPORT_JSON_FILE = "outdated-report.json"
    REPORT_MARKDOWN_FILE = "outdated-report.md"

    LOG_LEVEL_ENV = "NODECACHE_LOG_LEVEL"
    LOG_LEVELS = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
    LOG_FORMAT = "[%(levelname)s] %(message)s"
    LOG_FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

"""Argument parsing functionality for node-cache-builder."""

import argparse
from constants import Constants


def _common_options() -> argparse.ArgumentParser:
    """Options shared by every subcommand."""
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (JSON, YML or YAML). "
                             "Defaults to the first config file found from the current directory upwards.",
                        action="store",
                        type=str)
    common.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=Constants.LOG_LEVELS,
                        default="INFO")
    common.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    common.add_argument("-q", "--quiet",
                        dest="QUIET",
                        help="Only report errors on the console.",
                        action="store_true")
    return common


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level parser with one subparser per command."""
    common = _common_options()
    parser = argparse.ArgumentParser(
        prog="nodecache",
        description=(
            "Aggregate dependencies from multiple repositories and build pnpm cache archives for CI/CD"
        ),
        add_help=True,
    )
    parser.add_argument("--version", action="version",
                        version=f"{Constants.PROGRAM_NAME} {Constants.VERSION}")

    sub = parser.add_subparsers(dest="action", metavar="<command>")
    sub.required = True

    add_cmd = sub.add_parser("add", parents=[common],
                             help="Add a repository to the configuration")
    add_cmd.add_argument("REPO_PATH", metavar="repo-path", type=str,
                         help="Repository directory containing package.json")

    remove_cmd = sub.add_parser("remove", parents=[common],
                                help="Remove a repository from the configuration")
    remove_cmd.add_argument("REPO_PATH", metavar="repo-path", type=str,
                            help="Repository directory as added")

    sub.add_parser("list", parents=[common],
                   help="List all configured repositories")

    build_cmd = sub.add_parser("build", parents=[common],
                               help="Build the pnpm cache archive from configured repositories")
    build_cmd.add_argument("-o", "--output",
                           dest="OUTPUT",
                           help="Output path for the archive (e.g., cache.tar.gz). "
                                "Defaults to defaultOutput from the configuration.",
                           action="store",
                           type=str)
    build_cmd.add_argument("--report-mode",
                           dest="REPORT_MODE",
                           help="Report mode: console or file (default: from configuration, else console)",
                           action="store",
                           type=str.lower,
                           choices=Constants.REPORT_MODES)
    build_cmd.add_argument("--report-dir",
                           dest="REPORT_DIR",
                           help="Directory for report files (default: current directory)",
                           action="store",
                           type=str)
    build_cmd.add_argument("--error-on-warnings",
                           dest="ERROR_ON_WARNINGS",
                           help="Exit with a non-zero status code if outdated dependencies are found.",
                           action="store_true")

    config_cmd = sub.add_parser("config", parents=[common],
                                help="View or modify configuration")
    config_cmd.add_argument("--set-output",
                            dest="SET_OUTPUT",
                            help="Set default output path",
                            action="store",
                            type=str)
    config_cmd.add_argument("--set-report-mode",
                            dest="SET_REPORT_MODE",
                            help="Set default report mode (console|file)",
                            action="store",
                            type=str.lower,
                            choices=Constants.REPORT_MODES)
    config_cmd.add_argument("--show",
                            dest="SHOW",
                            help="Show current configuration",
                            action="store_true")

    extract_cmd = sub.add_parser("extract", parents=[common],
                                 help="Extract a cache archive into a directory")
    extract_cmd.add_argument("ARCHIVE", metavar="archive", type=str,
                             help="Path to the .tar.gz archive")
    extract_cmd.add_argument("TARGET_DIR", metavar="target-dir", type=str, nargs="?",
                             default=".",
                             help="Directory to extract into (default: current directory)")

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)

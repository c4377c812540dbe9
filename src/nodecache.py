"""node-cache-builder - merge package.json dependencies across repositories
and build a pnpm cache archive for CI.

    Returns:
        int: Exit code
"""
import logging
import os
import sys

from args import parse_args
from archive.builder import ArchiveError
from common.logging_utils import configure_logging, extra_context, is_debug_enabled
from constants import Constants, ExitCodes
from repository.config import ConfigError
from repository.scanner import ScanError

import cli_build
import cli_config

COMMANDS = {
    "add": cli_config.run_add,
    "remove": cli_config.run_remove,
    "list": cli_config.run_list,
    "config": cli_config.run_config,
    "build": cli_build.run_build,
    "extract": cli_build.run_extract,
}


def _setup_logging(args):
    """Configure logging based on CLI arguments."""
    # Honor CLI --loglevel by passing it to centralized logger via env
    if getattr(args, "LOG_LEVEL", None):
        os.environ[Constants.LOG_LEVEL_ENV] = str(args.LOG_LEVEL).upper()
    configure_logging(log_file=getattr(args, "LOG_FILE", None), quiet=getattr(args, "QUIET", False))


def run(argv=None) -> int:
    """Parse arguments, dispatch the subcommand and map errors to exit codes."""
    args = parse_args(argv)
    _setup_logging(args)
    logger = logging.getLogger(__name__)

    if is_debug_enabled(logger):
        logger.debug(
            "CLI start",
            extra=extra_context(event="function_entry", component="cli", action=args.action)
        )

    handler = COMMANDS[args.action]
    try:
        return handler(args)
    except (ConfigError, ScanError) as e:
        logger.error("%s", e)
        return ExitCodes.FILE_ERROR.value
    except ArchiveError as e:
        logger.error("Build failed: %s", e)
        return ExitCodes.INSTALL_ERROR.value
    except OSError as e:
        logger.error("File error: %s", e)
        return ExitCodes.FILE_ERROR.value


def main():
    """Main function of the program."""
    sys.exit(run())


if __name__ == "__main__":
    main()

#!/usr/bin/env python3

import argparse
import sys
from typing import FrozenSet, List, Optional

from actions.registry import ActionRegistry, build_registry
from config import ConfigParser
from dispatcher import Dispatcher
from utils.dry_run import DryRunRunner, generate_plan_report
from utils.error_handler import ConfigurationError, ErrorHandler, FatalError
from utils.logger import get_logger
from utils.process import CommandRunner, is_privileged, probe_tools

__version__ = "1.1.0"

USAGE = "Usage: archmaint [--all] [--dry-run] [--verbose] [--config PATH] [--log-file PATH]"


class MenuArgumentParser(argparse.ArgumentParser):
    """Parser that raises on malformed flags instead of exiting"""

    def error(self, message):
        raise argparse.ArgumentError(None, message)


def build_parser() -> argparse.ArgumentParser:
    # Prefixes such as --al must not select --all
    parser = MenuArgumentParser(prog="archmaint", usage=USAGE, add_help=False,
                                allow_abbrev=False,
                                description="Arch Linux maintenance menu")
    parser.add_argument("-h", "--help", action="store_true", help="Show usage and exit")
    parser.add_argument("--all", action="store_true", help="Run all tasks without prompting")
    parser.add_argument("--config", help="Path to config file")
    parser.add_argument("--dry-run", action="store_true", help="Show what would be done")
    parser.add_argument("--verbose", action="store_true", help="Verbose output")
    parser.add_argument("--log-file", help="Log to file")
    return parser


def tools_to_probe(registry: ActionRegistry, privileged: bool, sudo_command: str) -> List[str]:
    tools = set(registry.tools())
    tools.add("yay")
    if not privileged:
        tools.add(sudo_command)
    return sorted(tools)


def missing_tools_warning(missing: FrozenSet[str]) -> Optional[str]:
    if not missing:
        return None
    return f"⚠ Missing commands: {' '.join(sorted(missing))}. Some tasks will be skipped."


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    # Anything unrecognized falls through to the interactive menu
    try:
        args, _ = parser.parse_known_args(argv)
    except argparse.ArgumentError:
        args, _ = parser.parse_known_args([])

    if args.help:
        print(USAGE)
        return 0

    config_parser = ConfigParser(args.config)
    try:
        config_parser.load_config()
        registry = build_registry()
        config_parser.validate_action_names(registry.names())

        update_settings = config_parser.get_settings()
        log_level = "DEBUG" if args.verbose else update_settings.get('log_level', 'INFO')
        logger = get_logger(log_level, args.log_file, console_output=args.verbose)
        logger.info(f"Starting archmaint v{__version__}")

        privileged = is_privileged()
        sudo_command = update_settings.get('sudo_command', 'sudo')
        missing = probe_tools(tools_to_probe(registry, privileged, sudo_command))
        settings = config_parser.build_settings(
            privileged, missing,
            interactive=not args.all,
            dry_run=args.dry_run,
            default_destructive=[a.name for a in registry if a.destructive],
        )
    except ConfigurationError as e:
        ErrorHandler().handle_config_error(e, str(config_parser.config_path))
        print(f"[FATAL] {e}", file=sys.stderr)
        return 1
    except FatalError as e:
        print(f"[FATAL] {e}", file=sys.stderr)
        return 1

    print(f"Arch Maintenance v{__version__}")
    warning = missing_tools_warning(settings.missing_tools)
    if warning:
        print(warning)
        logger.warning(warning)

    runner_class = DryRunRunner if settings.dry_run else CommandRunner
    runner = runner_class(privileged=settings.privileged, sudo_command=settings.sudo_command,
                          timeout=settings.command_timeout, logger=logger)
    if settings.dry_run:
        print(generate_plan_report(registry.curated(), settings))

    dispatcher = Dispatcher(registry, settings, runner, logger)
    try:
        if args.all:
            return dispatcher.run_all()
        return dispatcher.run_interactive()
    except KeyboardInterrupt:
        print("\nInterrupted.", file=sys.stderr)
        logger.warning("Interrupted by user")
        return 130


if __name__ == "__main__":
    sys.exit(main())

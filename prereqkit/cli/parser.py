"""
PrereqKit CLI argument parser.

This module implements the command-line interface for PrereqKit using argparse.
"""

import argparse
import importlib
import logging
import sys
from pathlib import Path
from typing import List, Optional

try:
    from importlib.metadata import version

    __version__ = version("prereqkit")
except Exception:
    __version__ = "0.1.0"

logger = logging.getLogger(__name__)


class CLI:
    """PrereqKit command-line interface."""

    def __init__(self):
        """Initialize CLI with argument parser."""
        self.parser = self._create_parser()

    def _create_parser(self) -> argparse.ArgumentParser:
        """
        Create argument parser with all subcommands.

        Returns:
            Configured ArgumentParser instance
        """
        parser = argparse.ArgumentParser(
            prog="prereqkit",
            description="PrereqKit - Android SDK prerequisite installer",
            epilog='Use "prereqkit COMMAND --help" for command-specific help',
            formatter_class=argparse.RawDescriptionHelpFormatter,
        )

        parser.add_argument(
            "--version", action="version", version=f"PrereqKit {__version__}"
        )
        parser.add_argument(
            "--verbose", "-v", action="store_true", help="Enable verbose output"
        )
        parser.add_argument(
            "--quiet",
            "-q",
            action="store_true",
            help="Enable minimal output (errors only)",
        )
        parser.add_argument(
            "--config",
            type=Path,
            metavar="PATH",
            help="Path to configuration file (default: ./prereqkit.yaml)",
        )
        parser.add_argument(
            "--project-root",
            type=Path,
            metavar="PATH",
            default=Path.cwd(),
            help="Project root directory (default: current directory)",
        )

        subparsers = parser.add_subparsers(
            dest="command", help="Available commands", metavar="COMMAND"
        )

        self._add_discover_command(subparsers)
        self._add_ensure_command(subparsers)

        return parser

    def _add_discover_command(self, subparsers):
        """Add 'discover' subcommand."""
        parser = subparsers.add_parser(
            "discover",
            help="List platforms required by projects in the workspace",
            description="Scan project files and list the platforms they target",
        )
        parser.add_argument(
            "--json", action="store_true", help="Print platforms as a JSON list"
        )

    def _add_ensure_command(self, subparsers):
        """Add 'ensure' subcommand."""
        parser = subparsers.add_parser(
            "ensure",
            help="Install the SDK and platforms required by the workspace",
            description=(
                "Locate or install the Android SDK and install every platform "
                "referenced by project files"
            ),
        )
        parser.add_argument(
            "--no-install",
            action="store_true",
            help="Fail instead of installing the SDK when none is found",
        )
        parser.add_argument(
            "--sdk-root",
            type=Path,
            metavar="PATH",
            help="SDK location to use or install into (overrides config)",
        )
        parser.add_argument(
            "--print-env",
            action="store_true",
            help="Print resulting environment bindings as KEY=VALUE",
        )

    def parse_args(self, args: Optional[List[str]] = None):
        """
        Parse command-line arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Parsed arguments namespace
        """
        return self.parser.parse_args(args)

    def run(self, args: Optional[List[str]] = None) -> int:
        """
        Run CLI with given arguments.

        Args:
            args: Arguments to parse (uses sys.argv if None)

        Returns:
            Exit code (0 for success, non-zero for error)
        """
        parsed_args = self.parse_args(args)

        self._configure_logging(parsed_args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        try:
            return self._dispatch_command(parsed_args)
        except KeyboardInterrupt:
            logger.info("Operation cancelled by user")
            return 130
        except Exception as e:
            logger.error(f"Error: {e}")
            if parsed_args.verbose:
                import traceback

                traceback.print_exc()
            return 1

    def _configure_logging(self, args):
        """
        Configure logging based on verbose/quiet flags.

        Args:
            args: Parsed arguments with verbose/quiet flags
        """
        if args.verbose:
            level = logging.DEBUG
            format_str = "%(levelname)s [%(name)s] %(message)s"
        elif args.quiet:
            level = logging.ERROR
            format_str = "%(levelname)s: %(message)s"
        else:
            level = logging.INFO
            format_str = "%(message)s"

        logging.basicConfig(level=level, format=format_str, force=True)

    def _dispatch_command(self, args) -> int:
        """
        Dispatch to appropriate command handler.

        Args:
            args: Parsed arguments with command field

        Returns:
            Exit code from command handler
        """
        command_map = {
            "discover": "prereqkit.cli.commands.discover",
            "ensure": "prereqkit.cli.commands.ensure",
        }

        module_name = command_map.get(args.command)
        if not module_name:
            logger.error(f"Unknown command: {args.command}")
            return 1

        module = importlib.import_module(module_name)
        return module.run(args)


def main():
    """Main entry point for CLI."""
    cli = CLI()
    sys.exit(cli.run())


if __name__ == "__main__":
    main()

"""
Shared utilities for CLI commands.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from prereqkit.config.parser import PrereqConfig, load_config

logger = logging.getLogger(__name__)


def resolve_project_root(path: Optional[Path] = None) -> Path:
    """
    Resolve project root directory.

    Args:
        path: Optional path (defaults to current directory)

    Returns:
        Resolved absolute path
    """
    if path is None:
        path = Path.cwd()
    return Path(path).resolve()


def load_project_config(args) -> PrereqConfig:
    """
    Load configuration for the project selected on the command line.

    Args:
        args: Parsed arguments with project_root and config

    Returns:
        Parsed configuration (defaults when no file exists)

    Raises:
        ConfigError: If the configuration file is invalid
    """
    project_root = resolve_project_root(getattr(args, "project_root", None))
    config_path = getattr(args, "config", None)
    return load_config(project_root, Path(config_path) if config_path else None)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    print(f"ERROR: {message}", file=sys.stderr)
    if details:
        print(f"  {details}", file=sys.stderr)

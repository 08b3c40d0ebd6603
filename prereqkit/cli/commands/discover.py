"""
Discover command implementation.

Lists the platforms required by project files in the workspace.
"""

import json
import logging

from prereqkit.cli.utils import load_project_config, print_error, resolve_project_root
from prereqkit.core.exceptions import ScanError
from prereqkit.prerequisites.discoverer import PlatformDiscoverer

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the discover command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success)
    """
    project_root = resolve_project_root(args.project_root)
    config = load_project_config(args)
    logger.debug(f"Discovering platforms in {project_root}")

    discoverer = PlatformDiscoverer(max_workers=config.discovery.max_workers)
    try:
        platforms = sorted(discoverer.discover(project_root))
    except ScanError as e:
        print_error(str(e))
        return 1

    if args.json:
        print(json.dumps(platforms))
    elif platforms:
        for platform in platforms:
            print(platform)
    else:
        logger.info("No Android projects found")

    return 0

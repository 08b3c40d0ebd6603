"""
Ensure command implementation.

Locates or installs the Android SDK and installs the platforms the
workspace requires.
"""

import logging
from dataclasses import replace

from prereqkit.cli.utils import load_project_config, print_error, resolve_project_root
from prereqkit.core.exceptions import ScanError
from prereqkit.prerequisites.discoverer import PlatformDiscoverer
from prereqkit.prerequisites.pipeline import (
    BuildContext,
    BuildPipeline,
    InstallPrerequisitesStep,
)
from prereqkit.sdk.installer import AndroidSdkInstaller
from prereqkit.sdk.locator import EnvironmentSdkLocator

logger = logging.getLogger(__name__)


def run(args) -> int:
    """
    Run the ensure command.

    Args:
        args: Parsed command-line arguments

    Returns:
        Exit code (0 for success, 1 if prerequisites could not be satisfied)
    """
    project_root = resolve_project_root(args.project_root)
    config = load_project_config(args)

    sdk_config = config.sdk
    if args.sdk_root:
        sdk_config = replace(sdk_config, root=args.sdk_root.expanduser().resolve())
    if args.no_install:
        sdk_config = replace(sdk_config, auto_install=False)
    config = replace(config, sdk=sdk_config)

    step = InstallPrerequisitesStep(
        config,
        locator=EnvironmentSdkLocator(sdk_root=sdk_config.root),
        installer=AndroidSdkInstaller(
            sdk_root=sdk_config.root,
            archive_url=sdk_config.archive_url,
            archive_sha256=sdk_config.archive_sha256,
        ),
        discoverer=PlatformDiscoverer(max_workers=config.discovery.max_workers),
    )

    context = BuildContext(workspace=project_root)
    try:
        success = BuildPipeline([step]).run(context)
    except ScanError as e:
        print_error(str(e))
        return 1

    if args.print_env:
        for binding in context.environment:
            print(binding)

    if not success:
        print_error("Project prerequisites could not be installed")
        return 1

    return 0

"""
Ensure the platforms required by a workspace are installed.

The orchestrator runs one linear sequence per build:

1. Discover the platforms referenced by project files (stop if none)
2. Locate an existing SDK
3. Install the SDK if none was found and auto-install is enabled
4. Bind ``ANDROID_HOME`` to the SDK root for later build steps
5. Install every discovered platform into the SDK

Failures are logged with context and reported as a plain boolean.
"""

import logging
from typing import TYPE_CHECKING, Iterable, Optional

from prereqkit.config.parser import PrereqConfig
from prereqkit.core.environment import ANDROID_HOME
from prereqkit.core.exceptions import InstallationError, SdkNotFoundError
from prereqkit.prerequisites.discoverer import PlatformDiscoverer
from prereqkit.sdk.base import SdkHandle, SdkInstaller, SdkLocator

if TYPE_CHECKING:
    from prereqkit.prerequisites.pipeline import BuildContext

logger = logging.getLogger(__name__)


class PrerequisiteOrchestrator:
    """
    Drives SDK lookup, SDK installation and platform installation.

    Platform installation is best-effort: every platform is attempted once,
    and the run fails afterwards if any of them could not be installed.

    Example:
        >>> orchestrator = PrerequisiteOrchestrator(PrereqConfig())
        >>> ok = orchestrator.ensure_prerequisites(
        ...     context, EnvironmentSdkLocator(), AndroidSdkInstaller()
        ... )
    """

    def __init__(
        self,
        config: Optional[PrereqConfig] = None,
        discoverer: Optional[PlatformDiscoverer] = None,
    ):
        """
        Initialize orchestrator.

        Args:
            config: Configuration (default: built-in defaults)
            discoverer: Platform discoverer (default: scans the local disk)
        """
        self.config = config or PrereqConfig()
        self.discoverer = discoverer or PlatformDiscoverer(
            max_workers=self.config.discovery.max_workers
        )

    def ensure_prerequisites(
        self,
        context: "BuildContext",
        locator: SdkLocator,
        installer: SdkInstaller,
    ) -> bool:
        """
        Make sure the SDK and every platform the workspace needs are installed.

        Args:
            context: Build context; ``context.workspace`` is scanned and
                ``context.environment`` receives ``ANDROID_HOME``
            locator: Finds an already installed SDK
            installer: Installs the SDK and platforms

        Returns:
            True if all prerequisites are satisfied, False otherwise

        Raises:
            ScanError: If the workspace root cannot be scanned
        """
        logger.info("Finding project prerequisites...")
        platforms = self.discoverer.discover(context.workspace)
        if not platforms:
            logger.info("No Android projects found; nothing to install")
            return True

        try:
            sdk = self._resolve_sdk(context, locator, installer)
        except SdkNotFoundError as e:
            logger.error(str(e))
            return False
        except InstallationError as e:
            logger.error(f"Android SDK installation failed: {e}")
            return False

        context.environment.bind(ANDROID_HOME, str(sdk.root))

        return self._install_platforms(installer, sdk, sorted(platforms))

    def _resolve_sdk(
        self,
        context: "BuildContext",
        locator: SdkLocator,
        installer: SdkInstaller,
    ) -> SdkHandle:
        """
        Locate the SDK, installing it when allowed.

        Raises:
            SdkNotFoundError: If no SDK exists and auto-install is disabled
            InstallationError: If installation fails
        """
        sdk = locator.locate(context)
        if sdk is not None:
            return sdk

        if not self.config.auto_install:
            raise SdkNotFoundError(
                "Android SDK not found and automatic installation is disabled. "
                "Set ANDROID_HOME or enable sdk.auto_install."
            )

        logger.info("Installing Android SDK...")
        sdk = installer.install(context)
        logger.info(f"Android SDK installed at {sdk.root}")
        return sdk

    def _install_platforms(
        self, installer: SdkInstaller, sdk: SdkHandle, platforms: Iterable[str]
    ) -> bool:
        platforms = list(platforms)
        logger.info(f"Ensuring platforms are installed: {', '.join(platforms)}")

        failed = []
        for platform in platforms:
            try:
                installer.install_platform(sdk, platform)
            except InstallationError as e:
                logger.error(f"Failed to install platform {platform}: {e}")
                failed.append(platform)

        if failed:
            logger.error(
                f"{len(failed)} of {len(platforms)} platform(s) could not be "
                f"installed: {', '.join(failed)}"
            )
            return False

        return True


__all__ = ["PrerequisiteOrchestrator"]

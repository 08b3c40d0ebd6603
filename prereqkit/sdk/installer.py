"""
Android SDK installation.

This module orchestrates installing the Android SDK command-line tools and
SDK platforms:
1. Take the cross-process lock for the SDK root, clearing stale lock files
2. Reuse the SDK if the root already has one
3. Download the command-line tools archive
4. Extract it to ``<root>/cmdline-tools/latest``
5. Install platforms on demand with ``sdkmanager``

Every failure surfaces as ``InstallationError``.
"""

import logging
import os
import re
import shutil
import subprocess
import tempfile
from pathlib import Path
from typing import List, Optional

from filelock import Timeout as LockTimeout

from prereqkit.config.parser import DEFAULT_SDK_ARCHIVE_URL
from prereqkit.core.directory import get_default_sdk_dir, get_downloads_dir
from prereqkit.core.download import DownloadError, DownloadProgress, download_file
from prereqkit.core.environment import ANDROID_HOME, EnvironmentContext
from prereqkit.core.exceptions import InstallationError
from prereqkit.core.filesystem import (
    ArchiveExtractionError,
    extract_archive,
    looks_like_sdk,
)
from prereqkit.core.locking import LockManager
from prereqkit.sdk.base import SdkHandle, SdkInstaller
from prereqkit.sdk.locator import read_tools_revision

logger = logging.getLogger(__name__)

# "Google Inc.:Google APIs:19" style add-on targets
_ADDON_PATTERN = re.compile(r"^(?P<vendor>[^:]+):(?P<name>[^:]+):(?P<api>\d+)$")


class AndroidSdkInstaller(SdkInstaller):
    """
    Installs the Android SDK and SDK platforms.

    Example:
        >>> installer = AndroidSdkInstaller(sdk_root=Path("/opt/android-sdk"))
        >>> sdk = installer.install(context)
        >>> installer.install_platform(sdk, "android-19")
    """

    def __init__(
        self,
        sdk_root: Optional[Path] = None,
        archive_url: str = DEFAULT_SDK_ARCHIVE_URL,
        archive_sha256: Optional[str] = None,
        downloads_dir: Optional[Path] = None,
        lock_manager: Optional[LockManager] = None,
        lock_timeout: int = 600,
        command_timeout: Optional[int] = None,
    ):
        """
        Initialize installer.

        Args:
            sdk_root: Where to install the SDK (default: global cache/android-sdk)
            archive_url: URL of the command-line tools archive
            archive_sha256: Expected SHA256 of the archive
            downloads_dir: Where archives are stored (default: global cache/downloads)
            lock_manager: Optional lock manager. If None, creates new one.
            lock_timeout: Seconds to wait for another build's installation
            command_timeout: Seconds before an sdkmanager run is abandoned
        """
        self.sdk_root = Path(sdk_root) if sdk_root else get_default_sdk_dir()
        self.archive_url = archive_url
        self.archive_sha256 = archive_sha256
        self.downloads_dir = Path(downloads_dir) if downloads_dir else get_downloads_dir()
        self._lock_manager = lock_manager
        self.lock_timeout = lock_timeout
        self.command_timeout = command_timeout

    @property
    def lock_manager(self) -> LockManager:
        if self._lock_manager is None:
            self._lock_manager = LockManager()
        return self._lock_manager

    def install(self, context) -> SdkHandle:
        try:
            self.lock_manager.cleanup_stale_locks()
            with self.lock_manager.sdk_lock(self.sdk_root, timeout=self.lock_timeout):
                if looks_like_sdk(self.sdk_root):
                    logger.info(f"Android SDK already present at {self.sdk_root}")
                else:
                    self._install_command_line_tools()
        except LockTimeout as e:
            raise InstallationError(
                f"Timed out waiting to install into {self.sdk_root}: {e}"
            ) from e
        except OSError as e:
            # LockTimeout subclasses OSError and is handled above
            raise InstallationError(
                f"Could not install Android SDK into {self.sdk_root}: {e}"
            ) from e

        return SdkHandle(
            root=self.sdk_root,
            source="installed",
            tools_revision=read_tools_revision(self.sdk_root),
        )

    def _install_command_line_tools(self) -> None:
        """Download and unpack the command-line tools into the SDK root."""
        archive_name = self.archive_url.rstrip("/").rsplit("/", 1)[-1]
        archive_path = self.downloads_dir / archive_name

        try:
            download_file(
                self.archive_url,
                archive_path,
                expected_sha256=self.archive_sha256,
                progress_callback=_log_progress,
            )
        except DownloadError as e:
            raise InstallationError(f"Could not download Android SDK tools: {e}") from e

        self.sdk_root.mkdir(parents=True, exist_ok=True)
        target = self.sdk_root / "cmdline-tools" / "latest"

        with tempfile.TemporaryDirectory(dir=self.sdk_root, prefix=".extract-") as tmp:
            try:
                extract_archive(archive_path, tmp)
            except ArchiveExtractionError as e:
                raise InstallationError(f"Could not extract Android SDK tools: {e}") from e

            # The archive holds a single top-level "cmdline-tools" directory
            extracted = Path(tmp) / "cmdline-tools"
            if not extracted.is_dir():
                raise InstallationError(
                    f"Unexpected layout in {archive_name}: no cmdline-tools directory"
                )

            if target.exists():
                shutil.rmtree(target)
            target.parent.mkdir(parents=True, exist_ok=True)
            shutil.move(str(extracted), str(target))

        logger.info(f"Installed Android SDK tools to {target}")

    def install_platform(self, sdk: SdkHandle, platform: str) -> None:
        if platform_installed(sdk.root, platform):
            logger.info(f"Platform {platform} is already installed")
            return

        package = sdk_package_for(platform)
        command = self._sdkmanager_command(sdk) + [f"--sdk_root={sdk.root}", package]
        logger.info(f"Installing platform {platform} ({package})")
        logger.debug(f"Running: {' '.join(command)}")

        environment = EnvironmentContext()
        environment.bind(ANDROID_HOME, sdk.root)

        try:
            result = subprocess.run(
                command,
                input="y\n" * 20,
                capture_output=True,
                text=True,
                timeout=self.command_timeout,
                env=environment.apply(),
                check=False,
            )
        except (OSError, subprocess.SubprocessError) as e:
            raise InstallationError(
                f"Failed to run sdkmanager for {platform}: {e}\n"
                f"Command: {' '.join(command)}"
            ) from e

        if result.returncode != 0:
            output = (result.stderr or result.stdout).strip()
            raise InstallationError(
                f"sdkmanager failed to install {platform} "
                f"(exit code {result.returncode}): {output}"
            )

        logger.info(f"Installed platform {platform}")

    def _sdkmanager_command(self, sdk: SdkHandle) -> List[str]:
        """Find sdkmanager inside the SDK, falling back to PATH."""
        name = "sdkmanager.bat" if os.name == "nt" else "sdkmanager"
        for relative in (
            Path("cmdline-tools") / "latest" / "bin",
            Path("tools") / "bin",
        ):
            candidate = sdk.root / relative / name
            if candidate.is_file():
                return [str(candidate)]

        found = shutil.which("sdkmanager")
        if found:
            return [found]

        raise InstallationError(
            f"sdkmanager not found in {sdk.root} or on PATH. "
            "Install the Android SDK command-line tools."
        )


def sdk_package_for(platform: str) -> str:
    """
    Map a project target to an sdkmanager package path.

    Args:
        platform: Target such as 'android-19' or 'Google Inc.:Google APIs:19'

    Returns:
        Package path such as 'platforms;android-19'

    Example:
        >>> sdk_package_for("Google Inc.:Google APIs:19")
        'add-ons;addon-google_apis-google-19'
    """
    match = _ADDON_PATTERN.match(platform)
    if match:
        vendor = _slug(match.group("vendor").split()[0])
        name = _slug(match.group("name"))
        return f"add-ons;addon-{name}-{vendor}-{match.group('api')}"
    return f"platforms;{platform}"


def platform_installed(sdk_root: Path, platform: str) -> bool:
    """
    Check whether a platform already exists in the SDK.

    Args:
        sdk_root: SDK root directory
        platform: Platform identifier

    Returns:
        True if the platform's directory is present
    """
    category, _, directory = sdk_package_for(platform).partition(";")
    return (Path(sdk_root) / category / directory).is_dir()


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "_", text.strip().lower()).strip("_")


def _log_progress(progress: DownloadProgress) -> None:
    logger.debug(f"Downloading Android SDK tools: {progress}")


__all__ = [
    "AndroidSdkInstaller",
    "sdk_package_for",
    "platform_installed",
]

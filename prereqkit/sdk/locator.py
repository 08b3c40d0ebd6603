"""
Locate an Android SDK that is already installed.

Lookup order:
1. The SDK root from configuration
2. ``ANDROID_HOME``
3. ``ANDROID_SDK_ROOT``
4. The SDK containing an ``sdkmanager`` or ``android`` executable on PATH
"""

import logging
import os
import shutil
from pathlib import Path
from typing import Callable, Iterator, List, Mapping, Optional, Tuple

from prereqkit.core.filesystem import looks_like_sdk
from prereqkit.core.properties import PropertiesError, load_properties
from prereqkit.sdk.base import SdkHandle, SdkLocator

logger = logging.getLogger(__name__)

SDK_ENV_VARS = ("ANDROID_HOME", "ANDROID_SDK_ROOT")
SDK_EXECUTABLES = ("sdkmanager", "android")

# Where tools keep their package manifest, newest layout first
_TOOLS_MANIFESTS = (
    Path("cmdline-tools") / "latest" / "source.properties",
    Path("tools") / "source.properties",
)


class EnvironmentSdkLocator(SdkLocator):
    """
    Finds an SDK from configuration, environment variables or PATH.

    Example:
        >>> locator = EnvironmentSdkLocator(sdk_root=Path("/opt/android-sdk"))
        >>> sdk = locator.locate(context)
        >>> if sdk:
        ...     print(sdk.root)
    """

    def __init__(
        self,
        sdk_root: Optional[Path] = None,
        environ: Optional[Mapping[str, str]] = None,
        which: Callable[[str], Optional[str]] = shutil.which,
    ):
        """
        Initialize locator.

        Args:
            sdk_root: Configured SDK root, checked first
            environ: Environment to read (default: ``os.environ``)
            which: Executable lookup function (default: ``shutil.which``)
        """
        self.sdk_root = Path(sdk_root) if sdk_root else None
        self.environ = os.environ if environ is None else environ
        self.which = which

    def locate(self, context) -> Optional[SdkHandle]:
        for candidate, source in self._candidates():
            if looks_like_sdk(candidate):
                sdk = SdkHandle(
                    root=candidate,
                    source=source,
                    tools_revision=read_tools_revision(candidate),
                )
                logger.info(f"Found Android SDK: {sdk}")
                return sdk
            logger.debug(f"Not an Android SDK ({source}): {candidate}")

        logger.debug("No Android SDK found")
        return None

    def _candidates(self) -> Iterator[Tuple[Path, str]]:
        if self.sdk_root:
            yield self.sdk_root, "config"

        for var in SDK_ENV_VARS:
            value = self.environ.get(var, "").strip()
            if value:
                yield Path(value).expanduser(), var

        for name in SDK_EXECUTABLES:
            executable = self.which(name)
            if not executable:
                continue
            for parent in _executable_parents(Path(executable)):
                yield parent, "path"


def _executable_parents(executable: Path) -> List[Path]:
    """
    Directories that may be the SDK root for a tools executable.

    ``<root>/tools/android``, ``<root>/tools/bin/sdkmanager`` and
    ``<root>/cmdline-tools/latest/bin/sdkmanager`` are all covered.
    """
    executable = executable.resolve()
    return list(executable.parents)[1:4]


def read_tools_revision(sdk_root: Path) -> Optional[str]:
    """
    Read the SDK tools revision from its ``source.properties``.

    Args:
        sdk_root: SDK root directory

    Returns:
        Value of ``Pkg.Revision``, or None if unavailable
    """
    for manifest in _TOOLS_MANIFESTS:
        path = Path(sdk_root) / manifest
        if not path.is_file():
            continue
        try:
            revision = load_properties(path).get("Pkg.Revision", "").strip()
        except (OSError, PropertiesError) as e:
            logger.debug(f"Could not read {path}: {e}")
            continue
        if revision:
            return revision
    return None


__all__ = ["EnvironmentSdkLocator", "read_tools_revision", "SDK_ENV_VARS"]

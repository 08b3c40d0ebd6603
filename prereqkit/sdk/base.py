"""
SDK collaborator interfaces.

The prerequisite orchestrator never downloads or installs anything
itself. It talks to two collaborators:

- ``SdkLocator`` finds an SDK that is already present
- ``SdkInstaller`` installs the SDK and individual platforms into it

Implementations decide how installation works and whether it is locked
against concurrent builds.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
    from prereqkit.prerequisites.pipeline import BuildContext


@dataclass(frozen=True)
class SdkHandle:
    """
    An SDK located on disk or freshly installed.

    Attributes:
        root: SDK root directory (the ``ANDROID_HOME`` value)
        source: How the SDK was obtained ('config', 'ANDROID_HOME', 'path', 'installed', ...)
        tools_revision: Revision of the SDK tools, when known
    """

    root: Path
    source: str = "unknown"
    tools_revision: Optional[str] = None

    def __str__(self) -> str:
        revision = f" (tools {self.tools_revision})" if self.tools_revision else ""
        return f"{self.root}{revision} [{self.source}]"


class SdkLocator(ABC):
    """Finds an SDK that is already installed."""

    @abstractmethod
    def locate(self, context: "BuildContext") -> Optional[SdkHandle]:
        """
        Look for an existing SDK.

        Args:
            context: Current build context

        Returns:
            Handle to the SDK, or None if none was found
        """
        pass


class SdkInstaller(ABC):
    """Installs the SDK and its platforms."""

    @abstractmethod
    def install(self, context: "BuildContext") -> SdkHandle:
        """
        Install the SDK.

        Args:
            context: Current build context

        Returns:
            Handle to the installed SDK

        Raises:
            InstallationError: If installation fails
        """
        pass

    @abstractmethod
    def install_platform(self, sdk: SdkHandle, platform: str) -> None:
        """
        Ensure a platform is installed into an SDK.

        Args:
            sdk: Target SDK
            platform: Platform identifier (e.g. 'android-19')

        Raises:
            InstallationError: If installation fails
        """
        pass


__all__ = ["SdkHandle", "SdkLocator", "SdkInstaller"]

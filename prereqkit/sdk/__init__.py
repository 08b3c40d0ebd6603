"""
SDK collaborators: locating an installed SDK and installing SDKs and platforms.
"""

from .base import SdkHandle, SdkInstaller, SdkLocator
from .installer import AndroidSdkInstaller, platform_installed, sdk_package_for
from .locator import EnvironmentSdkLocator, read_tools_revision

__all__ = [
    "SdkHandle",
    "SdkInstaller",
    "SdkLocator",
    "AndroidSdkInstaller",
    "EnvironmentSdkLocator",
    "platform_installed",
    "read_tools_revision",
    "sdk_package_for",
]

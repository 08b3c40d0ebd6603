"""
Directory layout for PrereqKit.

Global Cache (~/.prereqkit/ or %USERPROFILE%\\.prereqkit\\):
    - android-sdk/ : SDK installed automatically when none is found
    - downloads/   : Downloaded SDK archives
    - lock/        : Cross-process lock files
"""

import os
from pathlib import Path


class DirectoryError(Exception):
    """Base exception for directory-related errors."""

    pass


def get_global_cache_dir() -> Path:
    """
    Get the platform-specific global cache directory path.

    Returns:
        Path: The global cache directory path.
            - Windows: %USERPROFILE%\\.prereqkit
            - Linux/macOS: ~/.prereqkit/

    Raises:
        DirectoryError: If USERPROFILE is unset on Windows
    """
    if os.name == "nt":
        user_profile = os.environ.get("USERPROFILE")
        if not user_profile:
            raise DirectoryError(
                "USERPROFILE environment variable is not set. "
                "Cannot determine global cache directory."
            )
        return Path(user_profile) / ".prereqkit"
    return Path.home() / ".prereqkit"


def get_default_sdk_dir() -> Path:
    """Directory the SDK is installed into when no root is configured."""
    return get_global_cache_dir() / "android-sdk"


def get_downloads_dir() -> Path:
    """Directory holding downloaded SDK archives."""
    return get_global_cache_dir() / "downloads"


__all__ = [
    "DirectoryError",
    "get_global_cache_dir",
    "get_default_sdk_dir",
    "get_downloads_dir",
]

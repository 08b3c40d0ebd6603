"""
Core functionality for PrereqKit.

This package contains the foundational modules that other components depend on.
"""

from .environment import (
    ANDROID_HOME,
    EnvironmentBinding,
    EnvironmentContext,
)

from .filesystem import (
    FileSystem,
    LocalFileSystem,
    extract_archive,
    looks_like_sdk,
)

from .properties import (
    PropertiesError,
    parse_properties,
    load_properties,
)

from .exceptions import (
    PrereqKitError,
    ScanError,
    FileParseError,
    SdkError,
    SdkNotFoundError,
    InstallationError,
    EnvironmentBindingError,
)

__all__ = [
    "ANDROID_HOME",
    "EnvironmentBinding",
    "EnvironmentContext",
    "FileSystem",
    "LocalFileSystem",
    "extract_archive",
    "looks_like_sdk",
    "PropertiesError",
    "parse_properties",
    "load_properties",
    "PrereqKitError",
    "ScanError",
    "FileParseError",
    "SdkError",
    "SdkNotFoundError",
    "InstallationError",
    "EnvironmentBindingError",
]

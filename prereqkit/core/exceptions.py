"""
Centralized exception hierarchy for PrereqKit.

This module defines all custom exceptions used across the codebase
so that callers can distinguish recoverable per-file problems from
failures that end a prerequisite run.
"""


# ============================================================================
# Base Exceptions
# ============================================================================


class PrereqKitError(Exception):
    """Base exception for all PrereqKit errors."""

    pass


# ============================================================================
# Discovery Exceptions
# ============================================================================


class ScanError(PrereqKitError):
    """Raised when the workspace root directory cannot be scanned."""

    def __init__(self, root: str, reason: str = ""):
        self.root = root
        self.reason = reason
        msg = f"Cannot scan workspace: {root}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class FileParseError(PrereqKitError):
    """Raised when a single project file cannot be read or parsed."""

    def __init__(self, path: str, reason: str = ""):
        self.path = path
        self.reason = reason
        msg = f"Failed to read project file: {path}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg)


# ============================================================================
# SDK Exceptions
# ============================================================================


class SdkError(PrereqKitError):
    """Base exception for SDK-related errors."""

    pass


class SdkNotFoundError(SdkError):
    """Raised when no SDK is available and automatic installation is disabled."""

    pass


class InstallationError(SdkError):
    """Raised when installing the SDK or one of its platforms fails."""

    pass


# ============================================================================
# Build Environment Exceptions
# ============================================================================


class EnvironmentBindingError(PrereqKitError):
    """Raised when an environment variable is bound more than once."""

    def __init__(self, key: str):
        self.key = key
        super().__init__(f"Environment variable already bound: {key}")

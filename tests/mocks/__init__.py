"""
Test doubles for PrereqKit components.

This package provides in-memory and recording implementations of the
workspace and SDK collaborators to enable isolated, deterministic testing.
"""

from .filesystem import InMemoryFileSystem
from .sdk import RecordingSdkInstaller, StubSdkLocator

__all__ = [
    "InMemoryFileSystem",
    "RecordingSdkInstaller",
    "StubSdkLocator",
]

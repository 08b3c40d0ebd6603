"""Test fixtures for PrereqKit tests.

- workspaces: Source trees with Android project files
- sdks: Mock Android SDK directories

Import fixtures in your tests using:
    from tests.fixtures.workspaces import android_workspace
    from tests.fixtures.sdks import mock_android_sdk
"""

__all__ = [
    "workspaces",
    "sdks",
]

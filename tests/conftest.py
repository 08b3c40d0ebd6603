"""
Pytest configuration and shared fixtures for PrereqKit tests.
"""

import pytest
from pathlib import Path

# Import test fixtures to make them available to all tests
# ruff: noqa: F401
from tests.fixtures.workspaces import (
    empty_workspace,
    android_workspace,
    project_file_factory,
)
from tests.fixtures.sdks import mock_android_sdk

from prereqkit.prerequisites.pipeline import BuildContext


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch) -> Path:
    """Create isolated home directory for tests."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()

    monkeypatch.setenv("HOME", str(fake_home))
    monkeypatch.setenv("USERPROFILE", str(fake_home))

    return fake_home


@pytest.fixture
def clean_sdk_env(monkeypatch):
    """Remove SDK environment variables inherited from the host."""
    monkeypatch.delenv("ANDROID_HOME", raising=False)
    monkeypatch.delenv("ANDROID_SDK_ROOT", raising=False)


@pytest.fixture
def build_context(android_workspace: Path) -> BuildContext:
    """Build context for the standard Android workspace."""
    return BuildContext(workspace=android_workspace)

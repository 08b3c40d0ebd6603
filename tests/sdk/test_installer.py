"""
Tests for Android SDK installation.

Network access is mocked with ``responses`` and sdkmanager runs are mocked
at ``subprocess.run``.
"""

import io
import os
import subprocess
import time
import zipfile
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest
import responses

from prereqkit.core.exceptions import InstallationError
from prereqkit.core.locking import LockManager, LockTimeout
from prereqkit.sdk.base import SdkHandle
from prereqkit.sdk.installer import (
    AndroidSdkInstaller,
    platform_installed,
    sdk_package_for,
)

ARCHIVE_URL = "https://dl.example.com/android/repository/commandlinetools-linux.zip"


def make_tools_archive(top_level: str = "cmdline-tools") -> bytes:
    """Build an in-memory command-line tools archive."""
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w") as zf:
        info = zipfile.ZipInfo(f"{top_level}/bin/sdkmanager")
        info.external_attr = 0o755 << 16
        zf.writestr(info, "#!/bin/sh\nexit 0\n")
        zf.writestr(f"{top_level}/source.properties", "Pkg.Revision=12.0\n")
    return buffer.getvalue()


@pytest.fixture
def installer_factory(tmp_path):
    """Create installers that keep all state under tmp_path."""

    def factory(sdk_root: Path = None, **kwargs) -> AndroidSdkInstaller:
        kwargs.setdefault("downloads_dir", tmp_path / "downloads")
        return AndroidSdkInstaller(
            sdk_root=sdk_root or tmp_path / "sdk",
            archive_url=ARCHIVE_URL,
            lock_manager=LockManager(lock_dir=tmp_path / "locks"),
            **kwargs,
        )

    return factory


class TestInstall:
    """Test AndroidSdkInstaller.install()."""

    @responses.activate
    def test_downloads_and_extracts_tools(self, installer_factory, tmp_path):
        """Test a fresh install lays out cmdline-tools/latest."""
        responses.add(responses.GET, ARCHIVE_URL, body=make_tools_archive(), status=200)

        sdk = installer_factory().install(None)

        latest = tmp_path / "sdk" / "cmdline-tools" / "latest"
        assert sdk.root == tmp_path / "sdk"
        assert sdk.source == "installed"
        assert sdk.tools_revision == "12.0"
        assert (latest / "bin" / "sdkmanager").is_file()
        assert not list((tmp_path / "sdk").glob(".extract-*"))

    @responses.activate
    def test_existing_sdk_reused(self, installer_factory, mock_android_sdk):
        """Test nothing is downloaded when the root already has an SDK."""
        sdk = installer_factory(sdk_root=mock_android_sdk).install(None)

        assert sdk.root == mock_android_sdk
        assert len(responses.calls) == 0

    @responses.activate
    def test_download_failure(self, installer_factory):
        """Test download errors become InstallationError."""
        responses.add(responses.GET, ARCHIVE_URL, status=500)

        with patch("prereqkit.core.download.time.sleep"):
            with pytest.raises(InstallationError, match="Could not download"):
                installer_factory().install(None)

    @responses.activate
    def test_checksum_failure(self, installer_factory):
        """Test checksum mismatch becomes InstallationError."""
        responses.add(responses.GET, ARCHIVE_URL, body=make_tools_archive(), status=200)

        with pytest.raises(InstallationError, match="Checksum mismatch"):
            installer_factory(archive_sha256="0" * 64).install(None)

    @responses.activate
    def test_unexpected_archive_layout(self, installer_factory):
        """Test archive without cmdline-tools is rejected."""
        responses.add(
            responses.GET, ARCHIVE_URL, body=make_tools_archive("tools"), status=200
        )

        with pytest.raises(InstallationError, match="Unexpected layout"):
            installer_factory().install(None)

    @responses.activate
    def test_corrupt_archive(self, installer_factory):
        """Test extraction errors become InstallationError."""
        responses.add(responses.GET, ARCHIVE_URL, body=b"not a zip", status=200)

        with pytest.raises(InstallationError, match="Could not extract"):
            installer_factory().install(None)

    def test_unusable_downloads_dir(self, installer_factory, tmp_path):
        """Test filesystem errors during setup become InstallationError."""
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")

        installer = installer_factory(downloads_dir=blocker / "sub")

        with pytest.raises(InstallationError, match="Could not install Android SDK"):
            installer.install(None)

    @responses.activate
    def test_unwritable_sdk_root(self, installer_factory, tmp_path):
        """Test an SDK root that cannot be created becomes InstallationError."""
        responses.add(responses.GET, ARCHIVE_URL, body=make_tools_archive(), status=200)
        blocker = tmp_path / "file"
        blocker.write_text("")

        with pytest.raises(InstallationError) as exc_info:
            installer_factory(sdk_root=blocker / "sdk").install(None)

        assert isinstance(exc_info.value.__cause__, OSError)

    def test_stale_locks_cleaned_before_locking(self, tmp_path, mock_android_sdk):
        """Test leftover lock files are removed when an installation starts."""
        lock_dir = tmp_path / "locks"
        lock_dir.mkdir()
        stale = lock_dir / "sdk-0123456789abcdef.lock"
        stale.write_text("")
        two_days_ago = time.time() - 48 * 3600
        os.utime(stale, (two_days_ago, two_days_ago))

        installer = AndroidSdkInstaller(
            sdk_root=mock_android_sdk, lock_manager=LockManager(lock_dir=lock_dir)
        )
        installer.install(None)

        assert not stale.exists()

    def test_lock_timeout(self, tmp_path):
        """Test waiting too long for another installation fails cleanly."""
        lock_manager = MagicMock()
        lock_manager.sdk_lock.side_effect = LockTimeout("sdk.lock")

        installer = AndroidSdkInstaller(sdk_root=tmp_path / "sdk", lock_manager=lock_manager)

        with pytest.raises(InstallationError, match="Timed out waiting"):
            installer.install(None)


class TestInstallPlatform:
    """Test AndroidSdkInstaller.install_platform()."""

    def test_already_installed_platform_skipped(self, installer_factory, mock_android_sdk):
        """Test existing platform directory short-circuits."""
        sdk = SdkHandle(root=mock_android_sdk)

        with patch("prereqkit.sdk.installer.subprocess.run") as run:
            installer_factory().install_platform(sdk, "android-19")

        run.assert_not_called()

    def test_runs_sdkmanager(self, installer_factory, mock_android_sdk, monkeypatch):
        """Test sdkmanager is invoked with the platform package."""
        monkeypatch.setenv("PREREQKIT_BUILD_ID", "42")
        sdk = SdkHandle(root=mock_android_sdk)
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")

        with patch("prereqkit.sdk.installer.subprocess.run", return_value=completed) as run:
            installer_factory().install_platform(sdk, "android-21")

        command = run.call_args.args[0]
        sdkmanager = mock_android_sdk / "cmdline-tools" / "latest" / "bin" / "sdkmanager"
        assert command == [
            str(sdkmanager),
            f"--sdk_root={mock_android_sdk}",
            "platforms;android-21",
        ]
        assert run.call_args.kwargs["input"].startswith("y\n")
        assert run.call_args.kwargs["env"]["ANDROID_HOME"] == str(mock_android_sdk)
        assert run.call_args.kwargs["env"]["PREREQKIT_BUILD_ID"] == "42"

    def test_sdkmanager_failure(self, installer_factory, mock_android_sdk):
        """Test non-zero exit raises InstallationError."""
        sdk = SdkHandle(root=mock_android_sdk)
        completed = subprocess.CompletedProcess(
            args=[], returncode=1, stdout="", stderr="Failed to find package"
        )

        with patch("prereqkit.sdk.installer.subprocess.run", return_value=completed):
            with pytest.raises(InstallationError, match="Failed to find package"):
                installer_factory().install_platform(sdk, "android-99")

    def test_sdkmanager_cannot_run(self, installer_factory, mock_android_sdk):
        """Test OSError from subprocess raises InstallationError."""
        sdk = SdkHandle(root=mock_android_sdk)

        with patch(
            "prereqkit.sdk.installer.subprocess.run", side_effect=OSError("exec format")
        ):
            with pytest.raises(InstallationError, match="Failed to run sdkmanager"):
                installer_factory().install_platform(sdk, "android-21")

    def test_sdkmanager_missing(self, installer_factory, tmp_path):
        """Test missing sdkmanager raises InstallationError."""
        sdk_root = tmp_path / "bare-sdk"
        (sdk_root / "platform-tools").mkdir(parents=True)

        with patch("prereqkit.sdk.installer.shutil.which", return_value=None):
            with pytest.raises(InstallationError, match="sdkmanager not found"):
                installer_factory().install_platform(SdkHandle(root=sdk_root), "android-21")

    def test_sdkmanager_from_path(self, installer_factory, tmp_path):
        """Test sdkmanager on PATH is used when the SDK has none."""
        sdk_root = tmp_path / "bare-sdk"
        (sdk_root / "platform-tools").mkdir(parents=True)
        completed = subprocess.CompletedProcess(args=[], returncode=0, stdout="", stderr="")

        with patch(
            "prereqkit.sdk.installer.shutil.which", return_value="/usr/bin/sdkmanager"
        ), patch(
            "prereqkit.sdk.installer.subprocess.run", return_value=completed
        ) as run:
            installer_factory().install_platform(SdkHandle(root=sdk_root), "android-21")

        assert run.call_args.args[0][0] == "/usr/bin/sdkmanager"


class TestPackageMapping:
    """Test sdk_package_for() and platform_installed()."""

    @pytest.mark.parametrize(
        "platform,package",
        [
            ("android-19", "platforms;android-19"),
            ("android-N", "platforms;android-N"),
            ("Google Inc.:Google APIs:19", "add-ons;addon-google_apis-google-19"),
        ],
    )
    def test_package_for(self, platform, package):
        """Test targets map to sdkmanager packages."""
        assert sdk_package_for(platform) == package

    def test_platform_installed(self, mock_android_sdk):
        """Test platform directory presence."""
        assert platform_installed(mock_android_sdk, "android-19") is True
        assert platform_installed(mock_android_sdk, "android-21") is False

    def test_addon_installed(self, tmp_path):
        """Test add-on directory presence."""
        (tmp_path / "add-ons" / "addon-google_apis-google-19").mkdir(parents=True)
        assert platform_installed(tmp_path, "Google Inc.:Google APIs:19") is True

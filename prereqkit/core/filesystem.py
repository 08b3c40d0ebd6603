"""
File system utilities for PrereqKit.

This module provides:
- The ``FileSystem`` capability used to scan a workspace and read files,
  so discovery can run against a local disk or any injected backend
- Archive extraction (zip, tar.gz) with directory traversal protection

Where the scan executes (locally or on a remote build worker) is decided by
the ``FileSystem`` implementation handed to the caller.
"""

import logging
import os
import sys
import tarfile
import zipfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Iterable, List, Optional, Union

from prereqkit.core.exceptions import ScanError
from prereqkit.core.properties import decode_properties

logger = logging.getLogger(__name__)


# ============================================================================
# Errors
# ============================================================================


class FilesystemError(Exception):
    """Base exception for filesystem operations."""

    pass


class ArchiveExtractionError(FilesystemError):
    """Failed to extract an archive."""

    pass


class UnsupportedArchiveFormat(ArchiveExtractionError):
    """Archive format is not supported."""

    pass


class InsecureArchiveError(ArchiveExtractionError):
    """Archive contains insecure paths (directory traversal attempt)."""

    pass


# ============================================================================
# Workspace Access
# ============================================================================


class FileSystem(ABC):
    """
    Abstract interface for reading a build workspace.

    Implementations decide where the files live; callers only see paths
    relative to the scanned root and file contents.
    """

    @abstractmethod
    def scan(self, root: Path, patterns: Iterable[str]) -> List[str]:
        """
        Find files under root matching any of the glob patterns.

        Args:
            root: Directory to scan recursively
            patterns: Glob patterns such as ``**/project.properties``

        Returns:
            Sorted, de-duplicated POSIX paths relative to root

        Raises:
            ScanError: If root cannot be scanned
        """
        pass

    @abstractmethod
    def read_text(self, path: Path) -> str:
        """
        Read a text file.

        Args:
            path: File to read

        Returns:
            File content

        Raises:
            OSError: If the file cannot be read
        """
        pass


class LocalFileSystem(FileSystem):
    """FileSystem backed by the local disk."""

    def __init__(self, encoding: Optional[str] = None):
        """
        Initialize filesystem.

        Args:
            encoding: Fixed text encoding (default: UTF-8, falling back to
                ISO-8859-1 for content that is not valid UTF-8)
        """
        self.encoding = encoding

    def scan(self, root: Path, patterns: Iterable[str]) -> List[str]:
        root = Path(root)

        if not root.exists():
            raise ScanError(str(root), "directory does not exist")
        if not root.is_dir():
            raise ScanError(str(root), "not a directory")

        # Unreadable subdirectories are skipped by glob; only the root is fatal
        try:
            with os.scandir(root):
                pass
        except OSError as e:
            raise ScanError(str(root), str(e)) from e

        matches = set()
        for pattern in patterns:
            for path in root.glob(pattern):
                if path.is_file():
                    matches.add(path.relative_to(root).as_posix())

        logger.debug(f"Scanned {root}: {len(matches)} matching file(s)")
        return sorted(matches)

    def read_text(self, path: Path) -> str:
        if self.encoding:
            return Path(path).read_text(encoding=self.encoding)
        return decode_properties(Path(path).read_bytes())


# ============================================================================
# Path Utilities
# ============================================================================


def is_relative_to(path: Path, parent: Path) -> bool:
    """
    Check if path is relative to (under) parent directory.

    Args:
        path: Path to check
        parent: Parent directory

    Returns:
        True if path is under parent directory
    """
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


def looks_like_sdk(path: Union[str, Path]) -> bool:
    """
    Check whether a directory has the layout of an Android SDK.

    Any of ``cmdline-tools``, ``tools`` or ``platform-tools`` is enough.

    Args:
        path: Candidate SDK root

    Returns:
        True if path is a directory containing an SDK tools directory
    """
    path = Path(path)
    if not path.is_dir():
        return False
    return any(
        (path / name).is_dir() for name in ("cmdline-tools", "tools", "platform-tools")
    )


# ============================================================================
# Archive Extraction
# ============================================================================


def _validate_archive_path(path: str, destination: Path) -> None:
    """
    Validate that an archive member path is safe to extract.

    Args:
        path: Member path from archive
        destination: Extraction destination

    Raises:
        InsecureArchiveError: If path attempts directory traversal
    """
    member_path = (destination / path).resolve()

    if not is_relative_to(member_path, destination.resolve()):
        raise InsecureArchiveError(
            f"Archive member '{path}' attempts directory traversal. "
            "This is a security risk and extraction has been blocked."
        )


def extract_archive(
    archive_path: Union[str, Path],
    destination: Union[str, Path],
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> None:
    """
    Extract an archive to a destination directory.

    Supported formats: .zip, .tar.gz, .tgz

    Args:
        archive_path: Path to the archive file
        destination: Directory to extract to
        progress_callback: Optional callback(current, total) for progress

    Raises:
        UnsupportedArchiveFormat: If archive format is not recognized
        ArchiveExtractionError: If extraction fails
        InsecureArchiveError: If archive contains malicious paths

    Example:
        >>> extract_archive('commandlinetools-linux.zip', '/opt/android-sdk/cmdline-tools')
    """
    archive_path = Path(archive_path)
    destination = Path(destination)

    if not archive_path.exists():
        raise ArchiveExtractionError(f"Archive not found: {archive_path}")

    destination.mkdir(parents=True, exist_ok=True)
    archive_name = archive_path.name.lower()

    try:
        if archive_name.endswith(".zip"):
            _extract_zip(archive_path, destination, progress_callback)
        elif archive_name.endswith((".tar.gz", ".tgz")):
            _extract_tar_gz(archive_path, destination, progress_callback)
        else:
            raise UnsupportedArchiveFormat(
                f"Unsupported archive format: {archive_path.suffix}. "
                "Supported: .zip, .tar.gz, .tgz"
            )
    except (InsecureArchiveError, UnsupportedArchiveFormat):
        raise
    except Exception as e:
        raise ArchiveExtractionError(f"Failed to extract {archive_path}: {e}") from e


def _extract_zip(
    archive_path: Path,
    destination: Path,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> None:
    """Extract a ZIP archive, restoring executable bits."""
    with zipfile.ZipFile(archive_path, "r") as zf:
        members = zf.infolist()
        total = len(members)

        for member in members:
            _validate_archive_path(member.filename, destination)

        for i, member in enumerate(members):
            extracted = Path(zf.extract(member, destination))
            # sdkmanager ships as a shell script; zipfile drops the mode bits
            mode = (member.external_attr >> 16) & 0o777
            if mode and not member.is_dir():
                extracted.chmod(mode)
            if progress_callback:
                progress_callback(i + 1, total)


def _extract_tar_gz(
    archive_path: Path,
    destination: Path,
    progress_callback: Optional[Callable[[int, int], None]] = None,
) -> None:
    """Extract a .tar.gz archive."""
    with tarfile.open(archive_path, "r:gz") as tar:
        members = tar.getmembers()
        total = len(members)

        for member in members:
            _validate_archive_path(member.name, destination)

        if sys.version_info >= (3, 12):
            tar.extractall(destination, filter="data")
        else:
            tar.extractall(destination)

        if progress_callback:
            progress_callback(total, total)


__all__ = [
    "FilesystemError",
    "ArchiveExtractionError",
    "UnsupportedArchiveFormat",
    "InsecureArchiveError",
    "FileSystem",
    "LocalFileSystem",
    "is_relative_to",
    "looks_like_sdk",
    "extract_archive",
]

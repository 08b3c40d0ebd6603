"""
Network download with retry logic and checksum verification.

Used to fetch the SDK command-line tools archive:
- HTTP/HTTPS downloads over ``requests`` with streaming
- Retry with exponential backoff on network errors
- SHA-256 verification while the file is written
- Periodic progress reporting
"""

import hashlib
import logging
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

import requests
from requests.exceptions import RequestException

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192


@dataclass
class DownloadProgress:
    """Progress information for a download."""

    bytes_downloaded: int
    total_bytes: int  # 0 when the server sent no content-length

    @property
    def percentage(self) -> float:
        if self.total_bytes <= 0:
            return 0.0
        return self.bytes_downloaded / self.total_bytes * 100

    def __str__(self) -> str:
        mb_downloaded = self.bytes_downloaded / 1024 / 1024
        if self.total_bytes > 0:
            mb_total = self.total_bytes / 1024 / 1024
            return f"{mb_downloaded:.1f}/{mb_total:.1f} MB ({self.percentage:.1f}%)"
        return f"{mb_downloaded:.1f} MB"


class DownloadError(Exception):
    """Exception raised when download fails."""

    pass


class ChecksumError(DownloadError):
    """Exception raised when checksum verification fails."""

    pass


def download_file(
    url: str,
    destination: Path,
    expected_sha256: Optional[str] = None,
    progress_callback: Optional[Callable[[DownloadProgress], None]] = None,
    timeout: int = 30,
    max_retries: int = 3,
) -> Path:
    """
    Download file from URL to destination with retries and checksum check.

    An existing destination whose checksum already matches is reused.

    Args:
        url: URL to download from
        destination: Local path to save file
        expected_sha256: Expected SHA256 hash (verified during download)
        progress_callback: Optional callback for progress updates
        timeout: Request timeout in seconds
        max_retries: Maximum number of attempts

    Returns:
        Path to downloaded file

    Raises:
        DownloadError: If download fails after retries
        ChecksumError: If checksum doesn't match expected value
        ValueError: If URL is empty

    Example:
        >>> download_file(
        ...     "https://dl.google.com/android/repository/commandlinetools-linux.zip",
        ...     Path("downloads/commandlinetools-linux.zip"),
        ... )
    """
    if not url:
        raise ValueError("URL cannot be empty")

    destination = Path(destination)
    destination.parent.mkdir(parents=True, exist_ok=True)

    if destination.exists() and expected_sha256:
        if verify_checksum(destination, expected_sha256):
            logger.info(f"Using previously downloaded {destination.name}")
            return destination
        logger.warning(f"Checksum mismatch for {destination.name}, re-downloading")
        destination.unlink()

    for attempt in range(max_retries):
        try:
            return _download(url, destination, expected_sha256, progress_callback, timeout)
        except RequestException as e:
            if attempt == max_retries - 1:
                raise DownloadError(
                    f"Download of {url} failed after {max_retries} attempts: {e}"
                ) from e

            backoff_seconds = 2**attempt
            logger.warning(
                f"Download attempt {attempt + 1} failed: {e}. "
                f"Retrying in {backoff_seconds}s..."
            )
            time.sleep(backoff_seconds)

    raise DownloadError(f"Download of {url} failed")


def _download(
    url: str,
    destination: Path,
    expected_sha256: Optional[str],
    progress_callback: Optional[Callable[[DownloadProgress], None]],
    timeout: int,
) -> Path:
    """Stream one download attempt to disk."""
    logger.info(f"Downloading {url}")

    response = requests.get(url, stream=True, timeout=timeout, allow_redirects=True)
    response.raise_for_status()

    total_size = _content_length(response)

    hasher = hashlib.sha256()
    downloaded = 0
    last_report = time.monotonic()

    with open(destination, "wb") as f:
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if not chunk:
                continue
            f.write(chunk)
            hasher.update(chunk)
            downloaded += len(chunk)

            now = time.monotonic()
            if progress_callback and now - last_report >= 0.5:
                progress_callback(DownloadProgress(downloaded, total_size))
                last_report = now

    if progress_callback:
        progress_callback(DownloadProgress(downloaded, total_size))

    if expected_sha256:
        actual = hasher.hexdigest()
        if actual.lower() != expected_sha256.lower():
            destination.unlink()
            raise ChecksumError(
                f"Checksum mismatch for {destination.name}: "
                f"expected {expected_sha256}, got {actual}"
            )
        logger.debug("Checksum verified successfully")

    logger.info(f"Download complete: {destination}")
    return destination


def _content_length(response) -> int:
    """Declared body size, or 0 when the header is missing or malformed."""
    try:
        return max(int(response.headers.get("content-length", 0)), 0)
    except (TypeError, ValueError):
        return 0


def verify_checksum(file_path: Path, expected_sha256: str) -> bool:
    """
    Verify file SHA256 checksum.

    Args:
        file_path: Path to file to verify
        expected_sha256: Expected SHA256 hash (hex string)

    Returns:
        True if checksum matches, False otherwise

    Raises:
        FileNotFoundError: If file doesn't exist
    """
    if not file_path.exists():
        raise FileNotFoundError(f"File not found: {file_path}")

    hasher = hashlib.sha256()
    with open(file_path, "rb") as f:
        while chunk := f.read(CHUNK_SIZE):
            hasher.update(chunk)

    return hasher.hexdigest().lower() == expected_sha256.lower()


__all__ = [
    "DownloadProgress",
    "DownloadError",
    "ChecksumError",
    "download_file",
    "verify_checksum",
]

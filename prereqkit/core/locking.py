"""
Concurrent access control for PrereqKit.

Installing an SDK writes into a shared directory, so two builds running on
the same machine must not install into the same SDK root at once. This
module provides cross-process file locks built on the ``filelock`` library.

Usage:
    from prereqkit.core.locking import LockManager

    lock_manager = LockManager()
    with lock_manager.sdk_lock(sdk_root, timeout=600):
        # Only this process installs into sdk_root
        pass
"""

import hashlib
import logging
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from filelock import FileLock, Timeout as LockTimeout

from prereqkit.core.directory import get_global_cache_dir

logger = logging.getLogger(__name__)


class LockManager:
    """
    Manages file locks for PrereqKit resources.

    Attributes:
        lock_dir: Directory where lock files are stored
    """

    def __init__(self, lock_dir: Optional[Path] = None):
        """
        Initialize lock manager.

        Args:
            lock_dir: Directory for lock files (default: global cache/lock/)
        """
        if lock_dir is None:
            lock_dir = get_global_cache_dir() / "lock"

        self.lock_dir = Path(lock_dir)
        self.lock_dir.mkdir(parents=True, exist_ok=True)

    def lock_path_for(self, sdk_root: Path) -> Path:
        """Lock file guarding a given SDK root."""
        digest = hashlib.sha256(str(Path(sdk_root).resolve()).encode("utf-8"))
        return self.lock_dir / f"sdk-{digest.hexdigest()[:16]}.lock"

    @contextmanager
    def sdk_lock(self, sdk_root: Path, timeout: int = 600):
        """
        Acquire the installation lock for an SDK root.

        Args:
            sdk_root: SDK directory about to be modified
            timeout: Maximum wait time in seconds (default: 600 for downloads)

        Yields:
            None

        Raises:
            LockTimeout: If lock can't be acquired within timeout
        """
        lock_path = self.lock_path_for(sdk_root)
        lock = FileLock(lock_path, timeout=timeout)

        try:
            with lock:
                logger.debug(f"Acquired SDK lock for {sdk_root}: {lock_path}")
                yield
                logger.debug(f"Released SDK lock for {sdk_root}: {lock_path}")
        except LockTimeout:
            logger.error(
                f"Could not acquire SDK lock for {sdk_root} after {timeout}s. "
                "Another build may be installing into this SDK."
            )
            raise

    def cleanup_stale_locks(self, max_age_hours: int = 24) -> int:
        """
        Remove lock files older than max_age_hours.

        Args:
            max_age_hours: Maximum age in hours before lock is considered stale

        Returns:
            Number of stale locks removed
        """
        if not self.lock_dir.exists():
            return 0

        current_time = time.time()
        removed_count = 0

        for lock_file in self.lock_dir.glob("*.lock"):
            try:
                age_hours = (current_time - lock_file.stat().st_mtime) / 3600
                if age_hours > max_age_hours:
                    lock_file.unlink()
                    logger.info(f"Removed stale lock file: {lock_file}")
                    removed_count += 1
            except OSError as e:
                logger.debug(f"Could not remove lock {lock_file}: {e}")

        return removed_count


__all__ = ["LockManager", "LockTimeout"]

"""
Discover the platforms required by Android projects in a workspace.

Every ``default.properties`` and ``project.properties`` file under the
workspace is read and its ``target`` value collected. A file that cannot
be read or parsed is logged and skipped; only an unreadable workspace
root aborts discovery.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import FrozenSet, Iterable, List, Optional, Tuple

from prereqkit.core.exceptions import FileParseError
from prereqkit.core.filesystem import FileSystem, LocalFileSystem
from prereqkit.core.properties import PropertiesError, parse_properties

logger = logging.getLogger(__name__)

PROJECT_FILE_PATTERNS = ("**/default.properties", "**/project.properties")
TARGET_KEY = "target"


class PlatformDiscoverer:
    """
    Finds the set of platforms referenced by project files in a tree.

    Example:
        >>> discoverer = PlatformDiscoverer()
        >>> discoverer.discover(Path("workspace"))
        frozenset({'android-19'})
    """

    def __init__(
        self,
        filesystem: Optional[FileSystem] = None,
        patterns: Iterable[str] = PROJECT_FILE_PATTERNS,
        max_workers: int = 1,
    ):
        """
        Initialize discoverer.

        Args:
            filesystem: Workspace access (default: local disk)
            patterns: Glob patterns of project files
            max_workers: Threads used to read files (1 reads sequentially)
        """
        if max_workers < 1:
            raise ValueError(f"max_workers must be at least 1, got {max_workers}")

        self.filesystem = filesystem or LocalFileSystem()
        self.patterns = tuple(patterns)
        self.max_workers = max_workers

    def discover(self, root_dir: Path) -> FrozenSet[str]:
        """
        Collect the platforms referenced anywhere under root_dir.

        Args:
            root_dir: Workspace root directory

        Returns:
            Platform identifiers; empty when no project requires one

        Raises:
            ScanError: If root_dir cannot be scanned
        """
        root_dir = Path(root_dir)
        files = self.filesystem.scan(root_dir, self.patterns)

        if self.max_workers > 1 and len(files) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as pool:
                results = list(pool.map(lambda f: self._read_platform(root_dir, f), files))
        else:
            results = [self._read_platform(root_dir, f) for f in files]

        return self._merge(results)

    def _read_platform(self, root_dir: Path, filename: str) -> Tuple[str, Optional[str]]:
        """Read one project file; failures are logged and yield no platform."""
        try:
            return filename, self.read_target(root_dir / filename)
        except FileParseError as e:
            logger.warning(f"{e}; skipping")
            return filename, None

    def read_target(self, path: Path) -> Optional[str]:
        """
        Read the trimmed ``target`` value of a single project file.

        Args:
            path: Project file path

        Returns:
            Platform identifier, or None if the key is absent or blank

        Raises:
            FileParseError: If the file cannot be read or parsed
        """
        try:
            properties = parse_properties(self.filesystem.read_text(path))
        except (OSError, UnicodeDecodeError, PropertiesError) as e:
            raise FileParseError(str(path), str(e)) from e

        platform = properties.get(TARGET_KEY, "").strip()
        return platform or None

    @staticmethod
    def _merge(results: List[Tuple[str, Optional[str]]]) -> FrozenSet[str]:
        platforms = set()
        for filename, platform in results:
            if platform:
                logger.info(f"Project file {filename} requires platform {platform}")
                platforms.add(platform)
        return frozenset(platforms)


def discover_platforms(
    root_dir: Path, filesystem: Optional[FileSystem] = None
) -> FrozenSet[str]:
    """Convenience wrapper around ``PlatformDiscoverer.discover``."""
    return PlatformDiscoverer(filesystem=filesystem).discover(root_dir)


__all__ = [
    "PROJECT_FILE_PATTERNS",
    "TARGET_KEY",
    "PlatformDiscoverer",
    "discover_platforms",
]

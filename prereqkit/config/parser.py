"""YAML configuration parser for PrereqKit.

This module provides parsing and validation for prereqkit.yaml configuration files.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

import yaml

from prereqkit.core.exceptions import PrereqKitError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "prereqkit.yaml"

DEFAULT_SDK_ARCHIVE_URL = (
    "https://dl.google.com/android/repository/"
    "commandlinetools-linux-11076708_latest.zip"
)


class ConfigError(PrereqKitError):
    """Configuration parsing or validation error."""

    pass


@dataclass
class SdkConfig:
    """SDK lookup and installation settings."""

    auto_install: bool = True
    root: Optional[Path] = None  # Lookup and install location
    archive_url: str = DEFAULT_SDK_ARCHIVE_URL
    archive_sha256: Optional[str] = None


@dataclass
class DiscoveryConfig:
    """Workspace scan settings."""

    max_workers: int = 1


@dataclass
class PrereqConfig:
    """Complete PrereqKit configuration."""

    version: int = 1
    sdk: SdkConfig = field(default_factory=SdkConfig)
    discovery: DiscoveryConfig = field(default_factory=DiscoveryConfig)

    @property
    def auto_install(self) -> bool:
        """Whether a missing SDK may be installed automatically."""
        return self.sdk.auto_install


def parse_config(config_path: Path, project_root: Optional[Path] = None) -> PrereqConfig:
    """
    Parse prereqkit.yaml configuration file.

    Args:
        config_path: Path to prereqkit.yaml
        project_root: Base for relative paths (default: the file's directory)

    Returns:
        Parsed and validated configuration

    Raises:
        ConfigError: If configuration is invalid
    """
    config_path = Path(config_path)
    if not config_path.exists():
        raise ConfigError(f"Configuration file not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError("Configuration must be a mapping")

    base = Path(project_root) if project_root else config_path.parent
    return _parse_and_validate(data, base)


def load_config(
    project_root: Path, config_path: Optional[Path] = None
) -> PrereqConfig:
    """
    Load configuration for a project, falling back to defaults.

    Args:
        project_root: Project root directory
        config_path: Explicit configuration file (must exist when given)

    Returns:
        Parsed configuration, or defaults when no file is present

    Raises:
        ConfigError: If the configuration file is invalid or missing
    """
    project_root = Path(project_root)

    if config_path is None:
        config_path = project_root / CONFIG_FILENAME
        if not config_path.exists():
            logger.debug(f"No {CONFIG_FILENAME} in {project_root}, using defaults")
            return PrereqConfig()

    logger.debug(f"Loading configuration from {config_path}")
    return parse_config(config_path, project_root)


def _parse_and_validate(data: dict, base: Path) -> PrereqConfig:
    """Parse and validate configuration data."""
    version = data.get("version", 1)
    if version != 1:
        raise ConfigError(f"Unsupported version: {version} (expected 1)")

    return PrereqConfig(
        version=version,
        sdk=_parse_sdk(data.get("sdk") or {}, base),
        discovery=_parse_discovery(data.get("discovery") or {}),
    )


def _parse_sdk(data: dict, base: Path) -> SdkConfig:
    """Parse sdk section."""
    if not isinstance(data, dict):
        raise ConfigError("sdk must be a dictionary")

    auto_install = data.get("auto_install", True)
    if not isinstance(auto_install, bool):
        raise ConfigError(f"sdk.auto_install must be true or false, got: {auto_install}")

    root = data.get("root")
    if root is not None:
        if not isinstance(root, str) or not root.strip():
            raise ConfigError("sdk.root must be a non-empty path")
        root = Path(root).expanduser()
        if not root.is_absolute():
            root = base / root

    archive_url = data.get("archive_url", DEFAULT_SDK_ARCHIVE_URL)
    if not isinstance(archive_url, str) or not archive_url:
        raise ConfigError("sdk.archive_url must be a non-empty string")

    archive_sha256 = data.get("archive_sha256")
    if archive_sha256 is not None and not isinstance(archive_sha256, str):
        raise ConfigError("sdk.archive_sha256 must be a string")

    return SdkConfig(
        auto_install=auto_install,
        root=root,
        archive_url=archive_url,
        archive_sha256=archive_sha256,
    )


def _parse_discovery(data: dict) -> DiscoveryConfig:
    """Parse discovery section."""
    if not isinstance(data, dict):
        raise ConfigError("discovery must be a dictionary")

    max_workers = data.get("max_workers", 1)
    if isinstance(max_workers, bool) or not isinstance(max_workers, int):
        raise ConfigError(f"discovery.max_workers must be an integer, got: {max_workers}")
    if max_workers < 1:
        raise ConfigError(f"discovery.max_workers must be at least 1, got: {max_workers}")

    return DiscoveryConfig(max_workers=max_workers)

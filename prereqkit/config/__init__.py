"""Configuration loading for PrereqKit."""

from .parser import (
    CONFIG_FILENAME,
    ConfigError,
    DiscoveryConfig,
    PrereqConfig,
    SdkConfig,
    load_config,
    parse_config,
)

__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "DiscoveryConfig",
    "PrereqConfig",
    "SdkConfig",
    "load_config",
    "parse_config",
]

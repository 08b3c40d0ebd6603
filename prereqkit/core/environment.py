"""
Build environment bindings.

A binding is a single key/value pair (for example ``ANDROID_HOME``) that
later build steps see for the rest of the build. Each key can be bound
once; bindings are never overwritten.
"""

import logging
import os
from dataclasses import dataclass
from typing import Dict, Iterator, List, Mapping, Optional

from prereqkit.core.exceptions import EnvironmentBindingError

logger = logging.getLogger(__name__)

ANDROID_HOME = "ANDROID_HOME"


@dataclass(frozen=True)
class EnvironmentBinding:
    """A key/value pair exported to subsequent build steps."""

    key: str
    value: str

    def __str__(self) -> str:
        return f"{self.key}={self.value}"


class EnvironmentContext:
    """
    Write-once environment shared by the steps of a build.

    Example:
        >>> env = EnvironmentContext()
        >>> env.bind("ANDROID_HOME", "/opt/android-sdk")
        EnvironmentBinding(key='ANDROID_HOME', value='/opt/android-sdk')
        >>> env.get("ANDROID_HOME")
        '/opt/android-sdk'
    """

    def __init__(self):
        self._bindings: Dict[str, EnvironmentBinding] = {}

    def bind(self, key: str, value: str) -> EnvironmentBinding:
        """
        Attach a key/value pair for the remainder of the build.

        Args:
            key: Environment variable name
            value: Environment variable value

        Returns:
            The created binding

        Raises:
            EnvironmentBindingError: If key is already bound
        """
        if key in self._bindings:
            raise EnvironmentBindingError(key)

        binding = EnvironmentBinding(key=key, value=str(value))
        self._bindings[key] = binding
        logger.debug(f"Bound environment variable {binding}")
        return binding

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        binding = self._bindings.get(key)
        return binding.value if binding else default

    @property
    def bindings(self) -> List[EnvironmentBinding]:
        """Bindings in the order they were created."""
        return list(self._bindings.values())

    def apply(self, base: Optional[Mapping[str, str]] = None) -> Dict[str, str]:
        """
        Build an environment mapping with all bindings applied.

        Args:
            base: Starting environment (default: ``os.environ``)

        Returns:
            New dictionary suitable for ``subprocess`` ``env=``
        """
        env = dict(os.environ if base is None else base)
        for binding in self._bindings.values():
            env[binding.key] = binding.value
        return env

    def __contains__(self, key: str) -> bool:
        return key in self._bindings

    def __iter__(self) -> Iterator[EnvironmentBinding]:
        return iter(self.bindings)

    def __len__(self) -> int:
        return len(self._bindings)


__all__ = ["ANDROID_HOME", "EnvironmentBinding", "EnvironmentContext"]

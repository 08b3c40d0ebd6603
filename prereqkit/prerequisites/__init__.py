"""
Project prerequisite discovery and installation.
"""

from .discoverer import PROJECT_FILE_PATTERNS, PlatformDiscoverer, discover_platforms
from .orchestrator import PrerequisiteOrchestrator
from .pipeline import (
    BuildContext,
    BuildPipeline,
    BuildStep,
    InstallPrerequisitesStep,
    StepResult,
)

__all__ = [
    "PROJECT_FILE_PATTERNS",
    "PlatformDiscoverer",
    "discover_platforms",
    "PrerequisiteOrchestrator",
    "BuildContext",
    "BuildPipeline",
    "BuildStep",
    "InstallPrerequisitesStep",
    "StepResult",
]

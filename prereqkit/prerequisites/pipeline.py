"""
Minimal build pipeline.

A pipeline runs ``BuildStep`` objects in order against a shared
``BuildContext`` and stops at the first step that fails. Steps exchange
information through the context's write-once environment.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Sequence

from prereqkit.config.parser import PrereqConfig
from prereqkit.core.environment import EnvironmentContext
from prereqkit.prerequisites.discoverer import PlatformDiscoverer
from prereqkit.prerequisites.orchestrator import PrerequisiteOrchestrator
from prereqkit.sdk.base import SdkInstaller, SdkLocator

logger = logging.getLogger(__name__)


@dataclass
class BuildContext:
    """State shared by the steps of one build."""

    workspace: Path
    environment: EnvironmentContext = field(default_factory=EnvironmentContext)

    def __post_init__(self):
        self.workspace = Path(self.workspace)


@dataclass(frozen=True)
class StepResult:
    """Outcome of a single build step."""

    step: str
    success: bool


class BuildStep(ABC):
    """A unit of work in a build pipeline."""

    name: str = "step"

    @abstractmethod
    def run(self, context: BuildContext) -> StepResult:
        """
        Execute the step.

        Args:
            context: Shared build context

        Returns:
            Result of the step
        """
        pass


class InstallPrerequisitesStep(BuildStep):
    """Build step that installs the SDK platforms the workspace needs."""

    name = "install-prerequisites"

    def __init__(
        self,
        config: PrereqConfig,
        locator: SdkLocator,
        installer: SdkInstaller,
        discoverer: Optional[PlatformDiscoverer] = None,
    ):
        self.locator = locator
        self.installer = installer
        self.orchestrator = PrerequisiteOrchestrator(config, discoverer)

    def run(self, context: BuildContext) -> StepResult:
        success = self.orchestrator.ensure_prerequisites(
            context, self.locator, self.installer
        )
        return StepResult(step=self.name, success=success)


class BuildPipeline:
    """Runs build steps in order until one fails."""

    def __init__(self, steps: Sequence[BuildStep]):
        self.steps = list(steps)
        self.results: List[StepResult] = []

    def run(self, context: BuildContext) -> bool:
        """
        Run all steps against context.

        Args:
            context: Shared build context

        Returns:
            True if every step succeeded
        """
        self.results = []
        for step in self.steps:
            logger.debug(f"Running build step: {step.name}")
            result = step.run(context)
            self.results.append(result)
            if not result.success:
                logger.error(f"Build step failed: {step.name}")
                return False
        return True


__all__ = [
    "BuildContext",
    "StepResult",
    "BuildStep",
    "InstallPrerequisitesStep",
    "BuildPipeline",
]

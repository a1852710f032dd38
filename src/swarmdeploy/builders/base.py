"""Base build strategy interface."""

import logging
import shlex
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Dict, List, Optional, Union

from swarmdeploy.errors import BuildError
from swarmdeploy.models.application import ApplicationSpec
from swarmdeploy.utils.deploy_log import DeploymentLog
from swarmdeploy.utils.process import stream_command


logger = logging.getLogger(__name__)


class BuildType(Enum):
    """Supported build types."""
    NIXPACKS = "nixpacks"
    HEROKU_BUILDPACKS = "heroku_buildpacks"
    PAKETO_BUILDPACKS = "paketo_buildpacks"
    DOCKERFILE = "dockerfile"
    STATIC = "static"
    NONE = "none"


@dataclass
class BuildCommand:
    """Description of a build, without running it."""
    build_type: BuildType
    argv: List[str]
    cwd: str
    log_path: Optional[str] = None
    env: Dict[str, str] = field(default_factory=dict)

    def as_shell(self) -> str:
        """Shell line equivalent to running the build into the log."""
        line = f"cd {shlex.quote(self.cwd)} && {shlex.join(self.argv)}"
        if self.log_path:
            line += f" >> {shlex.quote(self.log_path)} 2>&1"
        return line


class BuildStrategy(ABC):
    """Turns application source into a local image named ``<app>:latest``."""

    build_type: BuildType

    def __init__(self, applications_dir: Union[str, Path]):
        """Initialize with the root holding app checkouts."""
        self.applications_dir = Path(applications_dir)

    def code_path(self, app: ApplicationSpec) -> Path:
        """Checkout directory for an app."""
        return self.applications_dir / app.app_name / "code"

    def build_dir(self, app: ApplicationSpec) -> Path:
        """Directory the build runs in, honoring ``build_path``."""
        return self.code_path(app) / app.build_path.strip("/")

    @abstractmethod
    def get_command(self, app: ApplicationSpec, log_path: Optional[str] = None) -> BuildCommand:
        """Describe the build command."""
        pass

    async def prepare(self, app: ApplicationSpec, log: DeploymentLog) -> None:
        """Hook run before the build command."""
        pass

    async def build(self, app: ApplicationSpec, log: DeploymentLog) -> None:
        """Run the build, streaming output into the log."""
        command = self.get_command(app, str(log.path))
        await self.prepare(app, log)

        logger.info(f"Building {app.app_name} with {self.build_type.value}")
        try:
            returncode = await stream_command(command.argv, log, cwd=command.cwd)
        except OSError as e:
            raise BuildError(f"{command.argv[0]} could not be started: {e}", self.build_type.value) from e

        if returncode != 0:
            raise BuildError(
                f"{self.build_type.value} build failed with exit code {returncode}",
                self.build_type.value,
            )

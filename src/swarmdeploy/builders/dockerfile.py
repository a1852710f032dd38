"""Dockerfile and static site strategies."""

import asyncio
import logging
from pathlib import Path
from typing import Optional

from jinja2 import TemplateError

from swarmdeploy.builders.base import BuildCommand, BuildStrategy, BuildType
from swarmdeploy.errors import BuildError
from swarmdeploy.models.application import ApplicationSpec
from swarmdeploy.utils.deploy_log import DeploymentLog
from swarmdeploy.utils.templates import parse_key_values, render_template


logger = logging.getLogger(__name__)


STATIC_DOCKERFILE = "Dockerfile.static"

STATIC_TEMPLATE = """\
FROM nginx:alpine
WORKDIR /usr/share/nginx/html/
COPY {{ publish_directory }} .
"""


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class DockerfileStrategy(BuildStrategy):
    """Plain ``docker build`` of the app's Dockerfile."""

    build_type = BuildType.DOCKERFILE

    def context_dir(self, app: ApplicationSpec) -> Path:
        """Build context, defaulting to the Dockerfile's directory."""
        if app.docker_context_path:
            return self.code_path(app) / app.docker_context_path.strip("/")
        return self.build_dir(app)

    def dockerfile_path(self, app: ApplicationSpec) -> Path:
        return self.build_dir(app) / app.dockerfile

    def get_command(self, app: ApplicationSpec, log_path: Optional[str] = None) -> BuildCommand:
        context = str(self.context_dir(app))
        argv = ["docker", "build", "-t", f"{app.app_name}:latest", "-f", str(self.dockerfile_path(app))]
        for key, value in parse_key_values(app.build_args).items():
            argv += ["--build-arg", f"{key}={value}"]
        argv.append(context)
        return BuildCommand(self.build_type, argv, cwd=context, log_path=log_path)


class StaticStrategy(DockerfileStrategy):
    """Serve a directory with nginx via a generated Dockerfile."""

    build_type = BuildType.STATIC

    def context_dir(self, app: ApplicationSpec) -> Path:
        return self.build_dir(app)

    def dockerfile_path(self, app: ApplicationSpec) -> Path:
        return self.build_dir(app) / STATIC_DOCKERFILE

    def render_dockerfile(self, app: ApplicationSpec) -> str:
        return render_template(
            STATIC_TEMPLATE,
            publish_directory=(app.publish_directory or ".").strip("/") or ".",
        )

    async def prepare(self, app: ApplicationSpec, log: DeploymentLog) -> None:
        """Write the generated Dockerfile into the build dir."""
        path = self.dockerfile_path(app)
        try:
            content = self.render_dockerfile(app)
        except TemplateError as e:
            raise BuildError(f"Cannot render {STATIC_DOCKERFILE}: {e}", self.build_type.value) from e
        try:
            await asyncio.to_thread(_write, path, content)
        except OSError as e:
            raise BuildError(f"Cannot write {path}: {e}", self.build_type.value) from e
        log.write(f"Generated {path.name} for static build\n")
        logger.debug(f"Wrote static Dockerfile {path}")

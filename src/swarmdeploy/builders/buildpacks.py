"""Nixpacks and Cloud Native Buildpacks strategies."""

from typing import List, Optional

from swarmdeploy.builders.base import BuildCommand, BuildStrategy, BuildType
from swarmdeploy.models.application import ApplicationSpec
from swarmdeploy.utils.templates import parse_key_values


def _env_flags(app: ApplicationSpec) -> List[str]:
    flags: List[str] = []
    for key, value in parse_key_values(app.env).items():
        flags += ["--env", f"{key}={value}"]
    return flags


class NixpacksStrategy(BuildStrategy):
    """Build with the nixpacks CLI."""

    build_type = BuildType.NIXPACKS

    def get_command(self, app: ApplicationSpec, log_path: Optional[str] = None) -> BuildCommand:
        build_dir = str(self.build_dir(app))
        argv = ["nixpacks", "build", build_dir, "--name", app.app_name, *_env_flags(app)]
        return BuildCommand(self.build_type, argv, cwd=build_dir, log_path=log_path)


class PackStrategy(BuildStrategy):
    """Build with ``pack`` and a fixed builder image."""

    builder: str

    def get_command(self, app: ApplicationSpec, log_path: Optional[str] = None) -> BuildCommand:
        build_dir = str(self.build_dir(app))
        argv = [
            "pack", "build", app.app_name,
            "--path", build_dir,
            "--builder", self.builder,
            *_env_flags(app),
        ]
        return BuildCommand(self.build_type, argv, cwd=build_dir, log_path=log_path)


class HerokuStrategy(PackStrategy):
    """Heroku buildpacks."""

    build_type = BuildType.HEROKU_BUILDPACKS
    builder = "heroku/builder:24"


class PaketoStrategy(PackStrategy):
    """Paketo buildpacks."""

    build_type = BuildType.PAKETO_BUILDPACKS
    builder = "paketobuildpacks/builder-jammy-full"

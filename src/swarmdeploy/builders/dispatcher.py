"""Build type dispatch."""

import logging
from pathlib import Path
from typing import Dict, Optional, Type, Union

from swarmdeploy.builders.base import BuildCommand, BuildStrategy, BuildType
from swarmdeploy.builders.buildpacks import HerokuStrategy, NixpacksStrategy, PaketoStrategy
from swarmdeploy.builders.dockerfile import DockerfileStrategy, StaticStrategy
from swarmdeploy.models.application import ApplicationSpec
from swarmdeploy.utils.deploy_log import DeploymentLog


logger = logging.getLogger(__name__)


STRATEGY_CLASSES: Dict[BuildType, Type[BuildStrategy]] = {
    BuildType.NIXPACKS: NixpacksStrategy,
    BuildType.HEROKU_BUILDPACKS: HerokuStrategy,
    BuildType.PAKETO_BUILDPACKS: PaketoStrategy,
    BuildType.DOCKERFILE: DockerfileStrategy,
    BuildType.STATIC: StaticStrategy,
}

# Build types that intentionally have no strategy
NO_BUILD = {BuildType.NONE}


class BuildDispatcher:
    """Maps each build type to exactly one strategy."""

    def __init__(
        self,
        applications_dir: Union[str, Path],
        strategy_classes: Optional[Dict[BuildType, Type[BuildStrategy]]] = None,
    ):
        """Instantiate one strategy per build type."""
        classes = STRATEGY_CLASSES if strategy_classes is None else strategy_classes
        check_exhaustive(classes)
        self._strategies: Dict[BuildType, BuildStrategy] = {
            build_type: strategy_class(applications_dir)
            for build_type, strategy_class in classes.items()
        }

    def get_strategy(self, build_type: str) -> Optional[BuildStrategy]:
        """Strategy for a build type tag, None when nothing should be built."""
        try:
            return self._strategies.get(BuildType(build_type))
        except ValueError:
            return None

    async def dispatch_build(self, app: ApplicationSpec, log: DeploymentLog) -> bool:
        """Run the build for the app's build type. Returns whether a build ran."""
        if app.is_docker_source:
            return False
        strategy = self.get_strategy(app.build_type)
        if strategy is None:
            logger.debug(f"No build step for {app.app_name} ({app.build_type})")
            return False
        await strategy.build(app, log)
        return True

    def get_build_command(self, app: ApplicationSpec, log_path: Optional[str] = None) -> Optional[BuildCommand]:
        """Describe the build for the app's build type without running it."""
        strategy = self.get_strategy(app.build_type)
        if strategy is None:
            return None
        return strategy.get_command(app, log_path)


def check_exhaustive(classes: Dict[BuildType, Type[BuildStrategy]]) -> None:
    """Fail if a build type has no strategy, or a strategy is filed under the wrong type."""
    missing = [t.value for t in BuildType if t not in classes and t not in NO_BUILD]
    if missing:
        raise RuntimeError(f"No build strategy registered for: {', '.join(missing)}")
    for build_type, strategy_class in classes.items():
        if strategy_class.build_type is not build_type:
            raise RuntimeError(
                f"{strategy_class.__name__} builds {strategy_class.build_type.value}, "
                f"registered for {build_type.value}"
            )

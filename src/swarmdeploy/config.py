"""Configuration loading."""

import asyncio
import logging
from pathlib import Path
from typing import Any, Dict, Optional

from pydantic import ValidationError
from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from swarmdeploy.errors import ConfigError
from swarmdeploy.models.application import ApplicationSpec
from swarmdeploy.models.config import DeployConfig


logger = logging.getLogger(__name__)


class ConfigManager:
    """Loads the main config and application descriptors."""

    def __init__(self, config_dir: Path):
        """Initialize configuration manager."""
        self.config_dir = Path(config_dir)
        self.yaml = YAML(typ="safe")
        self.config: Optional[DeployConfig] = None
        self.applications: Dict[str, ApplicationSpec] = {}
        self.errors: Dict[str, str] = {}

    async def load(self):
        """Load all configuration files."""
        logger.info(f"Loading configuration from {self.config_dir}")
        self.errors.clear()

        await self._load_main_config()
        await self._load_applications()

        logger.info(f"Loaded {len(self.applications)} application(s)")

    async def _load_main_config(self):
        """Load main configuration file, defaults when it is missing."""
        config_file = self.config_dir / "config.yaml"
        if not config_file.exists():
            logger.warning(f"Main config not found, using defaults: {config_file}")
            self.config = DeployConfig()
            return

        try:
            data = await self._read_yaml(config_file) or {}
            if not isinstance(data, dict):
                raise ConfigError(
                    f"Invalid main config {config_file}: expected a mapping, got {type(data).__name__}"
                )
            self.config = DeployConfig.model_validate(data)
            logger.debug(f"Loaded main config: {config_file}")
        except ValidationError as e:
            logger.error(f"Invalid main config: {e}")
            raise ConfigError(f"Invalid main config {config_file}: {e}") from e

    async def _load_applications(self):
        """Load application descriptors from ``apps/*.yaml``."""
        apps_dir = self.config_dir / "apps"
        if not apps_dir.exists():
            logger.warning(f"Apps directory not found: {apps_dir}")
            return

        self.applications.clear()
        for yaml_file in sorted(apps_dir.glob("*.yaml")):
            try:
                data = await self._read_yaml(yaml_file)
            except ConfigError as e:
                logger.error(str(e))
                self.errors[str(yaml_file)] = str(e)
                continue

            data = data or {}
            if not isinstance(data, dict):
                message = f"{yaml_file}: expected a mapping of application names, got {type(data).__name__}"
                logger.error(message)
                self.errors[str(yaml_file)] = message
                continue

            for name, spec in data.items():
                spec = spec or {}
                if not isinstance(spec, dict):
                    message = f"Application {name} in {yaml_file} must be a mapping, got {type(spec).__name__}"
                    logger.error(message)
                    self.errors[str(name)] = message
                    continue
                try:
                    self.applications[name] = ApplicationSpec.model_validate({**spec, "app_name": name})
                except ValidationError as e:
                    logger.error(f"Invalid application {name} in {yaml_file}: {e}")
                    self.errors[str(name)] = str(e)
            logger.debug(f"Loaded applications from {yaml_file}")

    async def _read_yaml(self, file_path: Path) -> Any:
        """Read and parse a YAML file."""
        try:
            content = await asyncio.to_thread(file_path.read_text)
            return self.yaml.load(content)
        except (OSError, YAMLError) as e:
            raise ConfigError(f"Error loading {file_path}: {e}") from e

    def get_application(self, name: str) -> Optional[ApplicationSpec]:
        """Get application descriptor by name."""
        return self.applications.get(name)

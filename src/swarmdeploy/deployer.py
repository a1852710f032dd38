"""Deployment pipeline: build, upload, reconcile."""

import asyncio
import logging
from datetime import datetime
from pathlib import Path
from typing import Awaitable, Callable, Optional

import docker

from swarmdeploy.builders import BuildCommand, BuildDispatcher
from swarmdeploy.errors import SwarmDeployError
from swarmdeploy.models.application import ApplicationSpec
from swarmdeploy.models.config import DeployConfig
from swarmdeploy.swarm.control_plane import ControlPlane, DockerControlPlane
from swarmdeploy.swarm.docker_client import get_docker_client
from swarmdeploy.swarm.mounts import write_file_mounts
from swarmdeploy.swarm.reconciler import ReconcileResult, ServiceReconciler
from swarmdeploy.upload import upload_image
from swarmdeploy.utils.deploy_log import DeploymentLog
from swarmdeploy.utils.locks import KeyedLock


logger = logging.getLogger(__name__)


ClientFactory = Callable[[Optional[str], DeployConfig], docker.DockerClient]
Uploader = Callable[[ApplicationSpec, DeploymentLog, docker.DockerClient], Awaitable[str]]


class Deployer:
    """Runs one deployment per call, serialized per application."""

    def __init__(
        self,
        config: DeployConfig,
        dispatcher: Optional[BuildDispatcher] = None,
        lock: Optional[KeyedLock] = None,
        client_factory: ClientFactory = get_docker_client,
        control_plane_factory: Callable[[docker.DockerClient], ControlPlane] = DockerControlPlane,
        uploader: Uploader = upload_image,
    ):
        """Initialize deployer."""
        self.config = config
        self.dispatcher = dispatcher or BuildDispatcher(config.agent.applications_dir)
        self.lock = lock or KeyedLock()
        self.client_factory = client_factory
        self.control_plane_factory = control_plane_factory
        self.uploader = uploader

    def log_path(self, app: ApplicationSpec) -> Path:
        """Fresh log file path for a deployment of ``app``."""
        stamp = datetime.now().strftime("%Y-%m-%d-%H-%M-%S-%f")
        return Path(self.config.agent.logs_dir) / app.app_name / f"{app.app_name}-{stamp}.log"

    def get_build_command(self, app: ApplicationSpec, log_path: Optional[str] = None) -> Optional[BuildCommand]:
        """Describe the app's build without running it."""
        return self.dispatcher.get_build_command(app, log_path)

    async def deploy(self, app: ApplicationSpec, log_path: Optional[Path] = None) -> ReconcileResult:
        """Build, optionally upload, then create or update the service.

        The log always ends with a success or failure marker. Errors are
        re-raised after being logged.
        """
        async with self.lock.hold(app.app_name):
            path = log_path or self.log_path(app)
            try:
                log = DeploymentLog(path)
            except OSError as e:
                raise SwarmDeployError(f"Cannot open deployment log {path}: {e}") from e
            try:
                log.write(f"\nBuild {app.build_type}: ✅\nSource Type: {app.source_type}: ✅\n")
                logger.info(f"Deploying {app.app_name} (build {app.build_type}, source {app.source_type})")

                await self.dispatcher.dispatch_build(app, log)

                client = await asyncio.to_thread(self.client_factory, app.server_id, self.config)
                try:
                    result = await self._publish(app, log, client)
                finally:
                    client.close()

                log.write("Docker Deployed: ✅\n")
                logger.info(f"Deployed {app.app_name}: service {result.action}")
                return result

            except Exception as e:
                message = str(e)
                log.write(f"Error ❌\n{message}\n" if message else "Error ❌\n")
                logger.error(f"Deployment of {app.app_name} failed: {e}")
                raise
            finally:
                log.close()

    async def _publish(self, app: ApplicationSpec, log: DeploymentLog, client: docker.DockerClient) -> ReconcileResult:
        """Upload if needed, write file mounts, then reconcile the service."""
        if app.registry_id:
            await self.uploader(app, log, client)

        await write_file_mounts(app.app_name, app.mounts, self.config.agent.applications_dir)

        reconciler = ServiceReconciler(
            self.control_plane_factory(client),
            applications_dir=self.config.agent.applications_dir,
            default_network=self.config.swarm.default_network,
            strict_inspect=self.config.swarm.strict_inspect,
        )
        return await reconciler.reconcile(app)

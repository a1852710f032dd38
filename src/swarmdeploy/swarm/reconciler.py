"""Swarm service reconciliation."""

import copy
import logging
from dataclasses import dataclass
from typing import Any, Dict, Literal, Optional

from swarmdeploy.errors import ControlPlaneError, ServiceNotFound
from swarmdeploy.models.application import ApplicationSpec
from swarmdeploy.swarm.control_plane import ControlPlane, ServiceState
from swarmdeploy.swarm.environment import prepare_environment_variables
from swarmdeploy.swarm.image import get_auth_config, get_image_name
from swarmdeploy.swarm.mounts import (
    find_duplicate_targets,
    generate_bind_mounts,
    generate_file_mounts,
    generate_volume_mounts,
)
from swarmdeploy.swarm.resources import calculate_resources
from swarmdeploy.swarm.service_config import DEFAULT_NETWORK, generate_config_container


logger = logging.getLogger(__name__)


@dataclass
class ServiceSpecification:
    """Composed service spec plus the credentials needed to pull its image."""
    spec: Dict[str, Any]
    auth_config: Optional[Dict[str, str]] = None

    @property
    def name(self) -> str:
        return self.spec["Name"]


@dataclass
class ReconcileResult:
    """Outcome of one reconciliation."""
    name: str
    action: Literal["created", "updated"]
    version: Optional[int] = None
    force_update: Optional[int] = None


def build_service_spec(
    app: ApplicationSpec,
    applications_dir: str,
    default_network: str = DEFAULT_NETWORK,
) -> ServiceSpecification:
    """Compose the full service specification for an application.

    Pure; composition errors (bad resources or mounts) propagate.
    """
    resources = calculate_resources(
        cpu_limit=app.cpu_limit,
        cpu_reservation=app.cpu_reservation,
        memory_limit=app.memory_limit,
        memory_reservation=app.memory_reservation,
    )

    mounts = [
        *generate_volume_mounts(app.mounts),
        *generate_bind_mounts(app.mounts),
        *generate_file_mounts(app.app_name, app.mounts, applications_dir),
    ]
    duplicates = find_duplicate_targets(mounts)
    if duplicates:
        logger.warning(f"App {app.app_name} mounts multiple sources at {', '.join(duplicates)}")

    config = generate_config_container(app, default_network=default_network)

    container_spec: Dict[str, Any] = {
        "Image": get_image_name(app),
        "Env": prepare_environment_variables(app.env),
        "Mounts": mounts,
        "Labels": config.labels,
    }
    if config.health_check is not None:
        container_spec["HealthCheck"] = config.health_check
    if app.command:
        container_spec["Command"] = ["/bin/sh"]
        container_spec["Args"] = ["-c", app.command]

    spec = {
        "Name": app.app_name,
        "Labels": dict(config.labels),
        "TaskTemplate": {
            "ContainerSpec": container_spec,
            "Networks": config.networks,
            "RestartPolicy": config.restart_policy,
            "Placement": config.placement,
            "Resources": resources,
        },
        "Mode": config.mode,
        "RollbackConfig": config.rollback_config,
        "UpdateConfig": config.update_config,
        "EndpointSpec": {
            "Ports": [
                {
                    "Protocol": port.protocol,
                    "TargetPort": port.target_port,
                    "PublishedPort": port.published_port,
                }
                for port in app.ports
            ],
        },
    }
    return ServiceSpecification(spec=spec, auth_config=get_auth_config(app))


class ServiceReconciler:
    """Creates or updates the swarm service for an application.

    Callers must not run two reconciliations for the same app at once; the
    Deployer serializes them with a KeyedLock.
    """

    def __init__(
        self,
        control_plane: ControlPlane,
        applications_dir: str,
        default_network: str = DEFAULT_NETWORK,
        strict_inspect: bool = False,
    ):
        """Initialize reconciler."""
        self.control_plane = control_plane
        self.applications_dir = applications_dir
        self.default_network = default_network
        self.strict_inspect = strict_inspect

    async def reconcile(self, app: ApplicationSpec) -> ReconcileResult:
        """Create the service if absent, otherwise force an update."""
        composed = build_service_spec(app, self.applications_dir, self.default_network)

        current = await self._observe(app.app_name)
        if current is None:
            return await self._create(composed)
        return await self._update(composed, current)

    async def _observe(self, name: str) -> Optional[ServiceState]:
        """Fetch the live service, None when it should be treated as absent."""
        try:
            return await self.control_plane.inspect_service(name)
        except ServiceNotFound:
            logger.debug(f"Service {name} not found")
            return None
        except Exception as e:
            if self.strict_inspect:
                raise ControlPlaneError(f"Cannot determine state of service {name}: {e}") from e
            logger.warning(f"Inspect of service {name} failed, treating as absent: {e}")
            return None

    async def _create(self, composed: ServiceSpecification) -> ReconcileResult:
        logger.info(f"Creating service {composed.name}")
        try:
            await self.control_plane.create_service(composed.spec, composed.auth_config)
        except Exception as e:
            logger.error(f"Failed to create service {composed.name}: {e}")
            raise
        return ReconcileResult(name=composed.name, action="created")

    async def _update(self, composed: ServiceSpecification, current: ServiceState) -> ReconcileResult:
        spec = copy.deepcopy(composed.spec)
        force_update = current.force_update + 1
        spec["TaskTemplate"]["ForceUpdate"] = force_update

        logger.info(
            f"Updating service {composed.name} (version {current.version}, force update {force_update})"
        )
        try:
            await self.control_plane.update_service(
                composed.name,
                current.version,
                spec,
                composed.auth_config,
            )
        except Exception as e:
            logger.error(f"Failed to update service {composed.name}: {e}")
            raise
        return ReconcileResult(
            name=composed.name,
            action="updated",
            version=current.version,
            force_update=force_update,
        )

"""Swarm control plane access."""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import docker
import requests
from docker.errors import DockerException, NotFound

from swarmdeploy.errors import ControlPlaneError, ServiceNotFound


logger = logging.getLogger(__name__)


@dataclass
class ServiceState:
    """Snapshot of a live swarm service."""
    name: str
    version: int
    force_update: int = 0
    spec: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_inspect(cls, name: str, attrs: Dict[str, Any]) -> "ServiceState":
        """Build from a service inspect payload."""
        spec = attrs.get("Spec") or {}
        task_template = spec.get("TaskTemplate") or {}
        return cls(
            name=name,
            version=int(attrs["Version"]["Index"]),
            force_update=int(task_template.get("ForceUpdate") or 0),
            spec=spec,
        )


class ControlPlane(ABC):
    """Operations the reconciler needs from the orchestrator."""

    @abstractmethod
    async def inspect_service(self, name: str) -> ServiceState:
        """Return the current service state, raise ServiceNotFound if absent."""
        pass

    @abstractmethod
    async def update_service(
        self,
        name: str,
        version: int,
        spec: Dict[str, Any],
        auth_config: Optional[Dict[str, str]] = None,
    ) -> None:
        """Replace the spec of an existing service at ``version``."""
        pass

    @abstractmethod
    async def create_service(
        self,
        spec: Dict[str, Any],
        auth_config: Optional[Dict[str, str]] = None,
    ) -> None:
        """Create a new service."""
        pass


class DockerControlPlane(ControlPlane):
    """Control plane backed by a docker SDK client."""

    def __init__(self, client: docker.DockerClient):
        """Initialize with a connected docker client."""
        self.client = client

    async def inspect_service(self, name: str) -> ServiceState:
        """Inspect a service by name."""
        try:
            attrs = await asyncio.to_thread(self.client.api.inspect_service, name)
        except NotFound as e:
            raise ServiceNotFound(f"Service {name} not found") from e
        except (DockerException, requests.RequestException) as e:
            raise ControlPlaneError(f"Failed to inspect service {name}: {e}") from e
        return ServiceState.from_inspect(name, attrs)

    async def update_service(
        self,
        name: str,
        version: int,
        spec: Dict[str, Any],
        auth_config: Optional[Dict[str, str]] = None,
    ) -> None:
        """Update a service through the low-level API."""
        await self._login(auth_config)
        try:
            await asyncio.to_thread(
                self.client.api.update_service,
                name,
                version,
                task_template=spec["TaskTemplate"],
                name=spec["Name"],
                labels=spec.get("Labels"),
                mode=spec.get("Mode"),
                update_config=spec.get("UpdateConfig"),
                rollback_config=spec.get("RollbackConfig"),
                endpoint_spec=spec.get("EndpointSpec"),
            )
        except (DockerException, requests.RequestException) as e:
            raise ControlPlaneError(f"Failed to update service {name}: {e}") from e
        logger.debug(f"Updated service {name} at version {version}")

    async def create_service(
        self,
        spec: Dict[str, Any],
        auth_config: Optional[Dict[str, str]] = None,
    ) -> None:
        """Create a service through the low-level API."""
        name = spec["Name"]
        await self._login(auth_config)
        try:
            await asyncio.to_thread(
                self.client.api.create_service,
                spec["TaskTemplate"],
                name=name,
                labels=spec.get("Labels"),
                mode=spec.get("Mode"),
                update_config=spec.get("UpdateConfig"),
                rollback_config=spec.get("RollbackConfig"),
                endpoint_spec=spec.get("EndpointSpec"),
            )
        except (DockerException, requests.RequestException) as e:
            raise ControlPlaneError(f"Failed to create service {name}: {e}") from e
        logger.debug(f"Created service {name}")

    async def _login(self, auth_config: Optional[Dict[str, str]]) -> None:
        """Store registry credentials so the SDK sends X-Registry-Auth."""
        if not auth_config or not auth_config.get("username"):
            return
        try:
            await asyncio.to_thread(
                self.client.login,
                username=auth_config["username"],
                password=auth_config.get("password"),
                registry=auth_config.get("serveraddress"),
            )
        except (DockerException, requests.RequestException) as e:
            raise ControlPlaneError(
                f"Registry login failed for {auth_config.get('serveraddress')}: {e}"
            ) from e

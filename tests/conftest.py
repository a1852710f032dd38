"""Shared fixtures."""

import copy

import pytest

from swarmdeploy.errors import ControlPlaneError, ServiceNotFound
from swarmdeploy.models.config import AgentConfig, DeployConfig
from swarmdeploy.swarm.control_plane import ControlPlane, ServiceState


class FakeControlPlane(ControlPlane):
    """In-memory swarm that records every call."""

    def __init__(self):
        self.services = {}
        self.calls = []
        self.inspect_error = None
        self.write_error = None
        self._index = 10

    async def inspect_service(self, name):
        self.calls.append(("inspect", name))
        if self.inspect_error is not None:
            raise self.inspect_error
        if name not in self.services:
            raise ServiceNotFound(f"Service {name} not found")
        version, spec = self.services[name]
        return ServiceState.from_inspect(name, {"Version": {"Index": version}, "Spec": spec})

    async def update_service(self, name, version, spec, auth_config=None):
        self.calls.append(("update", name, version, copy.deepcopy(spec), auth_config))
        if self.write_error is not None:
            raise self.write_error
        current_version, _ = self.services[name]
        if version != current_version:
            raise ControlPlaneError("update out of sequence")
        self._index += 1
        self.services[name] = (self._index, copy.deepcopy(spec))

    async def create_service(self, spec, auth_config=None):
        self.calls.append(("create", copy.deepcopy(spec), auth_config))
        if self.write_error is not None:
            raise self.write_error
        if spec["Name"] in self.services:
            raise ControlPlaneError("name conflicts with an existing object")
        self._index += 1
        self.services[spec["Name"]] = (self._index, copy.deepcopy(spec))

    def writes(self):
        return [c for c in self.calls if c[0] in ("create", "update")]


@pytest.fixture
def fake_control_plane():
    """Empty in-memory control plane."""
    return FakeControlPlane()


@pytest.fixture
def deploy_config(tmp_path):
    """Config rooted in a temporary directory."""
    return DeployConfig(
        agent=AgentConfig(
            logs_dir=str(tmp_path / "logs"),
            applications_dir=str(tmp_path / "applications"),
        )
    )

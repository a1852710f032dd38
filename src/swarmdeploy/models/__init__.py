"""Pydantic models for configuration and validation."""

from swarmdeploy.models.config import DeployConfig, AgentConfig, SwarmConfig, ServerConfig
from swarmdeploy.models.application import (
    ApplicationSpec,
    BindMount,
    FileMount,
    PortSpec,
    RegistrySpec,
    VolumeMount,
)

__all__ = [
    "DeployConfig",
    "AgentConfig",
    "SwarmConfig",
    "ServerConfig",
    "ApplicationSpec",
    "BindMount",
    "FileMount",
    "PortSpec",
    "RegistrySpec",
    "VolumeMount",
]

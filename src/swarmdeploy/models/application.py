"""Application descriptor models."""

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator


SOURCE_TYPE_ALIASES = {"github", "gitlab", "bitbucket", "gitea", "drop"}


class PortSpec(BaseModel):
    """Published port mapping."""
    protocol: Literal["tcp", "udp"] = Field(default="tcp")
    target_port: int = Field(..., ge=1, le=65535)
    published_port: int = Field(..., ge=1, le=65535)

    class Config:
        """Pydantic config."""
        extra = "forbid"


class VolumeMount(BaseModel):
    """Named volume mounted into the service."""
    type: Literal["volume"] = "volume"
    volume_name: str = Field(..., min_length=1)
    mount_path: str = Field(..., min_length=1)

    class Config:
        """Pydantic config."""
        extra = "forbid"


class BindMount(BaseModel):
    """Host path bound into the service."""
    type: Literal["bind"] = "bind"
    host_path: str = Field(..., min_length=1)
    mount_path: str = Field(..., min_length=1)

    class Config:
        """Pydantic config."""
        extra = "forbid"


class FileMount(BaseModel):
    """Inline file content written on the host and bound into the service."""
    type: Literal["file"] = "file"
    content: str = Field(default="")
    mount_path: str = Field(..., min_length=1)
    file_path: Optional[str] = Field(None, description="Logical file name under the app files dir")

    class Config:
        """Pydantic config."""
        extra = "forbid"

    @property
    def logical_name(self) -> str:
        """Path under the app files dir, defaults to the mount path itself."""
        return self.file_path or self.mount_path.lstrip("/")


MountSpec = Annotated[Union[VolumeMount, BindMount, FileMount], Field(discriminator="type")]


class RegistrySpec(BaseModel):
    """Private registry the built image is pushed to and pulled from."""
    registry_url: str = Field(default="")
    image_prefix: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    class Config:
        """Pydantic config."""
        extra = "ignore"


class ApplicationSpec(BaseModel):
    """Declarative description of one application deployment."""
    app_name: str = Field(..., pattern=r"^[a-zA-Z0-9][a-zA-Z0-9_.-]{0,62}$")
    server_id: Optional[str] = Field(None, description="Remote docker server key")

    source_type: Literal["docker", "git"] = Field(default="git")
    build_type: Literal[
        "nixpacks",
        "heroku_buildpacks",
        "paketo_buildpacks",
        "dockerfile",
        "static",
        "none",
    ] = Field(default="nixpacks")
    docker_image: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    env: Optional[str] = None
    build_args: Optional[str] = None
    command: Optional[str] = None

    cpu_limit: Optional[float] = None
    cpu_reservation: Optional[float] = None
    memory_limit: Optional[float] = None
    memory_reservation: Optional[float] = None

    ports: List[PortSpec] = Field(default_factory=list)
    mounts: List[MountSpec] = Field(default_factory=list)

    registry: Optional[RegistrySpec] = None
    registry_id: Optional[str] = None

    replicas: int = Field(default=1, ge=0)

    # Raw swarm overrides, passed through as-is
    health_check_swarm: Optional[Dict[str, Any]] = None
    restart_policy_swarm: Optional[Dict[str, Any]] = None
    placement_swarm: Optional[Dict[str, Any]] = None
    update_config_swarm: Optional[Dict[str, Any]] = None
    rollback_config_swarm: Optional[Dict[str, Any]] = None
    mode_swarm: Optional[Dict[str, Any]] = None
    labels_swarm: Optional[Dict[str, str]] = None
    network_swarm: Optional[List[Dict[str, Any]]] = None

    # Build inputs
    build_path: str = Field(default="/")
    dockerfile: str = Field(default="Dockerfile")
    docker_context_path: Optional[str] = None
    publish_directory: Optional[str] = None

    class Config:
        """Pydantic config."""
        extra = "ignore"

    @field_validator("source_type", mode="before")
    @classmethod
    def normalize_source_type(cls, v):
        """Collapse git provider names into the built-from-source type."""
        if isinstance(v, str) and v.lower() in SOURCE_TYPE_ALIASES:
            return "git"
        return v

    @property
    def is_docker_source(self) -> bool:
        """Whether the image comes straight from ``docker_image``."""
        return self.source_type == "docker"

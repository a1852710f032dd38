"""Configuration models."""

from typing import Dict, Optional
from pydantic import BaseModel, Field, field_validator


class AgentConfig(BaseModel):
    """Local runtime configuration."""
    log_level: str = Field(default="INFO")
    logs_dir: str = Field(default="./logs")
    applications_dir: str = Field(default="./applications")

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v):
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"Invalid log level: {v}")
        return v.upper()


class SwarmConfig(BaseModel):
    """Swarm service defaults."""
    default_network: str = Field(default="swarmdeploy-network")
    strict_inspect: bool = Field(
        default=False,
        description="Only treat a not-found inspect as absent; raise on other failures",
    )


class ServerConfig(BaseModel):
    """Remote docker daemon connection."""
    base_url: str = Field(..., description="Docker daemon URL, e.g. tcp://host:2376")
    tls: bool = Field(default=False)
    tls_verify: bool = Field(default=True)
    cert_path: Optional[str] = None
    timeout: int = Field(default=60, ge=1)


class DeployConfig(BaseModel):
    """Main configuration model."""
    agent: AgentConfig = Field(default_factory=AgentConfig)
    swarm: SwarmConfig = Field(default_factory=SwarmConfig)
    servers: Dict[str, ServerConfig] = Field(default_factory=dict)

    class Config:
        """Pydantic config."""
        extra = "ignore"

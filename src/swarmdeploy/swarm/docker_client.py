"""Docker client acquisition per server."""

import logging
from pathlib import Path
from typing import Optional

import docker
from docker.errors import DockerException
from docker.tls import TLSConfig

from swarmdeploy.errors import ConfigError, ControlPlaneError
from swarmdeploy.models.config import DeployConfig, ServerConfig


logger = logging.getLogger(__name__)


def _tls_config(server: ServerConfig) -> Optional[TLSConfig]:
    if not server.tls:
        return None
    if not server.cert_path:
        return TLSConfig(verify=server.tls_verify)
    certs = Path(server.cert_path)
    return TLSConfig(
        client_cert=(str(certs / "cert.pem"), str(certs / "key.pem")),
        ca_cert=str(certs / "ca.pem") if server.tls_verify else None,
        verify=server.tls_verify,
    )


def get_docker_client(server_id: Optional[str], config: DeployConfig) -> docker.DockerClient:
    """Return a client for the local daemon or a configured remote server."""
    try:
        if not server_id:
            return docker.from_env()

        server = config.servers.get(server_id)
        if server is None:
            raise ConfigError(f"Unknown server: {server_id}")

        logger.debug(f"Connecting to docker server {server_id} at {server.base_url}")
        return docker.DockerClient(
            base_url=server.base_url,
            tls=_tls_config(server) or False,
            timeout=server.timeout,
        )
    except DockerException as e:
        raise ControlPlaneError(f"Cannot connect to docker ({server_id or 'local'}): {e}") from e

"""Image reference and registry credential resolution."""

from typing import Dict, Optional

from swarmdeploy.models.application import ApplicationSpec


MISSING_IMAGE = "ERROR-NO-IMAGE-PROVIDED"
DOCKER_HUB_ADDRESS = "https://index.docker.io/v1/"


def get_image_name(app: ApplicationSpec) -> str:
    """Image reference the service should run.

    A docker source without an image yields a sentinel so the failure shows
    up when the control plane tries to pull it.
    """
    if app.is_docker_source:
        return app.docker_image or MISSING_IMAGE

    registry = app.registry
    if registry is None:
        return f"{app.app_name}:latest"

    prefix = f"{registry.image_prefix}/" if registry.image_prefix else ""
    return f"{registry.registry_url}/{prefix}{app.app_name}"


def get_auth_config(app: ApplicationSpec) -> Optional[Dict[str, str]]:
    """Registry credentials for pulling the image, or None for anonymous."""
    if app.is_docker_source:
        if app.username and app.password:
            return {
                "username": app.username,
                "password": app.password,
                "serveraddress": DOCKER_HUB_ADDRESS,
            }
        return None

    if app.registry is not None:
        return {
            "username": app.registry.username,
            "password": app.registry.password,
            "serveraddress": app.registry.registry_url,
        }
    return None

"""Push locally built images to the app's registry."""

import asyncio
import logging

import docker
import requests
from docker.errors import DockerException

from swarmdeploy.errors import UploadError
from swarmdeploy.models.application import ApplicationSpec
from swarmdeploy.swarm.image import get_auth_config, get_image_name
from swarmdeploy.utils.deploy_log import DeploymentLog


logger = logging.getLogger(__name__)


async def upload_image(app: ApplicationSpec, log: DeploymentLog, client: docker.DockerClient) -> str:
    """Tag ``<app>:latest`` with the registry name and push it.

    Returns the pushed reference.
    """
    if app.registry is None:
        raise UploadError(f"App {app.app_name} has registry_id but no registry settings")

    local_ref = f"{app.app_name}:latest"
    remote_ref = get_image_name(app)
    auth = get_auth_config(app)
    log.write(f"Uploading {local_ref} to {remote_ref}\n")

    try:
        image = await asyncio.to_thread(client.images.get, local_ref)
        await asyncio.to_thread(image.tag, remote_ref, "latest")
        output = await asyncio.to_thread(
            client.images.push,
            remote_ref,
            tag="latest",
            auth_config=auth,
            stream=True,
            decode=True,
        )
        for chunk in await asyncio.to_thread(list, output):
            if "error" in chunk:
                raise UploadError(f"Push of {remote_ref} failed: {chunk['error']}")
            if chunk.get("status"):
                log.write(f"{chunk['status']}\n")
    except (DockerException, requests.RequestException) as e:
        raise UploadError(f"Push of {remote_ref} failed: {e}") from e

    logger.info(f"Pushed {remote_ref}")
    return f"{remote_ref}:latest"

"""Exception hierarchy."""

from typing import Optional


class SwarmDeployError(Exception):
    """Base error for deployment failures."""
    pass


class CompositionError(SwarmDeployError):
    """Descriptor could not be translated into a service specification."""
    pass


class ResourceError(CompositionError):
    """Invalid resource limit or reservation."""
    pass


class MountError(CompositionError):
    """Invalid mount declaration."""
    pass


class BuildError(SwarmDeployError):
    """A build strategy failed."""

    def __init__(self, message: str, build_type: Optional[str] = None):
        super().__init__(message)
        self.build_type = build_type


class UploadError(SwarmDeployError):
    """Pushing the built image to the registry failed."""
    pass


class ControlPlaneError(SwarmDeployError):
    """The swarm control plane rejected or failed a request."""
    pass


class ServiceNotFound(ControlPlaneError):
    """No service with the requested name exists."""
    pass


class ConfigError(SwarmDeployError):
    """Configuration could not be loaded."""
    pass

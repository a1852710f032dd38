"""
swarmdeploy - declarative application deployment onto Docker Swarm.

Turns an application descriptor into a Swarm service specification and
creates or force-updates the service on the control plane.
"""

__version__ = "1.0.0"

# Re-export key components for easier access
from swarmdeploy.models.application import ApplicationSpec
from swarmdeploy.models.config import DeployConfig
from swarmdeploy.deployer import Deployer
from swarmdeploy.swarm.reconciler import ServiceReconciler, build_service_spec

__all__ = [
    "ApplicationSpec",
    "DeployConfig",
    "Deployer",
    "ServiceReconciler",
    "build_service_spec",
]

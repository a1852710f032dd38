"""Swarm service specification and reconciliation."""

from swarmdeploy.swarm.control_plane import ControlPlane, DockerControlPlane, ServiceState
from swarmdeploy.swarm.reconciler import (
    ReconcileResult,
    ServiceReconciler,
    ServiceSpecification,
    build_service_spec,
)

__all__ = [
    "ControlPlane",
    "DockerControlPlane",
    "ReconcileResult",
    "ServiceReconciler",
    "ServiceSpecification",
    "ServiceState",
    "build_service_spec",
]

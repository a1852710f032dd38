"""Derived swarm service configuration blocks."""

import copy
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from swarmdeploy.models.application import ApplicationSpec


APP_LABEL = "swarmdeploy.app"
DEFAULT_NETWORK = "swarmdeploy-network"

# Swarm durations are nanoseconds
DEFAULT_RESTART_DELAY_NS = 5_000_000_000

DEFAULT_RESTART_POLICY = {
    "Condition": "on-failure",
    "Delay": DEFAULT_RESTART_DELAY_NS,
    "MaxAttempts": 0,
}
DEFAULT_ROLLBACK_CONFIG = {
    "Parallelism": 1,
    "FailureAction": "pause",
    "Order": "stop-first",
}
DEFAULT_UPDATE_CONFIG = {
    "Parallelism": 1,
    "Delay": 0,
    "FailureAction": "pause",
    "Order": "start-first",
}
MANAGER_CONSTRAINT = "node.role==manager"


@dataclass
class ServiceConfig:
    """Swarm configuration blocks derived from an application."""
    health_check: Optional[Dict[str, Any]]
    restart_policy: Dict[str, Any]
    placement: Dict[str, Any]
    labels: Dict[str, str]
    mode: Dict[str, Any]
    rollback_config: Dict[str, Any]
    update_config: Dict[str, Any]
    networks: List[Dict[str, Any]]


def generate_config_container(
    app: ApplicationSpec,
    default_network: str = DEFAULT_NETWORK,
) -> ServiceConfig:
    """Derive health check, policies, placement, labels, mode and networks.

    Explicit ``*_swarm`` overrides on the application are passed through;
    everything else falls back to the defaults above. Apps with mounts are
    pinned to manager nodes since file and bind sources live there.
    """
    if app.placement_swarm is not None:
        placement = copy.deepcopy(app.placement_swarm)
    else:
        placement = {"Constraints": [MANAGER_CONSTRAINT] if app.mounts else []}

    labels = dict(app.labels_swarm or {})
    labels[APP_LABEL] = app.app_name

    if app.mode_swarm is not None:
        mode = copy.deepcopy(app.mode_swarm)
    else:
        mode = {"Replicated": {"Replicas": app.replicas}}

    if app.network_swarm is not None:
        networks = copy.deepcopy(app.network_swarm)
    else:
        networks = [{"Target": default_network}]

    return ServiceConfig(
        health_check=copy.deepcopy(app.health_check_swarm),
        restart_policy=copy.deepcopy(app.restart_policy_swarm or DEFAULT_RESTART_POLICY),
        placement=placement,
        labels=labels,
        mode=mode,
        rollback_config=copy.deepcopy(app.rollback_config_swarm or DEFAULT_ROLLBACK_CONFIG),
        update_config=copy.deepcopy(app.update_config_swarm or DEFAULT_UPDATE_CONFIG),
        networks=networks,
    )

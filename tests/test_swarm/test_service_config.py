"""Tests for derived service configuration."""

from swarmdeploy.models.application import ApplicationSpec, VolumeMount
from swarmdeploy.swarm.service_config import (
    APP_LABEL,
    DEFAULT_RESTART_POLICY,
    DEFAULT_ROLLBACK_CONFIG,
    DEFAULT_UPDATE_CONFIG,
    generate_config_container,
)


class TestGenerateConfigContainer:
    """Test generate_config_container."""

    def test_defaults(self):
        """An app without overrides gets the documented defaults."""
        app = ApplicationSpec(app_name="api", replicas=3)

        config = generate_config_container(app, default_network="edge")

        assert config.health_check is None
        assert config.restart_policy == DEFAULT_RESTART_POLICY
        assert config.restart_policy["Condition"] == "on-failure"
        assert config.placement == {"Constraints": []}
        assert config.labels == {APP_LABEL: "api"}
        assert config.mode == {"Replicated": {"Replicas": 3}}
        assert config.rollback_config == DEFAULT_ROLLBACK_CONFIG
        assert config.rollback_config["FailureAction"] == "pause"
        assert config.update_config == DEFAULT_UPDATE_CONFIG
        assert config.networks == [{"Target": "edge"}]

    def test_mounts_pin_to_manager(self):
        app = ApplicationSpec(
            app_name="db",
            mounts=[VolumeMount(volume_name="pg", mount_path="/var/lib/postgresql/data")],
        )

        config = generate_config_container(app)

        assert config.placement == {"Constraints": ["node.role==manager"]}

    def test_overrides_pass_through(self):
        health = {"Test": ["CMD", "curl", "-f", "http://localhost/"], "Interval": 10_000_000_000}
        app = ApplicationSpec(
            app_name="api",
            health_check_swarm=health,
            restart_policy_swarm={"Condition": "any"},
            placement_swarm={"Constraints": ["node.labels.tier==web"]},
            update_config_swarm={"Parallelism": 2, "Order": "stop-first"},
            rollback_config_swarm={"Parallelism": 0},
            mode_swarm={"Global": {}},
            network_swarm=[{"Target": "a"}, {"Target": "b", "Aliases": ["api"]}],
        )

        config = generate_config_container(app)

        assert config.health_check == health
        assert config.restart_policy == {"Condition": "any"}
        assert config.placement == {"Constraints": ["node.labels.tier==web"]}
        assert config.update_config == {"Parallelism": 2, "Order": "stop-first"}
        assert config.rollback_config == {"Parallelism": 0}
        assert config.mode == {"Global": {}}
        assert [n["Target"] for n in config.networks] == ["a", "b"]

    def test_identity_label_wins(self):
        app = ApplicationSpec(
            app_name="api",
            labels_swarm={"team": "core", APP_LABEL: "spoofed"},
        )

        config = generate_config_container(app)

        assert config.labels == {"team": "core", APP_LABEL: "api"}

    def test_defaults_are_not_shared(self):
        """Mutating one result must not leak into the next."""
        app = ApplicationSpec(app_name="api")

        first = generate_config_container(app)
        first.update_config["Parallelism"] = 99
        first.restart_policy["Condition"] = "none"

        second = generate_config_container(app)
        assert second.update_config["Parallelism"] == 1
        assert second.restart_policy["Condition"] == "on-failure"

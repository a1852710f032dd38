"""Tests for resource conversion."""

import pytest

from swarmdeploy.errors import ResourceError
from swarmdeploy.swarm.resources import BYTES_PER_MB, NANO_CPUS_PER_CORE, calculate_resources


class TestCalculateResources:
    """Test calculate_resources."""

    @pytest.mark.parametrize("memory_limit", [1, 256, 512.5, 4096])
    def test_memory_limit_only(self, memory_limit):
        """Only a memory limit yields Limits.MemoryBytes and no Reservations."""
        resources = calculate_resources(memory_limit=memory_limit)

        assert resources == {"Limits": {"MemoryBytes": int(round(memory_limit * BYTES_PER_MB))}}
        assert "Reservations" not in resources

    def test_unset_values_produce_empty_block(self):
        """No values means no resource keys at all."""
        assert calculate_resources() == {}

    def test_zero_cpu_is_omitted(self):
        """Zero CPU values are dropped, not zero-filled."""
        resources = calculate_resources(
            cpu_limit=0,
            cpu_reservation=None,
            memory_limit=128,
            memory_reservation=64,
        )

        assert "NanoCPUs" not in resources["Limits"]
        assert "NanoCPUs" not in resources["Reservations"]
        assert resources["Reservations"]["MemoryBytes"] == 64 * BYTES_PER_MB

    def test_fractional_cpu(self):
        """Fractional cores convert to integer nano CPUs."""
        resources = calculate_resources(cpu_limit=1.5, cpu_reservation=0.25)

        assert resources["Limits"] == {"NanoCPUs": 1_500_000_000}
        assert resources["Reservations"] == {"NanoCPUs": NANO_CPUS_PER_CORE // 4}
        assert isinstance(resources["Limits"]["NanoCPUs"], int)

    def test_reservation_above_limit_is_not_rejected(self):
        """Reservation <= limit is the caller's responsibility."""
        resources = calculate_resources(memory_limit=128, memory_reservation=256)

        assert resources["Reservations"]["MemoryBytes"] > resources["Limits"]["MemoryBytes"]

    @pytest.mark.parametrize(
        "kwargs",
        [
            {"cpu_limit": -1},
            {"memory_reservation": -0.5},
            {"memory_limit": float("nan")},
            {"cpu_reservation": float("inf")},
            {"memory_limit": "512"},
            {"cpu_limit": True},
        ],
    )
    def test_invalid_values(self, kwargs):
        """Malformed numbers are composition errors."""
        with pytest.raises(ResourceError):
            calculate_resources(**kwargs)

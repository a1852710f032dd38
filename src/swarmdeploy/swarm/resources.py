"""Resource limit conversion to swarm units."""

import math
from typing import Any, Dict, Optional

from swarmdeploy.errors import ResourceError


NANO_CPUS_PER_CORE = 1_000_000_000
BYTES_PER_MB = 1024 * 1024


def _checked(name: str, value: Optional[float]) -> Optional[float]:
    """Return value if it should be converted, None if it should be omitted."""
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ResourceError(f"{name} must be a number, got {value!r}")
    if math.isnan(value) or math.isinf(value) or value < 0:
        raise ResourceError(f"{name} must be a finite non-negative number, got {value!r}")
    if value == 0:
        return None
    return value


def _block(cpu: Optional[float], memory: Optional[float]) -> Dict[str, int]:
    block: Dict[str, int] = {}
    if cpu is not None:
        block["NanoCPUs"] = int(round(cpu * NANO_CPUS_PER_CORE))
    if memory is not None:
        block["MemoryBytes"] = int(round(memory * BYTES_PER_MB))
    return block


def calculate_resources(
    cpu_limit: Optional[float] = None,
    cpu_reservation: Optional[float] = None,
    memory_limit: Optional[float] = None,
    memory_reservation: Optional[float] = None,
) -> Dict[str, Any]:
    """Build the swarm ``Resources`` block.

    CPU values are fractional cores, memory values are megabytes. Unset or
    zero values are left out entirely so the control plane keeps its own
    defaults; an empty ``Limits``/``Reservations`` block is dropped too.
    Reservations are not checked against limits.
    """
    limits = _block(
        _checked("cpu_limit", cpu_limit),
        _checked("memory_limit", memory_limit),
    )
    reservations = _block(
        _checked("cpu_reservation", cpu_reservation),
        _checked("memory_reservation", memory_reservation),
    )

    resources: Dict[str, Any] = {}
    if limits:
        resources["Limits"] = limits
    if reservations:
        resources["Reservations"] = reservations
    return resources

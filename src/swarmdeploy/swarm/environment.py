"""Environment variable preparation."""

from typing import List, Optional


def prepare_environment_variables(env: Optional[str]) -> List[str]:
    """Split a raw env blob into ordered ``KEY=VALUE`` entries.

    Blank lines are skipped. Lines that do not look like ``KEY=VALUE`` are
    kept as-is rather than rejected.
    """
    if not env:
        return []

    entries = []
    for line in env.splitlines():
        stripped = line.strip()
        if not stripped:
            continue
        entries.append(stripped)
    return entries

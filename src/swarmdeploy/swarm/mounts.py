"""Mount translation into swarm mount descriptors."""

import asyncio
import logging
from pathlib import Path, PurePosixPath
from typing import Any, Dict, List, Sequence, Tuple

from swarmdeploy.errors import MountError
from swarmdeploy.models.application import BindMount, FileMount, VolumeMount


logger = logging.getLogger(__name__)


def generate_volume_mounts(mounts: Sequence[Any]) -> List[Dict[str, Any]]:
    """Translate volume mounts, preserving input order."""
    return [
        {
            "Type": "volume",
            "Source": mount.volume_name,
            "Target": mount.mount_path,
            "VolumeOptions": {},
        }
        for mount in mounts
        if isinstance(mount, VolumeMount)
    ]


def generate_bind_mounts(mounts: Sequence[Any]) -> List[Dict[str, Any]]:
    """Translate bind mounts, preserving input order."""
    return [
        {
            "Type": "bind",
            "Source": mount.host_path,
            "Target": mount.mount_path,
        }
        for mount in mounts
        if isinstance(mount, BindMount)
    ]


def app_files_dir(applications_dir: str, app_name: str) -> Path:
    """Directory holding materialized file mounts for an app."""
    return Path(applications_dir).resolve() / app_name / "files"


def file_mount_path(applications_dir: str, app_name: str, mount: FileMount) -> Path:
    """Deterministic host path of a file mount.

    Raises MountError if the logical name is empty or would leave the app
    files dir.
    """
    name = mount.logical_name
    relative = PurePosixPath(name)
    if not relative.parts or relative.is_absolute() or ".." in relative.parts:
        raise MountError(f"Invalid file mount name {name!r} for {mount.mount_path}")
    return app_files_dir(applications_dir, app_name) / relative


def file_mount_paths(
    app_name: str,
    mounts: Sequence[Any],
    applications_dir: str,
) -> List[Tuple[FileMount, Path]]:
    """Host path of every file mount, in input order.

    Raises MountError when two file mounts resolve to the same host file.
    """
    resolved: List[Tuple[FileMount, Path]] = []
    owners: Dict[Path, str] = {}
    for mount in mounts:
        if not isinstance(mount, FileMount):
            continue
        path = file_mount_path(applications_dir, app_name, mount)
        if path in owners:
            raise MountError(
                f"File mounts {owners[path]} and {mount.mount_path} of {app_name} "
                f"both resolve to {path}"
            )
        owners[path] = mount.mount_path
        resolved.append((mount, path))
    return resolved


def generate_file_mounts(
    app_name: str,
    mounts: Sequence[Any],
    applications_dir: str,
) -> List[Dict[str, Any]]:
    """Translate file mounts into binds of their materialized host paths.

    The content must already have been written with ``write_file_mounts``.
    """
    return [
        {
            "Type": "bind",
            "Source": str(path),
            "Target": mount.mount_path,
        }
        for mount, path in file_mount_paths(app_name, mounts, applications_dir)
    ]


def find_duplicate_targets(mount_list: Sequence[Dict[str, Any]]) -> List[str]:
    """Return targets that appear more than once."""
    seen = set()
    duplicates = []
    for mount in mount_list:
        target = mount["Target"]
        if target in seen and target not in duplicates:
            duplicates.append(target)
        seen.add(target)
    return duplicates


def _write(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


async def write_file_mounts(app_name: str, mounts: Sequence[Any], applications_dir: str) -> List[Path]:
    """Write file mount contents to their host paths."""
    written = []
    for mount, path in file_mount_paths(app_name, mounts, applications_dir):
        try:
            await asyncio.to_thread(_write, path, mount.content)
        except OSError as e:
            raise MountError(f"Cannot write file mount {mount.mount_path} to {path}: {e}") from e
        logger.debug(f"Wrote file mount {path} for {app_name}")
        written.append(path)
    return written

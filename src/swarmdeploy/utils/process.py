"""Async subprocess helpers."""

import asyncio
import logging
from typing import Dict, List, Optional

from swarmdeploy.utils.deploy_log import DeploymentLog


logger = logging.getLogger(__name__)


async def stream_command(
    cmd: List[str],
    log: DeploymentLog,
    cwd: Optional[str] = None,
    env: Optional[Dict[str, str]] = None,
) -> int:
    """Run a command, appending its combined output to the deployment log.

    Returns the exit code; the caller decides whether non-zero is fatal.
    """
    logger.debug(f"Streaming command: {' '.join(cmd)}")

    process = await asyncio.create_subprocess_exec(
        *cmd,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.STDOUT,
        cwd=cwd,
        env=env,
    )

    try:
        if process.stdout is None:
            raise RuntimeError(f"No output pipe for {cmd[0]}")
        async for line in process.stdout:
            log.write(line.decode(errors="replace"))
        return await process.wait()
    finally:
        if process.returncode is None:
            try:
                process.kill()
            except ProcessLookupError:
                pass
            await process.wait()

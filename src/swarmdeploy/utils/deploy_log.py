"""Append-only deployment log."""

import logging
from pathlib import Path
from typing import Optional, TextIO


logger = logging.getLogger(__name__)


class DeploymentLog:
    """Log file for a single deployment.

    Opened in append mode for the duration of one build/upload/reconcile
    sequence. Lines are mirrored to the module logger.
    """

    def __init__(self, path: Path):
        """Open the log file for appending."""
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self._stream: Optional[TextIO] = self.path.open("a", encoding="utf-8")

    @property
    def closed(self) -> bool:
        return self._stream is None

    def write(self, text: str) -> None:
        """Append raw text."""
        if self._stream is None:
            raise ValueError(f"Deployment log {self.path} is closed")
        self._stream.write(text)
        self._stream.flush()
        for line in text.splitlines():
            if line.strip():
                logger.debug(line)

    def close(self) -> None:
        """Close the underlying file, safe to call twice."""
        if self._stream is not None:
            self._stream.close()
            self._stream = None

    def __enter__(self) -> "DeploymentLog":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

"""Transient files created during a single tool call and removed before it returns."""

from __future__ import annotations

import logging
import os
import secrets
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


def unique_capture_path(directory: Path, prefix: str = "screenshot", suffix: str = ".png") -> Path:
    """Collision-resistant file name from a monotonic clock reading plus a random token."""
    return directory / f"{prefix}-{time.monotonic_ns()}-{secrets.token_hex(4)}{suffix}"


@contextmanager
def transient_artifact(directory: Path, prefix: str = "screenshot", suffix: str = ".png") -> Iterator[Path]:
    """Yield a fresh path that is deleted on every exit from the block.

    Deletion failures are logged, never raised.
    """
    directory.mkdir(parents=True, exist_ok=True)
    path = unique_capture_path(directory, prefix, suffix)
    try:
        yield path
    finally:
        discard(path)


def discard(path: Path) -> bool:
    if not path.exists():
        return True
    logger.debug("Deleting temporary file: %s", path)
    try:
        os.unlink(path)
    except OSError as e:
        logger.warning("Failed to delete temporary file %s: %s", path, e)
        return False
    logger.debug("Temporary file removed")
    return True

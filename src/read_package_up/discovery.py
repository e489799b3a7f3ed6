"""Upward file discovery utilities."""

from __future__ import annotations

import logging
import os
import stat
from collections.abc import Iterator

import aiofiles.os

from .paths import PathOrURL, to_path

logger = logging.getLogger(__name__)

ENTRY_TYPES = {"file", "directory"}


def _iter_candidates(
    name: str, cwd: PathOrURL | None, stop_at: PathOrURL | None
) -> Iterator[str]:
    """Yield the candidate paths for ``name`` from ``cwd`` up to the boundary.

    The boundary is ``stop_at`` (resolved relative to the start directory)
    or the filesystem root, whichever comes first.
    """
    directory = os.path.abspath(to_path(cwd) or os.getcwd())
    root = os.path.splitdrive(directory)[0] + os.sep
    boundary = os.path.abspath(os.path.join(directory, to_path(stop_at) or root))

    while True:
        yield os.path.join(directory, name)
        parent = os.path.dirname(directory)
        if directory == boundary or parent == directory:
            return
        directory = parent


def _matches(mode: int, type: str) -> bool:
    if type == "file":
        return stat.S_ISREG(mode)
    return stat.S_ISDIR(mode)


def _check_type(type: str) -> None:
    if type not in ENTRY_TYPES:
        known = ", ".join(sorted(ENTRY_TYPES))
        raise ValueError(f"Invalid type '{type}'. Expected one of: {known}")


async def find_up(
    name: str,
    *,
    cwd: PathOrURL | None = None,
    type: str = "file",
    stop_at: PathOrURL | None = None,
) -> str | None:
    """Find ``name`` by walking up parent directories without blocking.

    Returns the absolute path of the first match, or None once the stop
    boundary or the filesystem root has been checked.
    """
    _check_type(type)
    logger.debug("Searching upward for %s from %s", name, cwd or os.getcwd())
    for candidate in _iter_candidates(name, cwd, stop_at):
        try:
            info = await aiofiles.os.stat(candidate)
        except OSError:
            continue
        if _matches(info.st_mode, type):
            logger.debug("Found %s", candidate)
            return candidate

    logger.debug("No %s found upward from %s", name, cwd or os.getcwd())
    return None


def find_up_sync(
    name: str,
    *,
    cwd: PathOrURL | None = None,
    type: str = "file",
    stop_at: PathOrURL | None = None,
) -> str | None:
    """Blocking counterpart of :func:`find_up` with identical semantics."""
    _check_type(type)
    logger.debug("Searching upward for %s from %s", name, cwd or os.getcwd())
    for candidate in _iter_candidates(name, cwd, stop_at):
        try:
            info = os.stat(candidate)
        except OSError:
            continue
        if _matches(info.st_mode, type):
            logger.debug("Found %s", candidate)
            return candidate

    logger.debug("No %s found upward from %s", name, cwd or os.getcwd())
    return None

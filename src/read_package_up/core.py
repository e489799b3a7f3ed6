"""Core entrypoints: find the closest package.json and read it.

Both entrypoints run the same two steps. The upward search locates the
nearest package.json; the reader then loads it from that file's directory,
whatever directory the search started in. A search that finds nothing
returns None; read failures propagate unchanged.
"""

from __future__ import annotations

import logging
import os
from typing import overload

from .discovery import find_up, find_up_sync
from .models import NormalizedReadResult, NormalizeOptions, Options, ReadResult
from .parsers.package_json import PACKAGE_JSON, read_package, read_package_sync

logger = logging.getLogger(__name__)


def _build_result(
    options: Options, package_json: dict, file_path: str
) -> ReadResult | NormalizedReadResult:
    if options.normalize:
        return NormalizedReadResult(package_json=package_json, path=file_path)
    return ReadResult(package_json=package_json, path=file_path)


@overload
async def read_package_up(
    options: NormalizeOptions | None = None,
) -> NormalizedReadResult | None: ...


@overload
async def read_package_up(options: Options) -> ReadResult | None: ...


async def read_package_up(
    options: Options | None = None,
) -> ReadResult | NormalizedReadResult | None:
    """Read the closest package.json asynchronously.

    Params:
        options: where to start searching and whether to normalize. Defaults
            to ``NormalizeOptions()`` (current working directory, normalized).

    Returns: a ``NormalizedReadResult`` for normalizing options, a
    ``ReadResult`` for plain ``Options``, or None when no package.json exists
    between the start directory and the stop boundary.
    """
    if options is None:
        options = NormalizeOptions()

    file_path = await find_up(PACKAGE_JSON, cwd=options.cwd, stop_at=options.stop_at)
    if file_path is None:
        return None

    directory = os.path.dirname(file_path)
    logger.debug("Reading %s (normalize=%s)", file_path, options.normalize)
    package_json = await read_package(directory, normalize=options.normalize)
    return _build_result(options, package_json, file_path)


@overload
def read_package_up_sync(
    options: NormalizeOptions | None = None,
) -> NormalizedReadResult | None: ...


@overload
def read_package_up_sync(options: Options) -> ReadResult | None: ...


def read_package_up_sync(
    options: Options | None = None,
) -> ReadResult | NormalizedReadResult | None:
    """Synchronously read the closest package.json.

    Same options, results and errors as :func:`read_package_up`.
    """
    if options is None:
        options = NormalizeOptions()

    file_path = find_up_sync(PACKAGE_JSON, cwd=options.cwd, stop_at=options.stop_at)
    if file_path is None:
        return None

    directory = os.path.dirname(file_path)
    logger.debug("Reading %s (normalize=%s)", file_path, options.normalize)
    package_json = read_package_sync(directory, normalize=options.normalize)
    return _build_result(options, package_json, file_path)

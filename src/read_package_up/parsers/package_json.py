"""Read and parse package.json, optionally normalizing its contents."""

from __future__ import annotations

import copy
import json
import os
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Literal, TypeAlias, overload

import aiofiles

from ..errors import JSONError
from ..normalize import normalize_package_data
from ..paths import PathOrURL, to_path

PACKAGE_JSON = "package.json"

PackageJson: TypeAlias = dict[str, Any]
NormalizedPackageJson: TypeAlias = dict[str, Any]


def package_path(cwd: PathOrURL | None = None) -> str:
    """Return the absolute path of the package.json inside ``cwd``."""
    return os.path.abspath(os.path.join(to_path(cwd) or ".", PACKAGE_JSON))


def _decode(source: str | bytes, file_name: str | None) -> PackageJson:
    try:
        if isinstance(source, bytes):
            source = source.decode("utf-8")
        data = json.loads(source)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise JSONError(f"Failed to parse JSON: {exc}", file_name) from exc

    if not isinstance(data, dict):
        raise JSONError(
            f"package.json must contain a JSON object, got {type(data).__name__}", file_name
        )
    return data


def _read(data: PackageJson, normalize: bool) -> PackageJson | NormalizedPackageJson:
    if normalize:
        return normalize_package_data(data)
    return data


@overload
def parse_package(
    source: str | bytes | Mapping[str, Any], *, normalize: Literal[True] = True
) -> NormalizedPackageJson: ...


@overload
def parse_package(
    source: str | bytes | Mapping[str, Any], *, normalize: Literal[False]
) -> PackageJson: ...


def parse_package(
    source: str | bytes | Mapping[str, Any], *, normalize: bool = True
) -> PackageJson | NormalizedPackageJson:
    """Parse package.json content from a JSON string or an already-decoded mapping.

    Mappings are deep-copied before normalization, so the caller's object is
    never modified.
    """
    if isinstance(source, Mapping):
        data = copy.deepcopy(dict(source))
    elif isinstance(source, (str, bytes)):
        data = _decode(source, None)
    else:
        raise TypeError(
            f"source must be a JSON string or a mapping, got {type(source).__name__}"
        )
    return _read(data, normalize)


@overload
async def read_package(
    cwd: PathOrURL | None = None, *, normalize: Literal[True] = True
) -> NormalizedPackageJson: ...


@overload
async def read_package(
    cwd: PathOrURL | None = None, *, normalize: Literal[False]
) -> PackageJson: ...


async def read_package(
    cwd: PathOrURL | None = None, *, normalize: bool = True
) -> PackageJson | NormalizedPackageJson:
    """Read ``<cwd>/package.json`` without blocking the event loop.

    Raises:
        OSError: If the file is missing or unreadable.
        JSONError: If the file is not a JSON object.
        NormalizeError: If normalization was requested and fails.
    """
    path = package_path(cwd)
    async with aiofiles.open(path, "rb") as fh:
        content = await fh.read()
    return _read(_decode(content, path), normalize)


@overload
def read_package_sync(
    cwd: PathOrURL | None = None, *, normalize: Literal[True] = True
) -> NormalizedPackageJson: ...


@overload
def read_package_sync(
    cwd: PathOrURL | None = None, *, normalize: Literal[False]
) -> PackageJson: ...


def read_package_sync(
    cwd: PathOrURL | None = None, *, normalize: bool = True
) -> PackageJson | NormalizedPackageJson:
    """Blocking counterpart of :func:`read_package`."""
    path = package_path(cwd)
    content = Path(path).read_bytes()
    return _read(_decode(content, path), normalize)

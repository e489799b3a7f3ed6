"""Results returned when a package.json has been located and read."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

from ..parsers.package_json import PACKAGE_JSON, NormalizedPackageJson, PackageJson


def _check_path(path: str) -> None:
    if not os.path.isabs(path):
        raise ValueError(f"path must be absolute: {path}")
    if os.path.basename(path) != PACKAGE_JSON:
        raise ValueError(f"path must point to a {PACKAGE_JSON} file: {path}")


@dataclass(frozen=True)
class ReadResult:
    """Package.json data and the file it was read from."""

    package_json: PackageJson
    path: str

    def __post_init__(self) -> None:
        _check_path(self.path)

    def to_dict(self) -> dict[str, Any]:
        return {"packageJson": self.package_json, "path": self.path}


@dataclass(frozen=True)
class NormalizedReadResult(ReadResult):
    """A ReadResult whose data went through normalization."""

    package_json: NormalizedPackageJson

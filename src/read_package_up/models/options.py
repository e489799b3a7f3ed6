"""Search options for locating and reading the closest package.json."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from ..paths import PathOrURL


@dataclass(frozen=True)
class Options:
    """Options that yield the raw decoded package.json.

    ``cwd`` is the directory (or ``file://`` URL) the upward search starts
    from and defaults to the current working directory. ``stop_at`` bounds
    the search; by default it runs up to the filesystem root.
    """

    cwd: PathOrURL | None = None
    stop_at: PathOrURL | None = None
    normalize: bool = False

    def __post_init__(self) -> None:
        if not isinstance(self.normalize, bool):
            raise TypeError(f"normalize must be a bool, got {type(self.normalize).__name__}")


@dataclass(frozen=True)
class NormalizeOptions(Options):
    """Options that yield normalized package.json data."""

    normalize: Literal[True] = True

    def __post_init__(self) -> None:
        if self.normalize is not True:
            raise ValueError("NormalizeOptions always normalize; use Options for raw data")

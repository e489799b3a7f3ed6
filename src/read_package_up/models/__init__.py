"""Option and result models for read_package_up."""

from __future__ import annotations

from .options import NormalizeOptions, Options
from .result import NormalizedReadResult, ReadResult

__all__ = [
    "NormalizeOptions",
    "NormalizedReadResult",
    "Options",
    "ReadResult",
]

"""Read the closest package.json file.

Walks up from a starting directory to the nearest ``package.json`` and
returns its (optionally normalized) contents together with the file path.
"""

from .core import read_package_up, read_package_up_sync
from .discovery import find_up, find_up_sync
from .errors import JSONError, NormalizeError, ReadPackageError
from .models import NormalizedReadResult, NormalizeOptions, Options, ReadResult
from .normalize import normalize_package_data
from .parsers.package_json import (
    NormalizedPackageJson,
    PackageJson,
    parse_package,
    read_package,
    read_package_sync,
)

__all__ = [
    # Closest package.json
    "read_package_up",
    "read_package_up_sync",
    "Options",
    "NormalizeOptions",
    "ReadResult",
    "NormalizedReadResult",
    # Upward search
    "find_up",
    "find_up_sync",
    # Reading and normalization
    "read_package",
    "read_package_sync",
    "parse_package",
    "normalize_package_data",
    "PackageJson",
    "NormalizedPackageJson",
    # Errors
    "ReadPackageError",
    "JSONError",
    "NormalizeError",
]

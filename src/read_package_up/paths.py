"""Coerce path-or-URL arguments into filesystem paths."""

from __future__ import annotations

import os
from typing import TypeAlias
from urllib.parse import urlparse
from urllib.request import url2pathname

PathOrURL: TypeAlias = str | os.PathLike[str]


def to_path(value: PathOrURL | None) -> str | None:
    """Return ``value`` as a filesystem path string.

    ``file://`` URLs are converted to local paths; any other string or
    path-like object is returned as-is (via ``os.fspath``).
    """
    if value is None:
        return None

    raw = os.fspath(value)
    if not raw.startswith("file://"):
        return raw

    parsed = urlparse(raw)
    if parsed.netloc and parsed.netloc != "localhost":
        raise ValueError(f"File URL host must be empty or 'localhost': {raw}")
    return url2pathname(parsed.path)

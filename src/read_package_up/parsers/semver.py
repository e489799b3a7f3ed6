"""Loose semver handling built atop nodesemver.

Accepted in loose mode, as npm does when normalizing package.json:
- leading "v", "=" and surrounding whitespace ("v1.2.3", "=1.2.3", " 1.2.3 ")
- prerelease tags with or without a hyphen ("1.2.3-beta.1", "1.2.3beta")
- build metadata ("1.2.3+build.5"), dropped when cleaning
"""

from __future__ import annotations

import re

import nodesemver


def _prepare(version: str) -> str:
    return re.sub(r"^[=v]+", "", version.strip())


def valid(version: str) -> bool:
    return clean(version) is not None


def clean(version: str) -> str | None:
    """Return the canonical ``major.minor.patch[-prerelease]`` form, or None."""
    if not isinstance(version, str):
        return None
    try:
        return nodesemver.clean(_prepare(version), loose=True)
    except ValueError:
        return None

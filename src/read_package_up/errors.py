"""Errors raised while reading package.json data."""

from __future__ import annotations


class ReadPackageError(RuntimeError):
    """Base error for package.json data that cannot be turned into a manifest."""


class JSONError(ReadPackageError, ValueError):
    """Raised when package.json content is not a valid JSON object."""

    def __init__(self, message: str, file_name: str | None = None) -> None:
        if file_name:
            message = f"{message} in {file_name}"
        super().__init__(message)
        self.file_name = file_name


class NormalizeError(ReadPackageError, ValueError):
    """Raised when package.json data cannot be normalized."""

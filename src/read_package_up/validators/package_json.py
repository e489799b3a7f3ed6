"""JSON Schema gate for package.json data about to be normalized."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from collections.abc import Iterable
from typing import Any

from jsonschema import Draft202012Validator

DEFAULT_SCHEMA = Path(__file__).resolve().with_name("package_json.schema.json")


def _load_json(path: Path) -> dict:
    return json.loads(path.read_text(encoding="utf-8"))


@lru_cache(maxsize=None)
def _validator(schema_path: Path) -> Draft202012Validator:
    return Draft202012Validator(_load_json(schema_path))


def _format_errors(errors: Iterable) -> str:
    messages = []
    for error in errors:
        pointer = "/".join(str(p) for p in error.path)
        messages.append(f"- {pointer or '<root>'}: {error.message}")
    return "\n".join(messages)


def validate_package_data(document: Any, schema_path: Path = DEFAULT_SCHEMA) -> None:
    """Raise ValueError listing every schema violation found in ``document``."""
    validator = _validator(schema_path)
    errors = sorted(validator.iter_errors(document), key=lambda e: [str(p) for p in e.path])
    if errors:
        raise ValueError("\n" + _format_errors(errors))

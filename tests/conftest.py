import json
import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = (ROOT / "src").resolve()

if SRC not in (Path(p).resolve() for p in sys.path):
    sys.path.insert(0, str(SRC))


@pytest.fixture
def write_package():
    """Write a package.json into a directory, creating it when needed."""

    def _write(directory: Path, data=None, *, text: str | None = None) -> Path:
        directory.mkdir(parents=True, exist_ok=True)
        path = directory / "package.json"
        path.write_text(text if text is not None else json.dumps(data), encoding="utf-8")
        return path

    return _write

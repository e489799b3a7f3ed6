import asyncio
import json
import os

import pytest

from read_package_up import (
    JSONError,
    ReadPackageError,
    NormalizedReadResult,
    NormalizeOptions,
    Options,
    ReadResult,
    read_package_up,
    read_package_up_sync,
)
from read_package_up import core


@pytest.fixture
def nested_tree(tmp_path, write_package):
    """a/b holds the nearest package.json, a holds a farther one, a/b/c holds none."""
    write_package(tmp_path / "a", {"name": "outer", "version": "2.0.0"})
    inner = write_package(tmp_path / "a" / "b", {"name": "x", "version": "1.0.0"})
    start = tmp_path / "a" / "b" / "c"
    start.mkdir()
    return start, inner


def test_sync_returns_nearest_manifest(nested_tree):
    start, inner = nested_tree

    result = read_package_up_sync(NormalizeOptions(cwd=start))

    assert isinstance(result, NormalizedReadResult)
    assert result.path == str(inner)
    assert result.package_json["name"] == "x"
    assert result.package_json["version"] == "1.0.0"
    assert result.package_json["_id"] == "x@1.0.0"


def test_async_returns_nearest_manifest(nested_tree):
    start, inner = nested_tree

    result = asyncio.run(read_package_up(NormalizeOptions(cwd=start)))

    assert isinstance(result, NormalizedReadResult)
    assert result.path == str(inner)
    assert result.package_json["name"] == "x"


@pytest.mark.parametrize("depth", [0, 1, 3])
def test_sync_and_async_agree_at_any_depth(tmp_path, write_package, depth):
    path = write_package(tmp_path, {"name": "demo", "version": "1.0.0"})
    start = tmp_path.joinpath(*["d"] * depth)
    start.mkdir(parents=True, exist_ok=True)

    for options in (Options(cwd=start), NormalizeOptions(cwd=start)):
        sync_result = read_package_up_sync(options)
        async_result = asyncio.run(read_package_up(options))
        assert sync_result == async_result
        assert sync_result.path == str(path)


def test_plain_options_return_raw_data(tmp_path, write_package):
    raw = {"name": "demo", "version": "v1.0.0", "keywords": "a, b"}
    path = write_package(tmp_path, raw)

    result = read_package_up_sync(Options(cwd=tmp_path))

    assert type(result) is ReadResult
    assert result.package_json == raw
    assert result.to_dict() == {"packageJson": raw, "path": str(path)}


def test_normalize_options_apply_normalization(tmp_path, write_package):
    write_package(tmp_path, {"name": "demo", "version": "v1.0.0", "keywords": "a, b"})

    result = read_package_up_sync(NormalizeOptions(cwd=tmp_path))

    assert result.package_json["version"] == "1.0.0"
    assert result.package_json["keywords"] == ["a", "b"]
    assert "readme" in result.package_json


def test_defaults_to_cwd_and_normalization(nested_tree, monkeypatch):
    start, inner = nested_tree
    monkeypatch.chdir(start)

    sync_result = read_package_up_sync()
    async_result = asyncio.run(read_package_up())

    assert isinstance(sync_result, NormalizedReadResult)
    assert sync_result.path == str(inner)
    assert sync_result == async_result


def test_file_url_start_directory(nested_tree):
    start, inner = nested_tree

    result = read_package_up_sync(Options(cwd=start.as_uri()))

    assert result.path == str(inner)


def test_absent_without_reader_call(tmp_path, monkeypatch):
    calls = []

    def fake_sync(*args, **kwargs):
        calls.append((args, kwargs))
        return {}

    async def fake_async(*args, **kwargs):
        calls.append((args, kwargs))
        return {}

    monkeypatch.setattr(core, "read_package_sync", fake_sync)
    monkeypatch.setattr(core, "read_package", fake_async)
    start = tmp_path / "empty" / "tree"
    start.mkdir(parents=True)
    options = Options(cwd=start, stop_at=tmp_path)

    assert read_package_up_sync(options) is None
    assert asyncio.run(read_package_up(options)) is None
    assert calls == []


def test_absent_from_filesystem_root():
    root = os.path.abspath(os.sep)
    if os.path.exists(os.path.join(root, "package.json")):
        pytest.skip("filesystem root contains a package.json")

    assert read_package_up_sync(Options(cwd=root)) is None
    assert asyncio.run(read_package_up(NormalizeOptions(cwd=root))) is None


def test_reader_receives_found_directory(nested_tree, monkeypatch):
    start, inner = nested_tree
    calls = []

    def fake_sync(cwd, *, normalize):
        calls.append((cwd, normalize))
        return {"name": "stub"}

    async def fake_async(cwd, *, normalize):
        calls.append((cwd, normalize))
        return {"name": "stub"}

    monkeypatch.setattr(core, "read_package_sync", fake_sync)
    monkeypatch.setattr(core, "read_package", fake_async)

    sync_result = read_package_up_sync(Options(cwd=start))
    async_result = asyncio.run(read_package_up(NormalizeOptions(cwd=start)))

    assert calls == [(str(inner.parent), False), (str(inner.parent), True)]
    assert sync_result.path == async_result.path == str(inner)


def test_stop_at_bounds_search(nested_tree):
    start, _inner = nested_tree

    assert read_package_up_sync(Options(cwd=start, stop_at=start)) is None


def test_corrupt_manifest_propagates(tmp_path, write_package):
    write_package(tmp_path, {"name": "outer"})
    write_package(tmp_path / "pkg", text='{"name": "trunc')

    with pytest.raises(JSONError):
        read_package_up_sync(Options(cwd=tmp_path / "pkg"))
    with pytest.raises(JSONError):
        asyncio.run(read_package_up(NormalizeOptions(cwd=tmp_path / "pkg")))


def test_unreadable_manifest_propagates_os_error(tmp_path, write_package, monkeypatch):
    write_package(tmp_path, {"name": "demo"})

    def denied(*args, **kwargs):
        raise PermissionError("denied")

    monkeypatch.setattr(core, "read_package_sync", denied)

    with pytest.raises(PermissionError):
        read_package_up_sync(Options(cwd=tmp_path))


def test_options_validate_normalize_flag():
    with pytest.raises(TypeError):
        Options(normalize="yes")
    with pytest.raises(ValueError):
        NormalizeOptions(normalize=False)


def test_result_requires_absolute_package_json_path():
    with pytest.raises(ValueError):
        ReadResult(package_json={}, path="package.json")
    with pytest.raises(ValueError):
        NormalizedReadResult(package_json={}, path=os.path.abspath("manifest.json"))


def test_result_round_trips_through_json(tmp_path, write_package):
    write_package(tmp_path, {"name": "demo", "version": "1.0.0"})

    result = read_package_up_sync(Options(cwd=tmp_path))

    assert json.loads(json.dumps(result.to_dict()))["packageJson"]["name"] == "demo"


def test_plain_options_with_normalize_still_yield_read_result(tmp_path, write_package):
    write_package(tmp_path, {"name": "demo", "version": "v1.0.0"})

    result = read_package_up_sync(Options(cwd=tmp_path, normalize=True))

    assert isinstance(result, ReadResult)
    assert isinstance(result, NormalizedReadResult)
    assert result.package_json["version"] == "1.0.0"


ODD_MANIFESTS = [
    {"name": "x", "author": {"name": 5, "email": "a@b.c"}},
    {"name": "x", "contributors": [{"name": ["a"], "url": 3}, 7, None]},
    {"name": "x", "maintainers": "not a list"},
    {"name": "x", "homepage": "http://[oops"},
    {"name": "x", "bugs": "http://[oops"},
    {"name": "x", "bugs": {"url": "http://[oops", "email": 4}},
    {"name": "x", "repository": {"url": 12}},
    {"name": "x", "repository": ["user/repo"]},
    {"name": "x", "scripts": ["build", {}]},
    {"name": "x", "dependencies": "a b,c", "optionalDependencies": ["d@1"]},
    {"name": "x", "dependencies": 5, "bundleDependencies": ["y"]},
    {"name": "x", "readme": 3, "description": {"a": 1}},
    {"name": "x", "keywords": [1, "a", None], "files": {"a": 1}, "man": 2, "bin": 9},
    {"name": {}},
    {"name": "x", "version": []},
    {"name": "x", "version": "not-semver"},
]


@pytest.mark.parametrize("manifest", ODD_MANIFESTS)
def test_normalization_only_raises_read_package_errors(tmp_path, write_package, manifest):
    write_package(tmp_path, manifest)
    options = NormalizeOptions(cwd=tmp_path)

    for run in (read_package_up_sync, lambda o: asyncio.run(read_package_up(o))):
        try:
            result = run(options)
        except ReadPackageError:
            continue
        assert isinstance(result, NormalizedReadResult)
        assert "_id" in result.package_json

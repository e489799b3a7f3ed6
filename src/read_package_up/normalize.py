"""Normalization of decoded package.json data.

Applies the non-strict fix-ups npm performs when it reads a manifest: fields
with the wrong shape are coerced or dropped, a handful of defaults are filled
in, and ``_id`` is set to ``name@version``. Only ``name`` and ``version``
problems are fatal; everything else is logged at DEBUG level and repaired.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any
from urllib.parse import quote, urlsplit

from .errors import NormalizeError
from .parsers import semver
from .validators.package_json import validate_package_data

logger = logging.getLogger(__name__)

MISSING_README = "ERROR: No README data found!"
DEPENDENCY_SECTIONS = ("dependencies", "devDependencies", "optionalDependencies")
RESERVED_NAMES = {"node_modules", "favicon.ico"}

_GITHUB_SHORTCUT = re.compile(r"^(?:github:)?([\w-][\w.-]*)/([\w.-]+?)(?:\.git)?(?:#(.+))?$")
_GITHUB_URL = re.compile(
    r"^(git\+https|git\+http|https|http|git|git\+ssh|ssh)://(?:[^@/]+@)?(?:www\.)?github\.com[:/]"
    r"([^/]+)/([^/#]+?)(?:\.git)?/?(?:#(.+))?$"
)
_GITHUB_SCP = re.compile(r"^git@github\.com:([^/]+)/([^/#]+?)(?:\.git)?(?:#(.+))?$")
_EMAIL = re.compile(r"^.+@.+\..+$")
_SCHEME = re.compile(r"^[A-Za-z][A-Za-z0-9+.-]*:")


def _warn(message: str, *args: Any) -> None:
    logger.debug("package.json normalization: " + message, *args)


# ---- GitHub repository helpers -----------------------------------------------------


class _GitHubRepo:
    """Minimal hosted-repository view for github.com URLs."""

    def __init__(self, user: str, project: str, committish: str | None, style: str) -> None:
        self.user = user
        self.project = project
        self.committish = committish
        self.style = style

    @classmethod
    def from_url(cls, url: Any) -> _GitHubRepo | None:
        if not isinstance(url, str):
            return None
        url = url.strip()
        if "://" not in url and not url.startswith("git@"):
            match = _GITHUB_SHORTCUT.match(url)
            if match:
                return cls(match.group(1), match.group(2), match.group(3), "shortcut")
            return None
        match = _GITHUB_SCP.match(url)
        if match:
            return cls(match.group(1), match.group(2), match.group(3), "ssh")
        match = _GITHUB_URL.match(url)
        if match:
            scheme = match.group(1)
            if scheme in {"git+ssh", "ssh"}:
                style = "ssh"
            elif scheme == "git":
                style = "git"
            else:
                style = "https"
            return cls(match.group(2), match.group(3), match.group(4), style)
        return None

    def _suffix(self) -> str:
        return f"#{self.committish}" if self.committish else ""

    def canonical(self) -> str:
        path = f"github.com/{self.user}/{self.project}.git"
        if self.style == "ssh":
            return f"git+ssh://git@{path}{self._suffix()}"
        if self.style == "git":
            return f"git://{path}{self._suffix()}"
        return f"git+https://{path}{self._suffix()}"

    def bugs(self) -> str:
        return f"https://github.com/{self.user}/{self.project}/issues"

    def docs(self) -> str:
        tree = f"/tree/{quote(self.committish)}" if self.committish else ""
        return f"https://github.com/{self.user}/{self.project}{tree}#readme"


def _is_falsy(value: Any) -> bool:
    """Match JavaScript falsiness for JSON values: null, false, 0 and the empty string."""
    return value is None or (isinstance(value, (str, int, float)) and not value)


def _repository_url(data: dict[str, Any]) -> Any:
    repository = data.get("repository")
    if isinstance(repository, dict):
        return repository.get("url")
    return None


def _has_scheme(value: str) -> bool:
    try:
        return bool(urlsplit(value).scheme)
    except ValueError:
        return bool(_SCHEME.match(value))


# ---- Field fixers ------------------------------------------------------------------


def _is_encoded(part: str) -> bool:
    return quote(part, safe="-_.!~*'()") == part


def _ensure_valid_name(name: str) -> None:
    scoped = False
    if name.startswith("@"):
        rest = name[1:].split("/")
        scoped = len(rest) == 2 and all(rest) and all(_is_encoded(p) for p in rest)
    plain = not re.search(r"[/@\s+%:]", name) and _is_encoded(name)
    if name.startswith(".") or not (scoped or plain) or name.lower() in RESERVED_NAMES:
        raise NormalizeError(f"Invalid name: {json.dumps(name, ensure_ascii=False)}")


def _fix_name(data: dict[str, Any]) -> None:
    data["name"] = data["name"].strip()
    _ensure_valid_name(data["name"])


def _fix_version(data: dict[str, Any]) -> None:
    version = data["version"]
    if not version:
        return
    cleaned = semver.clean(version)
    if cleaned is None:
        raise NormalizeError(f'Invalid version: "{version}"')
    data["version"] = cleaned


def _extract_description(readme: str) -> str | None:
    if not readme or readme == MISSING_README:
        return None
    lines = readme.strip().split("\n")
    start = 0
    while start < len(lines) and lines[start] and re.match(r"^(#|$)", lines[start].strip()):
        start += 1
    end = start + 1
    while end < len(lines) and lines[end].strip():
        end += 1
    return " ".join(lines[start:end]).strip()


def _fix_description(data: dict[str, Any]) -> None:
    description = data.get("description")
    if description and not isinstance(description, str):
        _warn("'description' field should be a string")
        del data["description"]
    readme = data.get("readme")
    if isinstance(readme, str) and readme and not data.get("description"):
        extracted = _extract_description(readme)
        if extracted is not None:
            data["description"] = extracted
    if "description" in data and data["description"] is None:
        del data["description"]


def _fix_repository(data: dict[str, Any]) -> None:
    if not data.get("repository"):
        return
    if isinstance(data["repository"], str):
        data["repository"] = {"type": "git", "url": data["repository"]}
    url = _repository_url(data)
    hosted = _GitHubRepo.from_url(url)
    if hosted is not None:
        data["repository"]["url"] = hosted.canonical()


def _fix_modules(data: dict[str, Any]) -> None:
    if "modules" in data:
        _warn("'modules' field is deprecated")
        del data["modules"]


def _fix_scripts(data: dict[str, Any]) -> None:
    scripts = data.get("scripts")
    if not scripts:
        return
    if isinstance(scripts, list):
        data["scripts"] = [s for s in scripts if isinstance(s, str)]
        return
    if not isinstance(scripts, dict):
        _warn("'scripts' must be an object")
        del data["scripts"]
        return
    for key in [k for k, v in scripts.items() if not isinstance(v, str)]:
        _warn("script values must be string commands, dropping %s", key)
        del scripts[key]


def _fix_files(data: dict[str, Any]) -> None:
    files = data.get("files")
    if files and not isinstance(files, list):
        _warn("Invalid 'files' member")
        del data["files"]
    elif files:
        data["files"] = [f for f in files if f and isinstance(f, str)]


def _fix_bin(data: dict[str, Any]) -> None:
    bin_field = data.get("bin")
    if not bin_field or not isinstance(bin_field, str):
        return
    name = data.get("name") or ""
    scoped = re.match(r"^@[^/]+/(.*)$", name)
    data["bin"] = {scoped.group(1) if scoped else name: bin_field}


def _fix_man(data: dict[str, Any]) -> None:
    if isinstance(data.get("man"), str) and data["man"]:
        data["man"] = [data["man"]]


def _fix_bugs(data: dict[str, Any]) -> None:
    bugs = data.get("bugs")
    if not bugs:
        hosted = _GitHubRepo.from_url(_repository_url(data))
        if hosted is not None:
            data["bugs"] = {"url": hosted.bugs()}
        return

    normalized: dict[str, str] = {}
    if isinstance(bugs, str):
        if _EMAIL.match(bugs):
            normalized["email"] = bugs
        elif _has_scheme(bugs):
            normalized["url"] = bugs
        else:
            _warn("Bug string field must be url, email, or {email,url}")
    elif isinstance(bugs, dict):
        url = bugs.get("url")
        if isinstance(url, str) and _has_scheme(url):
            normalized["url"] = url
        elif url:
            _warn("bugs.url field must be a string url")
        email = bugs.get("email")
        if isinstance(email, str) and _EMAIL.match(email):
            normalized["email"] = email
        elif email:
            _warn("bugs.email field must be a string email")

    if normalized:
        data["bugs"] = normalized
    else:
        _warn("Normalized value of bugs field is an empty object, removing it")
        del data["bugs"]


def _fix_keywords(data: dict[str, Any]) -> None:
    if isinstance(data.get("keywords"), str):
        data["keywords"] = re.split(r",\s+", data["keywords"])
    keywords = data.get("keywords")
    if keywords and not isinstance(keywords, list):
        _warn("keywords should be an array of strings")
        del data["keywords"]
    elif keywords:
        data["keywords"] = [k for k in keywords if k and isinstance(k, str)]


def _fix_readme(data: dict[str, Any]) -> None:
    if not data.get("readme"):
        _warn("No README data")
        data["readme"] = MISSING_README


def _fix_homepage(data: dict[str, Any]) -> None:
    if not data.get("homepage"):
        hosted = _GitHubRepo.from_url(_repository_url(data))
        if hosted is not None:
            data["homepage"] = hosted.docs()
    homepage = data.get("homepage")
    if not homepage:
        return
    if not isinstance(homepage, str):
        _warn("homepage field must be a string url, deleted")
        del data["homepage"]
        return
    if not _has_scheme(homepage):
        data["homepage"] = "http://" + homepage


def _fix_license(data: dict[str, Any]) -> None:
    if not data.get("license") and not data.get("licence"):
        _warn("No license field")


def _objectify(deps: Any) -> Any:
    if isinstance(deps, str):
        deps = re.split(r"[\n\r\s\t ,]+", deps.strip())
    if not isinstance(deps, list):
        return deps
    objectified: dict[str, str] = {}
    for dep in deps:
        if not isinstance(dep, str):
            continue
        parts = re.split(r"(:?[@\s><=])", dep.strip())
        name = parts.pop(0)
        objectified[name] = "".join(parts).strip().removeprefix("@")
    return objectified


def _fix_bundle_dependencies(data: dict[str, Any]) -> None:
    if data.get("bundledDependencies") and not data.get("bundleDependencies"):
        data["bundleDependencies"] = data.pop("bundledDependencies")
    bundled = data.get("bundleDependencies")
    if bundled and not isinstance(bundled, list):
        _warn("Invalid 'bundleDependencies' list")
        del data["bundleDependencies"]
    elif bundled:
        kept = []
        for name in bundled:
            if not name or not isinstance(name, str):
                continue
            dependencies = data.setdefault("dependencies", {})
            if isinstance(dependencies, dict) and name not in dependencies:
                _warn("Non-dependency in bundleDependencies: %s", name)
                dependencies[name] = "*"
            kept.append(name)
        data["bundleDependencies"] = kept


def _fix_dependencies(data: dict[str, Any]) -> None:
    for section in DEPENDENCY_SECTIONS:
        if data.get(section):
            data[section] = _objectify(data[section])

    optional = data.get("optionalDependencies")
    if optional and isinstance(optional, dict):
        dependencies = data.get("dependencies") or {}
        if isinstance(dependencies, dict):
            dependencies.update(optional)
            data["dependencies"] = dependencies

    _fix_bundle_dependencies(data)

    for section in ("dependencies", "devDependencies"):
        if section not in data:
            continue
        if not data[section] or not isinstance(data[section], dict):
            _warn("%s field must be an object", section)
            del data[section]
            continue
        for name in [n for n, spec in data[section].items() if not isinstance(spec, str)]:
            _warn("Invalid dependency specifier for %s in %s", name, section)
            del data[section][name]


def _unparse_person(person: Any) -> Any:
    if isinstance(person, str):
        return person
    if not isinstance(person, dict):
        return ""
    name = str(person.get("name") or "")
    url = person.get("url") or person.get("web")
    email = person.get("email") or person.get("mail")
    return name + (f" <{email}>" if email else "") + (f" ({url})" if url else "")


def _parse_person(person: Any) -> Any:
    if not isinstance(person, str):
        return person
    parsed: dict[str, str] = {}
    name = re.match(r"^([^(<]+)", person)
    url = re.search(r"\(([^()]+)\)", person)
    email = re.search(r"<([^<>]+)>", person)
    if name and name.group(0).strip():
        parsed["name"] = name.group(0).strip()
    if email:
        parsed["email"] = email.group(1)
    if url:
        parsed["url"] = url.group(1)
    return parsed


def _fix_people(data: dict[str, Any]) -> None:
    for fn in (_unparse_person, _parse_person):
        if data.get("author"):
            data["author"] = fn(data["author"])
        for field in ("maintainers", "contributors"):
            if isinstance(data.get(field), list):
                data[field] = [fn(person) for person in data[field]]


FIXERS = (
    _fix_name,
    _fix_version,
    _fix_description,
    _fix_repository,
    _fix_modules,
    _fix_scripts,
    _fix_files,
    _fix_bin,
    _fix_man,
    _fix_bugs,
    _fix_keywords,
    _fix_readme,
    _fix_homepage,
    _fix_license,
    _fix_dependencies,
    _fix_people,
)


def normalize_package_data(data: dict[str, Any]) -> dict[str, Any]:
    """Normalize ``data`` in place and return it.

    Raises:
        NormalizeError: If ``name`` or ``version`` has the wrong type or an
            invalid value, or if ``data`` is not an object.
    """
    if isinstance(data, dict):
        for field in ("name", "version"):
            if _is_falsy(data.get(field)):
                data[field] = ""

    try:
        validate_package_data(data)
    except ValueError as exc:
        raise NormalizeError(f"package.json data failed validation:{exc}") from exc

    for fixer in FIXERS:
        fixer(data)

    data["_id"] = f"{data['name']}@{data['version']}"
    return data

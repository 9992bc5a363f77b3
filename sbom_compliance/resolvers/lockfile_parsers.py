"""Lockfile parsers producing package name to version maps.

Each parser takes raw lockfile content and returns a flat mapping from
package name to pinned version. Content with no recognised shape raises
LockfileParseError; the resolver treats that as non-fatal.
"""
import json
from typing import Any, Callable, NamedTuple

from packaging.utils import canonicalize_name

from sbom_compliance.exceptions import LockfileParseError

NODE_MODULES = "node_modules/"


def _load_json_object(content: str, filename: str) -> dict[str, Any]:
    try:
        data = json.loads(content)
    except (json.JSONDecodeError, TypeError) as e:
        raise LockfileParseError(f"Invalid JSON in {filename}: {e}") from e
    if not isinstance(data, dict):
        raise LockfileParseError(
            f"Invalid {filename}: expected an object at root level, "
            f"got {type(data).__name__}"
        )
    return data


def _entry_version(entry: Any) -> str:
    if isinstance(entry, dict):
        version = entry.get("version")
        if isinstance(version, str):
            return version.strip()
    return ""


def parse_package_lock(content: str) -> dict[str, str]:
    """Parse an npm ``package-lock.json``.

    Two shapes are recognised:

    - v2/v3: a ``packages`` map keyed by install path. The root entry (empty
      key) is skipped and the package name is the path after the last
      ``node_modules/``, so nested copies collapse onto the same name; the
      entry seen last wins.
    - v1: a ``dependencies`` map keyed directly by package name.

    Args:
        content: Raw lockfile content.

    Returns:
        Mapping of package name to version.

    Raises:
        LockfileParseError: If the content is not JSON or has neither shape.
    """
    lockfile = _load_json_object(content, "package-lock.json")
    versions: dict[str, str] = {}

    packages = lockfile.get("packages")
    if isinstance(packages, dict):
        for path, entry in packages.items():
            if not path or NODE_MODULES not in path:
                continue
            name = path.rsplit(NODE_MODULES, 1)[1]
            version = _entry_version(entry)
            if name and version:
                versions[name] = version
        return versions

    dependencies = lockfile.get("dependencies")
    if isinstance(dependencies, dict):
        for name, entry in dependencies.items():
            version = _entry_version(entry)
            if name and version:
                versions[name] = version
        return versions

    raise LockfileParseError(
        "Unrecognised package-lock.json format: no 'packages' or 'dependencies' map"
    )


def parse_pipfile_lock(content: str) -> dict[str, str]:
    """Parse a pipenv ``Pipfile.lock``.

    Reads the ``default`` section, then ``develop``; the ``==`` pin prefix is
    stripped and names are keyed by their PEP 503 canonical form. Entries
    without a version (VCS or path installs) are skipped.

    Args:
        content: Raw lockfile content.

    Returns:
        Mapping of canonical package name to version.

    Raises:
        LockfileParseError: If the content is not JSON or has no sections.
    """
    lockfile = _load_json_object(content, "Pipfile.lock")
    sections = [
        lockfile[key] for key in ("default", "develop") if isinstance(lockfile.get(key), dict)
    ]
    if not sections:
        raise LockfileParseError(
            "Unrecognised Pipfile.lock format: no 'default' or 'develop' section"
        )

    versions: dict[str, str] = {}
    for section in sections:
        for name, entry in section.items():
            version = _entry_version(entry)
            if version.startswith("=="):
                version = version[2:]
            if name and version:
                versions.setdefault(str(canonicalize_name(name)), version)
    return versions


class LockfileFormat(NamedTuple):
    """A lockfile the resolver knows how to read, and the ecosystems it pins."""

    path: str
    ecosystems: frozenset[str]
    parse: Callable[[str], dict[str, str]]
    normalize_name: Callable[[str], str]


def _identity(name: str) -> str:
    return name


def _canonical(name: str) -> str:
    return str(canonicalize_name(name))


PACKAGE_LOCK = LockfileFormat(
    path="package-lock.json",
    ecosystems=frozenset({"npm"}),
    parse=parse_package_lock,
    normalize_name=_identity,
)

PIPFILE_LOCK = LockfileFormat(
    path="Pipfile.lock",
    ecosystems=frozenset({"pypi", "pip"}),
    parse=parse_pipfile_lock,
    normalize_name=_canonical,
)

DEFAULT_LOCKFILE_FORMATS: tuple[LockfileFormat, ...] = (PACKAGE_LOCK, PIPFILE_LOCK)

"""Package URL (purl) version helpers.

Format: ``pkg:type/namespace/name@version?qualifiers#subpath``.
See https://github.com/package-url/purl-spec.

Only the pieces the lockfile pass needs are implemented here: detecting
whether a purl already pins a version and appending one when it does not.
npm scopes may appear encoded (``pkg:npm/%40scope/name``) or raw
(``pkg:npm/@scope/name``); in both cases the version separator can only
appear in the final path segment, so that is the only segment inspected.
"""

from typing import NamedTuple, Optional
from urllib.parse import quote


class PurlParts(NamedTuple):
    """A purl split around its version separator."""

    base: str  # pkg:type/namespace/name
    version: Optional[str]
    suffix: str  # "?qualifiers#subpath" or ""


def split_purl(purl: str) -> Optional[PurlParts]:
    """Split a purl into base, version and qualifier/subpath suffix.

    Args:
        purl: Package URL string (e.g., "pkg:npm/express@4.18.2").

    Returns:
        PurlParts, or None if the string is not a ``pkg:type/name`` purl.
    """
    if not purl or not purl.startswith("pkg:"):
        return None

    core = purl
    suffix = ""
    for marker in ("#", "?"):
        if marker in core:
            index = core.index(marker)
            core, suffix = core[:index], core[index:] + suffix

    # pkg:type/...
    if "/" not in core[4:]:
        return None

    head, _, last_segment = core.rpartition("/")
    if not last_segment or not head[4:]:
        return None

    if "@" in last_segment:
        name, _, version = last_segment.partition("@")
        if not name:
            return None
        return PurlParts(base=f"{head}/{name}", version=version or None, suffix=suffix)

    return PurlParts(base=core, version=None, suffix=suffix)


def get_purl_version(purl: str) -> Optional[str]:
    """Return the version pinned in a purl, or None when it has none."""
    parts = split_purl(purl)
    return parts.version if parts else None


def has_version(purl: str) -> bool:
    """Check whether a purl already encodes a version."""
    return get_purl_version(purl) is not None


def with_version(purl: str, version: str) -> str:
    """Return the purl pinned to ``version``.

    A purl that already carries a version is returned unchanged. Otherwise
    ``@<version>`` is inserted after the name, ahead of any qualifiers or
    subpath, so the type prefix and name are always preserved.

    Args:
        purl: Package URL, with or without a version.
        version: Resolved version to pin.

    Returns:
        The versioned purl.
    """
    parts = split_purl(purl)
    if parts is None:
        # Not a well-formed purl; append so no information is dropped.
        return f"{purl}@{version}"
    if parts.version is not None:
        return purl
    return f"{parts.base}@{quote(version, safe='.+-_~!')}{parts.suffix}"

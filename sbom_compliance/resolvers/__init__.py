"""Dependency-version resolvers package."""

from sbom_compliance.resolvers.base import (
    DependencyGraph,
    FileContentProvider,
    HashEnricher,
)
from sbom_compliance.resolvers.lockfile import LockfileVersionResolver
from sbom_compliance.resolvers.lockfile_parsers import (
    DEFAULT_LOCKFILE_FORMATS,
    PACKAGE_LOCK,
    PIPFILE_LOCK,
    LockfileFormat,
    parse_package_lock,
    parse_pipfile_lock,
)
from sbom_compliance.resolvers.providers import (
    PROVIDER_REGISTRY,
    HttpFileContentProvider,
    ProviderConfig,
    detect_provider,
    parse_repo_url,
)

__all__ = [
    "DEFAULT_LOCKFILE_FORMATS",
    "PACKAGE_LOCK",
    "PIPFILE_LOCK",
    "PROVIDER_REGISTRY",
    "DependencyGraph",
    "FileContentProvider",
    "HashEnricher",
    "HttpFileContentProvider",
    "LockfileFormat",
    "LockfileVersionResolver",
    "ProviderConfig",
    "detect_provider",
    "parse_package_lock",
    "parse_pipfile_lock",
    "parse_repo_url",
]

"""Custom exceptions for sbom-compliance."""


class ComplianceError(Exception):
    """Base exception for all sbom-compliance errors."""

    pass


class ConfigurationError(ComplianceError):
    """Exception raised when configuration or credentials are invalid."""

    pass


class NetworkError(ComplianceError):
    """Exception raised when a network request fails."""

    pass


class RepositoryFileError(ComplianceError):
    """Base for non-fatal file lookups against a source repository."""

    pass


class RepositoryFileNotFoundError(RepositoryFileError):
    """Exception raised when a requested repository file does not exist."""

    pass


class RepositoryAccessDeniedError(RepositoryFileError):
    """Exception raised when the credential may not read a repository file."""

    pass


class UnsupportedProviderError(RepositoryFileError):
    """Exception raised when a repository's provider cannot be queried."""

    pass


class LockfileParseError(ComplianceError):
    """Exception raised when lockfile content has no recognised shape."""

    pass

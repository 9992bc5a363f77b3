"""Constants for sbom-compliance."""

# Exit codes
EXIT_SUCCESS = 0  # No issues found
EXIT_ISSUES = 1  # Incompatible, review-needed or conflicting licenses found
EXIT_ERROR = 2  # Command failed due to error

# Value written to Dependency.version_source by the lockfile pass
VERSION_SOURCE_LOCKFILE = "lockfile"

# Branch used when a repository does not record its default branch
DEFAULT_BRANCH = "main"

# Provider assumed when neither the repository nor its URL names one
DEFAULT_PROVIDER = "github"

# Seconds to wait for a lockfile fetch before treating it as not found
DEFAULT_FETCH_TIMEOUT = 15.0

# Environment variable read by the CLI for the repository credential
TOKEN_ENV_VAR = "SBOM_COMPLIANCE_TOKEN"

LEGAL_DISCLAIMER = (
    "Compatibility verdicts are informational only and do not constitute "
    "legal advice. Consult a qualified attorney for license compliance."
)

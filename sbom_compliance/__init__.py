"""SBOM compliance engine: license verdicts, conflicts and lockfile enrichment."""

__version__ = "0.1.0"

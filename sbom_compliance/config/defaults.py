"""Default configuration values for sbom-compliance."""

from __future__ import annotations

from sbom_compliance.models.config import EngineConfig

# Default configuration file names to search for
DEFAULT_CONFIG_NAMES = [".sbom-compliance.yaml", ".sbom-compliance.yml"]


def get_default_config() -> EngineConfig:
    """Get the default configuration.

    Returns:
        EngineConfig with the built-in tables and defaults.
    """
    return EngineConfig()

"""Configuration handling for sbom-compliance."""
from __future__ import annotations

from sbom_compliance.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from sbom_compliance.config.loader import (
    find_config_file,
    load_config,
    load_config_file,
)
from sbom_compliance.models.config import EngineConfig

__all__ = [
    "DEFAULT_CONFIG_NAMES",
    "EngineConfig",
    "find_config_file",
    "get_default_config",
    "load_config",
    "load_config_file",
]

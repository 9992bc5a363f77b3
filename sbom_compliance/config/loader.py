"""Locating and reading ``.sbom-compliance.yaml``.

The file carries the tables the engine and resolver run with: the
network-copyleft set, the license conflict table, lockfile fetch settings
and the base URLs of self-hosted repository providers. A missing, empty or
comment-only file means the built-in defaults.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from sbom_compliance.config.defaults import DEFAULT_CONFIG_NAMES, get_default_config
from sbom_compliance.exceptions import ConfigurationError
from sbom_compliance.models.config import EngineConfig
from sbom_compliance.resolvers.providers import PROVIDER_REGISTRY

logger = logging.getLogger(__name__)

SELF_HOSTED_PROVIDERS = tuple(p.id for p in PROVIDER_REGISTRY if p.self_hosted)


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the first of ``DEFAULT_CONFIG_NAMES`` present in a directory.

    Args:
        start_dir: Directory to look in. Defaults to the working directory.
    """
    directory = start_dir or Path.cwd()
    return next(
        (directory / name for name in DEFAULT_CONFIG_NAMES if (directory / name).is_file()),
        None,
    )


def _read_settings(path: Path) -> dict[str, Any] | None:
    """Parse the YAML document at ``path``; None when it holds no settings."""
    try:
        text = path.read_text(encoding="utf-8")
    except OSError as e:
        raise ConfigurationError(f"Cannot read configuration file '{path}': {e}") from e

    try:
        settings = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML syntax in '{path}': {e}") from e

    if settings is None or isinstance(settings, dict):
        return settings
    raise ConfigurationError(
        f"Invalid configuration in '{path}': expected a mapping of settings, "
        f"got {type(settings).__name__}"
    )


def _describe_errors(error: ValidationError) -> str:
    """Render validation errors as ``license_conflicts[0].reason: msg`` pairs."""
    described = []
    for err in error.errors():
        location = ""
        for part in err["loc"]:
            location += f"[{part}]" if isinstance(part, int) else f".{part}"
        described.append(f"{location.lstrip('.') or 'root'}: {err['msg']}")
    return "; ".join(described)


def _check_instance_urls(config: EngineConfig, path: Path) -> None:
    """Reject instance URLs keyed by anything but a self-hosted provider id."""
    unknown = sorted(set(config.instance_urls) - set(SELF_HOSTED_PROVIDERS))
    if unknown:
        raise ConfigurationError(
            f"Invalid configuration in '{path}': instance_urls has no self-hosted "
            f"provider {', '.join(unknown)} (expected one of "
            f"{', '.join(SELF_HOSTED_PROVIDERS)})"
        )


def load_config_file(path: Path) -> EngineConfig:
    """Load and validate one configuration file.

    Raises:
        ConfigurationError: If the file cannot be read or parsed, or its
            settings are invalid.
    """
    settings = _read_settings(path)
    if not settings:
        logger.debug("Configuration file %s is empty; using defaults", path)
        return get_default_config()

    try:
        config = EngineConfig.model_validate(settings)
    except ValidationError as e:
        raise ConfigurationError(
            f"Invalid configuration in '{path}': {_describe_errors(e)}"
        ) from e
    _check_instance_urls(config, path)

    logger.debug("Loaded configuration from %s", path)
    return config


def load_config(config_path: str | None = None) -> EngineConfig:
    """Load the explicit configuration file, else a discovered one, else defaults.

    Raises:
        ConfigurationError: If the chosen configuration file is invalid.
    """
    path = Path(config_path) if config_path is not None else find_config_file()
    if path is None:
        return get_default_config()
    return load_config_file(path)

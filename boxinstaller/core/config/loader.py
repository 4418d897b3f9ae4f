"""
Configuration loader — installer.yml → InstallerConfig.

The file is optional.  Without one, the model defaults describe the
stock Signal Desktop setup; with one, only the keys it sets override
those defaults.  Every problem surfaces as a ConfigError with the file
name in the message.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from boxinstaller.core.models.config import InstallerConfig

logger = logging.getLogger(__name__)

CONFIG_FILE = "installer.yml"


class ConfigError(Exception):
    """installer.yml is missing, unreadable or invalid."""


def find_config_file(start_dir: Path | None = None) -> Path | None:
    """Return the nearest installer.yml in ``start_dir`` or its parents."""
    start = (start_dir or Path.cwd()).resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILE
        if candidate.is_file():
            return candidate
    return None


def _read_mapping(path: Path) -> dict:
    try:
        document = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as e:
        raise ConfigError(f"Cannot read {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if document is None:
        return {}
    if not isinstance(document, dict):
        raise ConfigError(
            f"{path} must contain a YAML mapping, not {type(document).__name__}"
        )
    return document


def load_config(path: Path | None = None, *, search: bool = True) -> InstallerConfig:
    """Load and validate installer configuration.

    Args:
        path: Explicit installer.yml; it must exist.
        search: Without ``path``, look for installer.yml from the working
            directory upwards.  Defaults apply when nothing is found.

    Raises:
        ConfigError: On a missing explicit file or any invalid content.
    """
    if path is None and search:
        path = find_config_file()
    if path is None:
        logger.debug("No %s, using built-in defaults", CONFIG_FILE)
        return InstallerConfig()
    if not path.is_file():
        raise ConfigError(f"Config file not found: {path}")

    logger.debug("Reading %s", path)
    try:
        config = InstallerConfig.model_validate(_read_mapping(path))
    except ValidationError as e:
        raise ConfigError(f"Invalid installer configuration in {path}: {e}") from e

    logger.info("Config %s: sandbox '%s', app '%s'", path, config.sandbox.name, config.app.id)
    return config

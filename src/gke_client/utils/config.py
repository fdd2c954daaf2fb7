"""
Configuration utilities for loading the YAML settings file.
"""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from ..exceptions import ConfigError
from ..models import UpdateSettings

logger = logging.getLogger(__name__)

DEFAULT_SETTINGS_FILE = Path.home() / ".jx" / "gke-terraform.yaml"


def load_settings(config_file: Optional[Union[str, Path]] = None) -> UpdateSettings:
    """
    Load update settings from a YAML file.

    Args:
        config_file: Path to the settings file. When omitted the default
            ``~/.jx/gke-terraform.yaml`` is used if it exists.

    Returns:
        UpdateSettings: Validated settings, defaults when no file is present

    Raises:
        ConfigError: If an explicit file is missing, the YAML is malformed or
            the values are invalid
    """
    if config_file is None:
        path = DEFAULT_SETTINGS_FILE
        if not path.exists():
            logger.debug("No settings file at %s, using defaults", path)
            return UpdateSettings()
    else:
        path = Path(config_file).expanduser()
        if not path.exists():
            raise ConfigError(f"Settings file not found at path: {path}")

    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Error parsing settings file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Settings file {path} must contain a mapping")

    try:
        settings = UpdateSettings(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid settings in {path}: {e}") from e

    logger.debug("Loaded settings from %s", path)
    return settings

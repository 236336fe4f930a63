"""YAML configuration loader for buildgate."""

import logging
from pathlib import Path
from typing import Optional, Union

import yaml
from pydantic import ValidationError

from ..errors import ConfigError
from .defaults import default_config
from .environment import substitute_environment_variables
from .models import GateConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAMES = ("buildgate.yaml", "buildgate.yml")


def find_config_file(project_root: Union[str, Path]) -> Optional[Path]:
    """Return the first buildgate.yaml/.yml in project_root, if any."""
    root = Path(project_root)
    for name in CONFIG_FILENAMES:
        candidate = root / name
        if candidate.is_file():
            return candidate
    return None


def load_config(file_path: Union[str, Path]) -> GateConfig:
    """Load and validate a pipeline configuration file.

    Args:
        file_path: Path to the YAML configuration file

    Returns:
        Validated GateConfig

    Raises:
        ConfigError: If the file is missing, is not valid YAML, or does not
            match the configuration schema
    """
    path = Path(file_path)

    if path.suffix.lower() not in {".yaml", ".yml"}:
        raise ConfigError(
            f"Invalid file extension: {path.suffix}. "
            "Suggestion: Use .yaml or .yml extension for configuration files."
        )

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except FileNotFoundError:
        raise ConfigError(f"Configuration file not found: {path}")
    except OSError as e:
        raise ConfigError(f"Cannot read configuration file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Configuration root in {path} must be a mapping")

    data = substitute_environment_variables(data)

    try:
        config = GateConfig(**data)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration in {path}:\n{e}") from e

    logger.info(f"Loaded configuration {path} with {len(config.steps)} step(s)")
    return config


def resolve_config(
    config_path: Optional[Union[str, Path]], project_root: Union[str, Path]
) -> GateConfig:
    """Load an explicit config, a discovered one, or fall back to the defaults."""
    if config_path is not None:
        return load_config(config_path)

    discovered = find_config_file(project_root)
    if discovered is not None:
        return load_config(discovered)

    logger.debug("No configuration file found, using the built-in pipeline")
    return default_config()

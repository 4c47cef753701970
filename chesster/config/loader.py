"""Configuration loading and saving."""

import json
from pathlib import Path

from loguru import logger
from pydantic import ValidationError

from chesster.config.schema import Config


def get_config_path() -> Path:
    """Get the default configuration file path."""
    return Path.home() / ".chesster" / "config.json"


def load_config(config_path: Path | None = None) -> Config:
    """
    Load configuration from file, with environment overrides.

    Args:
        config_path: Optional path to config file. Uses default if not provided.

    Returns:
        Loaded configuration, or defaults if the file is missing or invalid.
    """
    path = config_path or get_config_path()

    if path.exists():
        try:
            data = json.loads(path.read_text())
            return Config(**data)
        except (json.JSONDecodeError, ValidationError) as e:
            logger.warning(f"Failed to load config from {path}: {e}")
            logger.warning("Using default configuration.")

    return Config()


def save_config(config: Config, config_path: Path | None = None) -> None:
    """
    Save configuration to file.

    Args:
        config: Configuration to save.
        config_path: Optional path to save to. Uses default if not provided.
    """
    path = config_path or get_config_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(config.model_dump(), indent=2))

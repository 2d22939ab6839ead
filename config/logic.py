import collections.abc
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from config.loader import load_config
from config.models import Config
from utils.errors import ConfigurationError
from utils.logger import logger

DEFAULT_CONFIG_PATH = Path(__file__).parent / "default.yaml"
USER_CONFIG_DIR = Path.home() / ".worklogs"
USER_CONFIG_PATH = USER_CONFIG_DIR / "config.yaml"
REGISTRY_ENV_VAR = "WORKLOG_CONFIG"


def deep_merge(target: Dict[str, Any], source: Dict[str, Any]) -> Dict[str, Any]:
    """
    Recursively merges two dictionaries.
    Arrays are replaced, not merged.
    """
    for key, value in source.items():
        if isinstance(value, collections.abc.Mapping) and key in target and isinstance(target[key], collections.abc.Mapping):
            target[key] = deep_merge(dict(target[key]), value)
        else:
            target[key] = value
    return target


def load_and_merge_configs(custom_config_path: Optional[str] = None) -> Config:
    """
    Loads the bundled defaults and the user config and merges them.
    A custom config path can be provided to override the user config.
    """
    config_paths: List[Path] = []

    if DEFAULT_CONFIG_PATH.is_file():
        config_paths.append(DEFAULT_CONFIG_PATH)
    else:
        raise ConfigurationError("Default configuration file not found.")

    if custom_config_path:
        path = Path(custom_config_path).expanduser()
        if not path.is_file():
            raise ConfigurationError(f"Custom config file not found at: {custom_config_path}")
        config_paths.append(path)
        logger.info(f"Using custom configuration from: {path}")
    elif USER_CONFIG_PATH.is_file():
        config_paths.append(USER_CONFIG_PATH)

    merged_config: Dict[str, Any] = {}
    for path in config_paths:
        logger.debug(f"Loading configuration from: {path}")
        with open(path, "r", encoding="utf-8") as f:
            merged_config = deep_merge(merged_config, load_config(f))

    try:
        final_config = Config(**merged_config)
    except ValidationError as e:
        raise ConfigurationError(f"Configuration validation failed: {e}") from e

    logger.debug(f"Final merged config: {final_config.model_dump_json(indent=2)}")
    return final_config


def registry_path(config: Config) -> Path:
    """The project registry location; the WORKLOG_CONFIG variable wins over the settings file."""
    return Path(os.getenv(REGISTRY_ENV_VAR) or config.registry.path).expanduser()

"""Configuration loading and validation."""

import copy
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from yamlmerge.errors import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILENAME = ".yamlmerge.yaml"

# Output layout for re-serialized documents. The indent is only used where
# the destination does not show its own. Long lines are not folded so
# untouched scalars keep their original line breaks.
DEFAULT_SETTINGS: Dict[str, Any] = {
    "indent": {"mapping": 2, "sequence": 4, "offset": 2},
    "width": 4096,
    "atomic_write": False,
}

INDENT_KEYS = ("mapping", "sequence", "offset")


def load_config(config_path: Optional[Path] = None, search_dir: Optional[Path] = None) -> Dict[str, Any]:
    """Load configuration from YAML file.

    Search order:
    1. Explicit --config path
    2. .yamlmerge.yaml in search_dir (default: current working directory)

    Args:
        config_path: Explicit path to config file
        search_dir: Directory to look for the default config file in

    Returns:
        Configuration dictionary (empty if no config found)

    Raises:
        ConfigError: if the explicit file is missing, or a file is unreadable
            or its top level is not a mapping
    """
    if config_path:
        config_path = Path(config_path)
        if not config_path.exists():
            raise ConfigError(config_path, "file not found")
        search_paths = [config_path]
    else:
        search_paths = [(search_dir or Path.cwd()) / DEFAULT_CONFIG_FILENAME]

    for path in search_paths:
        if path.exists():
            try:
                with open(path, encoding="utf-8") as f:
                    config = yaml.safe_load(f) or {}
            except (OSError, yaml.YAMLError) as e:
                raise ConfigError(path, e) from e

            if not isinstance(config, dict):
                raise ConfigError(path, "top level must be a mapping")
            logger.info("Loaded config from: %s", path)
            return config

    return {}


def get_settings(config: Dict[str, Any], layout: Optional[Dict[str, int]] = None) -> Dict[str, Any]:
    """Combine a loaded config with the defaults.

    Args:
        config: Configuration dictionary (may be empty)
        layout: Indent settings detected from the document being written.
            They replace the default indent; indent keys set in the config
            still win.

    Returns:
        Complete settings dictionary
    """
    settings = copy.deepcopy(DEFAULT_SETTINGS)
    if layout:
        settings["indent"].update(layout)
    for key, value in config.items():
        if key == "indent" and isinstance(value, dict):
            settings["indent"].update(value)
        else:
            settings[key] = value
    return settings


def _is_positive_int(value: Any) -> bool:
    # bool is an int subclass
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def validate_config(config: Dict[str, Any]) -> List[str]:
    """Validate configuration and return list of errors.

    Args:
        config: Configuration dictionary

    Returns:
        List of error messages (empty if valid)
    """
    errors = []

    for key in config:
        if key not in DEFAULT_SETTINGS:
            errors.append(f"Unknown setting '{key}'")

    indent = config.get("indent", {})
    if not isinstance(indent, dict):
        errors.append("'indent' must be a mapping")
    else:
        for key, value in indent.items():
            if key not in INDENT_KEYS:
                errors.append(f"Unknown indent setting '{key}'")
            elif key == "offset":
                if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                    errors.append("'indent.offset' must be a non-negative integer")
            elif not _is_positive_int(value):
                errors.append(f"'indent.{key}' must be a positive integer")

        merged = get_settings({"indent": indent})["indent"]
        sequence, offset = merged["sequence"], merged["offset"]
        if _is_positive_int(sequence) and isinstance(offset, int) and offset >= sequence:
            errors.append("'indent.offset' must be smaller than 'indent.sequence'")

    if "width" in config and not _is_positive_int(config["width"]):
        errors.append("'width' must be a positive integer")

    if "atomic_write" in config and not isinstance(config["atomic_write"], bool):
        errors.append("'atomic_write' must be true or false")

    return errors

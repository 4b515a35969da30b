#  whereami - Configuration
#
#  Loads config.json and validates it. Every key is optional; a missing
#  file means the built-in defaults.
#
#  Depends on: config.json (optional)
#  Used by:    cli.py, server.py

import copy
import json
import logging
from pathlib import Path

from whereami.base import PROXIMITY_WINDOW, TAB_WIDTH

log = logging.getLogger("whereami")

DEFAULT_CONFIG: dict = {
    "tab_width": TAB_WIDTH,
    "proximity_window": PROXIMITY_WINDOW,
    "format": "text",
    "mcp": {
        "server_name": "whereami",
        "whereami_tool": {
            "name": "whereami",
            "description": "Show the chain of enclosing scopes (by indentation) for a line of a source file.",
        },
    },
}


class ConfigError(ValueError):
    """Raised when config.json is unreadable or invalid."""


def load_config(config_path: Path) -> dict:
    """Load config.json merged over the defaults.

    Raises ConfigError if the file exists but cannot be parsed or is invalid.
    """
    config = copy.deepcopy(DEFAULT_CONFIG)
    if not config_path.exists():
        log.debug(f"{config_path} not found, using defaults.")
        return config

    try:
        with open(config_path, encoding="utf-8") as f:
            user_config = json.load(f)
    except (OSError, json.JSONDecodeError) as e:
        raise ConfigError(f"Could not read {config_path}: {e}") from e

    if not isinstance(user_config, dict):
        raise ConfigError(f"{config_path} must contain a JSON object.")

    for key, value in user_config.items():
        if key == "mcp" and isinstance(value, dict):
            config["mcp"].update(value)
        else:
            config[key] = value

    _validate_config(config)
    return config


def _validate_config(config: dict):
    """Validate config values.

    Raises ConfigError on invalid config.
    """
    tab_width = config.get("tab_width")
    if not isinstance(tab_width, int) or isinstance(tab_width, bool) or tab_width <= 0:
        raise ConfigError("config.json 'tab_width' must be a positive integer.")

    window = config.get("proximity_window")
    if not isinstance(window, int) or isinstance(window, bool) or window < 0:
        raise ConfigError("config.json 'proximity_window' must be a non-negative integer.")

    if not isinstance(config.get("format"), str) or not config["format"]:
        raise ConfigError("config.json 'format' must be a non-empty string.")

    mcp_config = config.get("mcp")
    if not isinstance(mcp_config, dict):
        raise ConfigError("config.json 'mcp' must be an object.")
    tool = mcp_config.get("whereami_tool", {})
    if not isinstance(tool, dict):
        raise ConfigError("config.json 'mcp.whereami_tool' must be an object.")

from pathlib import Path
from typing import Any, Dict

import yaml

DEFAULT_CONFIG_PATH = Path("plantlog.config.yaml")

DEFAULT_STORAGE: Dict[str, Any] = {
    "sqlite_path": "plantlog.db",
    "collection": "plants",
    "timestamp_field": "dateAdded",
}

DEFAULT_LOGGING: Dict[str, Any] = {
    "level": "INFO",
    "file": None,
}


def load_config(path: Path | None = None) -> Dict[str, Any]:
    """
    Load the plantlog configuration from YAML.

    Args:
        path: Optional path to the config file. Defaults to plantlog.config.yaml

    Returns:
        Configuration dictionary (empty if the file is empty)

    Raises:
        FileNotFoundError: If the config file doesn't exist
        ValueError: If the document is not a mapping
    """
    cfg_path = path or DEFAULT_CONFIG_PATH
    if not cfg_path.exists():
        raise FileNotFoundError(f"Config file not found: {cfg_path}")
    with cfg_path.open("r", encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    if not isinstance(config, dict):
        raise ValueError("Config must be a dictionary")

    for section in ("storage", "logging"):
        value = config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ValueError(f"Config '{section}' must be a dictionary if provided")

    return config


def get_storage_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """
    Resolve storage settings with built-in fallbacks.

    Keys: sqlite_path, collection, timestamp_field.
    """
    user_storage = (config or {}).get("storage") or {}
    settings = {**DEFAULT_STORAGE, **user_storage}
    for key in DEFAULT_STORAGE:
        if not settings.get(key):
            settings[key] = DEFAULT_STORAGE[key]
        settings[key] = str(settings[key])
    return settings


def get_logging_settings(config: Dict[str, Any] | None = None) -> Dict[str, Any]:
    """Resolve logging settings (level, file) with built-in fallbacks."""
    user_logging = (config or {}).get("logging") or {}
    settings = {**DEFAULT_LOGGING, **user_logging}
    settings["level"] = str(settings.get("level") or DEFAULT_LOGGING["level"]).upper()
    return settings

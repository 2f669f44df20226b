"""
Configuration Management Module

Loads settings from the config.yaml file at the project root and keeps a
single parsed copy for the whole process.

Usage:
    from capture_gate.config import get_config, get_pose_config
    config = get_config()
    yaw_range = get_pose_config()["yaw_range"]
"""

import logging
import yaml
from pathlib import Path
from typing import Any, Dict, Optional


# Store the singleton instance (module-level variable)
_config_instance: Optional[Dict[str, Any]] = None

CONFIG_FILENAME = "config.yaml"


def get_project_root() -> Path:
    """
    Find the project root directory.

    The project root is the first parent of this package that contains
    config.yaml.

    Returns:
        Path: The absolute path to the project root directory.

    Raises:
        FileNotFoundError: If config.yaml cannot be found in any parent directory.
    """
    current_dir = Path(__file__).resolve().parent

    while current_dir != current_dir.parent:
        if (current_dir / CONFIG_FILENAME).exists():
            return current_dir
        current_dir = current_dir.parent

    raise FileNotFoundError(
        f"Could not find {CONFIG_FILENAME} in any parent directory. "
        "Make sure you're running from within the project directory."
    )


def load_config(config_path: Optional[str] = None) -> Dict[str, Any]:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Optional path to the config file.
                     If not provided, uses config.yaml in the project root.

    Returns:
        Dict containing all configuration values. An empty file yields {}.

    Raises:
        FileNotFoundError: If the config file doesn't exist.
        yaml.YAMLError: If the config file contains invalid YAML.
    """
    if config_path is None:
        config_path = get_project_root() / CONFIG_FILENAME
    else:
        config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, "r", encoding="utf-8") as f:
        config = yaml.safe_load(f)

    return config or {}


def get_config(reload: bool = False) -> Dict[str, Any]:
    """
    Get the configuration singleton.

    Args:
        reload: If True, forces reloading the configuration from disk.

    Returns:
        Dict containing all configuration values.

    Example:
        config = get_config()
        threshold = config["traits"]["min_eye_open_probability"]
    """
    global _config_instance

    if _config_instance is None or reload:
        _config_instance = load_config()

    return _config_instance


def get_section(section_name: str) -> Dict[str, Any]:
    """
    Get a top-level section from the configuration.

    Raises:
        KeyError: If the section doesn't exist in the configuration.
    """
    config = get_config()

    if section_name not in config:
        raise KeyError(
            f"Configuration section '{section_name}' not found. "
            f"Available sections: {list(config.keys())}"
        )

    return config[section_name]


def get_face_detection_config() -> Dict[str, Any]:
    """Get face detection configuration."""
    return get_section("face_detection")


def get_pose_config() -> Dict[str, Any]:
    """Get head pose band configuration."""
    return get_section("pose")


def get_trait_config() -> Dict[str, Any]:
    """Get expression and eye threshold configuration."""
    return get_section("traits")


def get_processor_config() -> Dict[str, Any]:
    """Get capture front end configuration."""
    return get_section("processor")


def get_logging_config() -> Dict[str, Any]:
    """Get logging configuration."""
    return get_section("logging")


def get_api_config() -> Dict[str, Any]:
    """Get API configuration."""
    return get_section("api")


def get_server_config() -> Dict[str, Any]:
    """
    Get server configuration for the API.

    Returns:
        Dict with host and port parsed from api.base_url.
    """
    api_config = get_api_config()
    base_url = api_config.get("base_url", "http://localhost:8000")

    host = "0.0.0.0"
    port = 8000

    try:
        url_part = base_url.split("//")[-1]  # Remove http:// or https://
        if ":" in url_part:
            host_part, port_str = url_part.rsplit(":", 1)
            port = int(port_str.rstrip("/"))
            if host_part != "localhost":
                host = host_part
    except (ValueError, IndexError):
        pass

    return {"host": host, "port": port}


DEFAULT_LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(level: Optional[str] = None) -> Dict[str, Any]:
    """
    Configure root logging from the logging section of config.yaml.

    Args:
        level: Overrides the configured level (e.g. "DEBUG" for --verbose).

    Returns:
        The level and format that were applied.
    """
    try:
        logging_config = get_logging_config()
    except (FileNotFoundError, KeyError):
        logging_config = {}

    applied = {
        "level": level or logging_config.get("level", "INFO"),
        "format": logging_config.get("format", DEFAULT_LOG_FORMAT),
    }
    logging.basicConfig(level=applied["level"], format=applied["format"])
    logging.getLogger().setLevel(applied["level"])
    return applied

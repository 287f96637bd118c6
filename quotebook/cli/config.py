"""Configuration management for the CLI."""

import os
from pathlib import Path
from typing import Any

import msgspec
import yaml

from quotebook.core.export import DEFAULT_DOCUMENT_NAME
from quotebook.core.models import DisplayFlags


class Config:
    """Configuration management for the CLI application."""

    @staticmethod
    def from_file(path: Path) -> dict[str, Any]:
        """Load configuration from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid YAML in config file: {e}") from e
        except OSError as e:
            raise ValueError(f"Error reading config file: {e}") from e

        if not isinstance(data, dict):
            raise ValueError(f"Config file {path} must contain a mapping")
        return data

    @staticmethod
    def get_config_paths() -> list[Path]:
        """Get the default configuration file paths to check."""
        paths = []

        # User config
        xdg_config_home = Path(
            os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config")
        )
        paths.append(xdg_config_home / "quotebook" / "config.yaml")

        # Project config
        paths.append(Path("quotebook.yaml"))

        return paths

    @staticmethod
    def merge_configs(*configs: dict[str, Any]) -> dict[str, Any]:
        """Merge multiple configuration dictionaries."""
        result: dict[str, Any] = {}
        for config in configs:
            result = _deep_merge(result, config)
        return result


def get_config_paths() -> list[Path]:
    """Get configuration paths in precedence order."""
    return Config.get_config_paths()


def load_config(extra: Path | None = None) -> dict[str, Any]:
    """Load configuration from files and environment variables.

    Args:
        extra: Explicit config file, applied after the default locations

    Returns:
        Merged configuration
    """
    config: dict[str, Any] = {}

    # Later paths win for conflicting keys
    paths = get_config_paths()
    if extra:
        paths.append(extra)
    for path in paths:
        if path.exists():
            config = Config.merge_configs(config, Config.from_file(path))

    # Override with environment variables
    env_overrides = {}
    if data_dir := os.environ.get("QUOTEBOOK_DATA_DIR"):
        env_overrides["data_dir"] = data_dir

    return Config.merge_configs(config, env_overrides)


def display_defaults(config: dict[str, Any]) -> DisplayFlags:
    """Default display flags for new quotes from the ``display`` section."""
    try:
        return msgspec.convert(config.get("display") or {}, type=DisplayFlags)
    except msgspec.ValidationError as e:
        raise ValueError(f"Invalid display settings in config: {e}") from e


def document_name(config: dict[str, Any]) -> str:
    """Name of exported documents from ``export.document_name``."""
    export = config.get("export") or {}
    return export.get("document_name") or DEFAULT_DOCUMENT_NAME


def _deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries."""
    result = base.copy()

    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = _deep_merge(result[key], value)
        else:
            result[key] = value

    return result

"""YAML configuration loader with inheritance support.

Supports:
- Loading YAML config files
- Config inheritance via 'extends' key
- Deep merging of nested config
"""

from pathlib import Path
from typing import Any

import yaml

from . import (
    JotConfig,
    LLMConfig,
    LoggingConfig,
    RemindersConfig,
    ServerConfig,
    StorageConfig,
    STTConfig,
)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries.

    Values from override take precedence. Nested dicts are merged recursively.
    """
    result = base.copy()
    for key, value in override.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_yaml_with_inheritance(path: Path) -> dict[str, Any]:
    """Load YAML file with inheritance support.

    If the file contains an 'extends' key, the base config is loaded first
    and merged with the current config.
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    with open(path) as f:
        config = yaml.safe_load(f) or {}

    if "extends" in config:
        base_name = config.pop("extends")
        base_config = load_yaml_with_inheritance(path.parent / base_name)
        config = deep_merge(base_config, config)

    return config


def dict_to_config(data: dict[str, Any]) -> JotConfig:
    """Convert raw dict to typed JotConfig dataclass."""
    jot_data = data.get("jot", {}) or {}

    def safe_get(key: str) -> dict[str, Any]:
        value = jot_data.get(key, {})
        return value if value is not None else {}

    return JotConfig(
        stt=STTConfig(**safe_get("stt")),
        llm=LLMConfig(**safe_get("llm")),
        storage=StorageConfig(**safe_get("storage")),
        reminders=RemindersConfig(**safe_get("reminders")),
        server=ServerConfig(**safe_get("server")),
        logging=LoggingConfig(**safe_get("logging")),
    )


class YAMLConfigLoader:
    """YAML configuration loader implementation."""

    def __init__(self, config_dir: Path | None = None) -> None:
        """Initialize loader with optional config directory.

        Args:
            config_dir: Directory containing config files.
                        Defaults to 'config' relative to project root.
        """
        if config_dir is None:
            config_dir = Path(__file__).parent.parent.parent.parent / "config"
        self._config_dir = config_dir

    def load(self, path: Path) -> JotConfig:
        """Load configuration from file path."""
        return dict_to_config(load_yaml_with_inheritance(path))

    def load_profile(self, profile: str) -> JotConfig:
        """Load configuration by profile name.

        A missing profile file yields the built-in defaults.
        """
        config_path = self._config_dir / f"{profile}.yaml"
        if not config_path.exists():
            return JotConfig()
        return self.load(config_path)

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self._config_dir


def load_config(path: str | Path | None = None, profile: str | None = None) -> JotConfig:
    """Load Jot configuration.

    Args:
        path: Direct path to config file (takes precedence)
        profile: Profile name ('default', 'dev', 'test') if path not given

    Returns:
        Parsed JotConfig

    Examples:
        >>> config = load_config(profile="dev")
        >>> config = load_config(path="/path/to/config.yaml")
    """
    loader = YAMLConfigLoader()

    if path is not None:
        return loader.load(Path(path))
    return loader.load_profile(profile or "default")


__all__ = [
    "YAMLConfigLoader",
    "deep_merge",
    "dict_to_config",
    "load_config",
    "load_yaml_with_inheritance",
]

"""
Layered YAML configuration.

Sources, lowest priority first:
- loggable/config/defaults.yml ("default configuration")
- application.yml in the working directory
- application-<profile>.yml when a profile is active
- LOGGABLE_* environment variables, only for keys no file defines
"""

import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from loggable.exceptions import ConfigurationException

ENV_PREFIX = "LOGGABLE_"
PROFILE_ENV_VAR = "LOGGABLE_PROFILE"
DEFAULT_SOURCE = "default configuration"
DEFAULTS_PATH = Path(__file__).parent / "defaults.yml"

TRUE_VALUES = {"true", "1", "yes", "on"}
FALSE_VALUES = {"false", "0", "no", "off"}


class ConfigurationProperties:
    """Merged view over all configuration sources, with per-key source tracking."""

    def __init__(
        self, profile: Optional[str] = None, config_dir: Optional[str] = None
    ):
        self.profile = profile or os.environ.get(PROFILE_ENV_VAR)
        self._config_dir = Path(config_dir) if config_dir else Path.cwd()
        self._data: Dict[str, Any] = {}
        self._sources: Dict[str, str] = {}
        self._load()

    def _load(self):
        self._merge(self._data, self._read(DEFAULTS_PATH), DEFAULT_SOURCE)

        filenames = ["application.yml"]
        if self.profile:
            filenames.append(f"application-{self.profile}.yml")

        for filename in filenames:
            path = self._config_dir / filename
            if path.exists():
                self._merge(self._data, self._read(path), filename)

    @staticmethod
    def _read(path: Path) -> Dict[str, Any]:
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationException(f"Invalid YAML in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigurationException(
                f"Top level of {path} must be a mapping, got {type(data).__name__}"
            )
        return data

    def _merge(
        self, target: Dict[str, Any], data: Dict[str, Any], source: str, prefix=""
    ):
        for key, value in data.items():
            full_key = f"{prefix}{key}"
            if isinstance(value, dict) and value:
                existing = target.get(key)
                if not isinstance(existing, dict):
                    existing = target[key] = {}
                # Children are tracked individually from here on
                self._sources.pop(full_key, None)
                self._merge(existing, value, source, f"{full_key}.")
            else:
                target[key] = dict(value) if isinstance(value, dict) else value
                self._sources[full_key] = source

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a value by dotted key, e.g. "logging.aspect.enabled".

        Falls back to the LOGGABLE_<KEY> environment variable when no
        configuration file defines the key.
        """
        node: Any = self._data
        for part in key.split("."):
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                return self._from_environment(key, default)
        return node

    def _from_environment(self, key: str, default: Any) -> Any:
        env_key = ENV_PREFIX + key.upper().replace(".", "_")
        raw = os.environ.get(env_key)
        if raw is None:
            return default

        self._sources[key] = f"environment variable ({env_key})"
        try:
            return yaml.safe_load(raw)
        except yaml.YAMLError:
            return raw

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self.get(key)
        if value is None:
            return default
        if isinstance(value, str):
            return value.strip().lower() in TRUE_VALUES
        return bool(value)

    def get_config_sources(self) -> Dict[str, str]:
        """Map every known key to the source that supplied it, sorted by key."""
        return dict(sorted(self._sources.items()))


_config: Optional[ConfigurationProperties] = None
_config_lock = threading.Lock()


def get_config() -> ConfigurationProperties:
    """Get the process-wide configuration, loading it on first use."""
    global _config
    if _config is None:
        with _config_lock:
            if _config is None:
                _config = ConfigurationProperties()
    return _config


def reload_config(profile: Optional[str] = None) -> ConfigurationProperties:
    """Discard the process-wide configuration and load it again."""
    global _config
    with _config_lock:
        _config = ConfigurationProperties(profile=profile)
    return _config


def log_config_sources(config: ConfigurationProperties, logger):
    """Log configuration keys grouped by the source that supplied them."""
    grouped: Dict[str, list] = {}
    for key, source in config.get_config_sources().items():
        grouped.setdefault(source, []).append(key)

    logger.info("Configuration sources:")
    for source, keys in grouped.items():
        logger.info(f"  [{source}]")
        for key in keys:
            logger.info(f"    {key}")

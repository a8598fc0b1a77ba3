"""Configuration management with YAML and environment variable support."""

import copy
import os
from typing import Any

import yaml

from chain_sdk_testkit.exceptions import ConfigError
from chain_sdk_testkit.logging_config import get_logger
from chain_sdk_testkit.validators import validate_base_url

logger = get_logger(__name__)


class ConfigManager:
    """Configuration manager for the test kit."""

    DEFAULT_CONFIG = {
        "client": {
            "base_url": "http://127.0.0.1:3000",
            "network": "TEST_NET",
            "timeout": 10,
        },
        "mock_server": {"host": "127.0.0.1", "lifetime": 300},
        "logging": {
            "level": "INFO",
            "file": None,
            "format": "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        },
    }

    def __init__(self, config_path: str | None = None):
        """Initialize configuration manager.

        Args:
            config_path: Path to config file (uses default or env var).
        """
        self.config_path: str = config_path or os.getenv(  # type: ignore[assignment]
            "TESTKIT_CONFIG_PATH", "testkit_config.yaml"
        )
        self.config: dict[str, Any] = copy.deepcopy(self.DEFAULT_CONFIG)

    def load(self) -> None:
        """Load configuration from YAML file, then apply env overrides."""
        if os.path.exists(self.config_path):
            try:
                with open(self.config_path) as f:
                    loaded_config = yaml.safe_load(f)
            except (OSError, yaml.YAMLError) as e:
                logger.warning(f"Failed to load config: {e}")
            else:
                if isinstance(loaded_config, dict):
                    self._merge(self.config, loaded_config)
        else:
            logger.info("Config file not found, using defaults")

        self._apply_env_overrides()

    def save(self) -> None:
        """Save configuration to YAML file."""
        try:
            with open(self.config_path, "w") as f:
                yaml.dump(self.config, f, default_flow_style=False, sort_keys=False)
        except OSError as e:
            logger.error(f"Failed to save config: {e}")

    def get(self, *keys: str) -> Any:
        """Get configuration value using dot notation.

        Args:
            *keys: Nested keys (e.g., "client", "base_url").

        Returns:
            Configuration value or None if not found.
        """
        value = self.config
        for key in keys:
            if isinstance(value, dict):
                value = value.get(key)
            else:
                return None
        return value

    def set(self, *keys: str, value: Any) -> None:
        """Set configuration value using dot notation.

        Args:
            *keys: Nested keys (e.g., "mock_server", "lifetime").
            value: Value to set.
        """
        config = self.config
        for key in keys[:-1]:
            if key not in config:
                config[key] = {}
            config = config[key]

        config[keys[-1]] = value

    @classmethod
    def _merge(cls, base: dict[str, Any], update: dict[str, Any]) -> None:
        for key, value in update.items():
            if isinstance(value, dict) and isinstance(base.get(key), dict):
                cls._merge(base[key], value)
            else:
                base[key] = value

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides.

        Environment variables:
            TESTKIT_BASE_URL
            TESTKIT_NETWORK
            TESTKIT_TIMEOUT
            TESTKIT_MOCK_LIFETIME
            TESTKIT_LOG_LEVEL
            TESTKIT_LOG_FILE
            TESTKIT_CONFIG_PATH (handled in __init__)
        """
        env_mappings = {
            "TESTKIT_BASE_URL": ("client", "base_url", str),
            "TESTKIT_NETWORK": ("client", "network", str),
            "TESTKIT_TIMEOUT": ("client", "timeout", int),
            "TESTKIT_MOCK_LIFETIME": ("mock_server", "lifetime", int),
            "TESTKIT_LOG_LEVEL": ("logging", "level", str),
            "TESTKIT_LOG_FILE": ("logging", "file", str),
        }

        for env_var, (section, key, type_converter) in env_mappings.items():
            value = os.getenv(env_var)
            if value is not None:
                if section not in self.config:
                    self.config[section] = {}

                try:
                    converted_value = type_converter(value)
                except ValueError:
                    logger.warning(f"Ignoring invalid {env_var}={value!r}")
                    continue
                self.config[section][key] = converted_value

    def validate(self) -> list[str]:
        """Validate configuration schema.

        Returns:
            List of validation errors (empty if valid).
        """
        from chain_sdk_testkit.client import NetworkType

        errors = []

        try:
            validate_base_url(self.get("client", "base_url"))
        except ConfigError as e:
            errors.append(f"client.base_url: {e.message}")

        network = self.get("client", "network")
        try:
            NetworkType.from_name(str(network))
        except ConfigError as e:
            errors.append(f"client.network: {e.message}")

        timeout = self.get("client", "timeout")
        if not isinstance(timeout, int) or timeout <= 0:
            errors.append("client.timeout must be a positive integer")

        lifetime = self.get("mock_server", "lifetime")
        if (
            isinstance(lifetime, bool)
            or not isinstance(lifetime, (int, float))
            or lifetime <= 0
        ):
            errors.append("mock_server.lifetime must be a positive number")

        return errors


# Global config manager instance
_config_manager: ConfigManager | None = None


def get_config_manager() -> ConfigManager:
    """Get global config manager instance, loaded and validated.

    Returns:
        ConfigManager instance.

    Raises:
        ConfigError: ERR_INVALID_SCHEMA if the loaded config is invalid.
    """
    global _config_manager
    if _config_manager is None:
        manager = ConfigManager()
        manager.load()
        errors = manager.validate()
        if errors:
            raise ConfigError(
                f"Invalid config in {manager.config_path}: {'; '.join(errors)}",
                ConfigError.ERR_INVALID_SCHEMA,
                hint="Fix the file or the TESTKIT_* environment overrides",
            )
        _config_manager = manager
    return _config_manager


def reset_config_manager() -> None:
    """Drop the global instance so the next access reloads it."""
    global _config_manager
    _config_manager = None

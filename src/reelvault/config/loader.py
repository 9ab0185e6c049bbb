"""Loading and caching of the ReelVault Settings.

Settings come from a TOML file (explicit path or one of the default
locations), with REELVAULT_* environment variables filling whatever the
file leaves out. A local .env file is read first and counts as environment.
"""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from dotenv import load_dotenv
from pydantic import ValidationError

from reelvault.config.models.settings import Settings
from reelvault.shared.errors import create_config_error

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATHS: tuple[Path, ...] = (
    Path("reelvault.toml"),
    Path("config/reelvault.toml"),
    Path.home() / ".reelvault" / "config.toml",
)


class SettingsLoader:
    """Thread-safe singleton manager for Settings.

    Uses double-checked locking pattern to ensure thread-safety
    while minimizing lock overhead.
    """

    _instance: Settings | None = None
    _lock: threading.RLock = threading.RLock()

    def get_config(self) -> Settings:
        """Get the global settings instance, loading it if necessary."""
        if self._instance is None:
            with self._lock:
                if self._instance is None:
                    self._instance = load_settings()

        return self._instance

    def reload_config(self, config_path: str | Path | None = None) -> Settings:
        """Reload the global settings instance from configuration files."""
        with self._lock:
            self._instance = load_settings(config_path)

        return self._instance


def _load_env_file(env_file: Path = Path(".env")) -> None:
    """Load environment variables from ``env_file`` when it exists."""
    if env_file.exists():
        load_dotenv(env_file, override=False)
        logger.debug("Loaded environment from %s", env_file)


def load_settings(config_path: str | Path | None = None) -> Settings:
    """Load settings from a TOML file or the environment.

    Args:
        config_path: Optional path to a TOML configuration file. If None,
            the default locations are tried before falling back to
            environment variables only.

    Raises:
        ApplicationError: If the file is missing or the values are invalid.
    """
    _load_env_file()

    try:
        if config_path:
            return Settings.from_toml_file(config_path)

        for candidate in DEFAULT_CONFIG_PATHS:
            if candidate.exists():
                return Settings.from_toml_file(candidate)

        return Settings()
    except FileNotFoundError as e:
        raise create_config_error(
            f"Configuration file not found: {config_path}",
            config_key="config_path",
            operation="load_settings",
            original_error=e,
        ) from e
    except (ValidationError, ValueError) as e:
        raise create_config_error(
            f"Invalid configuration: {e}",
            operation="load_settings",
            original_error=e,
        ) from e


# Global loader instance
_loader = SettingsLoader()


def get_config() -> Settings:
    """Get the global settings instance (thread-safe)."""
    return _loader.get_config()


def reload_config(config_path: str | Path | None = None) -> Settings:
    """Reload the global settings instance from configuration files."""
    return _loader.reload_config(config_path)


__all__ = ["SettingsLoader", "get_config", "load_settings", "reload_config"]

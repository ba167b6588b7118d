"""Configuration service for loading and saving config.yml."""

from __future__ import annotations

import logging
import os
from pathlib import Path

import yaml
from pydantic import ValidationError

from ..models import TtrakConfig

logger = logging.getLogger(__name__)

GITHUB_TOKEN_ENV = "GITHUB_TOKEN"
LINEAR_API_KEY_ENV = "LINEAR_API_KEY"


class ConfigService:
    """Service for loading, caching and persisting application configuration.

    ``update()`` is the only way configuration changes: callers derive a new
    snapshot from ``get_config()`` and hand it back here, where it is saved
    immediately. Concurrent writers would need external synchronization.
    """

    CONFIG_FILE = "config.yml"

    def __init__(self, config_dir: Path) -> None:
        """Initialize the config service.

        Args:
            config_dir: Directory holding config.yml
        """
        self.config_dir = config_dir
        self._config: TtrakConfig | None = None
        self._config_error: str | None = None

    @property
    def config_path(self) -> Path:
        return self.config_dir / self.CONFIG_FILE

    @property
    def has_config_error(self) -> bool:
        """Check if there was an error loading config."""
        return self._config_error is not None

    @property
    def config_error(self) -> str | None:
        """Get the config error message if any."""
        return self._config_error

    def get_config(self) -> TtrakConfig:
        """Get configuration, loading from file if not cached."""
        if self._config is None:
            self._config = self._apply_environment(self._load_config())
        return self._config

    def update(self, config: TtrakConfig) -> TtrakConfig:
        """Persist a new configuration snapshot and make it current.

        Raises:
            OSError: If the file could not be written.
        """
        self._write_config(self._strip_environment(config))
        self._config = config
        self._config_error = None
        logger.info("Configuration saved to %s", self.config_path)
        return config

    def reload(self) -> None:
        """Clear cached configuration, forcing reload on next access."""
        self._config = None
        self._config_error = None

    def _load_config(self) -> TtrakConfig:
        """Load configuration from file or return default."""
        self._config_error = None

        if not self.config_path.exists():
            logger.debug("No %s found, writing defaults", self.CONFIG_FILE)
            config = TtrakConfig.default()
            try:
                self._write_config(config)
            except OSError as e:
                logger.warning("Could not write default %s: %s", self.CONFIG_FILE, e)
            return config

        try:
            with self.config_path.open(encoding="utf-8") as f:
                data = yaml.safe_load(f)

            if data is None:
                self._config_error = f"{self.CONFIG_FILE} is empty"
                logger.warning(self._config_error)
                return TtrakConfig.default()

            config = TtrakConfig.model_validate(data)
            logger.info(
                "Loaded %s (providers=%s, sync=%s)",
                self.CONFIG_FILE,
                [p.value for p in config.configured_providers],
                config.sync_enabled,
            )
            return config

        except yaml.YAMLError as e:
            self._config_error = f"Invalid YAML in {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return TtrakConfig.default()

        except ValidationError as e:
            self._config_error = f"Invalid {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return TtrakConfig.default()

        except OSError as e:
            self._config_error = f"Error reading {self.CONFIG_FILE}: {e}"
            logger.warning(self._config_error)
            return TtrakConfig.default()

    def _write_config(self, config: TtrakConfig) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with self.config_path.open("w", encoding="utf-8") as f:
            yaml.safe_dump(config.to_document(), f, sort_keys=False)

    def _apply_environment(self, config: TtrakConfig) -> TtrakConfig:
        """Fill empty credentials from GITHUB_TOKEN / LINEAR_API_KEY."""
        github = config.integrations.github
        if github is not None and not github.token and os.environ.get(GITHUB_TOKEN_ENV):
            logger.debug("Using GitHub token from %s", GITHUB_TOKEN_ENV)
            github = github.model_copy(update={"token": os.environ[GITHUB_TOKEN_ENV]})

        linear = config.integrations.linear
        if linear is not None and not linear.api_key and os.environ.get(LINEAR_API_KEY_ENV):
            logger.debug("Using Linear API key from %s", LINEAR_API_KEY_ENV)
            linear = linear.model_copy(update={"api_key": os.environ[LINEAR_API_KEY_ENV]})

        integrations = config.integrations.model_copy(update={"github": github, "linear": linear})
        return config.model_copy(update={"integrations": integrations})

    def _strip_environment(self, config: TtrakConfig) -> TtrakConfig:
        """Keep credentials that came from the environment out of the file."""
        github = config.integrations.github
        env_token = os.environ.get(GITHUB_TOKEN_ENV)
        if github is not None and env_token and github.token == env_token:
            github = github.model_copy(update={"token": ""})

        linear = config.integrations.linear
        env_key = os.environ.get(LINEAR_API_KEY_ENV)
        if linear is not None and env_key and linear.api_key == env_key:
            linear = linear.model_copy(update={"api_key": ""})

        integrations = config.integrations.model_copy(update={"github": github, "linear": linear})
        return config.model_copy(update={"integrations": integrations})

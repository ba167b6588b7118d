"""Tests for ConfigService."""

from datetime import UTC, datetime
from pathlib import Path

import pytest
import yaml

from ttrak.models import GitHubIntegrationConfig, ProviderName
from ttrak.services import ConfigService

NOW = datetime(2025, 1, 15, 12, 0, tzinfo=UTC)


@pytest.fixture
def config_dir(tmp_path: Path) -> Path:
    return tmp_path / "ttrak"


@pytest.fixture(autouse=True)
def no_token_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real credentials in the environment out of these tests."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("LINEAR_API_KEY", raising=False)


class TestConfigServiceLoading:
    """Tests for ConfigService file loading."""

    def test_default_on_missing_file(self, config_dir: Path):
        """Missing config.yml returns the default config and writes it."""
        service = ConfigService(config_dir)
        config = service.get_config()

        assert config.configured_providers == []
        assert not config.sync_enabled
        assert not service.has_config_error
        assert (config_dir / "config.yml").exists()

    def test_load_valid_config(self, config_dir: Path):
        config_dir.mkdir()
        (config_dir / "config.yml").write_text(
            """
version: 1
integrations:
  github:
    token: ghp_abc
    repo: octo/hello
    sync_interval: 15
  sync:
    enabled: true
    last_sync:
      github: "2025-01-15T12:00:00Z"
theme:
  mode: catppuccin
  flavor: latte
default_view: todo
"""
        )

        service = ConfigService(config_dir)
        config = service.get_config()

        assert not service.has_config_error
        assert config.configured_providers == [ProviderName.GITHUB]
        assert config.sync_interval(ProviderName.GITHUB) == 15
        assert config.last_sync(ProviderName.GITHUB) == NOW
        assert config.theme.flavor == "latte"
        assert config.default_view == "todo"

    def test_empty_file_uses_default(self, config_dir: Path):
        config_dir.mkdir()
        (config_dir / "config.yml").write_text("")

        service = ConfigService(config_dir)
        config = service.get_config()

        assert config.configured_providers == []
        assert service.has_config_error
        assert "empty" in (service.config_error or "")

    def test_invalid_yaml_uses_default(self, config_dir: Path):
        """Config errors fall back to defaults instead of failing."""
        config_dir.mkdir()
        (config_dir / "config.yml").write_text("integrations: [unclosed")

        service = ConfigService(config_dir)
        config = service.get_config()

        assert config.configured_providers == []
        assert service.has_config_error
        assert "Invalid YAML" in (service.config_error or "")

    def test_invalid_values_use_default(self, config_dir: Path):
        config_dir.mkdir()
        (config_dir / "config.yml").write_text(
            "integrations:\n  github:\n    sync_interval: -5\n"
        )

        service = ConfigService(config_dir)

        assert service.get_config().configured_providers == []
        assert service.has_config_error

    def test_config_is_cached(self, config_dir: Path):
        service = ConfigService(config_dir)
        assert service.get_config() is service.get_config()

    def test_reload_rereads_file(self, config_dir: Path):
        service = ConfigService(config_dir)
        service.get_config()
        (config_dir / "config.yml").write_text("integrations:\n  linear:\n    api_key: k\n")

        service.reload()

        assert service.get_config().configured_providers == [ProviderName.LINEAR]


class TestConfigServiceEnvironment:
    """Tests for credential fallback to environment variables."""

    def test_empty_token_falls_back_to_env(
        self, config_dir: Path, monkeypatch: pytest.MonkeyPatch
    ):
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        monkeypatch.setenv("LINEAR_API_KEY", "env-key")
        config_dir.mkdir()
        (config_dir / "config.yml").write_text(
            "integrations:\n  github:\n    repo: o/r\n  linear: {}\n"
        )

        config = ConfigService(config_dir).get_config()

        assert config.integrations.github is not None
        assert config.integrations.github.token == "env-token"
        assert config.integrations.linear is not None
        assert config.integrations.linear.api_key == "env-key"

    def test_file_token_wins_over_env(self, config_dir: Path, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        config_dir.mkdir()
        (config_dir / "config.yml").write_text(
            "integrations:\n  github:\n    token: file-token\n    repo: o/r\n"
        )

        config = ConfigService(config_dir).get_config()

        assert config.integrations.github is not None
        assert config.integrations.github.token == "file-token"

    def test_env_token_not_written_back(self, config_dir: Path, monkeypatch: pytest.MonkeyPatch):
        """Saving never copies an environment credential into the file."""
        monkeypatch.setenv("GITHUB_TOKEN", "env-token")
        config_dir.mkdir()
        (config_dir / "config.yml").write_text("integrations:\n  github:\n    repo: o/r\n")

        service = ConfigService(config_dir)
        service.update(service.get_config().with_last_sync(ProviderName.GITHUB, NOW))

        saved = yaml.safe_load((config_dir / "config.yml").read_text())
        assert saved["integrations"]["github"]["token"] == ""
        assert service.get_config().integrations.github.token == "env-token"


class TestConfigServiceUpdate:
    """Tests for the single write path."""

    def test_update_persists_immediately(self, config_dir: Path):
        service = ConfigService(config_dir)
        new_config = service.get_config().with_integrations(
            GitHubIntegrationConfig(token="t", repo="o/r"), None
        )

        service.update(new_config)

        reloaded = ConfigService(config_dir).get_config()
        assert reloaded.configured_providers == [ProviderName.GITHUB]
        assert reloaded.sync_enabled
        assert service.get_config() is new_config

    def test_update_clears_previous_error(self, config_dir: Path):
        config_dir.mkdir()
        (config_dir / "config.yml").write_text("")
        service = ConfigService(config_dir)
        service.get_config()
        assert service.has_config_error

        service.update(service.get_config())

        assert not service.has_config_error

    def test_update_round_trips_last_sync(self, config_dir: Path):
        service = ConfigService(config_dir)
        service.update(
            service.get_config()
            .with_integrations(None, None)
            .with_last_sync(ProviderName.LINEAR, NOW)
        )

        assert ConfigService(config_dir).get_config().last_sync(ProviderName.LINEAR) == NOW

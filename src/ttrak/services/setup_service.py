"""Integration setup: credential checks and saving provider blocks."""

from __future__ import annotations

import logging
from dataclasses import dataclass

import httpx

from ..models import GitHubIntegrationConfig, LinearIntegrationConfig, TtrakConfig
from ..providers import ProviderAuthError, ProviderError, ProviderTransportError
from ..providers.github import GitHubClient
from ..providers.linear import LinearClient
from .config_service import ConfigService

logger = logging.getLogger(__name__)


class SetupError(ValueError):
    """Raised when setup input cannot be saved."""


@dataclass
class ValidationResult:
    """Outcome of a credential check, ready to show in the setup screen."""

    valid: bool
    message: str
    account: str | None = None  # GitHub login or Linear viewer name


class SetupService:
    """Validates provider credentials and saves the integration blocks.

    Saving goes through ConfigService.update() so the new configuration is
    on disk before the setup screen closes.
    """

    def __init__(
        self,
        config_service: ConfigService,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.config_service = config_service
        self._transport = transport

    def current_values(self) -> tuple[str, str, str]:
        """Prefill values: (GitHub token, GitHub repo, Linear API key)."""
        integrations = self.config_service.get_config().integrations
        github = integrations.github
        linear = integrations.linear
        return (
            github.token if github else "",
            github.repo if github else "",
            linear.api_key if linear else "",
        )

    async def validate_github(self, token: str) -> ValidationResult:
        """Check a GitHub token by looking up its user."""
        token = token.strip()
        if not token:
            return ValidationResult(False, "✗ GitHub token is empty")

        base_url = self._github_base_url()
        try:
            async with GitHubClient(token, base_url, transport=self._transport) as client:
                login = await client.get_authenticated_user()
        except ProviderTransportError:
            return ValidationResult(False, "✗ GitHub validation failed (network error)")
        except ProviderAuthError:
            return ValidationResult(False, "✗ GitHub token invalid")
        except ProviderError as e:
            logger.warning("GitHub token check failed: %s", e)
            return ValidationResult(False, f"✗ GitHub token invalid ({e.message})")

        logger.info("GitHub token valid for %s", login)
        return ValidationResult(True, f"✓ GitHub token valid ({login})", account=login)

    async def validate_linear(self, api_key: str) -> ValidationResult:
        """Check a Linear API key by looking up the viewer."""
        api_key = api_key.strip()
        if not api_key:
            return ValidationResult(False, "✗ Linear token is empty")

        api_url = self._linear_api_url()
        try:
            async with LinearClient(api_key, api_url, transport=self._transport) as client:
                viewer = await client.get_viewer()
        except ProviderTransportError:
            return ValidationResult(False, "✗ Linear validation failed (network error)")
        except ProviderError as e:
            logger.warning("Linear key check failed: %s", e)
            return ValidationResult(False, "✗ Linear token invalid")

        name = viewer.get("name") or viewer.get("id", "")
        logger.info("Linear API key valid for %s", name)
        return ValidationResult(True, f"✓ Linear token valid ({name})", account=name)

    def save(self, github_token: str, github_repo: str, linear_api_key: str) -> TtrakConfig:
        """Save the entered credentials and return the new config.

        GitHub is configured only when both token and repo are given and
        Linear only when a key is given; a cleared field removes the block.
        Other settings of a block that already exists are kept.

        Raises:
            SetupError: If the repo is not in owner/repo form
            OSError: If the config file could not be written
        """
        config = self.config_service.get_config()
        github_token = github_token.strip()
        github_repo = github_repo.strip()
        linear_api_key = linear_api_key.strip()

        github: GitHubIntegrationConfig | None = None
        if github_token and github_repo:
            existing = config.integrations.github or GitHubIntegrationConfig()
            github = existing.model_copy(update={"token": github_token, "repo": github_repo})
            if github.owner_and_name is None:
                raise SetupError(f'Invalid repo "{github_repo}". Expected "owner/repo"')

        linear: LinearIntegrationConfig | None = None
        if linear_api_key:
            existing_linear = config.integrations.linear or LinearIntegrationConfig()
            linear = existing_linear.model_copy(update={"api_key": linear_api_key})

        new_config = self.config_service.update(config.with_integrations(github, linear))
        logger.info(
            "Integrations saved: %s",
            [p.value for p in new_config.configured_providers] or "none",
        )
        return new_config

    def _github_base_url(self) -> str:
        github = self.config_service.get_config().integrations.github
        return github.base_url if github else GitHubIntegrationConfig().base_url

    def _linear_api_url(self) -> str:
        linear = self.config_service.get_config().integrations.linear
        return linear.api_url if linear else LinearIntegrationConfig().api_url

"""Tests for SetupService."""

from pathlib import Path

import httpx
import pytest

from ttrak.models import GitHubIntegrationConfig, ProviderName
from ttrak.services import ConfigService, SetupError, SetupService


@pytest.fixture(autouse=True)
def no_token_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("LINEAR_API_KEY", raising=False)


@pytest.fixture
def config_service(tmp_path: Path) -> ConfigService:
    return ConfigService(tmp_path / "ttrak")


def api_handler(request: httpx.Request) -> httpx.Response:
    """Accept the tokens "good" for both providers, reject everything else."""
    authorization = request.headers.get("authorization", "")
    if request.url.host == "api.github.com":
        if authorization != "Bearer good":
            return httpx.Response(401, json={"message": "Bad credentials"})
        return httpx.Response(200, json={"login": "octocat"})
    if authorization != "good":
        error = {
            "message": "Authentication required",
            "extensions": {"code": "AUTHENTICATION_ERROR"},
        }
        return httpx.Response(200, json={"errors": [error]})
    return httpx.Response(200, json={"data": {"viewer": {"id": "u1", "name": "Ada"}}})


def offline_handler(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("offline", request=request)


class TestSetupServiceValidation:
    """Tests for credential checks."""

    @pytest.mark.asyncio
    async def test_valid_github_token(self, config_service: ConfigService):
        service = SetupService(config_service, transport=httpx.MockTransport(api_handler))
        result = await service.validate_github("  good  ")

        assert result.valid
        assert result.account == "octocat"
        assert result.message == "✓ GitHub token valid (octocat)"

    @pytest.mark.asyncio
    async def test_invalid_github_token(self, config_service: ConfigService):
        service = SetupService(config_service, transport=httpx.MockTransport(api_handler))
        result = await service.validate_github("bad")

        assert not result.valid
        assert result.message == "✗ GitHub token invalid"

    @pytest.mark.asyncio
    async def test_empty_github_token_makes_no_request(self, config_service: ConfigService):
        service = SetupService(config_service, transport=httpx.MockTransport(offline_handler))
        result = await service.validate_github("   ")

        assert not result.valid
        assert result.message == "✗ GitHub token is empty"

    @pytest.mark.asyncio
    async def test_github_network_error(self, config_service: ConfigService):
        service = SetupService(config_service, transport=httpx.MockTransport(offline_handler))
        result = await service.validate_github("good")

        assert not result.valid
        assert "network error" in result.message

    @pytest.mark.asyncio
    async def test_valid_linear_key(self, config_service: ConfigService):
        service = SetupService(config_service, transport=httpx.MockTransport(api_handler))
        result = await service.validate_linear("good")

        assert result.valid
        assert result.message == "✓ Linear token valid (Ada)"

    @pytest.mark.asyncio
    async def test_invalid_linear_key(self, config_service: ConfigService):
        service = SetupService(config_service, transport=httpx.MockTransport(api_handler))
        result = await service.validate_linear("bad")

        assert not result.valid
        assert result.message == "✗ Linear token invalid"

    @pytest.mark.asyncio
    async def test_linear_network_error(self, config_service: ConfigService):
        service = SetupService(config_service, transport=httpx.MockTransport(offline_handler))
        result = await service.validate_linear("good")

        assert result.message == "✗ Linear validation failed (network error)"


class TestSetupServiceSave:
    """Tests for saving integration blocks."""

    def test_save_both_providers(self, config_service: ConfigService):
        service = SetupService(config_service)
        config = service.save(" ghp_x ", "acme/app", "lin_y")

        assert config.configured_providers == [ProviderName.GITHUB, ProviderName.LINEAR]
        assert config.sync_enabled
        assert service.current_values() == ("ghp_x", "acme/app", "lin_y")

        # Persisted, not just cached
        reloaded = ConfigService(config_service.config_dir).get_config()
        assert reloaded.configured_providers == [ProviderName.GITHUB, ProviderName.LINEAR]

    def test_github_requires_token_and_repo(self, config_service: ConfigService):
        service = SetupService(config_service)
        config = service.save("ghp_x", "", "")

        assert config.configured_providers == []
        assert not config.sync_enabled

    def test_clearing_field_removes_block(self, config_service: ConfigService):
        service = SetupService(config_service)
        service.save("ghp_x", "acme/app", "lin_y")
        config = service.save("ghp_x", "acme/app", "")

        assert config.configured_providers == [ProviderName.GITHUB]

    def test_existing_block_settings_kept(self, config_service: ConfigService):
        config = config_service.get_config()
        github = GitHubIntegrationConfig(token="old", repo="acme/app", sync_interval=45)
        config_service.update(config.with_integrations(github, None))

        updated = SetupService(config_service).save("new", "acme/other", "")

        assert updated.integrations.github is not None
        assert updated.integrations.github.token == "new"
        assert updated.integrations.github.repo == "acme/other"
        assert updated.integrations.github.sync_interval == 45

    def test_invalid_repo_rejected(self, config_service: ConfigService):
        service = SetupService(config_service)

        with pytest.raises(SetupError, match="owner/repo"):
            service.save("ghp_x", "just-a-name", "")

        assert config_service.get_config().configured_providers == []

    def test_current_values_empty(self, config_service: ConfigService):
        assert SetupService(config_service).current_values() == ("", "", "")

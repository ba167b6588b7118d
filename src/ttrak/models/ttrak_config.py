"""Configuration models for config.yml."""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_SYNC_INTERVAL = 30  # minutes


class ProviderName(str, Enum):
    """External task sources that can be synced."""

    GITHUB = "github"
    LINEAR = "linear"

    @property
    def label(self) -> str:
        """Human-readable provider name."""
        return "GitHub" if self is ProviderName.GITHUB else "Linear"


def _validate_interval(v: int) -> int:
    """Validate a sync interval is a positive number of minutes."""
    if v < 1:
        raise ValueError("sync_interval must be at least 1 minute")
    return v


class GitHubIntegrationConfig(BaseModel):
    """GitHub credentials and sync scope."""

    token: str = ""
    repo: str = Field(default="", description="Repository as owner/repo")
    sync_interval: int = DEFAULT_SYNC_INTERVAL
    sync_assigned_issues: bool = False
    sync_authored_prs: bool = True
    base_url: str = Field(
        default="https://api.github.com",
        description="REST API base URL (change for GitHub Enterprise)",
    )

    @field_validator("sync_interval")
    @classmethod
    def validate_interval(cls, v: int) -> int:
        return _validate_interval(v)

    @property
    def owner_and_name(self) -> tuple[str, str] | None:
        """Split repo into (owner, name), None if not in owner/repo form."""
        owner, _, name = self.repo.partition("/")
        if not owner or not name or "/" in name:
            return None
        return owner, name


class LinearIntegrationConfig(BaseModel):
    """Linear credentials and sync scope."""

    api_key: str = ""
    team_id: str | None = None
    sync_interval: int = DEFAULT_SYNC_INTERVAL
    sync_only_assigned: bool = True
    api_url: str = "https://api.linear.app/graphql"

    @field_validator("sync_interval")
    @classmethod
    def validate_interval(cls, v: int) -> int:
        return _validate_interval(v)


class SyncConfig(BaseModel):
    """Global sync switch and per-provider bookkeeping."""

    enabled: bool = False
    last_sync: dict[ProviderName, datetime] = Field(default_factory=dict)


class IntegrationsConfig(BaseModel):
    """Optional per-provider blocks. A missing block means not configured."""

    github: GitHubIntegrationConfig | None = None
    linear: LinearIntegrationConfig | None = None
    sync: SyncConfig | None = None


class ThemeConfig(BaseModel):
    """Display theme preferences."""

    mode: Literal["auto", "catppuccin", "system"] = "auto"
    flavor: Literal["latte", "frappe", "macchiato", "mocha"] = "mocha"


DefaultView = Literal["all", "todo", "inProgress", "done"]


class TtrakConfig(BaseModel):
    """Root configuration from config.yml.

    Instances are treated as immutable snapshots: the ``with_*`` helpers
    return a new config and ConfigService.update() is the single write path.
    """

    version: int = 1
    integrations: IntegrationsConfig = Field(default_factory=IntegrationsConfig)
    theme: ThemeConfig = Field(default_factory=ThemeConfig)
    default_view: DefaultView = "all"

    @property
    def sync_enabled(self) -> bool:
        """Whether sync is globally switched on."""
        return self.integrations.sync is not None and self.integrations.sync.enabled

    @property
    def configured_providers(self) -> list[ProviderName]:
        """Providers with a config block, in fixed order."""
        providers: list[ProviderName] = []
        if self.integrations.github is not None:
            providers.append(ProviderName.GITHUB)
        if self.integrations.linear is not None:
            providers.append(ProviderName.LINEAR)
        return providers

    def is_configured(self, provider: ProviderName) -> bool:
        return provider in self.configured_providers

    def sync_interval(self, provider: ProviderName) -> int | None:
        """Sync interval in minutes, None if the provider is not configured."""
        block = (
            self.integrations.github
            if provider is ProviderName.GITHUB
            else self.integrations.linear
        )
        return block.sync_interval if block is not None else None

    def last_sync(self, provider: ProviderName) -> datetime | None:
        """When the provider last synced successfully."""
        if self.integrations.sync is None:
            return None
        return self.integrations.sync.last_sync.get(provider)

    def with_last_sync(self, provider: ProviderName, when: datetime) -> TtrakConfig:
        """Return a copy with the provider's last sync time set."""
        sync = self.integrations.sync or SyncConfig(enabled=True)
        last_sync = {**sync.last_sync, provider: when}
        new_sync = sync.model_copy(update={"last_sync": last_sync})
        return self._with_integrations(sync=new_sync)

    def with_integrations(
        self,
        github: GitHubIntegrationConfig | None,
        linear: LinearIntegrationConfig | None,
    ) -> TtrakConfig:
        """Return a copy with provider blocks replaced.

        Sync is switched on when at least one provider is configured and the
        sync block is dropped when none are, keeping existing bookkeeping.
        """
        sync = self.integrations.sync
        if github is None and linear is None:
            sync = None
        elif sync is None:
            sync = SyncConfig(enabled=True)
        return self._with_integrations(github=github, linear=linear, sync=sync)

    def _with_integrations(self, **changes) -> TtrakConfig:
        integrations = self.integrations.model_copy(update=changes)
        return self.model_copy(update={"integrations": integrations})

    def to_document(self) -> dict:
        """Convert to a YAML-safe dict."""
        return self.model_dump(mode="json", exclude_none=True)

    @classmethod
    def default(cls) -> TtrakConfig:
        """Return default configuration: no providers, sync disabled."""
        return cls()

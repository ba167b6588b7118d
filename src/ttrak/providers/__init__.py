"""Provider adapters for external task sources."""

from ..models import ProviderName, TtrakConfig
from .errors import (
    ProviderAuthError,
    ProviderConfigError,
    ProviderError,
    ProviderForbiddenError,
    ProviderNotFoundError,
    ProviderRateLimitError,
    ProviderTransportError,
)
from .github import GitHubAdapter
from .linear import LinearAdapter
from .protocol import ProviderAdapter


def build_adapters(config: TtrakConfig) -> dict[ProviderName, ProviderAdapter]:
    """Create an adapter for every configured provider."""
    adapters: dict[ProviderName, ProviderAdapter] = {}
    if config.integrations.github is not None:
        adapters[ProviderName.GITHUB] = GitHubAdapter(config.integrations.github)
    if config.integrations.linear is not None:
        adapters[ProviderName.LINEAR] = LinearAdapter(config.integrations.linear)
    return adapters


__all__ = [
    "GitHubAdapter",
    "LinearAdapter",
    "ProviderAdapter",
    "ProviderAuthError",
    "ProviderConfigError",
    "ProviderError",
    "ProviderForbiddenError",
    "ProviderNotFoundError",
    "ProviderRateLimitError",
    "ProviderTransportError",
    "build_adapters",
]

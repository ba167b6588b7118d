"""Errors raised by provider clients and adapters.

Every provider failure is a ProviderError so the sync engine can catch one
type at the adapter boundary while the UI still tells the kinds apart.
"""

from __future__ import annotations

from datetime import datetime

from ..models import ProviderName


class ProviderError(Exception):
    """Base exception for provider errors."""

    def __init__(self, provider: ProviderName, message: str) -> None:
        super().__init__(message)
        self.provider = provider
        self.message = message


class ProviderAuthError(ProviderError):
    """Authentication failed (bad or missing credentials)."""

    pass


class ProviderForbiddenError(ProviderError):
    """Credentials lack permission for the resource."""

    pass


class ProviderNotFoundError(ProviderError):
    """Resource not found."""

    pass


class ProviderRateLimitError(ProviderError):
    """Rate limit exceeded."""

    def __init__(
        self,
        provider: ProviderName,
        message: str,
        reset_at: datetime | None = None,
    ) -> None:
        super().__init__(provider, message)
        self.reset_at = reset_at


class ProviderTransportError(ProviderError):
    """Network failure or timeout before a response was received."""

    pass


class ProviderConfigError(ProviderError):
    """Provider configuration is incomplete or malformed."""

    pass

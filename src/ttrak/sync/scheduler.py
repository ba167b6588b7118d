"""Sync scheduling: when each provider is due for another fetch."""

from __future__ import annotations

import logging
from datetime import datetime

from ..models import ProviderName, TtrakConfig
from ..utils import minutes_between, now_utc

logger = logging.getLogger(__name__)


def is_provider_due(
    config: TtrakConfig,
    provider: ProviderName,
    now: datetime | None = None,
) -> bool:
    """A provider is due if configured and never synced or its interval has passed."""
    interval = config.sync_interval(provider)
    if interval is None:
        return False

    last = config.last_sync(provider)
    if last is None:
        return True

    elapsed = minutes_between(last, now or now_utc())
    logger.debug("%s last synced %.1f min ago (interval %d)", provider.value, elapsed, interval)
    return elapsed > interval


def due_providers(config: TtrakConfig, now: datetime | None = None) -> list[ProviderName]:
    """Configured providers that are due, ignoring the global switch."""
    now = now or now_utc()
    return [p for p in config.configured_providers if is_provider_due(config, p, now)]


def is_sync_due(config: TtrakConfig, now: datetime | None = None) -> bool:
    """Sync is due if enabled and at least one configured provider is due."""
    if not config.sync_enabled:
        return False
    return bool(due_providers(config, now))


def mark_synced(
    config: TtrakConfig,
    provider: ProviderName,
    now: datetime | None = None,
) -> TtrakConfig:
    """Return a config snapshot recording a successful sync at ``now``.

    Only call after the provider's fetch finished without error; a fetch
    that merged zero changes still counts.
    """
    return config.with_last_sync(provider, now or now_utc())

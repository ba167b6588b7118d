"""Sync engine: fetch from due providers, merge, persist.

One cycle:
1. decide which providers run (all configured ones when forced, otherwise
   the due ones, and nothing when sync is disabled)
2. fetch from them concurrently and wait for every fetch to settle
3. merge the successful batches one provider at a time
4. record the sync time of each provider that succeeded, on the config
   as it is at the end of the cycle
5. save the task collection if it changed and the config if any provider
   succeeded

A failing provider never blocks the others: its error lands in the report
and its last sync time is left alone, so it is retried next cycle.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable, Mapping
from datetime import datetime
from typing import TYPE_CHECKING

from ..models import DataStore, ProviderFailure, ProviderName, SyncReport, Task, TtrakConfig
from ..providers import ProviderAdapter, ProviderError, ProviderRateLimitError, build_adapters
from ..utils import now_utc
from .merge import merge_tasks
from .scheduler import due_providers, is_sync_due, mark_synced

if TYPE_CHECKING:
    from ..repositories import TaskStoreProtocol
    from ..services.config_service import ConfigService

logger = logging.getLogger(__name__)

AdapterFactory = Callable[[TtrakConfig], Mapping[ProviderName, ProviderAdapter]]


class SyncEngine:
    """Runs sync cycles against the shared task collection.

    The collection is the same DataStore the view and TaskService work on.
    Cycles are serialized with a lock so a manual sync cannot interleave with
    another one between merge and save.
    """

    def __init__(
        self,
        config_service: ConfigService,
        repository: TaskStoreProtocol,
        adapter_factory: AdapterFactory = build_adapters,
    ) -> None:
        """Initialize the sync engine.

        Args:
            config_service: Source of the config snapshot and its write path
            repository: Where the task collection is saved
            adapter_factory: Builds adapters for the configured providers
        """
        self._config_service = config_service
        self._repository = repository
        self._adapter_factory = adapter_factory
        self._lock = asyncio.Lock()

    @property
    def is_running(self) -> bool:
        """Whether a cycle is in progress."""
        return self._lock.locked()

    def should_sync(self, now: datetime | None = None) -> bool:
        """Whether an unforced run would contact any provider."""
        return is_sync_due(self._config_service.get_config(), now)

    async def run(self, store: DataStore, force: bool = False) -> SyncReport:
        """Run one sync cycle.

        Args:
            store: Task collection to merge into; ``store.tasks`` is replaced
                with the merged list
            force: Sync every configured provider regardless of schedule
                and the global switch

        Raises:
            OSError: If the collection or config could not be saved
        """
        async with self._lock:
            return await self._run(store, force)

    async def _run(self, store: DataStore, force: bool) -> SyncReport:
        config = self._config_service.get_config()
        now = now_utc()

        if force:
            providers = list(config.configured_providers)
        elif is_sync_due(config, now):
            providers = due_providers(config, now)
        else:
            logger.debug("Sync not due, skipping")
            return SyncReport()

        report = SyncReport(attempted=providers)
        if not providers:
            logger.info("No providers configured, nothing to sync")
            return report

        adapters = self._adapter_factory(config)
        logger.info("Sync starting: %s", ", ".join(p.value for p in providers))

        results = await asyncio.gather(
            *(self._fetch(adapters, provider, config) for provider in providers),
            return_exceptions=True,
        )

        incoming: dict[ProviderName, list[Task]] = {}
        for provider, result in zip(providers, results, strict=True):
            if isinstance(result, Exception):
                failure = self._to_failure(provider, result)
                logger.error("Sync failed for %s", failure)
                report.failures.append(failure)
            elif isinstance(result, BaseException):
                raise result
            else:
                incoming[provider] = result
                report.succeeded.append(provider)

        merged = merge_tasks(incoming, store.tasks)
        report.added_ids = merged.added_ids
        report.updated_ids = merged.updated_ids

        if merged.changed:
            self._repository.save(store.model_copy(update={"tasks": merged.tasks}))
            store.tasks = merged.tasks

        if report.succeeded:
            self._record_sync(report.succeeded, now)

        logger.info(
            "Sync finished: %d added, %d updated, %d failed",
            len(report.added_ids),
            len(report.updated_ids),
            len(report.failures),
        )
        return report

    def _record_sync(self, providers: list[ProviderName], now: datetime) -> None:
        """Save last sync times on top of the config as it is now.

        The config can change while fetches are awaited (the setup screen
        saves through the same ConfigService), so the snapshot taken at the
        start of the cycle is not written back. Providers removed in the
        meantime are not recorded.
        """
        config = self._config_service.get_config()
        for provider in providers:
            if config.is_configured(provider):
                config = mark_synced(config, provider, now)
        self._config_service.update(config)

    async def _fetch(
        self,
        adapters: Mapping[ProviderName, ProviderAdapter],
        provider: ProviderName,
        config: TtrakConfig,
    ) -> list[Task]:
        adapter = adapters.get(provider)
        if adapter is None:
            raise ProviderError(provider, "No adapter available")
        since = config.last_sync(provider)
        logger.debug("Fetching %s (since=%s)", provider.value, since)
        return await adapter.fetch(since)

    @staticmethod
    def _to_failure(provider: ProviderName, error: Exception) -> ProviderFailure:
        if isinstance(error, ProviderError):
            reset_at = error.reset_at if isinstance(error, ProviderRateLimitError) else None
            return ProviderFailure(provider, error.message, error=error, reset_at=reset_at)
        # Unexpected payloads (validation, missing keys) stay isolated too
        logger.debug("Unexpected %s error", provider.value, exc_info=error)
        return ProviderFailure(provider, str(error) or type(error).__name__, error=error)

"""Synchronization: merge engine, scheduler and sync engine."""

from .engine import SyncEngine
from .merge import merge_tasks
from .scheduler import due_providers, is_provider_due, is_sync_due, mark_synced

__all__ = [
    "SyncEngine",
    "due_providers",
    "is_provider_due",
    "is_sync_due",
    "mark_synced",
    "merge_tasks",
]

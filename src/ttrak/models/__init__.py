"""Data models."""

from .store import DataStore
from .sync import MergeResult, ProviderFailure, SyncReport
from .task import (
    STATUS_CYCLE,
    GitHubItemType,
    GitHubMetadata,
    LinearMetadata,
    Task,
    TaskPriority,
    TaskSource,
    TaskStatus,
)
from .ttrak_config import (
    GitHubIntegrationConfig,
    IntegrationsConfig,
    LinearIntegrationConfig,
    ProviderName,
    SyncConfig,
    ThemeConfig,
    TtrakConfig,
)

__all__ = [
    "STATUS_CYCLE",
    "DataStore",
    "GitHubIntegrationConfig",
    "GitHubItemType",
    "GitHubMetadata",
    "IntegrationsConfig",
    "LinearIntegrationConfig",
    "LinearMetadata",
    "MergeResult",
    "ProviderFailure",
    "ProviderName",
    "SyncConfig",
    "SyncReport",
    "Task",
    "TaskPriority",
    "TaskSource",
    "TaskStatus",
    "ThemeConfig",
    "TtrakConfig",
]

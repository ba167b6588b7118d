"""Result records produced by the merge engine and sync engine."""

from dataclasses import dataclass, field
from datetime import datetime

from .task import Task
from .ttrak_config import ProviderName


@dataclass
class MergeResult:
    """Outcome of merging fetched tasks into the collection."""

    tasks: list[Task] = field(default_factory=list)  # Updated collection
    added_ids: list[str] = field(default_factory=list)  # Display ids appended
    updated_ids: list[str] = field(default_factory=list)  # External ids replaced

    @property
    def changed(self) -> bool:
        """Whether the merge touched the collection."""
        return bool(self.added_ids or self.updated_ids)


@dataclass
class ProviderFailure:
    """A provider that failed during one sync cycle."""

    provider: ProviderName
    message: str
    error: BaseException | None = None
    reset_at: datetime | None = None  # Rate-limit reset hint, when known

    def __str__(self) -> str:
        return f"{self.provider.label}: {self.message}"


@dataclass
class SyncReport:
    """Result of one sync cycle across all providers."""

    attempted: list[ProviderName] = field(default_factory=list)
    succeeded: list[ProviderName] = field(default_factory=list)
    failures: list[ProviderFailure] = field(default_factory=list)
    added_ids: list[str] = field(default_factory=list)
    updated_ids: list[str] = field(default_factory=list)

    @property
    def errors(self) -> list[str]:
        """One "<Provider>: <message>" entry per failed provider."""
        return [str(failure) for failure in self.failures]

    @property
    def has_errors(self) -> bool:
        """Whether any provider failed."""
        return len(self.failures) > 0

    @property
    def changed(self) -> bool:
        """Whether the task collection changed."""
        return bool(self.added_ids or self.updated_ids)

    @property
    def skipped(self) -> bool:
        """Whether no provider was attempted (sync not due or disabled)."""
        return not self.attempted

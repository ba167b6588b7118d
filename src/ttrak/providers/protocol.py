"""Protocol shared by the provider adapters."""

from datetime import datetime
from typing import Protocol

from ..models import ProviderName, Task


class ProviderAdapter(Protocol):
    """Fetches remote items from one provider as Task records.

    Adapters never touch the local collection. Failures are raised as
    ProviderError subclasses and handled by the caller.
    """

    name: ProviderName

    async def fetch(self, since: datetime | None = None) -> list[Task]:
        """Fetch tasks from the provider.

        Args:
            since: Only items changed after this point are needed. Providers
                may ignore it and return everything; re-fetching unchanged
                items is harmless.

        Returns:
            Task records with source, externalId and metadata populated,
            at most one per externalId.
        """
        ...

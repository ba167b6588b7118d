"""Merge engine: folds fetched provider tasks into the task collection.

Rules, applied per incoming task in arrival order:

- tasks without an external id are skipped
- within one provider batch, duplicate external ids collapse to the last one
- unknown external id: the task is appended as-is
- known external id with a strictly newer ``updated_at``: every field is
  taken from the incoming task except ``status`` and ``priority``, which
  belong to the local side
- anything else leaves the collection unchanged

Because replacement requires a strictly newer timestamp and the stored task
inherits that timestamp, merging the same batch twice changes nothing the
second time. Merge only adds and updates; tasks deleted locally come back on
the next sync if the provider still returns them.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping, Sequence

from ..models import MergeResult, ProviderName, Task

logger = logging.getLogger(__name__)

# Fields the local side owns once a synced task exists in the collection
LOCAL_OWNED_FIELDS = ("status", "priority")


def dedupe_batch(incoming: Iterable[Task]) -> list[tuple[str, Task]]:
    """Collapse tasks sharing an external id, last one wins.

    Returns (external id, task) pairs. Tasks without an external id are
    dropped. First-seen order is kept.
    """
    by_external_id: dict[str, Task] = {}
    for task in incoming:
        if not task.external_id:
            logger.debug("Skipping incoming task without externalId: %s", task.id)
            continue
        by_external_id[task.external_id] = task
    return list(by_external_id.items())


def build_index(tasks: Sequence[Task]) -> dict[str, int]:
    """Map external id -> position in the collection."""
    index: dict[str, int] = {}
    for position, task in enumerate(tasks):
        if task.external_id:
            index.setdefault(task.external_id, position)
    return index


def merge_task(existing: Task, incoming: Task) -> Task | None:
    """Merged version of a matched task, or None if incoming is not newer."""
    if incoming.updated_at <= existing.updated_at:
        return None
    return incoming.model_copy(
        update={field: getattr(existing, field) for field in LOCAL_OWNED_FIELDS}
    )


def merge_batch(
    incoming: Iterable[Task],
    tasks: list[Task],
    index: dict[str, int],
    result: MergeResult,
) -> None:
    """Merge one provider's batch into ``tasks`` in place.

    ``index`` must describe ``tasks`` and is kept current as tasks are
    appended.
    """
    for external_id, task in dedupe_batch(incoming):
        position = index.get(external_id)
        if position is None:
            index[external_id] = len(tasks)
            tasks.append(task)
            result.added_ids.append(task.id)
            continue

        merged = merge_task(tasks[position], task)
        if merged is not None:
            tasks[position] = merged
            result.updated_ids.append(external_id)


def merge_tasks(
    incoming_by_provider: Mapping[ProviderName, Sequence[Task]],
    current: Sequence[Task],
) -> MergeResult:
    """Merge every provider's batch into a copy of the collection.

    Providers are applied one after another; ``current`` is never mutated.
    """
    tasks = list(current)
    index = build_index(tasks)
    result = MergeResult(tasks=tasks)

    for provider, incoming in incoming_by_provider.items():
        before_added = len(result.added_ids)
        before_updated = len(result.updated_ids)
        merge_batch(incoming, tasks, index, result)
        logger.info(
            "Merged %s: %d added, %d updated",
            provider.label,
            len(result.added_ids) - before_added,
            len(result.updated_ids) - before_updated,
        )

    return result

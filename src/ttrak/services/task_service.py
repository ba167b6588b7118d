"""Service for local task CRUD operations."""

from __future__ import annotations

import logging

from ..models import STATUS_CYCLE, DataStore, Task, TaskPriority, TaskSource, TaskStatus
from ..models.task import LOCAL_PREFIX, TITLE_MAX_LENGTH
from ..repositories import TaskStoreProtocol
from ..utils import now_utc

logger = logging.getLogger(__name__)


class TaskValidationError(ValueError):
    """Raised when user input is rejected before touching the collection."""


class TaskService:
    """Service for task CRUD operations.

    Works on the in-memory collection shared with the view and the sync
    engine. Every mutation saves the whole collection first and only then
    becomes visible in memory, so a failed save (which propagates) leaves
    the collection as it was.
    """

    def __init__(self, repository: TaskStoreProtocol, store: DataStore | None = None) -> None:
        self.repository = repository
        self.store = store if store is not None else repository.load()

    @property
    def tasks(self) -> list[Task]:
        return self.store.tasks

    def get_task(self, task_id: str) -> Task | None:
        """Get a task by ID."""
        return self.store.find(task_id)

    def get_all_tasks(self) -> list[Task]:
        """Get all tasks in display order."""
        return list(self.store.tasks)

    def next_local_id(self) -> str:
        """Next LOCAL-<n> id: one past the highest existing local number."""
        numbers = [n for task in self.store.tasks if (n := task.local_number) is not None]
        return f"{LOCAL_PREFIX}-{max(numbers, default=0) + 1}"

    def create_task(
        self,
        title: str,
        status: TaskStatus | str = TaskStatus.TODO,
        priority: TaskPriority | str = TaskPriority.NONE,
    ) -> Task:
        """
        Create a new local task at the top of the list.

        Raises:
            TaskValidationError: If the title is empty or too long.
            OSError: If the collection could not be saved.
        """
        title = self._validate_title(title)
        now = now_utc()

        task = Task(
            id=self.next_local_id(),
            title=title,
            status=TaskStatus(status),
            priority=TaskPriority(priority),
            source=TaskSource.LOCAL,
            created_at=now,
            updated_at=now,
        )

        self._commit([task, *self.store.tasks])
        logger.info("Task created: %s (status=%s)", task.id, task.status.value)
        return task

    def edit_task(
        self,
        task_id: str,
        title: str,
        status: TaskStatus | str,
        priority: TaskPriority | str,
    ) -> Task | None:
        """
        Overwrite title, status and priority of a task.

        Source, external id and provider metadata are left untouched.
        Returns the updated task, or None if no task has that id.

        Raises:
            TaskValidationError: If the title is empty or too long.
            OSError: If the collection could not be saved.
        """
        title = self._validate_title(title)
        index = self.store.index_of(task_id)
        if index is None:
            logger.warning("Edit ignored, task not found: %s", task_id)
            return None

        task = self.store.tasks[index].model_copy(
            update={
                "title": title,
                "status": TaskStatus(status),
                "priority": TaskPriority(priority),
                "updated_at": now_utc(),
            }
        )
        self._replace(index, task)
        logger.info("Task updated: %s", task_id)
        return task

    def delete_task(self, task_id: str) -> bool:
        """Delete a task by ID. Returns False if it did not exist."""
        index = self.store.index_of(task_id)
        if index is None:
            return False

        logger.info("Deleting task: %s", task_id)
        tasks = list(self.store.tasks)
        del tasks[index]
        self._commit(tasks)
        return True

    def cycle_status(self, task_id: str) -> Task | None:
        """Advance status todo -> inProgress -> done -> todo.

        Cancelled tasks restart at todo.
        """
        index = self.store.index_of(task_id)
        if index is None:
            return None

        current = self.store.tasks[index]
        if current.status in STATUS_CYCLE:
            next_idx = (STATUS_CYCLE.index(current.status) + 1) % len(STATUS_CYCLE)
            new_status = STATUS_CYCLE[next_idx]
        else:
            new_status = STATUS_CYCLE[0]

        task = current.model_copy(update={"status": new_status, "updated_at": now_utc()})
        self._replace(index, task)
        logger.debug("Task %s status: %s -> %s", task_id, current.status.value, new_status.value)
        return task

    def _validate_title(self, title: str) -> str:
        title = (title or "").strip()
        if not title:
            raise TaskValidationError("Title cannot be empty")
        if len(title) > TITLE_MAX_LENGTH:
            raise TaskValidationError(f"Title cannot exceed {TITLE_MAX_LENGTH} characters")
        return title

    def _replace(self, index: int, task: Task) -> None:
        tasks = list(self.store.tasks)
        tasks[index] = task
        self._commit(tasks)

    def _commit(self, tasks: list[Task]) -> None:
        """Save ``tasks`` as the collection, then adopt them in memory."""
        self.repository.save(self.store.model_copy(update={"tasks": tasks}))
        self.store.tasks = tasks

"""Persisted task collection."""

from pydantic import BaseModel, ConfigDict, Field

from .task import Task

DATA_SCHEMA_URL = "https://raw.githubusercontent.com/esau-morais/ttrak/main/data.schema.json"
DATA_VERSION = 1


class DataStore(BaseModel):
    """The document stored in data.json.

    Task order is insertion order and doubles as the default display order.
    """

    model_config = ConfigDict(populate_by_name=True)

    schema_ref: str = Field(default=DATA_SCHEMA_URL, alias="$schema")
    version: int = DATA_VERSION
    tasks: list[Task] = Field(default_factory=list)

    def find(self, task_id: str) -> Task | None:
        """Get a task by display id."""
        for task in self.tasks:
            if task.id == task_id:
                return task
        return None

    def index_of(self, task_id: str) -> int | None:
        """Position of a task by display id."""
        for i, task in enumerate(self.tasks):
            if task.id == task_id:
                return i
        return None

    def to_document(self) -> dict:
        """Convert to the JSON-ready dict written to disk."""
        return {
            "$schema": self.schema_ref,
            "version": self.version,
            "tasks": [task.to_document() for task in self.tasks],
        }

"""Repository layer for data access."""

from .json_store import JsonTaskStore
from .protocol import TaskStoreProtocol

__all__ = [
    "JsonTaskStore",
    "TaskStoreProtocol",
]

"""Screen components."""

from .setup import SetupScreen
from .task_list import TaskListScreen

__all__ = [
    "SetupScreen",
    "TaskListScreen",
]

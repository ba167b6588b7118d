"""Widget components."""

from .command_bar import CommandBar
from .confirm_modal import ConfirmModal
from .task_list import EmptyListMessage, TaskList
from .task_modal import TaskFormResult, TaskModal
from .task_row import TaskRow
from .view_tabs import ViewTabs

__all__ = [
    "CommandBar",
    "ConfirmModal",
    "EmptyListMessage",
    "TaskFormResult",
    "TaskList",
    "TaskModal",
    "TaskRow",
    "ViewTabs",
]

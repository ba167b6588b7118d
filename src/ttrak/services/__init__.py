"""Service layer for business logic."""

from .config_service import ConfigService
from .filter_service import Filter, FilterService
from .setup_service import SetupError, SetupService, ValidationResult
from .task_service import TaskService, TaskValidationError

__all__ = [
    "ConfigService",
    "Filter",
    "FilterService",
    "SetupError",
    "SetupService",
    "TaskService",
    "TaskValidationError",
    "ValidationResult",
]

"""Linear provider."""

from .adapter import LinearAdapter, infer_priority_from_linear, map_linear_state, transform_issue
from .client import LinearClient

__all__ = [
    "LinearAdapter",
    "LinearClient",
    "infer_priority_from_linear",
    "map_linear_state",
    "transform_issue",
]

"""GitHub provider."""

from .adapter import GitHubAdapter, infer_priority_from_labels, map_github_state, transform_issue
from .client import GitHubClient, RateLimit

__all__ = [
    "GitHubAdapter",
    "GitHubClient",
    "RateLimit",
    "infer_priority_from_labels",
    "map_github_state",
    "transform_issue",
]

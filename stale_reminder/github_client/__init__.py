"""GitHub client package for API interaction."""

from .client import GitHubClient
from .models import OpenIssue, ProjectCard, TimelineSignal

__all__ = [
    "GitHubClient",
    "OpenIssue",
    "ProjectCard",
    "TimelineSignal",
]

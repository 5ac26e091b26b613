"""Git platform adapters (base and GitHub implementation)."""

from daebot.adapters.base import GitPlatformAdapter, GitPlatformError
from daebot.adapters.github import GitHubAdapter

__all__ = ["GitPlatformAdapter", "GitPlatformError", "GitHubAdapter"]

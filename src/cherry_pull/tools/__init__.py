"""External collaborators used by the workflow: git and HTTP."""

from .fetch import PatchFetcher
from .vcs import GitError, GitRepository

__all__ = [
    "GitError",
    "GitRepository",
    "PatchFetcher",
]

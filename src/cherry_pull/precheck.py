"""Precondition gate run before the workflow mutates anything."""

from __future__ import annotations

from .errors import DirtyTreeError, RebaseInProgressError
from .tools.vcs import GitRepository


def check_repo_state(repo: GitRepository) -> None:
    """Fail fast unless the working tree is clean and no ``am``/rebase session is open."""

    if not repo.is_clean(include_untracked=True):
        raise DirtyTreeError("Dirty tree. Clean up and try again.")
    if repo.am_in_progress():
        raise RebaseInProgressError("'git rebase' or 'git am' in progress. Clean up and try again.")


__all__ = ["check_repo_state"]

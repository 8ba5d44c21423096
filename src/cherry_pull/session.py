"""Run context that always returns the operator to their starting branch."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable, Iterator

from .tools.vcs import GitError, GitRepository

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SessionState:
    """Flags describing what cleanup has to undo.

    ``apply_open`` is set while a ``git am`` session may be open and
    ``cleanup_branch`` names the working branch to delete on exit.
    """

    starting_branch: str
    apply_open: bool = False
    cleanup_branch: str | None = None

    def preserve_branch(self) -> None:
        """Keep the working branch after exit."""

        self.cleanup_branch = None


@contextmanager
def cherry_pick_session(
    repo: GitRepository,
    starting_branch: str,
    *,
    echo: Callable[[str], None] | None = None,
) -> Iterator[SessionState]:
    """Yield a :class:`SessionState` and clean up on every exit path.

    The cleanup aborts an open ``git am`` session, checks out
    ``starting_branch`` and deletes the working branch. Each step is best
    effort so the error that ended the run stays the visible one.
    """

    state = SessionState(starting_branch=starting_branch)
    try:
        yield state
    finally:
        if echo is not None:
            echo("")
            echo(f"+++ Returning you to the {starting_branch} branch and cleaning up.")
        restore_starting_point(repo, state)


def restore_starting_point(repo: GitRepository, state: SessionState) -> None:
    LOGGER.info("Returning to %s and cleaning up", state.starting_branch)
    if state.apply_open:
        _best_effort(repo.am_abort)
        state.apply_open = False
    _best_effort(repo.checkout, state.starting_branch, force=True)
    if state.cleanup_branch:
        _best_effort(repo.delete_branch, state.cleanup_branch)
        state.cleanup_branch = None


def _best_effort(action, *args, **kwargs) -> None:
    try:
        action(*args, **kwargs)
    except (GitError, OSError) as error:
        LOGGER.debug("Ignoring cleanup failure: %s", error)


__all__ = ["SessionState", "cherry_pick_session", "restore_starting_point"]

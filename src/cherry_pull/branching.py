"""Working branch naming and creation."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from .errors import RefNotFoundError
from .session import SessionState
from .tools.vcs import GitRepository

LOGGER = logging.getLogger(__name__)

DEFAULT_BRANCH_PREFIX = "automated-cherry-pick-of"


@dataclass(frozen=True, slots=True)
class WorkingBranch:
    """Names used for one cherry-pick attempt.

    ``remote_name`` is the branch proposed upstream; ``local_name`` adds a
    timestamp so repeated runs never collide locally.
    """

    remote_name: str
    local_name: str


def working_branch_names(
    pull: str,
    base: str,
    *,
    timestamp: int | None = None,
    prefix: str = DEFAULT_BRANCH_PREFIX,
) -> WorkingBranch:
    remote_name = f"{prefix}-#{pull}-on-{base}".replace("/", "-")
    stamp = int(time.time()) if timestamp is None else timestamp
    return WorkingBranch(remote_name=remote_name, local_name=f"{remote_name}-{stamp}")


def prepare_branch(
    repo: GitRepository,
    session: SessionState,
    pull: str,
    base: str,
    *,
    timestamp: int | None = None,
    prefix: str = DEFAULT_BRANCH_PREFIX,
) -> WorkingBranch:
    """Create the working branch off ``base`` and register it for cleanup."""

    if repo.resolve_ref(base) is None:
        raise RefNotFoundError(
            f"'{base}' not found. The second argument should be something like upstream/release-0.21.\n"
            "    (In particular, it needs to be a valid, existing remote branch that I can 'git checkout'.)"
        )

    branch = working_branch_names(pull, base, timestamp=timestamp, prefix=prefix)
    LOGGER.info("Creating %s from %s", branch.local_name, base)
    repo.create_branch(branch.local_name, base)
    session.cleanup_branch = branch.local_name
    return branch


__all__ = ["DEFAULT_BRANCH_PREFIX", "WorkingBranch", "prepare_branch", "working_branch_names"]

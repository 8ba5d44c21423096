"""Push the finished working branch, or explain how to when it is unsafe."""

from __future__ import annotations

import enum
import logging
from typing import Callable

from .branching import WorkingBranch
from .errors import OperatorAbortedError
from .resolver import PROCEED_PROMPT, is_affirmative
from .session import SessionState
from .tools.vcs import GitRepository

LOGGER = logging.getLogger(__name__)


class PublishResult(str, enum.Enum):
    PUSHED = "pushed"
    MANUAL = "manual"


def remote_matches(repo: GitRepository, remote: str, disallowed: str) -> bool:
    """Return ``True`` when ``remote`` points at the ``disallowed`` location."""

    for line in repo.remote_lines():
        name, _, rest = line.partition("\t")
        if name == remote and disallowed in rest:
            return True
    return False


def subject_for(pull: str) -> str:
    return f"Automated cherry pick of #{pull}"


def publish(
    repo: GitRepository,
    session: SessionState,
    branch: WorkingBranch,
    *,
    pull: str,
    base: str,
    remote: str,
    disallowed_upstream: str,
    confirm: Callable[[str], str],
    echo: Callable[[str], None] = print,
) -> PublishResult:
    """Push ``branch`` to ``remote`` after confirmation.

    When ``remote`` is the canonical upstream, print manual push
    instructions instead and keep the working branch for the operator.
    """

    refspec = f"{branch.local_name}:{branch.remote_name}"
    if remote_matches(repo, remote, disallowed_upstream):
        echo(f"!!! You have '{remote}' configured as your {disallowed_upstream}")
        echo("This isn't normal. Leaving you with push instructions:")
        echo("")
        echo(f"  git push REMOTE {refspec}")
        echo("")
        echo("where REMOTE is your personal fork (maybe 'upstream'? Consider swapping those.).")
        echo(f"Then propose {branch.remote_name} as a pull against {base} (NOT MASTER).")
        echo(f"Use this exact subject: '{subject_for(pull)}' and include a justification.")
        session.preserve_branch()
        LOGGER.info("Preserving %s for a manual push", branch.local_name)
        return PublishResult.MANUAL

    echo("")
    echo(f"+++ I'm about to do the following to push to GitHub (and I'm assuming {remote} is your personal fork):")
    echo("")
    echo(f"  git push {remote} {refspec}")
    echo("")
    if not is_affirmative(confirm(PROCEED_PROMPT)):
        raise OperatorAbortedError("Aborting.")

    repo.push(remote, refspec, force=True)

    echo("")
    echo(f"+++ Now you must propose {branch.remote_name} as a pull against {base} (NOT MASTER).")
    echo(f"    You must use this exact subject: '{subject_for(pull)}' and include a justification.")
    echo("")
    return PublishResult.PUSHED


__all__ = ["PublishResult", "publish", "remote_matches", "subject_for"]

"""Apply a patch and wait for the operator to resolve any conflicts.

The loop never merges anything itself. It applies the patch once, then
watches the repository while the operator edits files and runs
``git am --continue`` in another window, prompting after each round.

Two signals mark an unfinished apply: unmerged paths in ``git status`` and
the ``rebase-apply`` marker directory. ``git am`` can stop with only the
marker present, so both are always checked.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Sequence

from .errors import ApplyFailedError, OperatorAbortedError

LOGGER = logging.getLogger(__name__)

PROCEED_PROMPT = "+++ Proceed (anything but 'y' aborts the cherry-pick)? [y/n]"


class ResolutionState(str, enum.Enum):
    APPLYING = "applying"
    AWAITING_RESOLUTION = "awaiting_resolution"
    RESOLVED = "resolved"
    ABORTED = "aborted"


@dataclass(frozen=True, slots=True)
class ConflictProbe:
    """Snapshot of the apply session as seen from the working tree."""

    unmerged: tuple[Path, ...] = ()
    session_open: bool = False

    @property
    def conflicted(self) -> bool:
        return bool(self.unmerged) or self.session_open


@dataclass(slots=True)
class ResolutionOutcome:
    state: ResolutionState = ResolutionState.APPLYING
    conflicts_seen: bool = False
    prompts: int = 0
    history: list[ResolutionState] = field(default_factory=list)

    def advance(self, state: ResolutionState) -> None:
        self.history.append(state)
        self.state = state


def is_affirmative(reply: str | None) -> bool:
    """Only a single ``y`` or ``Y`` counts as a yes."""

    return (reply or "").strip() in {"y", "Y"}


def resolve_conflicts(
    apply: Callable[[], bool],
    probe: Callable[[], ConflictProbe],
    confirm: Callable[[str], str],
    *,
    echo: Callable[[str], None] = print,
) -> ResolutionOutcome:
    """Drive the apply session to ``RESOLVED`` or raise.

    ``apply`` returns ``True`` when the patch went in cleanly. ``probe``
    reports the current conflict signals and ``confirm`` returns the
    operator's raw reply to a prompt.

    Raises :class:`ApplyFailedError` when the apply fails without leaving
    anything to resolve, and :class:`OperatorAbortedError` when the operator
    answers anything but ``y``.
    """

    outcome = ResolutionOutcome()
    outcome.advance(ResolutionState.APPLYING)
    if apply():
        outcome.advance(ResolutionState.RESOLVED)
        return outcome

    current = probe()
    while current.conflicted:
        if outcome.state is not ResolutionState.AWAITING_RESOLUTION:
            outcome.advance(ResolutionState.AWAITING_RESOLUTION)
        outcome.conflicts_seen = True
        _report_conflicts(current.unmerged, echo)
        reply = confirm(PROCEED_PROMPT)
        outcome.prompts += 1
        echo("")
        if not is_affirmative(reply):
            outcome.advance(ResolutionState.ABORTED)
            LOGGER.info("Operator declined after %d prompt(s)", outcome.prompts)
            raise OperatorAbortedError("Aborting.")
        current = probe()

    if not outcome.conflicts_seen:
        raise ApplyFailedError("git am failed, likely because of an in-progress 'git am' or 'git rebase'")

    outcome.advance(ResolutionState.RESOLVED)
    LOGGER.info("Conflicts resolved after %d prompt(s)", outcome.prompts)
    return outcome


def _report_conflicts(unmerged: Sequence[Path], echo: Callable[[str], None]) -> None:
    echo("")
    echo("+++ Conflicts detected:")
    echo("")
    if unmerged:
        for path in unmerged:
            echo(f"    {path.as_posix()}")
    else:
        echo("!!! None. Did you git am --continue?")
    echo("")
    echo("+++ Please resolve the conflicts in another window (and remember to 'git add / git am --continue')")


__all__ = [
    "ConflictProbe",
    "PROCEED_PROMPT",
    "ResolutionOutcome",
    "ResolutionState",
    "is_affirmative",
    "resolve_conflicts",
]

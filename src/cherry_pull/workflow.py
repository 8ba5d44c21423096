"""End-to-end cherry-pick of a pull request onto a release branch."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional

from .branching import WorkingBranch, prepare_branch
from .config import CherryPickConfig
from .errors import PreconditionError
from .precheck import check_repo_state
from .publish import PublishResult, publish
from .resolver import ConflictProbe, ResolutionOutcome, resolve_conflicts
from .session import SessionState, cherry_pick_session
from .tools.fetch import PatchFetcher
from .tools.vcs import GitRepository

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CherryPickRequest:
    pull: str
    branch: str


@dataclass(slots=True)
class CherryPickResult:
    """What a completed run produced."""

    starting_branch: str
    working_branch: WorkingBranch
    patch_path: Path
    resolution: ResolutionOutcome
    publish: PublishResult

    @property
    def branch_preserved(self) -> bool:
        return self.publish is PublishResult.MANUAL


def run_cherry_pick(
    repo: GitRepository,
    request: CherryPickRequest,
    config: CherryPickConfig,
    *,
    confirm: Callable[[str], str],
    echo: Callable[[str], None] = print,
    fetcher: Optional[PatchFetcher] = None,
    timestamp: int | None = None,
    update_remotes: bool | None = None,
) -> CherryPickResult:
    """Cherry-pick ``request.pull`` onto ``request.branch``.

    The repository is checked before anything is touched; from the first
    mutation onwards the run is wrapped in :func:`cherry_pick_session` so the
    operator ends up back on their starting branch whatever happens.
    """

    starting_branch = repo.current_branch()
    if starting_branch is None:
        raise PreconditionError("HEAD is detached. Check out a branch and try again.")

    check_repo_state(repo)

    if config.update_remotes if update_remotes is None else update_remotes:
        echo("+++ Updating remotes...")
        repo.update_remotes()

    fetcher = fetcher or PatchFetcher(
        url_template=config.patch_url_template,
        patch_dir=config.patch_dir,
        timeout=config.download_timeout,
    )

    with cherry_pick_session(repo, starting_branch, echo=echo) as session:
        working_branch = prepare_branch(
            repo,
            session,
            request.pull,
            request.branch,
            timestamp=timestamp,
            prefix=config.branch_prefix,
        )
        echo(f"+++ Created local branch {working_branch.local_name}")

        patch_path = fetcher.path_for(request.pull)
        echo(f"+++ Downloading patch to {patch_path} (in case you need to do this again)")
        patch_path = fetcher.fetch(request.pull)

        resolution = _apply_patch(repo, session, patch_path, confirm=confirm, echo=echo)

        outcome = publish(
            repo,
            session,
            working_branch,
            pull=request.pull,
            base=request.branch,
            remote=config.fork_remote,
            disallowed_upstream=config.disallowed_upstream,
            confirm=confirm,
            echo=echo,
        )

    return CherryPickResult(
        starting_branch=starting_branch,
        working_branch=working_branch,
        patch_path=patch_path,
        resolution=resolution,
        publish=outcome,
    )


def _apply_patch(
    repo: GitRepository,
    session: SessionState,
    patch_path: Path,
    *,
    confirm: Callable[[str], str],
    echo: Callable[[str], None],
) -> ResolutionOutcome:
    echo("")
    echo("+++ About to attempt cherry pick of PR. To reattempt:")
    echo(f"  $ git am -3 {patch_path}")
    echo("")

    def apply() -> bool:
        result = repo.am(patch_path, three_way=True)
        if result.returncode != 0:
            LOGGER.info("git am exited with %d: %s", result.returncode, result.stderr.strip())
        return result.returncode == 0

    def probe() -> ConflictProbe:
        return ConflictProbe(
            unmerged=tuple(repo.unmerged_paths()),
            session_open=repo.am_in_progress(),
        )

    session.apply_open = True
    resolution = resolve_conflicts(apply, probe, confirm, echo=echo)
    session.apply_open = False
    return resolution


__all__ = ["CherryPickRequest", "CherryPickResult", "run_cherry_pick"]

"""Minimal git helpers
The helpers below provide just enough structure to inspect the working
tree, drive a ``git am`` session, and move between branches.
"""

from __future__ import annotations

import logging
import subprocess
from pathlib import Path
from typing import List, Sequence

LOGGER = logging.getLogger(__name__)


class GitError(RuntimeError):
    """Raised when a git command fails or the repository cannot be used."""


class GitRepository:
    """Lightweight wrapper around ``git`` commands."""

    def __init__(self, root: Path | str) -> None:
        self.root = Path(root).resolve()
        if not (self.root / ".git").exists():
            raise GitError(f"Not a git repository: {self.root}")

    @classmethod
    def discover(cls, start: Path | str | None = None) -> "GitRepository":
        """Locate the nearest git repository starting from ``start``."""

        path = Path(start or Path.cwd()).resolve()
        for candidate in (path, *path.parents):
            if (candidate / ".git").exists():
                return cls(candidate)
        raise GitError(f"Unable to locate a git repository from {path}")

    # ------------------------------------------------------------------ git IO
    def _run_git(self, args: Sequence[str], *, check: bool = True) -> subprocess.CompletedProcess[str]:
        command = ["git", *args]
        LOGGER.debug("Running %s", " ".join(command))
        process = subprocess.run(
            command,
            cwd=self.root,
            capture_output=True,
            text=False,
            check=False,
        )
        stdout = process.stdout.decode("utf-8", errors="replace") if process.stdout else ""
        stderr = process.stderr.decode("utf-8", errors="replace") if process.stderr else ""
        result = subprocess.CompletedProcess(process.args, process.returncode, stdout, stderr)
        if check and result.returncode != 0:
            message = result.stderr.strip() or result.stdout.strip() or "unknown git error"
            raise GitError(f"git {' '.join(args)} failed: {message}")
        return result

    # -------------------------------------------------------------- branches
    def current_branch(self) -> str | None:
        """Return the current branch name or ``None`` when detached."""

        result = self._run_git(["symbolic-ref", "--short", "HEAD"], check=False)
        if result.returncode != 0:
            return None
        branch = result.stdout.strip()
        return branch or None

    def resolve_ref(self, ref: str) -> str | None:
        """Return the commit SHA ``ref`` points at, or ``None`` if it does not resolve."""

        result = self._run_git(["log", "-n1", "--format=%H", ref, "--"], check=False)
        if result.returncode != 0:
            return None
        sha = result.stdout.strip()
        return sha or None

    def create_branch(self, name: str, start_point: str) -> None:
        """Create ``name`` at ``start_point`` and switch to it."""

        self._run_git(["checkout", "-b", name, start_point], check=True)

    def checkout(self, ref: str, *, force: bool = False) -> None:
        args: List[str] = ["checkout"]
        if force:
            args.append("-f")
        args.append(ref)
        self._run_git(args, check=True)

    def delete_branch(self, name: str) -> None:
        """Force-delete the local branch ``name``."""

        self._run_git(["branch", "-D", name], check=True)

    # ------------------------------------------------------------- repo status
    def _status_entries(self) -> List[tuple[str, Path]]:
        result = self._run_git(["status", "--porcelain"], check=True)
        entries: List[tuple[str, Path]] = []
        for line in result.stdout.splitlines():
            if not line:
                continue
            status = line[:2]
            raw_path = line[3:]
            if status[0] in {"R", "C"} and " -> " in raw_path:
                raw_path = raw_path.split(" -> ", 1)[1]
            status_clean = status.strip() or status
            entries.append((status_clean, Path(raw_path.strip())))
        return entries

    def working_tree_changes(self, *, include_untracked: bool = True) -> List[Path]:
        """Return the set of paths with pending modifications."""

        paths = {
            path
            for status, path in self._status_entries()
            if include_untracked or status != "??"
        }
        return sorted(paths, key=lambda item: item.as_posix())

    def is_clean(self, *, include_untracked: bool = True) -> bool:
        """Return ``True`` when the working tree has no pending changes."""

        return not self.working_tree_changes(include_untracked=include_untracked)

    def unmerged_paths(self) -> List[Path]:
        """Return paths git reports as unmerged (porcelain status starting with ``U``).

        ``AA`` and ``DD`` conflicts are not reported; only the ``U*`` forms are
        listed.
        """

        return [path for status, path in self._status_entries() if status.startswith("U")]

    # ------------------------------------------------------------- am sessions
    def git_path(self, name: str) -> Path:
        """Return the absolute path of ``name`` inside the git directory."""

        result = self._run_git(["rev-parse", "--git-path", name], check=True)
        path = Path(result.stdout.strip())
        if not path.is_absolute():
            path = self.root / path
        return path

    def am_in_progress(self) -> bool:
        """Return ``True`` while a ``git am`` or ``git rebase`` session is open."""

        return self.git_path("rebase-apply").exists()

    def am(self, patch: Path, *, three_way: bool = True) -> subprocess.CompletedProcess[str]:
        """Apply ``patch`` with ``git am``; the result is returned without raising."""

        args: List[str] = ["am"]
        if three_way:
            args.append("-3")
        args.append(str(patch))
        return self._run_git(args, check=False)

    def am_abort(self) -> None:
        self._run_git(["am", "--abort"], check=True)

    # -------------------------------------------------------------- remotes
    def update_remotes(self) -> None:
        self._run_git(["remote", "update"], check=True)

    def remote_lines(self) -> List[str]:
        """Return the ``git remote -v`` listing, one entry per line."""

        result = self._run_git(["remote", "-v"], check=True)
        return [line for line in result.stdout.splitlines() if line.strip()]

    def push(
        self,
        remote: str,
        refspec: str,
        *,
        force: bool = False,
    ) -> None:
        """Push ``refspec`` to ``remote`` applying requested flags."""

        args: List[str] = ["push", remote]
        if force:
            args.append("-f")
        args.append(refspec)
        self._run_git(args, check=True)


__all__ = ["GitError", "GitRepository"]

from __future__ import annotations

import subprocess
import sys
from dataclasses import dataclass
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from cherry_pull.tools.vcs import GitRepository  # noqa: E402


def run_git(cwd: Path, *cmd: str) -> str:
    process = subprocess.run(
        ["git", *cmd],
        cwd=cwd,
        check=True,
        capture_output=True,
        text=True,
    )
    return process.stdout


def _configure_identity(cwd: Path) -> None:
    run_git(cwd, "config", "user.email", "agent@example.com")
    run_git(cwd, "config", "user.name", "Cherry Pull")


@dataclass(slots=True)
class CherryRepo:
    """Fixture payload: a clone of a synthetic upstream plus a bare fork."""

    work: GitRepository
    upstream_root: Path
    fork_root: Path
    patch_dir: Path
    clean_patch: bytes
    conflict_patch: bytes

    @property
    def root(self) -> Path:
        return self.work.root

    def fork_has_branch(self, name: str) -> bool:
        return _has_branch(self.fork_root, name)

    def has_local_branch(self, name: str) -> bool:
        return _has_branch(self.root, name)


def _has_branch(cwd: Path, name: str) -> bool:
    process = subprocess.run(
        ["git", "rev-parse", "--verify", "--quiet", f"refs/heads/{name}"],
        cwd=cwd,
        capture_output=True,
        text=True,
        check=False,
    )
    return process.returncode == 0


def _format_patch(cwd: Path, ref: str) -> bytes:
    process = subprocess.run(
        ["git", "format-patch", "-1", "--stdout", ref],
        cwd=cwd,
        check=True,
        capture_output=True,
    )
    return process.stdout


@pytest.fixture()
def cherry_repo(tmp_path: Path) -> CherryRepo:
    """Create upstream/work/fork repositories wired up like a real checkout.

    ``upstream/release-1.0`` changes ``file.txt`` to ``gamma``; the clean
    patch adds ``notes.txt`` and the conflicting patch changes ``file.txt``
    to ``beta`` on top of ``alpha``.
    """

    upstream = tmp_path / "upstream"
    upstream.mkdir()
    run_git(upstream, "init")
    _configure_identity(upstream)
    run_git(upstream, "symbolic-ref", "HEAD", "refs/heads/main")
    (upstream / "file.txt").write_text("alpha\n", encoding="utf-8")
    run_git(upstream, "add", "file.txt")
    run_git(upstream, "commit", "-m", "init")

    run_git(upstream, "checkout", "-b", "release-1.0")
    (upstream / "file.txt").write_text("gamma\n", encoding="utf-8")
    run_git(upstream, "commit", "-am", "release tweak")

    run_git(upstream, "checkout", "-b", "clean-fix", "main")
    (upstream / "notes.txt").write_text("note\n", encoding="utf-8")
    run_git(upstream, "add", "notes.txt")
    run_git(upstream, "commit", "-m", "Add notes")
    clean_patch = _format_patch(upstream, "clean-fix")

    run_git(upstream, "checkout", "-b", "conflict-fix", "main")
    (upstream / "file.txt").write_text("beta\n", encoding="utf-8")
    run_git(upstream, "commit", "-am", "Switch to beta")
    conflict_patch = _format_patch(upstream, "conflict-fix")

    run_git(upstream, "checkout", "main")

    fork = tmp_path / "fork.git"
    run_git(tmp_path, "init", "--bare", str(fork))

    work_root = tmp_path / "work"
    run_git(tmp_path, "clone", str(upstream), str(work_root))
    run_git(work_root, "remote", "rename", "origin", "upstream")
    run_git(work_root, "remote", "add", "origin", str(fork))
    _configure_identity(work_root)

    patch_dir = tmp_path / "patches"

    return CherryRepo(
        work=GitRepository(work_root),
        upstream_root=upstream,
        fork_root=fork,
        patch_dir=patch_dir,
        clean_patch=clean_patch,
        conflict_patch=conflict_patch,
    )

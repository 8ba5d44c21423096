"""Error taxonomy raised by the cherry-pick workflow.

Every error carries the process exit code the CLI should terminate with.
"""

from __future__ import annotations


class CherryPickError(RuntimeError):
    """Base class for all workflow failures."""

    exit_code: int = 1


class UsageError(CherryPickError):
    """Raised when the command line or configuration cannot be used."""

    exit_code = 2


class PreconditionError(CherryPickError):
    """Raised before any mutation when the repository is not ready."""


class DirtyTreeError(PreconditionError):
    """Raised when the working tree has pending changes."""


class RebaseInProgressError(PreconditionError):
    """Raised when a ``git am`` or ``git rebase`` session is already open."""


class RefNotFoundError(PreconditionError):
    """Raised when the base reference does not resolve to a commit."""


class NetworkError(CherryPickError):
    """Raised when a remote resource cannot be retrieved."""


class PatchDownloadError(NetworkError):
    """Raised when the pull request patch cannot be downloaded."""


class ApplyFailedError(CherryPickError):
    """Raised when ``git am`` fails without leaving conflicts to resolve."""


class OperatorAbortedError(CherryPickError):
    """Raised when the operator declines a confirmation prompt."""


__all__ = [
    "ApplyFailedError",
    "CherryPickError",
    "DirtyTreeError",
    "NetworkError",
    "OperatorAbortedError",
    "PatchDownloadError",
    "PreconditionError",
    "RebaseInProgressError",
    "RefNotFoundError",
    "UsageError",
]

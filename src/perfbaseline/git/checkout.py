"""Materialise a commit of a repository in an isolated workspace."""

from __future__ import annotations

import logging
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..errors import CheckoutFailure

logger = logging.getLogger(__name__)


def _open_or_clone(source: Path, workspace: Path) -> Repo:
    if (workspace / ".git").exists():
        repo = Repo(workspace)
        logger.info("Fetching %s into existing workspace %s", source, workspace)
        repo.git.fetch("origin")
        return repo

    workspace.parent.mkdir(parents=True, exist_ok=True)
    logger.info("Cloning %s into %s", source, workspace)
    return Repo.clone_from(str(source), str(workspace), no_checkout=True)


def checkout_commit(source: Path, workspace: Path, commit: str) -> Path:
    """Check out ``commit`` of ``source`` into ``workspace``.

    An existing clone in ``workspace`` is reused and refreshed; otherwise the
    source repository is cloned. The commit is checked out detached and any
    local modifications are discarded.

    Returns
    -------
    The workspace directory.

    Raises
    ------
    CheckoutFailure:
        If cloning, fetching or checking out fails.
    """
    try:
        repo = _open_or_clone(source.resolve(), workspace)
        repo.git.checkout("--force", "--detach", commit)
    except (GitCommandError, InvalidGitRepositoryError, NoSuchPathError) as e:
        raise CheckoutFailure(f"Could not check out {commit} into {workspace}: {e}") from e
    return workspace

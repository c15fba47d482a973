"""Version-control queries used while resolving the fork point."""

from __future__ import annotations

import logging
from pathlib import Path

from git import Repo
from git.exc import GitCommandError, InvalidGitRepositoryError, NoSuchPathError

from ..errors import ResolutionFailure

logger = logging.getLogger(__name__)


class GitRepo:
    """Wrapper around gitpython exposing the queries the resolver needs.

    Every git failure surfaces as :class:`ResolutionFailure`.
    """

    def __init__(self, repo_path: Path):
        self.repo_path = repo_path.resolve()
        try:
            self.repo = Repo(self.repo_path)
        except (InvalidGitRepositoryError, NoSuchPathError) as e:
            raise ResolutionFailure(f"Not a valid git repository: {repo_path}") from e

    def _git(self, *args: str) -> str:
        command = ["git", *args]
        logger.debug("%s", " ".join(command))
        try:
            return self.repo.git.execute(command).strip()
        except GitCommandError as e:
            raise ResolutionFailure(f"{' '.join(command)} failed: {e}") from e

    def current_branch(self) -> str:
        """Return the abbreviated name of ``HEAD`` (``HEAD`` when detached)."""
        return self._git("rev-parse", "--abbrev-ref", "HEAD")

    def fetch(self, remote: str, *refs: str) -> None:
        """Fetch ``refs`` from ``remote`` so its tracking branches are current."""
        self._git("fetch", remote, *refs)

    def merge_base(self, ref_a: str, ref_b: str) -> str:
        """Return the full id of the best common ancestor of two refs."""
        return self._git("merge-base", ref_a, ref_b)

    def is_ancestor(self, ancestor: str, rev: str) -> bool:
        """Return whether ``ancestor`` is reachable from ``rev``."""
        try:
            return self.repo.is_ancestor(ancestor, rev)
        except GitCommandError as e:
            raise ResolutionFailure(
                f"git merge-base --is-ancestor {ancestor} {rev} failed: {e}"
            ) from e

    def show_file_at_commit(self, commit: str, path: str) -> str:
        """Return the contents of ``path`` as recorded at ``commit``."""
        return self._git("show", f"{commit}:{path}")

    def short_hash(self, commit: str) -> str:
        """Return the abbreviated, unambiguous id of ``commit``."""
        return self._git("rev-parse", "--short", commit)

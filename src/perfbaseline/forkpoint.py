"""Decide which commit performance tests on the current branch compare against."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Optional

from .errors import ResolutionFailure
from .git.repo import GitRepo
from .identifier import InvalidBaselineIdentifier, format_identifier, is_commit_baseline
from .state import PerformanceTest

logger = logging.getLogger(__name__)


class ForkPointDecision(Enum):
    SKIP = "skip"
    EXPLICIT = "explicit"
    COMPUTED = "computed"


@dataclass(frozen=True, slots=True)
class ForkPointResult:
    """Outcome of a resolution; ``identifier`` is ``None`` when skipped."""

    decision: ForkPointDecision
    identifier: Optional[str] = None


def find_explicit_baseline(configured_baselines: Iterable[Optional[str]]) -> Optional[str]:
    """Return the first configured baseline that names a commit build.

    Ordering is whatever the caller supplies; when several entries qualify the
    first one wins.
    """
    for baselines in configured_baselines:
        if is_commit_baseline(baselines):
            return baselines
    return None


def compute_fork_point(
    git: GitRepo,
    remote: str = "origin",
    master_branch: str = "master",
    release_branch: str = "release",
) -> str:
    """Return the commit where ``HEAD`` forked from the reference branches.

    Both reference branches are fetched first. When the master fork point is
    an ancestor of the release fork point the release one is more specific and
    wins.
    """
    git.fetch(remote, master_branch, release_branch)
    master_fork_point = git.merge_base(f"{remote}/{master_branch}", "HEAD")
    release_fork_point = git.merge_base(f"{remote}/{release_branch}", "HEAD")
    logger.debug(
        "Fork points: %s=%s %s=%s",
        master_branch,
        master_fork_point,
        release_branch,
        release_fork_point,
    )
    if git.is_ancestor(master_fork_point, release_fork_point):
        return release_fork_point
    return master_fork_point


def resolve_fork_point(
    git: GitRepo,
    configured_baselines: Iterable[Optional[str]],
    performance_tests: List[PerformanceTest],
    *,
    remote: str = "origin",
    master_branch: str = "master",
    release_branch: str = "release",
    version_file: str = "version.txt",
) -> ForkPointResult:
    """Resolve the baseline identifier for the current checkout.

    Parameters
    ----------
    git:
        Repository to query.
    configured_baselines:
        Baselines already configured for performance tests, in priority order.
    performance_tests:
        Registered performance tests. Their ``baselines`` are overwritten when
        a baseline is computed.

    Returns
    -------
    A :class:`ForkPointResult`. Nothing is mutated for skipped or explicit
    resolutions.

    Raises
    ------
    ResolutionFailure:
        If a git query fails or the version file holds no usable version.
    """
    branch = git.current_branch()
    if branch in (master_branch, release_branch):
        logger.info("On %s, no fork point baseline needed", branch)
        return ForkPointResult(ForkPointDecision.SKIP)

    explicit = find_explicit_baseline(configured_baselines)
    if explicit is not None:
        logger.info("Using explicitly configured baseline %s", explicit)
        return ForkPointResult(ForkPointDecision.EXPLICIT, explicit)

    fork_point = compute_fork_point(git, remote, master_branch, release_branch)
    version = git.show_file_at_commit(fork_point, version_file).strip()
    short_hash = git.short_hash(fork_point)
    try:
        identifier = format_identifier(version, short_hash)
    except InvalidBaselineIdentifier as e:
        raise ResolutionFailure(
            f"Unusable {version_file} at {fork_point}: {version!r}"
        ) from e

    for test in performance_tests:
        test.baselines = identifier
    logger.info("Fork point of %s is %s", branch, identifier)
    return ForkPointResult(ForkPointDecision.COMPUTED, identifier)

"""Resolve and build performance-test baselines from the command line."""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Iterable

from .config import BaselineConfig, load_config
from .distribution import BaselineDistributionBuilder
from .errors import PerfBaselineError
from .forkpoint import ForkPointDecision, resolve_fork_point
from .git.repo import GitRepo
from .identifier import is_commit_baseline
from .state import clear_fork_point, load_fork_point, load_performance_tests, save_fork_point


def _resolve_config(args: argparse.Namespace) -> BaselineConfig:
    return load_config(args.repo_dir, args.config)


def _determine_fork_point(args: argparse.Namespace) -> None:
    config = _resolve_config(args)
    tests = load_performance_tests(config.resolved_state_path())

    # Resolved fork points are kept in their own file, never in the test state.
    configured = list(args.baseline) + [test.baselines for test in tests]
    result = resolve_fork_point(
        GitRepo(config.repo_dir),
        configured,
        tests,
        remote=config.remote,
        master_branch=config.master_branch,
        release_branch=config.release_branch,
        version_file=config.version_file,
    )

    if result.decision is ForkPointDecision.SKIP:
        clear_fork_point(config.fork_point_path())
        print("On a reference branch, no fork point baseline needed")
        return
    save_fork_point(config.fork_point_path(), result.identifier)
    print(result.identifier)


def _build_distribution(args: argparse.Namespace) -> None:
    config = _resolve_config(args)
    identifier = args.identifier
    if identifier is None:
        fork_point_path = config.fork_point_path()
        identifier = load_fork_point(fork_point_path)
        if identifier is None:
            raise PerfBaselineError(
                f"No baseline identifier given and none recorded in {fork_point_path};"
                " run determine-fork-point first"
            )
        if not is_commit_baseline(identifier):
            raise PerfBaselineError(
                f"'{identifier}' recorded in {fork_point_path} is not of the form"
                " <version>-commit-<hash>"
            )

    outputs = BaselineDistributionBuilder(config).build(identifier)
    print(f"  Distribution: {outputs.distribution_home}")
    print(f"  Tooling API jar: {outputs.tooling_api_jar}")


def _identifier(value: str) -> str:
    if not is_commit_baseline(value):
        raise argparse.ArgumentTypeError(
            f"'{value}' is not of the form <version>-commit-<hash>"
        )
    return value


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "--repo-dir",
        type=Path,
        default=Path.cwd(),
        help="Repository root (defaults to the current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="YAML configuration file (defaults to <repo-dir>/perfbaseline.yml)",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Log git and build commands")

    subparsers = parser.add_subparsers(dest="command", required=True)

    fork_parser = subparsers.add_parser(
        "determine-fork-point",
        help="Resolve the commit performance tests compare against",
    )
    fork_parser.add_argument(
        "--baseline",
        action="append",
        default=[],
        help="Baseline already configured for the performance tests (repeatable)",
    )
    fork_parser.set_defaults(func=_determine_fork_point)

    build_parser = subparsers.add_parser(
        "build-distribution",
        help="Check out and build the distribution of a baseline commit",
    )
    build_parser.add_argument(
        "identifier",
        nargs="?",
        type=_identifier,
        help="Baseline such as 5.1-commit-1a2b3c4 (defaults to the recorded fork point)",
    )
    build_parser.set_defaults(func=_build_distribution)

    return parser


def main(argv: Iterable[str] | None = None) -> None:
    parser = _build_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        args.func(args)
    except PerfBaselineError as e:
        print(f"Error: {e}", file=sys.stderr)
        raise SystemExit(1) from e


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()

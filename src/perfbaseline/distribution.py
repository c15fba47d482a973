"""Build a distribution of a baseline commit for performance tests."""

from __future__ import annotations

import logging
import shutil
import subprocess
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, List, Sequence

from .config import BaselineConfig, RemoteCacheCredentials
from .errors import BuildFailure
from .git.checkout import checkout_commit
from .identifier import commit_of, version_of

logger = logging.getLogger(__name__)

REDACTED = "********"

Checkout = Callable[[Path, Path, str], Path]
Runner = Callable[[Sequence[str], Path], None]


class BuildStage(Enum):
    IDLE = "idle"
    CHECKING_OUT = "checking out"
    CLEANING = "cleaning outputs"
    BUILDING = "building"
    DONE = "done"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class BuildOutputs:
    distribution_home: Path
    tooling_api_jar: Path


def build_outputs(build_dir: Path, identifier: str) -> BuildOutputs:
    """Return where the distribution of ``identifier`` is installed.

    Only the version part of the identifier is used, so rebuilding the same
    version from another commit overwrites the same outputs.
    """
    version = version_of(identifier)
    distributions = build_dir / "distributions"
    return BuildOutputs(
        distribution_home=distributions / f"gradle-{version}",
        tooling_api_jar=distributions / f"gradle-tooling-api-{version}.jar",
    )


def _cache_arguments(
    build_cache_enabled: bool, remote_cache: RemoteCacheCredentials | None
) -> List[str]:
    if not build_cache_enabled:
        return []
    arguments = ["--build-cache"]
    if remote_cache is not None and remote_cache.url:
        arguments += [
            f"-Dgradle.cache.remote.url={remote_cache.url}",
            f"-Dgradle.cache.remote.username={remote_cache.username}",
            f"-Dgradle.cache.remote.password={remote_cache.password}",
        ]
    return arguments


def build_command(config: BaselineConfig, checkout_dir: Path, outputs: BuildOutputs) -> List[str]:
    """Return the nested build command line for ``checkout_dir``."""
    command = [
        config.build_tool,
        "--init-script",
        str((checkout_dir / config.init_script).absolute()),
        "clean",
        ":install",
        f"-Pgradle_installPath={outputs.distribution_home.absolute()}",
        ":toolingApi:installToolingApiShadedJar",
        f"-PtoolingApiShadedJarInstallPath={outputs.tooling_api_jar.absolute()}",
    ]
    return command + _cache_arguments(config.build_cache_enabled, config.remote_cache)


def redact(command: Sequence[str]) -> List[str]:
    """Mask the remote cache password so the command can be logged."""
    prefix = "-Dgradle.cache.remote.password="
    return [prefix + REDACTED if arg.startswith(prefix) else arg for arg in command]


def run_nested_build(command: Sequence[str], cwd: Path) -> None:
    """Run ``command`` in ``cwd`` and raise :class:`BuildFailure` on a non-zero exit."""
    try:
        result = subprocess.run(list(command), cwd=cwd, check=False)
    except OSError as e:
        raise BuildFailure(f"Could not start {command[0]} in {cwd}: {e}") from e
    if result.returncode != 0:
        raise BuildFailure(
            f"Nested build in {cwd} failed with exit code {result.returncode}",
            returncode=result.returncode,
        )


class BaselineDistributionBuilder:
    """Check out a baseline commit and install its distribution.

    Steps run strictly in order (checkout, clean, build); the first failure
    moves :attr:`stage` to ``FAILED`` and propagates. Outputs of a failed
    build are left in place and removed by the next run.
    """

    def __init__(
        self,
        config: BaselineConfig,
        checkout: Checkout = checkout_commit,
        runner: Runner = run_nested_build,
    ):
        self.config = config
        self._checkout = checkout
        self._runner = runner
        self.stage = BuildStage.IDLE

    def build(self, identifier: str) -> BuildOutputs:
        outputs = build_outputs(self.config.resolved_build_dir(), identifier)
        commit = commit_of(identifier)
        try:
            self.stage = BuildStage.CHECKING_OUT
            checkout_dir = self._checkout(
                self.config.repo_dir, self.config.checkout_dir(commit), commit
            )

            self.stage = BuildStage.CLEANING
            if outputs.distribution_home.exists():
                logger.info("Deleting previous output %s", outputs.distribution_home)
                shutil.rmtree(outputs.distribution_home)

            self.stage = BuildStage.BUILDING
            command = build_command(self.config, checkout_dir, outputs)
            logger.info("Running %s", " ".join(redact(command)))
            self._runner(command, checkout_dir)
        except Exception:
            logger.debug("Baseline build of %s failed while %s", identifier, self.stage.value)
            self.stage = BuildStage.FAILED
            raise

        self.stage = BuildStage.DONE
        print(f"Building fork point succeeded, now the baseline is {identifier}")
        return outputs

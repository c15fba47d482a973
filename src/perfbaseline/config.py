"""Configuration for resolving and building performance baselines."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .errors import ConfigError

CONFIG_FILENAME = "perfbaseline.yml"


@dataclass(slots=True)
class RemoteCacheCredentials:
    """Connection details of the remote build cache forwarded to nested builds."""

    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None


@dataclass(slots=True)
class BaselineConfig:
    """Runtime configuration for both commands.

    Attributes
    ----------
    repo_dir:
        Root of the repository whose performance tests need a baseline.
    build_dir:
        Directory receiving checkouts, distributions and the state file.
        Defaults to ``<repo_dir>/build``.
    build_tool:
        Build entry point invoked inside the checked-out baseline commit.
    init_script:
        Init script enabling build scans, relative to the checkout.
    remote:
        Name of the git remote holding the reference branches.
    master_branch, release_branch:
        Reference branches the fork point is computed against.
    version_file:
        File holding the product version at any given commit.
    build_cache_enabled:
        Whether the invoking build runs with the build cache switched on.
    remote_cache:
        Remote cache credentials, when a remote cache is configured.
    state_path:
        JSON file with the baselines configured for the registered performance
        tests. Only read; resolved fork points are never written back to it.
    """

    repo_dir: Path = field(default_factory=Path.cwd)
    build_dir: Path | None = None
    build_tool: str = "./gradlew"
    init_script: str = "gradle/init-scripts/build-scan.init.gradle.kts"
    remote: str = "origin"
    master_branch: str = "master"
    release_branch: str = "release"
    version_file: str = "version.txt"
    build_cache_enabled: bool = False
    remote_cache: RemoteCacheCredentials | None = None
    state_path: Path | None = None

    def resolved_build_dir(self) -> Path:
        """Return the absolute build directory."""
        return (self.build_dir or self.repo_dir / "build").resolve()

    def resolved_state_path(self) -> Path:
        """Return the file holding the configured performance-test baselines."""
        return self.state_path or self.resolved_build_dir() / "performance-tests.json"

    def fork_point_path(self) -> Path:
        """Return the file handing the resolved baseline to ``build-distribution``."""
        return self.resolved_build_dir() / "fork-point.txt"

    def checkout_dir(self, commit: str) -> Path:
        """Return the isolated workspace used for ``commit``."""
        return self.resolved_build_dir() / "checkouts" / commit


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key) or {}
    if not isinstance(value, dict):
        raise ConfigError(f"'{key}' must be a mapping")
    return value


def _remote_cache_from(build_cache: Dict[str, Any]) -> RemoteCacheCredentials | None:
    remote = _section(build_cache, "remote")
    if not remote.get("url"):
        return None
    return RemoteCacheCredentials(
        url=str(remote["url"]),
        username=remote.get("username"),
        password=remote.get("password"),
    )


def load_config(repo_dir: Path, config_path: Path | None = None) -> BaselineConfig:
    """Build a :class:`BaselineConfig` for ``repo_dir``.

    Parameters
    ----------
    repo_dir:
        Repository root.
    config_path:
        YAML file to read. Defaults to ``<repo_dir>/perfbaseline.yml``; a
        missing file yields the defaults.

    Raises
    ------
    ConfigError:
        If the file is not valid YAML or does not hold a mapping.
    """
    repo_dir = repo_dir.resolve()
    path = config_path or repo_dir / CONFIG_FILENAME
    config = BaselineConfig(repo_dir=repo_dir)
    if not path.exists():
        return config

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping at the top level")

    if data.get("build_dir"):
        build_dir = Path(data["build_dir"])
        config.build_dir = build_dir if build_dir.is_absolute() else repo_dir / build_dir
    for key in ("build_tool", "init_script", "remote", "version_file"):
        if data.get(key):
            setattr(config, key, str(data[key]))

    branches = _section(data, "branches")
    config.master_branch = str(branches.get("master", config.master_branch))
    config.release_branch = str(branches.get("release", config.release_branch))

    build_cache = _section(data, "build_cache")
    config.build_cache_enabled = bool(build_cache.get("enabled", False))
    config.remote_cache = _remote_cache_from(build_cache)
    return config

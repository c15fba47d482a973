from __future__ import annotations

import json

import pytest

from perfbaseline.config import RemoteCacheCredentials, load_config
from perfbaseline.errors import ConfigError
from perfbaseline.state import (
    PerformanceTest,
    clear_fork_point,
    load_fork_point,
    load_performance_tests,
    save_fork_point,
)


def test_defaults_without_config_file(tmp_path) -> None:
    config = load_config(tmp_path)

    assert config.repo_dir == tmp_path.resolve()
    assert config.resolved_build_dir() == tmp_path.resolve() / "build"
    assert config.resolved_state_path() == tmp_path.resolve() / "build" / "performance-tests.json"
    assert config.fork_point_path() == tmp_path.resolve() / "build" / "fork-point.txt"
    assert config.checkout_dir("abc1234") == tmp_path.resolve() / "build" / "checkouts" / "abc1234"
    assert config.build_tool == "./gradlew"
    assert config.build_cache_enabled is False
    assert config.remote_cache is None


def test_yaml_settings_are_applied(tmp_path) -> None:
    (tmp_path / "perfbaseline.yml").write_text(
        """
build_dir: out
remote: upstream
branches:
  master: main
build_cache:
  enabled: true
  remote:
    url: https://cache.example.com/cache/
    username: ci
    password: s3cret
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.resolved_build_dir() == tmp_path.resolve() / "out"
    assert config.remote == "upstream"
    assert config.master_branch == "main"
    assert config.release_branch == "release"
    assert config.build_cache_enabled is True
    assert config.remote_cache == RemoteCacheCredentials(
        "https://cache.example.com/cache/", "ci", "s3cret"
    )


def test_remote_cache_without_url_is_ignored(tmp_path) -> None:
    config_path = tmp_path / "custom.yml"
    config_path.write_text("build_cache:\n  enabled: true\n  remote:\n    username: ci\n", encoding="utf-8")

    config = load_config(tmp_path, config_path)

    assert config.build_cache_enabled is True
    assert config.remote_cache is None


@pytest.mark.parametrize("content", ["build_dir: [unclosed", "- just\n- a list\n", "branches: main\n"])
def test_invalid_config_is_rejected(tmp_path, content) -> None:
    (tmp_path / "perfbaseline.yml").write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_performance_test_state(tmp_path) -> None:
    path = tmp_path / "build" / "performance-tests.json"
    assert load_performance_tests(path) == []

    path.parent.mkdir()
    path.write_text(json.dumps({"perf": "5.1-commit-abc1234", "adhoc": None}), encoding="utf-8")

    assert load_performance_tests(path) == [
        PerformanceTest("perf", "5.1-commit-abc1234"),
        PerformanceTest("adhoc", None),
    ]


def test_malformed_state_file(tmp_path) -> None:
    path = tmp_path / "performance-tests.json"
    path.write_text("[1, 2]", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_performance_tests(path)


def test_fork_point_handoff_file(tmp_path) -> None:
    path = tmp_path / "build" / "fork-point.txt"
    assert load_fork_point(path) is None

    save_fork_point(path, "5.1-commit-abc1234")
    assert load_fork_point(path) == "5.1-commit-abc1234"

    clear_fork_point(path)
    clear_fork_point(path)
    assert load_fork_point(path) is None

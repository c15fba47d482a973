"""Registered performance tests and the fork point handed between commands."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional

from .errors import ConfigError


@dataclass(slots=True)
class PerformanceTest:
    """A registered performance test and the baseline(s) it compares against."""

    name: str
    baselines: Optional[str] = None


def load_performance_tests(path: Path) -> List[PerformanceTest]:
    """Load registered performance tests from ``path``.

    The file maps test names to baseline strings (or ``null``). A missing file
    means no tests are registered.
    """
    if not path.exists():
        return []

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {path}: {e}") from e
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain an object mapping test names to baselines")

    return [
        PerformanceTest(name=name, baselines=None if value is None else str(value))
        for name, value in data.items()
    ]


def load_fork_point(path: Path) -> Optional[str]:
    """Return the baseline last resolved by ``determine-fork-point``, if any."""
    if not path.exists():
        return None
    identifier = path.read_text(encoding="utf-8").strip()
    return identifier or None


def save_fork_point(path: Path, identifier: str) -> None:
    """Record ``identifier`` as the baseline for the next distribution build."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(f"{identifier}\n", encoding="utf-8")


def clear_fork_point(path: Path) -> None:
    """Forget the recorded baseline so no stale fork point gets built."""
    path.unlink(missing_ok=True)

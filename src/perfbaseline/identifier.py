"""Parsing helpers for ``<version>-commit-<shortHash>`` baseline identifiers."""

from __future__ import annotations

import re

COMMIT_SEPARATOR = "-commit-"
COMMIT_VERSION_REGEX = re.compile(r"(\d+(\.\d+)+)-commit-[a-f0-9]+")


class InvalidBaselineIdentifier(ValueError):
    """Raised when a string is not a commit baseline identifier."""


def is_commit_baseline(value: str | None) -> bool:
    """Return ``True`` when ``value`` is a complete commit baseline identifier."""
    if value is None:
        return False
    return COMMIT_VERSION_REGEX.fullmatch(value) is not None


def format_identifier(version: str, short_hash: str) -> str:
    """Join ``version`` and ``short_hash`` and validate the result."""
    identifier = f"{version}{COMMIT_SEPARATOR}{short_hash}"
    if not is_commit_baseline(identifier):
        raise InvalidBaselineIdentifier(
            f"'{identifier}' is not of the form <version>-commit-<hash>"
        )
    return identifier


def _split(identifier: str) -> tuple[str, str]:
    if not is_commit_baseline(identifier):
        raise InvalidBaselineIdentifier(
            f"'{identifier}' is not of the form <version>-commit-<hash>"
        )
    version, _, commit = identifier.partition(COMMIT_SEPARATOR)
    return version, commit


def version_of(identifier: str) -> str:
    """Return the version part, e.g. ``5.1`` for ``5.1-commit-1a2b3c4``."""
    return _split(identifier)[0]


def commit_of(identifier: str) -> str:
    """Return the abbreviated commit hash part of ``identifier``."""
    return _split(identifier)[1]

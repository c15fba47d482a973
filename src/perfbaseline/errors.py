"""Exception types raised by perfbaseline."""

from __future__ import annotations


class PerfBaselineError(Exception):
    """Base class for every failure reported by the CLI."""


class ConfigError(PerfBaselineError):
    """The configuration file could not be read or has the wrong shape."""


class ResolutionFailure(PerfBaselineError):
    """A git query failed or returned unusable output while resolving the fork point."""


class CheckoutFailure(PerfBaselineError):
    """The baseline commit could not be checked out into the workspace."""


class BuildFailure(PerfBaselineError):
    """The nested build exited with a non-zero status."""

    def __init__(self, message: str, returncode: int | None = None):
        super().__init__(message)
        self.returncode = returncode

"""perfbaseline package.

Helpers for picking the commit that performance tests compare against and for
building a distribution of that commit to use as the baseline.
"""

__all__ = [
    "config",
    "errors",
    "identifier",
    "git",
    "forkpoint",
    "distribution",
    "state",
]

"""Git integration for fork point queries and baseline checkouts."""

from .checkout import checkout_commit
from .repo import GitRepo

__all__ = [
    "GitRepo",
    "checkout_commit",
]

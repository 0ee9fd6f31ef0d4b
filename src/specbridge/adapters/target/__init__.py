"""
Target adapters.

Importing this package registers the built-in targets.
"""

from specbridge.adapters.target.base import (
    TargetAdapter,
    create_target,
    list_targets,
    register_target,
)
from specbridge.adapters.target.github import GitHubAdapter

__all__ = [
    "GitHubAdapter",
    "TargetAdapter",
    "create_target",
    "list_targets",
    "register_target",
]

"""
GitHub Issues target.

Importing this package registers the ``github`` target type.
"""

from specbridge.adapters.target.github.adapter import GitHubAdapter, detect_changes
from specbridge.adapters.target.github.api import ApiIssueRepository
from specbridge.adapters.target.github.gh_cli import CliIssueRepository
from specbridge.adapters.target.github.models import GitHubIssue, IssueDraft
from specbridge.adapters.target.github.repository import IssueRepository

__all__ = [
    "ApiIssueRepository",
    "CliIssueRepository",
    "GitHubAdapter",
    "GitHubIssue",
    "IssueDraft",
    "IssueRepository",
    "detect_changes",
]

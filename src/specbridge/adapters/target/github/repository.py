"""
Remote issue repository protocol.

The GitHub adapter talks to GitHub only through this narrow interface.
Two implementations exist, one over the REST API and one over the gh CLI,
and the adapter never branches on which one it holds.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from specbridge.adapters.target.github.models import GitHubIssue, IssueDraft


@runtime_checkable
class IssueRepository(Protocol):
    """
    Protocol for issue storage on one repository.

    All methods raise SpecBridgeError subclasses on failure:
    AuthenticationError, RateLimitError or AdapterError.
    """

    def validate_access(self) -> None:
        """
        Check the repository is reachable with the configured credentials.

        Raises:
            AuthenticationError: If the repository cannot be accessed
        """
        ...

    def find_by_label(self, label: str) -> GitHubIssue | None:
        """Return the first issue (open or closed) carrying ``label``."""
        ...

    def create(self, draft: IssueDraft) -> GitHubIssue:
        """Create an issue. A draft with state 'closed' is closed right after creation."""
        ...

    def update(self, existing: GitHubIssue, draft: IssueDraft) -> None:
        """Apply title, body, state, label set and assignee to an existing issue."""
        ...

    def add_comment(self, issue_number: int, body: str) -> None:
        """Add a markdown comment to an issue."""
        ...

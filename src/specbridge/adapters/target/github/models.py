"""
GitHub data models for SpecBridge.

Defines Pydantic models for issues read back from GitHub (via REST or the
gh CLI) and for the issue content SpecBridge wants to write.
"""

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, computed_field


def _label_names(labels_data: object) -> list[str]:
    labels: list[str] = []
    if isinstance(labels_data, list):
        for label in labels_data:
            if isinstance(label, dict) and isinstance(label.get("name"), str):
                labels.append(label["name"])
            elif isinstance(label, str):
                labels.append(label)
    return labels


def _logins(assignees_data: object) -> list[str]:
    logins: list[str] = []
    if isinstance(assignees_data, list):
        for assignee in assignees_data:
            if isinstance(assignee, dict) and isinstance(assignee.get("login"), str):
                logins.append(assignee["login"])
    return logins


class GitHubIssue(BaseModel):
    """
    A GitHub issue.

    Represents data fetched from the REST API or `gh issue list --json`.
    """

    number: int = Field(..., description="Issue number")
    title: str = Field(..., description="Issue title")
    body: str = Field(default="", description="Issue body (markdown)")
    state: str = Field(default="open", description="Issue state (open/closed)")
    labels: list[str] = Field(default_factory=list, description="Label names")
    assignees: list[str] = Field(default_factory=list, description="Assignee logins")
    url: str = Field(default="", description="HTML URL for the issue")

    @computed_field  # type: ignore[prop-decorator]
    @property
    def is_open(self) -> bool:
        """Check if issue is open."""
        return self.state == "open"

    @property
    def assignee(self) -> str | None:
        """First assignee, the only one SpecBridge manages."""
        return self.assignees[0] if self.assignees else None

    @classmethod
    def from_rest(cls, data: dict[str, object]) -> GitHubIssue:
        """
        Create GitHubIssue from a REST API issue object.

        Args:
            data: JSON from `GET /repos/{owner}/{repo}/issues`

        Returns:
            GitHubIssue instance
        """
        assignees = _logins(data.get("assignees"))
        if not assignees:
            single = data.get("assignee")
            if isinstance(single, dict) and isinstance(single.get("login"), str):
                assignees = [single["login"]]

        number = data.get("number", 0)
        return cls(
            number=int(number) if isinstance(number, (int, float)) else 0,
            title=str(data.get("title") or ""),
            body=str(data.get("body") or ""),
            state=str(data.get("state") or "open").lower(),
            labels=_label_names(data.get("labels")),
            assignees=assignees,
            url=str(data.get("html_url") or ""),
        )

    @classmethod
    def from_gh_cli(cls, data: dict[str, object]) -> GitHubIssue:
        """
        Create GitHubIssue from `gh issue list --json` output.

        gh reports state in upper case (OPEN/CLOSED) and the URL as ``url``.
        """
        number = data.get("number", 0)
        return cls(
            number=int(number) if isinstance(number, (int, float)) else 0,
            title=str(data.get("title") or ""),
            body=str(data.get("body") or ""),
            state=str(data.get("state") or "open").lower(),
            labels=_label_names(data.get("labels")),
            assignees=_logins(data.get("assignees")),
            url=str(data.get("url") or ""),
        )


class IssueDraft(BaseModel):
    """
    Issue content to create or apply.

    A ``state`` of None leaves the issue state as it is on update; an
    ``assignee`` of None leaves its assignees as they are.
    """

    title: str
    body: str
    labels: list[str] = Field(default_factory=list)
    assignee: str | None = None
    state: Literal["open", "closed"] | None = None

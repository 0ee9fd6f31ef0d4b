"""
GitHub REST API issue repository.

Talks to the GitHub REST API (v3) with httpx using a bearer token.

Endpoints used:
- GET   /repos/{owner}/{repo}
- GET   /repos/{owner}/{repo}/issues?labels={label}&state=all
- POST  /repos/{owner}/{repo}/issues
- PATCH /repos/{owner}/{repo}/issues/{number}
- POST  /repos/{owner}/{repo}/issues/{number}/comments
"""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from specbridge.adapters.target.github.models import GitHubIssue, IssueDraft
from specbridge.core.config.models import GitHubSettings
from specbridge.core.errors import AdapterError, AuthenticationError, RateLimitError

PLATFORM = "github"
DEFAULT_TIMEOUT = 30.0

logger = logging.getLogger(__name__)


def _retry_after(response: httpx.Response) -> int | None:
    """Seconds to wait, from Retry-After or x-ratelimit-reset headers."""
    retry_after = response.headers.get("retry-after")
    if retry_after and retry_after.isdigit():
        return int(retry_after)
    reset = response.headers.get("x-ratelimit-reset")
    if reset and reset.isdigit():
        return max(0, int(reset) - int(time.time()))
    return None


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text.strip() or response.reason_phrase
    if isinstance(data, dict) and isinstance(data.get("message"), str):
        return data["message"]
    return response.reason_phrase


class ApiIssueRepository:
    """
    Issue repository backed by the GitHub REST API.

    Example:
        >>> repo = ApiIssueRepository(settings)
        >>> repo.validate_access()
        >>> issue = repo.find_by_label("specbridge:task-id:1.1")
    """

    def __init__(self, settings: GitHubSettings, client: httpx.Client | None = None) -> None:
        """
        Initialize the repository.

        Args:
            settings: GitHub target settings (token must be set)
            client: Preconfigured httpx client, mainly for tests
        """
        self.settings = settings
        self.client = client or httpx.Client(
            base_url=settings.api_url,
            headers={
                "Accept": "application/vnd.github+json",
                "Authorization": f"Bearer {settings.token}",
                "X-GitHub-Api-Version": "2022-11-28",
            },
            timeout=DEFAULT_TIMEOUT,
        )

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.settings.owner}/{self.settings.repo}"

    def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        logger.debug("GitHub API %s %s", method, path)
        try:
            response = self.client.request(method, path, **kwargs)
        except httpx.HTTPError as e:
            raise AdapterError(PLATFORM, f"{method} {path} failed: {e}") from e

        status = response.status_code
        exhausted = response.headers.get("x-ratelimit-remaining") == "0"
        if status == 429 or (status == 403 and exhausted):
            raise RateLimitError(PLATFORM, _retry_after(response))
        if status == 401:
            raise AuthenticationError("GitHub", _error_message(response))
        if status >= 400:
            message = _error_message(response)
            raise AdapterError(PLATFORM, f"HTTP {status} for {method} {path}: {message}")
        return response

    def _json(self, response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as e:
            raise AdapterError(PLATFORM, f"Failed to parse GitHub API response: {e}") from e

    def validate_access(self) -> None:
        try:
            self._request("GET", self.repo_path)
        except (AdapterError, AuthenticationError) as e:
            raise AuthenticationError("GitHub", "failed to access repository") from e

    def find_by_label(self, label: str) -> GitHubIssue | None:
        response = self._request(
            "GET",
            f"{self.repo_path}/issues",
            params={"labels": label, "state": "all", "per_page": 10},
        )
        data = self._json(response)
        if not isinstance(data, list):
            return None
        for item in data:
            # The issues endpoint also lists pull requests
            if isinstance(item, dict) and "pull_request" not in item:
                return GitHubIssue.from_rest(item)
        return None

    def create(self, draft: IssueDraft) -> GitHubIssue:
        payload: dict[str, Any] = {
            "title": draft.title,
            "body": draft.body,
            "labels": draft.labels,
        }
        if draft.assignee:
            payload["assignees"] = [draft.assignee]

        response = self._request("POST", f"{self.repo_path}/issues", json=payload)
        issue = GitHubIssue.from_rest(self._json(response))

        if draft.state == "closed":
            self._request(
                "PATCH", f"{self.repo_path}/issues/{issue.number}", json={"state": "closed"}
            )
            issue = issue.model_copy(update={"state": "closed"})
        return issue

    def update(self, existing: GitHubIssue, draft: IssueDraft) -> None:
        payload: dict[str, Any] = {
            "title": draft.title,
            "body": draft.body,
            "labels": draft.labels,
        }
        if draft.state is not None:
            payload["state"] = draft.state
        if draft.assignee:
            payload["assignees"] = [draft.assignee]
        self._request("PATCH", f"{self.repo_path}/issues/{existing.number}", json=payload)

    def add_comment(self, issue_number: int, body: str) -> None:
        self._request(
            "POST", f"{self.repo_path}/issues/{issue_number}/comments", json={"body": body}
        )

    def close(self) -> None:
        self.client.close()

"""
GitHub CLI issue repository.

Provides the issue operations SpecBridge needs via the `gh` CLI tool,
reusing the user's existing `gh auth login` session. Every command is run
with an argument list; nothing is interpolated into a shell string.
"""

from __future__ import annotations

import json
import logging
import re
import subprocess

from specbridge.adapters.target.github.models import GitHubIssue, IssueDraft
from specbridge.core.config.models import GitHubSettings
from specbridge.core.errors import AdapterError, AuthenticationError

PLATFORM = "github"
ISSUE_FIELDS = "number,title,body,state,labels,assignees,url"
ISSUE_URL_PATTERN = re.compile(r"/issues/(\d+)")

logger = logging.getLogger(__name__)


class CliIssueRepository:
    """
    Issue repository backed by the `gh` CLI.

    Requires `gh` to be installed and authenticated.

    Example:
        >>> repo = CliIssueRepository(settings)
        >>> repo.validate_access()
        >>> repo.add_comment(12, "Synced")
    """

    def __init__(self, settings: GitHubSettings) -> None:
        self.settings = settings
        self._known_labels: set[str] = set()

    @property
    def repo_arg(self) -> str:
        return self.settings.full_name

    @staticmethod
    def is_available() -> bool:
        """
        Check if the GitHub CLI is installed.

        Returns:
            True if `gh --version` runs successfully
        """
        try:
            result = subprocess.run(
                ["gh", "--version"],
                capture_output=True,
                text=True,
                check=False,
            )
            return result.returncode == 0
        except (OSError, FileNotFoundError):
            return False

    def _run(self, args: list[str], action: str) -> str:
        """
        Run a gh command and return its stdout.

        Raises:
            AdapterError: If gh cannot be started or exits non-zero
        """
        logger.debug("Running gh %s", " ".join(args[:3]))
        try:
            result = subprocess.run(
                ["gh", *args],
                capture_output=True,
                text=True,
                check=False,
            )
        except (OSError, FileNotFoundError) as e:
            raise AdapterError(PLATFORM, f"Failed to run gh command: {e}") from e

        if result.returncode != 0:
            error_msg = result.stderr.strip() or result.stdout.strip() or "Unknown error"
            raise AdapterError(PLATFORM, f"Failed to {action}: {error_msg}")
        return result.stdout

    def _ensure_labels(self, labels: list[str]) -> None:
        """Create any labels not yet known to exist (`--force` makes this idempotent)."""
        for label in labels:
            if label in self._known_labels:
                continue
            self._run(
                ["label", "create", label, "--repo", self.repo_arg, "--force"],
                f"create label '{label}'",
            )
            self._known_labels.add(label)

    def validate_access(self) -> None:
        try:
            self._run(["repo", "view", self.repo_arg, "--json", "name"], "view repository")
        except AdapterError as e:
            raise AuthenticationError("GitHub", "failed to access repository via gh CLI") from e

    def find_by_label(self, label: str) -> GitHubIssue | None:
        output = self._run(
            [
                "issue",
                "list",
                "--repo",
                self.repo_arg,
                "--label",
                label,
                "--state",
                "all",
                "--limit",
                "1",
                "--json",
                ISSUE_FIELDS,
            ],
            "list issues",
        )
        try:
            data = json.loads(output or "[]")
        except json.JSONDecodeError as e:
            raise AdapterError(PLATFORM, f"Failed to parse gh output: {e}") from e

        if isinstance(data, list) and data and isinstance(data[0], dict):
            return GitHubIssue.from_gh_cli(data[0])
        return None

    def create(self, draft: IssueDraft) -> GitHubIssue:
        self._ensure_labels(draft.labels)

        args = [
            "issue",
            "create",
            "--repo",
            self.repo_arg,
            "--title",
            draft.title,
            "--body",
            draft.body,
        ]
        for label in draft.labels:
            args.extend(["--label", label])
        if draft.assignee:
            args.extend(["--assignee", draft.assignee])

        # Output is the issue URL
        url = self._run(args, "create issue").strip()
        match = ISSUE_URL_PATTERN.search(url)
        if not match:
            raise AdapterError(PLATFORM, f"Could not determine issue number from gh output: {url}")
        number = int(match.group(1))

        state = "open"
        if draft.state == "closed":
            self._run(["issue", "close", str(number), "--repo", self.repo_arg], "close issue")
            state = "closed"

        return GitHubIssue(
            number=number,
            title=draft.title,
            body=draft.body,
            state=state,
            labels=list(draft.labels),
            assignees=[draft.assignee] if draft.assignee else [],
            url=url,
        )

    def update(self, existing: GitHubIssue, draft: IssueDraft) -> None:
        added = [label for label in draft.labels if label not in existing.labels]
        removed = [label for label in existing.labels if label not in draft.labels]
        self._ensure_labels(added)

        args = [
            "issue",
            "edit",
            str(existing.number),
            "--repo",
            self.repo_arg,
            "--title",
            draft.title,
            "--body",
            draft.body,
        ]
        for label in added:
            args.extend(["--add-label", label])
        for label in removed:
            args.extend(["--remove-label", label])
        if draft.assignee:
            # The draft assignee ends up as the only assignee
            if draft.assignee not in existing.assignees:
                args.extend(["--add-assignee", draft.assignee])
            for login in existing.assignees:
                if login != draft.assignee:
                    args.extend(["--remove-assignee", login])
        self._run(args, "update issue")

        if draft.state is not None and draft.state != existing.state:
            command = "close" if draft.state == "closed" else "reopen"
            self._run(
                ["issue", command, str(existing.number), "--repo", self.repo_arg],
                f"{command} issue",
            )

    def add_comment(self, issue_number: int, body: str) -> None:
        self._run(
            ["issue", "comment", str(issue_number), "--repo", self.repo_arg, "--body", body],
            "add comment",
        )

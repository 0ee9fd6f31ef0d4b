"""
GitHub Issues target adapter.

Each requirement, task and design document maps to one GitHub issue. The
issue is found again on later runs through its marker label
(``specbridge:<kind>-id:<id>``), so repeated syncs update instead of
duplicating.
"""

from __future__ import annotations

import logging

from specbridge.adapters.target.base import TargetAdapter, register_target
from specbridge.adapters.target.github.api import ApiIssueRepository
from specbridge.adapters.target.github.formatting import (
    build_labels,
    design_title,
    format_change_comment,
    format_design_body,
    format_requirement_body,
    format_task_body,
    marker_label,
)
from specbridge.adapters.target.github.gh_cli import CliIssueRepository
from specbridge.adapters.target.github.models import GitHubIssue, IssueDraft
from specbridge.adapters.target.github.repository import IssueRepository
from specbridge.core.config.models import GitHubSettings
from specbridge.core.errors import AdapterError, AuthenticationError, SpecBridgeError
from specbridge.core.models import (
    Design,
    FieldChange,
    Requirement,
    SyncChange,
    SyncResult,
    Task,
    TaskStatus,
)


def _describe(error: Exception) -> str:
    if isinstance(error, SpecBridgeError):
        return error.message
    return f"{type(error).__name__}: {error}"


def detect_changes(existing: GitHubIssue, title: str, assignee: str | None) -> list[FieldChange]:
    """
    Diff the fields SpecBridge reports on: title and assignee.

    The assignee is only compared when one is given; issues assigned by
    hand on GitHub are left alone.

    Example:
        >>> issue = GitHubIssue(number=1, title="Old")
        >>> [c.field for c in detect_changes(issue, "New", None)]
        ['title']
    """
    changes: list[FieldChange] = []
    if existing.title != title:
        changes.append(FieldChange(field="title", old_value=existing.title, new_value=title))
    if assignee is not None and existing.assignee != assignee:
        changes.append(
            FieldChange(field="assignee", old_value=existing.assignee, new_value=assignee)
        )
    return changes


@register_target("github")
class GitHubAdapter(TargetAdapter):
    """
    Sync requirements, tasks and design documents to GitHub Issues.

    The transport is chosen from ``auth_method``: the REST API with a token,
    or the gh CLI session. Tests inject a repository directly.

    Example:
        >>> adapter = GitHubAdapter(settings, name="github")
        >>> adapter.init()
        >>> result = adapter.sync_tasks(spec.tasks)
    """

    platform = "github"
    supports_design = True

    def __init__(
        self,
        settings: GitHubSettings,
        name: str | None = None,
        logger: logging.Logger | None = None,
        repository: IssueRepository | None = None,
    ) -> None:
        super().__init__(name=name, logger=logger)
        self.settings = settings
        self.repository = repository

    def init(self) -> None:
        if self.repository is None:
            self.repository = self._build_repository()
        self.repository.validate_access()
        self.logger.info("GitHub target '%s' ready for %s", self.name, self.settings.full_name)

    def _build_repository(self) -> IssueRepository:
        if self.settings.auth_method == "token":
            if not self.settings.token:
                raise AuthenticationError("GitHub", "token is required")
            return ApiIssueRepository(self.settings)

        if not CliIssueRepository.is_available():
            raise AdapterError(
                self.platform,
                "GitHub CLI (gh) is not installed.\n"
                "Install: https://cli.github.com/\n"
                "Authenticate: gh auth login",
            )
        return CliIssueRepository(self.settings)

    @property
    def _repo(self) -> IssueRepository:
        if self.repository is None:
            raise AdapterError(self.platform, "adapter is not initialized")
        return self.repository

    def _upsert(
        self,
        result: SyncResult,
        item_type: str,
        item_id: str,
        label: str,
        draft: IssueDraft,
    ) -> None:
        """Create or update the issue carrying ``label`` and record the outcome."""
        existing = self._repo.find_by_label(label)

        if existing is None:
            issue = self._repo.create(draft)
            result.created += 1
            result.changes.append(
                SyncChange(
                    action="created",
                    item_type=item_type,  # type: ignore[arg-type]
                    item_id=item_id,
                    remote_id=str(issue.number),
                )
            )
            self.logger.debug("Created issue #%d for %s %s", issue.number, item_type, item_id)
            return

        changes = detect_changes(existing, draft.title, draft.assignee)
        self._repo.update(existing, draft)
        result.updated += 1
        result.changes.append(
            SyncChange(
                action="updated",
                item_type=item_type,  # type: ignore[arg-type]
                item_id=item_id,
                changes=tuple(changes),
                remote_id=str(existing.number),
            )
        )
        self.logger.debug("Updated issue #%d for %s %s", existing.number, item_type, item_id)

        if changes and self.settings.add_comments:
            try:
                self._repo.add_comment(existing.number, format_change_comment(changes))
            except SpecBridgeError as e:
                self.logger.warning(
                    "Failed to comment on issue #%d: %s", existing.number, e.message
                )

    def sync_requirements(self, requirements: list[Requirement]) -> SyncResult:
        result = self.new_result("requirements")
        for req in requirements:
            label = marker_label("req", req.id)
            draft = IssueDraft(
                title=req.title,
                body=format_requirement_body(req),
                labels=build_labels(req.labels, label),
            )
            try:
                self._upsert(result, "requirement", req.id, label, draft)
            except Exception as e:
                result.add_error(f"Failed to sync requirement {req.id}: {_describe(e)}")
        return result

    def sync_tasks(self, tasks: list[Task]) -> SyncResult:
        result = self.new_result("tasks")
        for task in tasks:
            label = marker_label("task", task.id)
            draft = IssueDraft(
                title=task.title,
                body=format_task_body(task),
                labels=build_labels(task.labels, label),
                assignee=task.assignee,
                state="closed" if task.is_done else "open",
            )
            try:
                self._upsert(result, "task", task.id, label, draft)
            except Exception as e:
                result.add_error(f"Failed to sync task {task.id}: {_describe(e)}")
        return result

    def sync_design(self, design: Design) -> SyncResult:
        result = self.new_result("design")
        item_id = design.spec_name or "design"
        label = marker_label("design", item_id)
        draft = IssueDraft(
            title=design_title(design),
            body=format_design_body(design),
            labels=[label],
        )
        try:
            self._upsert(result, "design", item_id, label, draft)
        except Exception as e:
            result.add_error(f"Failed to sync design {item_id}: {_describe(e)}")
        return result

    def get_task_status(self, task_id: str) -> TaskStatus:
        """
        Read a task's status back from GitHub.

        Only open/closed is visible remotely: closed maps to DONE and
        anything else, including a missing issue, to TODO.
        """
        issue = self._repo.find_by_label(marker_label("task", task_id))
        if issue is None or issue.is_open:
            return TaskStatus.TODO
        return TaskStatus.DONE

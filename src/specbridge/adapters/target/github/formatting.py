"""
Issue body, label and comment formatting for the GitHub target.

Output must be byte-identical for identical input so repeated syncs
write the same issue bodies.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from specbridge.core.models import Design, FieldChange, Requirement, Task, utc_now

TOOL_LABEL_PREFIX = "specbridge"
SYNC_TRAILER = "\n---\n*Synced by SpecBridge*"
COMMENT_HEADER = "🔄 **Synced by SpecBridge**"


def marker_label(kind: str, item_id: str) -> str:
    """
    Build the correlation label for an item.

    Example:
        >>> marker_label("task", "1.2")
        'specbridge:task-id:1.2'
    """
    return f"{TOOL_LABEL_PREFIX}:{kind}-id:{item_id}"


def build_labels(labels: Iterable[str] | None, sync_label: str) -> list[str]:
    """Item labels followed by the marker label, without duplicates."""
    result: list[str] = []
    for label in [*(labels or []), sync_label]:
        if label not in result:
            result.append(label)
    return result


def format_task_body(task: Task) -> str:
    body = f"# {task.title}\n\n"
    if task.description:
        body += f"{task.description}\n\n"
    body += f"**Status:** {task.status.value}\n"
    if task.assignee:
        body += f"**Assignee:** @{task.assignee}\n"
    if task.parent_id:
        body += f"**Parent Task:** {task.parent_id}\n"
    return body + SYNC_TRAILER


def format_requirement_body(requirement: Requirement) -> str:
    body = f"# {requirement.title}\n\n"
    if requirement.description:
        body += f"{requirement.description}\n\n"
    if requirement.priority:
        body += f"**Priority:** {requirement.priority}\n"
    return body + SYNC_TRAILER


def format_design_body(design: Design) -> str:
    return f"{design.content.strip()}\n" + SYNC_TRAILER


def design_title(design: Design, fallback: str = "design") -> str:
    return f"Design: {design.spec_name or fallback}"


def format_change_comment(changes: Iterable[FieldChange], timestamp: datetime | None = None) -> str:
    """
    Format the audit comment posted when an existing issue's title or assignee changes.

    Args:
        changes: Field-level diffs
        timestamp: Time to report (defaults to now)

    Returns:
        Markdown comment body
    """
    when = (timestamp or utc_now()).isoformat()
    comment = f"{COMMENT_HEADER}\n\n**Time:** {when}\n\n**Changes:**\n"
    for change in changes:
        comment += f"- **{change.field}:** {change.old_value} → {change.new_value}\n"
    return comment

"""
Unified data model for SpecBridge.

Source adapters convert their documents into SpecData; target adapters
consume SpecData and report what they did as SyncResult objects. Nothing
here knows about a particular markdown convention or platform.
"""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, computed_field


def utc_now() -> datetime:
    """Current time as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


class TaskStatus(str, Enum):
    """Status of a task in a spec."""

    TODO = "todo"
    IN_PROGRESS = "in_progress"
    DONE = "done"
    BLOCKED = "blocked"


class SpecMeta(BaseModel):
    """Metadata for one parsed spec (or merged set of specs)."""

    name: str = Field(..., description="Spec name, derived from its directory")
    version: str = Field(default="1.0.0", description="Spec format version")
    created_at: datetime = Field(default_factory=utc_now)
    updated_at: datetime = Field(default_factory=utc_now)


class Requirement(BaseModel):
    """A numbered requirement section from requirements.md."""

    id: str = Field(..., description="Requirement ID, e.g. 'req-1' or 'auth:req-1'")
    title: str
    description: str = ""
    priority: str | None = Field(default=None, description="high/medium/low")
    labels: list[str] = Field(default_factory=list)
    sync_id: str | None = Field(default=None, description="Remote platform ID")


class Task(BaseModel):
    """A checkbox task from tasks.md."""

    id: str = Field(..., description="Dotted task ID, e.g. '1.2' or 'auth:1.2'")
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.TODO
    assignee: str | None = None
    parent_id: str | None = None
    labels: list[str] = Field(default_factory=list)
    sync_id: str | None = None
    spec_name: str | None = Field(default=None, description="Owning spec when merged")
    spec_path: str | None = Field(default=None, description="Owning spec directory when merged")

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE


class Design(BaseModel):
    """The design document, kept as a single markdown blob."""

    content: str
    sections: dict[str, str] = Field(default_factory=dict)
    spec_name: str | None = None


class EpicStatus(BaseModel):
    """Overall completion of an epic, derived from its tasks."""

    status: Literal["todo", "in_progress", "done"]
    progress: int = Field(default=0, ge=0, le=100, description="Percent of tasks done")
    total: int = 0
    completed: int = 0
    in_progress: int = 0
    todo: int = 0

    @classmethod
    def from_tasks(cls, tasks: list[Task]) -> EpicStatus:
        """
        Compute epic status from a task list.

        All tasks done means done, nothing started means todo,
        anything else is in progress.
        """
        total = len(tasks)
        completed = sum(1 for t in tasks if t.status == TaskStatus.DONE)
        in_progress = sum(1 for t in tasks if t.status == TaskStatus.IN_PROGRESS)
        todo = total - completed - in_progress

        if total == 0:
            status = "todo"
        elif completed == total:
            status = "done"
        elif completed == 0 and in_progress == 0:
            status = "todo"
        else:
            status = "in_progress"

        progress = round(completed * 100 / total) if total else 0
        return cls(
            status=status,
            progress=progress,
            total=total,
            completed=completed,
            in_progress=in_progress,
            todo=todo,
        )


class SpecData(BaseModel):
    """Top-level container produced by a source adapter."""

    meta: SpecMeta
    requirements: list[Requirement] = Field(default_factory=list)
    design: Design | None = None
    tasks: list[Task] = Field(default_factory=list)
    epic_title: str = ""
    epic_description: str = ""

    @computed_field  # type: ignore[prop-decorator]
    @property
    def epic_status(self) -> EpicStatus:
        return EpicStatus.from_tasks(self.tasks)


class FieldChange(BaseModel):
    """Old and new value of one field."""

    model_config = ConfigDict(frozen=True)

    field: str
    old_value: Any = None
    new_value: Any = None


class SyncChange(BaseModel):
    """Audit record for one item touched during a sync."""

    model_config = ConfigDict(frozen=True)

    timestamp: datetime = Field(default_factory=utc_now)
    action: Literal["created", "updated", "closed"]
    item_type: Literal["requirement", "task", "design"]
    item_id: str
    changes: tuple[FieldChange, ...] = ()
    remote_id: str | None = Field(default=None, description="Platform ID the item maps to")


class SyncResult(BaseModel):
    """
    Outcome of one adapter call.

    Results can be merged: counts and lists are unioned and the success
    flags are ANDed.

    Example:
        >>> a = SyncResult(created=1)
        >>> b = SyncResult(success=False, failed=1, errors=["boom"])
        >>> merged = a.merge(b)
        >>> (merged.success, merged.created, merged.failed)
        (False, 1, 1)
    """

    success: bool = True
    created: int = 0
    updated: int = 0
    failed: int = 0
    changes: list[SyncChange] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    target: str | None = Field(default=None, description="Name of the target adapter")
    kind: str | None = Field(default=None, description="requirements, tasks or design")

    def add_error(self, message: str) -> None:
        """Record a per-item failure."""
        self.success = False
        self.failed += 1
        self.errors.append(message)

    def merge(self, other: SyncResult) -> SyncResult:
        return SyncResult(
            success=self.success and other.success,
            created=self.created + other.created,
            updated=self.updated + other.updated,
            failed=self.failed + other.failed,
            changes=[*self.changes, *other.changes],
            errors=[*self.errors, *other.errors],
            target=self.target if self.target == other.target else None,
            kind=self.kind if self.kind == other.kind else None,
        )

    def summary(self) -> str:
        """Short human-readable summary of the counts."""
        return f"created {self.created}, updated {self.updated}, failed {self.failed}"


def merge_results(results: list[SyncResult]) -> SyncResult:
    """Fold a list of results into one. An empty list yields an empty success."""
    if not results:
        return SyncResult()
    merged = results[0].model_copy(deep=True)
    for result in results[1:]:
        merged = merged.merge(result)
    return merged

"""
Sync engine.

Coordinates one sync run: parse the specs once through a source adapter,
narrow the parsed data to the requested scope, then push it to each target
adapter in turn. A failing target is recorded as a failed result and never
stops the remaining targets; a failing parse aborts the run.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from specbridge.adapters.source.base import SourceAdapter
from specbridge.adapters.target.base import TargetAdapter
from specbridge.core.models import SpecData, SyncResult, utc_now


class SyncScope(str, Enum):
    """Which items a sync run covers."""

    ALL = "all"
    REQUIREMENTS = "requirements"
    TASKS = "tasks"
    SINGLE = "single"


class SyncOptions(BaseModel):
    """
    Options for one sync run.

    Leaving ``scope`` unset syncs tasks only; ``SyncScope.ALL`` adds
    requirements and the design document.
    """

    model_config = ConfigDict(frozen=True)

    scope: SyncScope | None = Field(default=None, description="Items to sync; None means tasks")
    item_id: str | None = Field(default=None, description="Item id for the single scope")
    dry_run: bool = Field(default=False, description="Report without touching any target")
    path: Path | None = Field(default=None, description="Spec path handed to the source")


class EngineStatus(BaseModel):
    """Snapshot of the engine state."""

    state: Literal["idle", "syncing", "error"] = "idle"
    last_sync: str | None = Field(default=None, description="ISO timestamp of the last run")
    results: list[SyncResult] = Field(default_factory=list)


class SyncEngine:
    """
    Runs spec -> platform synchronization.

    The engine keeps every result it has produced in an in-memory history
    for the lifetime of the instance.

    Example:
        >>> engine = SyncEngine(logger=logging.getLogger("specbridge"))
        >>> results = engine.sync(KiroSource(), [adapter], SyncOptions(scope=SyncScope.ALL))
        >>> engine.get_status().state
        'idle'
    """

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)
        self._status = EngineStatus()
        self._history: list[SyncResult] = []

    def sync(
        self,
        source: SourceAdapter,
        targets: list[TargetAdapter],
        options: SyncOptions | None = None,
    ) -> list[SyncResult]:
        """
        Parse once and sync the result to every target.

        Args:
            source: Source adapter to parse specs with
            targets: Target adapters, synced sequentially in order
            options: Scope, dry-run and path settings

        Returns:
            Results in target order; each target contributes one entry per
            item kind it synced, or a single failed entry if it raised

        Raises:
            Exception: Whatever the source raised while parsing
        """
        opts = options or SyncOptions()
        self._status = EngineStatus(state="syncing")

        self.logger.debug("Starting sync with source '%s'", source.name)
        self.logger.debug("Targets: %s", ", ".join(t.name for t in targets) or "none")

        try:
            spec_data = source.parse(opts.path or Path.cwd())
        except Exception as e:
            self.logger.error("Failed to parse specs: %s", e)
            self._status = EngineStatus(state="error", last_sync=utc_now().isoformat())
            raise

        filtered = self._filter_by_scope(spec_data, opts)
        self.logger.debug(
            "Filtered data: %d requirements, %d tasks",
            len(filtered.requirements),
            len(filtered.tasks),
        )

        results: list[SyncResult] = []
        for target in targets:
            try:
                results.extend(self._sync_to_target(target, filtered, opts))
            except Exception as e:
                self.logger.error("Failed to sync to %s: %s", target.name, e)
                results.append(
                    SyncResult(success=False, failed=1, errors=[str(e)], target=target.name)
                )

        self._history.extend(results)
        has_errors = any(not result.success for result in results)
        self._status = EngineStatus(
            state="error" if has_errors else "idle",
            last_sync=utc_now().isoformat(),
            results=results,
        )
        self.logger.debug("Sync finished with %d results", len(results))
        return results

    def _sync_to_target(
        self,
        target: TargetAdapter,
        data: SpecData,
        options: SyncOptions,
    ) -> list[SyncResult]:
        if options.dry_run:
            self.logger.info("[DRY RUN] Would sync to %s", target.name)
            return [SyncResult(target=target.name)]

        target.ensure_initialized()
        scope = options.scope
        results: list[SyncResult] = []

        if scope in (SyncScope.ALL, SyncScope.REQUIREMENTS, SyncScope.SINGLE) and data.requirements:
            self.logger.debug("Syncing %d requirements to %s", len(data.requirements), target.name)
            result = target.sync_requirements(data.requirements)
            results.append(self._stamp(result, target, "requirements"))

        if scope in (None, SyncScope.ALL, SyncScope.TASKS, SyncScope.SINGLE) and data.tasks:
            self.logger.debug("Syncing %d tasks to %s", len(data.tasks), target.name)
            result = target.sync_tasks(data.tasks)
            results.append(self._stamp(result, target, "tasks"))

        if scope == SyncScope.ALL and data.design is not None and target.supports_design:
            self.logger.debug("Syncing design document to %s", target.name)
            result = target.sync_design(data.design)
            results.append(self._stamp(result, target, "design"))

        return results

    @staticmethod
    def _stamp(result: SyncResult, target: TargetAdapter, kind: str) -> SyncResult:
        return result.model_copy(update={"target": target.name, "kind": kind})

    @staticmethod
    def _filter_by_scope(data: SpecData, options: SyncOptions) -> SpecData:
        """
        Narrow parsed data to the requested scope.

        The design document is carried through every scope; whether it is
        sent is decided per target.
        """
        scope = options.scope
        if scope in (None, SyncScope.ALL):
            return data

        requirements = []
        tasks = []
        if scope == SyncScope.REQUIREMENTS:
            requirements = list(data.requirements)
        elif scope == SyncScope.TASKS:
            tasks = list(data.tasks)
        elif scope == SyncScope.SINGLE and options.item_id:
            requirements = [r for r in data.requirements if r.id == options.item_id][:1]
            tasks = [t for t in data.tasks if t.id == options.item_id][:1]

        return data.model_copy(update={"requirements": requirements, "tasks": tasks})

    def get_status(self) -> EngineStatus:
        return self._status.model_copy(deep=True)

    def get_history(self) -> list[SyncResult]:
        return [result.model_copy(deep=True) for result in self._history]

    def clear_history(self) -> None:
        self._history = []

"""
Sync state persistence.

Keeps the flat local-id -> remote-id correlation table in
``.specbridge/sync-state.json`` and a summary of the last run in
``.specbridge/last-run.json``. Both files are rewritten wholesale on save;
there is no locking, so concurrent runs against one project race.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from specbridge.core.models import utc_now

STATE_DIR = ".specbridge"
STATE_FILE = "sync-state.json"
LAST_RUN_FILE = "last-run.json"

module_logger = logging.getLogger(__name__)


def _write_atomic(path: Path, content: str) -> None:
    """Write a file via temp file + rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    temp_path = path.with_suffix(".tmp")
    try:
        temp_path.write_text(content, encoding="utf-8")
        temp_path.replace(path)
    except OSError:
        if temp_path.exists():
            temp_path.unlink()
        raise


class RunRecord(BaseModel):
    """Summary of the most recent sync run."""

    finished_at: datetime = Field(default_factory=utc_now)
    scope: str | None = None
    dry_run: bool = False
    created: int = 0
    updated: int = 0
    failed: int = 0
    targets: list[str] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.failed == 0


class SyncStateManager:
    """
    Manages the persisted item-id -> platform-id mapping.

    Example:
        >>> manager = SyncStateManager(Path("."))
        >>> manager.load()
        >>> manager.set_sync_id("task-1", "99")
        >>> manager.save()
        >>> SyncStateManager(Path(".")).load()["task-1"]
        '99'
    """

    def __init__(
        self,
        project_root: Path | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """
        Initialize the state manager.

        Args:
            project_root: Project root directory (defaults to cwd)
            logger: Logger for load/save diagnostics
        """
        self.project_root = (project_root or Path.cwd()).resolve()
        self.logger = logger or module_logger
        self._state: dict[str, str] = {}

    @property
    def state_dir(self) -> Path:
        return self.project_root / STATE_DIR

    @property
    def state_file_path(self) -> Path:
        """Full path to the sync state file."""
        return self.state_dir / STATE_FILE

    @property
    def last_run_path(self) -> Path:
        return self.state_dir / LAST_RUN_FILE

    def load(self) -> dict[str, str]:
        """
        Load sync state from disk.

        A missing or corrupt file yields an empty mapping.

        Returns:
            Copy of the loaded mapping
        """
        self._state = {}
        if self.state_file_path.exists():
            try:
                data = json.loads(self.state_file_path.read_text(encoding="utf-8"))
            except (json.JSONDecodeError, OSError, UnicodeDecodeError) as e:
                self.logger.warning("Failed to load sync state: %s", e)
            else:
                if isinstance(data, dict):
                    self._state = {str(k): str(v) for k, v in data.items()}
                else:
                    self.logger.warning(
                        "Ignoring sync state at %s: expected a JSON object", self.state_file_path
                    )
        return dict(self._state)

    def save(self) -> None:
        """Write the whole mapping to disk."""
        _write_atomic(self.state_file_path, json.dumps(self._state, indent=2))
        self.logger.debug("Saved %d sync ids to %s", len(self._state), self.state_file_path)

    def get_sync_id(self, item_id: str) -> str | None:
        return self._state.get(item_id)

    def set_sync_id(self, item_id: str, sync_id: str) -> None:
        self._state[item_id] = sync_id

    def remove_sync_id(self, item_id: str) -> None:
        self._state.pop(item_id, None)

    def get_all(self) -> dict[str, str]:
        return dict(self._state)

    def clear(self) -> None:
        self._state = {}

    def has_synced(self, item_id: str) -> bool:
        return item_id in self._state

    def synced_count(self) -> int:
        return len(self._state)

    def save_last_run(self, record: RunRecord) -> None:
        """Persist the last-run summary."""
        _write_atomic(self.last_run_path, record.model_dump_json(indent=2))

    def load_last_run(self) -> RunRecord | None:
        """Load the last-run summary, or None if absent or unreadable."""
        if not self.last_run_path.exists():
            return None
        try:
            return RunRecord.model_validate_json(self.last_run_path.read_text(encoding="utf-8"))
        except (ValidationError, OSError, UnicodeDecodeError) as e:
            self.logger.warning("Failed to load last run summary: %s", e)
            return None

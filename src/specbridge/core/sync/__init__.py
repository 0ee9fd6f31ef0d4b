"""
Sync engine and persisted sync state.
"""

from specbridge.core.sync.engine import EngineStatus, SyncEngine, SyncOptions, SyncScope
from specbridge.core.sync.state import RunRecord, SyncStateManager

__all__ = [
    "EngineStatus",
    "RunRecord",
    "SyncEngine",
    "SyncOptions",
    "SyncScope",
    "SyncStateManager",
]

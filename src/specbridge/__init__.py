"""
SpecBridge - sync spec documents to issue trackers.

Reads requirements, design and task documents written in the Kiro markdown
convention and reconciles them with issues on a project management platform.
"""

__version__ = "0.1.0"

# Re-export core models for convenience
from specbridge.core.models import Requirement, SpecData, SyncResult, Task, TaskStatus

__all__ = ["Requirement", "SpecData", "SyncResult", "Task", "TaskStatus", "__version__"]

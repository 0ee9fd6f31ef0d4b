"""
Target adapter base class and registry.

Target adapters push SpecData items to a project management platform.
Each adapter is constructed with its validated platform settings; ``init``
checks credentials and connectivity before anything is synced.

Design sync is an optional capability advertised by ``supports_design``
rather than probed for at runtime.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any

from specbridge.core.config.models import TargetConfig
from specbridge.core.models import Design, Requirement, SyncResult, Task, TaskStatus


class TargetAdapter(ABC):
    """
    Base class for target adapters.

    Subclasses implement ``init``, ``sync_requirements``, ``sync_tasks`` and
    ``get_task_status``; adapters that set ``supports_design`` also implement
    ``sync_design``. Per-item failures are recorded on the returned
    SyncResult and never raised.
    """

    platform: str = "base"
    supports_design: bool = False

    def __init__(self, name: str | None = None, logger: logging.Logger | None = None) -> None:
        self.name = name or self.platform
        self.logger = logger or logging.getLogger(__name__)
        self.initialized = False

    @abstractmethod
    def init(self) -> None:
        """
        Validate credentials and connectivity.

        Raises:
            AuthenticationError: If credentials are missing or rejected
            AdapterError: If the platform tooling is unavailable
        """

    @abstractmethod
    def sync_requirements(self, requirements: list[Requirement]) -> SyncResult:
        """Create or update one remote item per requirement."""

    @abstractmethod
    def sync_tasks(self, tasks: list[Task]) -> SyncResult:
        """Create or update one remote item per task."""

    @abstractmethod
    def get_task_status(self, task_id: str) -> TaskStatus:
        """Read a task's status back from the platform."""

    def sync_design(self, design: Design) -> SyncResult:
        raise NotImplementedError(f"{self.platform} does not sync design documents")

    def ensure_initialized(self) -> None:
        """Run ``init`` once per adapter instance."""
        if not self.initialized:
            self.init()
            self.initialized = True

    def new_result(self, kind: str) -> SyncResult:
        return SyncResult(target=self.name, kind=kind)


# Target registry: platform type -> adapter class
_targets: dict[str, type[TargetAdapter]] = {}


def register_target(
    platform: str,
) -> Callable[[type[TargetAdapter]], type[TargetAdapter]]:
    """
    Decorator to register a target adapter for a platform type.

    Raises:
        ValueError: If the platform is already registered
    """

    def decorator(adapter_class: type[TargetAdapter]) -> type[TargetAdapter]:
        if platform in _targets:
            raise ValueError(f"Target '{platform}' is already registered.")
        _targets[platform] = adapter_class
        return adapter_class

    return decorator


def create_target(
    target_config: TargetConfig,
    logger: logging.Logger | None = None,
    **kwargs: Any,
) -> TargetAdapter:
    """
    Instantiate the adapter for a configured target.

    Raises:
        ValueError: If no adapter is registered for the target type
    """
    adapter_class = _targets.get(target_config.type)
    if adapter_class is None:
        available = ", ".join(sorted(_targets)) if _targets else "none registered"
        raise ValueError(
            f"Unsupported target adapter: {target_config.type}. Available targets: {available}"
        )
    return adapter_class(  # type: ignore[call-arg]
        target_config.config, name=target_config.name, logger=logger, **kwargs
    )


def list_targets() -> list[str]:
    return sorted(_targets.keys())

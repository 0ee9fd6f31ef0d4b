"""
Source adapter protocol and registry.

Source adapters read spec documents from disk and convert them to the
unified SpecData model. The pattern mirrors the target registry:
- SourceAdapter is a runtime_checkable Protocol
- Sources are registered with a decorator
- Sources are instantiated on demand, not at import time
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from pathlib import Path
from typing import Protocol, runtime_checkable

from specbridge.core.models import SpecData


@runtime_checkable
class SourceAdapter(Protocol):
    """
    Protocol for source adapter implementations.

    Sources are responsible for:
    - Detecting whether a path holds specs they understand
    - Parsing those specs into SpecData
    """

    @property
    def name(self) -> str:
        """Source name (e.g. 'kiro')."""
        ...

    def detect(self, path: Path) -> bool:
        """
        Check whether this source can handle the given path.

        Returns:
            True if specs are found. Never raises.
        """
        ...

    def parse(self, path: Path) -> SpecData:
        """
        Parse spec documents under ``path``.

        Raises:
            AdapterError: If the specs cannot be found or parsed
        """
        ...


class BaseSourceAdapter:
    """Shared behavior for source adapters."""

    name = "base"

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self.logger = logger or logging.getLogger(__name__)

    def validate_spec_data(self, data: SpecData) -> None:
        """
        Check that parsed data carries every mandatory field.

        Raises:
            ValueError: Describing the first problem found
        """
        meta = data.meta
        if not meta.name:
            raise ValueError("Invalid SpecData: missing meta.name")
        if not meta.version:
            raise ValueError("Invalid SpecData: missing meta.version")
        if meta.created_at is None:
            raise ValueError("Invalid SpecData: missing meta.created_at")
        if meta.updated_at is None:
            raise ValueError("Invalid SpecData: missing meta.updated_at")

        if not isinstance(data.requirements, list):
            raise ValueError("Invalid SpecData: requirements must be a list")
        if not isinstance(data.tasks, list):
            raise ValueError("Invalid SpecData: tasks must be a list")

        for index, req in enumerate(data.requirements):
            if not req.id:
                raise ValueError(f"Invalid requirement at index {index}: missing id")
            if not req.title:
                raise ValueError(f"Invalid requirement at index {index}: missing title")
            if not req.description:
                raise ValueError(f"Invalid requirement at index {index}: missing description")

        for index, task in enumerate(data.tasks):
            if not task.id:
                raise ValueError(f"Invalid task at index {index}: missing id")
            if not task.title:
                raise ValueError(f"Invalid task at index {index}: missing title")
            if not task.status:
                raise ValueError(f"Invalid task at index {index}: missing status")


# Source registry
_sources: dict[str, type[BaseSourceAdapter]] = {}


def register_source(
    name: str,
) -> Callable[[type[BaseSourceAdapter]], type[BaseSourceAdapter]]:
    """
    Decorator to register a source adapter implementation.

    Raises:
        ValueError: If source name is already registered
    """

    def decorator(source_class: type[BaseSourceAdapter]) -> type[BaseSourceAdapter]:
        if name in _sources:
            raise ValueError(
                f"Source '{name}' is already registered. "
                f"Available sources: {', '.join(_sources.keys())}"
            )
        _sources[name] = source_class
        return source_class

    return decorator


def get_source(name: str, logger: logging.Logger | None = None) -> BaseSourceAdapter:
    """
    Instantiate a registered source adapter.

    Raises:
        ValueError: If source name is not registered
    """
    source_class = _sources.get(name)
    if source_class is None:
        available = ", ".join(sorted(_sources)) if _sources else "none registered"
        raise ValueError(f"Source '{name}' not registered. Available sources: {available}")
    return source_class(logger=logger)


def list_sources() -> list[str]:
    return sorted(_sources.keys())

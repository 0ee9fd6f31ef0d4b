"""
Source adapters.

Importing this package registers the built-in sources.
"""

from specbridge.adapters.source.base import (
    BaseSourceAdapter,
    SourceAdapter,
    get_source,
    list_sources,
    register_source,
)
from specbridge.adapters.source.kiro import KiroSource

__all__ = [
    "BaseSourceAdapter",
    "KiroSource",
    "SourceAdapter",
    "get_source",
    "list_sources",
    "register_source",
]

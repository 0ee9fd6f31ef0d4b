"""
Configuration models and loading.

This module provides Pydantic models for .specbridge.yaml plus the loader
that substitutes environment placeholders and validates the document.
"""

from .env import build_env_snapshot, substitute_env
from .loader import DEFAULT_CONFIG, DEFAULT_CONFIG_FILE, get_project_config_path, load_config
from .models import (
    GitHubSettings,
    MappingKind,
    NotificationConfig,
    SourceConfig,
    SpecBridgeConfig,
    TargetConfig,
    TargetMapping,
)

__all__ = [
    # Models
    "GitHubSettings",
    "MappingKind",
    "NotificationConfig",
    "SourceConfig",
    "SpecBridgeConfig",
    "TargetConfig",
    "TargetMapping",
    # Loader functions
    "DEFAULT_CONFIG",
    "DEFAULT_CONFIG_FILE",
    "build_env_snapshot",
    "get_project_config_path",
    "load_config",
    "substitute_env",
]

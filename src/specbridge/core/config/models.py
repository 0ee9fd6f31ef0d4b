"""
Configuration data models for SpecBridge.

These models define the structure of .specbridge.yaml, with validation
and type safety via Pydantic. Platform settings are a tagged union keyed
by the target ``type``: each supported platform registers one settings
model in PLATFORM_SETTINGS and a target's ``config`` block is validated
against it.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator, model_validator

SUPPORTED_VERSIONS = ("1.0",)


class GitHubSettings(BaseModel):
    """
    Settings for the GitHub Issues target.

    YAML keys may use camelCase (authMethod, addComments, apiUrl).
    """

    model_config = ConfigDict(populate_by_name=True, extra="forbid")

    owner: str = Field(..., min_length=1, description="Repository owner")
    repo: str = Field(..., min_length=1, description="Repository name")
    token: str | None = Field(default=None, description="API token for token auth")
    auth_method: Literal["token", "gh-cli"] = Field(
        default="token",
        alias="authMethod",
        description="'token' for REST API calls, 'gh-cli' to shell out to gh",
    )
    add_comments: bool = Field(
        default=True,
        alias="addComments",
        description="Comment on issues when synced fields change",
    )
    api_url: str = Field(
        default="https://api.github.com",
        alias="apiUrl",
        description="REST API base URL (GitHub Enterprise)",
    )

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.repo}"


# Platform type -> settings model
PLATFORM_SETTINGS: dict[str, type[BaseModel]] = {
    "github": GitHubSettings,
}


class MappingKind(str, Enum):
    """How a spec channel is represented on the platform."""

    ISSUE = "issue"


class TargetMapping(BaseModel):
    """Per-channel mapping for a target."""

    requirements: MappingKind | None = None
    tasks: MappingKind | None = None
    design: MappingKind | None = None


class SourceConfig(BaseModel):
    """Where specs are read from."""

    type: str = Field(..., min_length=1, description="Source adapter type (e.g. 'kiro')")
    path: str | None = Field(default=None, description="Spec path, auto-detected if omitted")


class TargetConfig(BaseModel):
    """One sync target."""

    name: str = Field(..., min_length=1)
    type: str = Field(..., min_length=1)
    enabled: StrictBool
    config: GitHubSettings
    mapping: TargetMapping | None = None

    @model_validator(mode="before")
    @classmethod
    def _validate_platform_config(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        target_type = data.get("type")
        if target_type is None:
            return data
        settings_model = PLATFORM_SETTINGS.get(target_type)
        if settings_model is None:
            supported = ", ".join(sorted(PLATFORM_SETTINGS))
            raise ValueError(
                f"unsupported target type '{target_type}' (supported: {supported})"
            )
        raw = data.get("config")
        if raw is None:
            raise ValueError("missing required field 'config'")
        if isinstance(raw, settings_model):
            return data
        if not isinstance(raw, dict):
            raise ValueError("'config' must be a mapping")
        return {**data, "config": settings_model.model_validate(raw)}


class NotificationConfig(BaseModel):
    """Notification channel. Parsed and validated, not dispatched."""

    type: str = Field(..., min_length=1)
    config: dict[str, Any] = Field(default_factory=dict)
    events: list[str] = Field(default_factory=list)


class SpecBridgeConfig(BaseModel):
    """Root of .specbridge.yaml."""

    version: str
    source: SourceConfig
    targets: list[TargetConfig] = Field(..., min_length=1)
    notifications: list[NotificationConfig] = Field(default_factory=list)

    @field_validator("version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        # `version: 1.0` in YAML arrives as a float
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @model_validator(mode="after")
    def _check_version(self) -> SpecBridgeConfig:
        if self.version not in SUPPORTED_VERSIONS:
            raise ValueError(
                f"Unsupported version: {self.version}. "
                f"Supported versions: {', '.join(SUPPORTED_VERSIONS)}"
            )
        return self

    @property
    def enabled_targets(self) -> list[TargetConfig]:
        return [t for t in self.targets if t.enabled]

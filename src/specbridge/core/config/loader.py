"""
Configuration loading.

Reads .specbridge.yaml, substitutes ``${VAR}`` placeholders from an
explicit environment snapshot and validates the result with Pydantic.
A missing file and an invalid file fail with distinct errors so the CLI
can tell the user to run ``specbridge init`` only when that helps.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from specbridge.core.config.env import build_env_snapshot, substitute_env_in
from specbridge.core.config.models import SpecBridgeConfig
from specbridge.core.errors import ConfigNotFoundError, ConfigParseError

DEFAULT_CONFIG_FILE = ".specbridge.yaml"

DEFAULT_CONFIG = """\
# SpecBridge Configuration
#
# This file configures how SpecBridge syncs your specifications
# to project management platforms.

version: "1.0"

# Source configuration
# Specifies where to read specifications from
source:
  type: kiro
  path: .kiro/specs

# Target configurations
# Specifies where to sync specifications to
targets:
  - name: github-issues
    type: github
    enabled: true
    config:
      owner: your-org
      repo: your-repo
      token: ${GITHUB_TOKEN}
      authMethod: token  # token | gh-cli
      addComments: true  # Add sync comments to issues
    mapping:
      requirements: issue
      tasks: issue

# Optional: Notification configuration
# notifications:
#   - type: slack
#     config:
#       webhook: ${SLACK_WEBHOOK}
#     events:
#       - task_completed
#       - sync_failed
"""


def get_project_config_path(project_dir: Path | None = None) -> Path:
    """
    Get path to the project configuration file.

    Args:
        project_dir: Project directory (defaults to current directory)

    Returns:
        Path to .specbridge.yaml in the project root
    """
    if project_dir is None:
        project_dir = Path.cwd()
    return project_dir / DEFAULT_CONFIG_FILE


def format_validation_error(error: ValidationError) -> str:
    """Flatten a Pydantic ValidationError into one line per problem."""
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "config"
        problems.append(f"{location}: {item['msg']}")
    return "; ".join(problems)


def parse_config(data: Any, env: Mapping[str, str]) -> SpecBridgeConfig:
    """
    Validate an already-parsed YAML document.

    Raises:
        ConfigParseError: If the document is not a mapping, a placeholder is
            unresolved, or validation fails
    """
    if not isinstance(data, dict):
        raise ConfigParseError("configuration must be a YAML mapping")

    substituted = substitute_env_in(data, env)

    try:
        return SpecBridgeConfig.model_validate(substituted)
    except ValidationError as e:
        raise ConfigParseError(format_validation_error(e)) from e


def load_config(
    path: Path | None = None,
    *,
    env: Mapping[str, str] | None = None,
    project_dir: Path | None = None,
) -> SpecBridgeConfig:
    """
    Load and validate the configuration file.

    Args:
        path: Config file path (defaults to <project_dir>/.specbridge.yaml)
        env: Environment snapshot for placeholder substitution
            (defaults to build_env_snapshot(project_dir))
        project_dir: Project directory (defaults to cwd)

    Returns:
        Validated SpecBridgeConfig

    Raises:
        ConfigNotFoundError: If the file does not exist
        ConfigParseError: If the file cannot be read, parsed or validated

    Example:
        >>> config = load_config(env={"GITHUB_TOKEN": "ghp_x"})
        >>> config.targets[0].config.owner
        'your-org'
    """
    if path is None:
        path = get_project_config_path(project_dir)

    if not path.exists():
        raise ConfigNotFoundError(path)

    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except (yaml.YAMLError, OSError, UnicodeDecodeError) as e:
        raise ConfigParseError(f"cannot read {path}: {e}") from e

    if env is None:
        env = build_env_snapshot(project_dir or path.parent)

    return parse_config(data, env)

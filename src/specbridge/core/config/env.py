"""Environment snapshot helpers.

Configuration values may reference ``${VAR_NAME}`` placeholders. Rather than
reading ``os.environ`` while walking the config, the loader receives an
explicit snapshot built here.

Precedence implemented here:
  os.environ > project .env.local > project .env

The .env files are read with python-dotenv and never written back into the
process environment.
"""

from __future__ import annotations

import os
import re
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from dotenv import dotenv_values

from specbridge.core.errors import ConfigParseError

PLACEHOLDER_PATTERN = re.compile(r"\$\{([^}]+)\}")


def _read_env(path: Path) -> dict[str, str]:
    if not path.exists():
        return {}
    values = dotenv_values(path)
    out: dict[str, str] = {}
    for k, v in values.items():
        if k is None or v is None:
            continue
        out[str(k)] = str(v)
    return out


def build_env_snapshot(
    project_dir: Path | None = None,
    *,
    env_files: Iterable[Path] | None = None,
    environ: Mapping[str, str] | None = None,
) -> dict[str, str]:
    """
    Build the environment mapping used for placeholder substitution.

    Args:
        project_dir: Directory holding .env files (defaults to cwd)
        env_files: Explicit env files, lowest precedence first
        environ: Process environment to overlay (defaults to os.environ)

    Returns:
        Flat name -> value mapping
    """
    if project_dir is None:
        project_dir = Path.cwd()
    if env_files is None:
        env_files = [project_dir / ".env", project_dir / ".env.local"]
    if environ is None:
        environ = os.environ

    snapshot: dict[str, str] = {}
    for path in env_files:
        snapshot.update(_read_env(Path(path)))
    snapshot.update(environ)
    return snapshot


def substitute_env(value: str, env: Mapping[str, str]) -> str:
    """
    Replace ``${VAR}`` placeholders in a string.

    Raises:
        ConfigParseError: If a referenced variable is not in ``env``
    """

    def _replace(match: re.Match[str]) -> str:
        name = match.group(1)
        if name not in env:
            raise ConfigParseError(f"Environment variable {name} is not defined")
        return env[name]

    return PLACEHOLDER_PATTERN.sub(_replace, value)


def substitute_env_in(data: Any, env: Mapping[str, str]) -> Any:
    """Recursively substitute placeholders in every string of a parsed document."""
    if isinstance(data, str):
        return substitute_env(data, env)
    if isinstance(data, list):
        return [substitute_env_in(item, env) for item in data]
    if isinstance(data, dict):
        return {key: substitute_env_in(value, env) for key, value in data.items()}
    return data

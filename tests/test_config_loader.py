"""
Unit tests for configuration loading.

Tests placeholder substitution from an explicit environment snapshot,
.env layering, platform settings validation and error mapping.
"""

import os
from pathlib import Path

import pytest
import yaml

from specbridge.core.config import (
    DEFAULT_CONFIG,
    GitHubSettings,
    MappingKind,
    build_env_snapshot,
    get_project_config_path,
    load_config,
    substitute_env,
)
from specbridge.core.config.loader import parse_config
from specbridge.core.errors import ConfigNotFoundError, ConfigParseError

ENV = {"GITHUB_TOKEN": "ghp_secret"}


def minimal_config(**target_overrides):
    target = {
        "name": "gh",
        "type": "github",
        "enabled": True,
        "config": {"owner": "acme", "repo": "widgets", "token": "${GITHUB_TOKEN}"},
    }
    target.update(target_overrides)
    return {"version": "1.0", "source": {"type": "kiro"}, "targets": [target]}


# ==============================================================================
# Environment Snapshot Tests
# ==============================================================================


class TestSubstituteEnv:
    """Tests for ${VAR} substitution."""

    def test_replaces_placeholder(self):
        """Test a defined variable is substituted."""
        assert substitute_env("token ${A}", {"A": "x"}) == "token x"

    def test_multiple_placeholders(self):
        """Test several placeholders in one string."""
        assert substitute_env("${A}/${B}", {"A": "1", "B": "2"}) == "1/2"

    def test_undefined_variable(self):
        """Test an undefined variable is a parse error naming it."""
        with pytest.raises(ConfigParseError) as exc_info:
            substitute_env("${MISSING}", {})
        assert "Environment variable MISSING is not defined" in str(exc_info.value)

    def test_plain_string_untouched(self):
        """Test strings without placeholders pass through."""
        assert substitute_env("plain", {}) == "plain"


class TestBuildEnvSnapshot:
    """Tests for env snapshot layering."""

    def test_env_files_layered(self, tmp_path):
        """Test .env.local overrides .env."""
        (tmp_path / ".env").write_text("A=from-env\nB=only-env\n")
        (tmp_path / ".env.local").write_text("A=from-local\n")

        snapshot = build_env_snapshot(tmp_path, environ={})

        assert snapshot == {"A": "from-local", "B": "only-env"}

    def test_environ_wins(self, tmp_path):
        """Test the process environment overrides files."""
        (tmp_path / ".env").write_text("A=from-file\n")

        snapshot = build_env_snapshot(tmp_path, environ={"A": "from-os"})

        assert snapshot["A"] == "from-os"

    def test_missing_files(self, tmp_path):
        """Test missing .env files are ignored."""
        assert build_env_snapshot(tmp_path, environ={"X": "1"}) == {"X": "1"}

    def test_does_not_touch_os_environ(self, tmp_path, monkeypatch):
        """Test .env values are not exported to the process."""
        monkeypatch.delenv("SB_ONLY_IN_FILE", raising=False)
        (tmp_path / ".env").write_text("SB_ONLY_IN_FILE=1\n")

        build_env_snapshot(tmp_path)

        assert "SB_ONLY_IN_FILE" not in os.environ


# ==============================================================================
# Validation Tests
# ==============================================================================


class TestParseConfig:
    """Tests for document validation."""

    def test_valid(self):
        """Test a minimal config validates and substitutes the token."""
        config = parse_config(minimal_config(), ENV)

        target = config.targets[0]
        assert isinstance(target.config, GitHubSettings)
        assert target.config.token == "ghp_secret"
        assert target.config.auth_method == "token"
        assert target.config.add_comments is True

    def test_camel_case_aliases(self):
        """Test authMethod/addComments/apiUrl keys are accepted."""
        data = minimal_config(
            config={
                "owner": "acme",
                "repo": "widgets",
                "authMethod": "gh-cli",
                "addComments": False,
                "apiUrl": "https://ghe.example.com/api/v3",
            }
        )
        settings = parse_config(data, {}).targets[0].config

        assert settings.auth_method == "gh-cli"
        assert settings.add_comments is False
        assert settings.api_url == "https://ghe.example.com/api/v3"

    def test_numeric_version(self):
        """Test `version: 1.0` parsed as a float is accepted."""
        data = minimal_config()
        data["version"] = 1.0
        assert parse_config(data, ENV).version == "1.0"

    def test_unsupported_version(self):
        """Test unknown versions are rejected."""
        data = minimal_config()
        data["version"] = "2.0"
        with pytest.raises(ConfigParseError, match="Unsupported version"):
            parse_config(data, ENV)

    def test_unsupported_target_type(self):
        """Test unknown target types are rejected."""
        with pytest.raises(ConfigParseError, match="unsupported target type 'jira'"):
            parse_config(minimal_config(type="jira"), ENV)

    def test_missing_target_config(self):
        """Test a target without config is rejected."""
        data = minimal_config()
        del data["targets"][0]["config"]
        with pytest.raises(ConfigParseError, match="config"):
            parse_config(data, ENV)

    def test_enabled_must_be_boolean(self):
        """Test enabled is strictly boolean."""
        with pytest.raises(ConfigParseError, match="enabled"):
            parse_config(minimal_config(enabled="yes"), ENV)

    def test_no_targets(self):
        """Test at least one target is required."""
        data = minimal_config()
        data["targets"] = []
        with pytest.raises(ConfigParseError, match="targets"):
            parse_config(data, ENV)

    def test_unknown_github_key(self):
        """Test typos in platform settings are caught."""
        data = minimal_config(config={"owner": "a", "repo": "b", "tokn": "x"})
        with pytest.raises(ConfigParseError):
            parse_config(data, ENV)

    def test_not_a_mapping(self):
        """Test a non-mapping document is rejected."""
        with pytest.raises(ConfigParseError, match="mapping"):
            parse_config(["a"], ENV)

    def test_enabled_targets(self):
        """Test disabled targets are filtered."""
        data = minimal_config()
        data["targets"].append({**data["targets"][0], "name": "off", "enabled": False})
        config = parse_config(data, ENV)

        assert [t.name for t in config.enabled_targets] == ["gh"]

    def test_mapping_and_notifications(self):
        """Test optional sections are parsed."""
        data = minimal_config(mapping={"requirements": "issue", "tasks": "issue"})
        data["notifications"] = [{"type": "slack", "events": ["sync_failed"]}]
        config = parse_config(data, ENV)

        assert config.targets[0].mapping.tasks == MappingKind.ISSUE
        assert config.notifications[0].events == ["sync_failed"]


# ==============================================================================
# File Loading Tests
# ==============================================================================


class TestLoadConfig:
    """Tests for load_config."""

    def test_missing_file(self, tmp_path):
        """Test a missing file raises ConfigNotFoundError."""
        with pytest.raises(ConfigNotFoundError) as exc_info:
            load_config(project_dir=tmp_path, env={})
        assert exc_info.value.path == tmp_path / ".specbridge.yaml"

    def test_invalid_yaml(self, tmp_path):
        """Test malformed YAML raises ConfigParseError."""
        path = tmp_path / ".specbridge.yaml"
        path.write_text("version: [unclosed\n")

        with pytest.raises(ConfigParseError):
            load_config(path, env={})

    def test_loads_file(self, tmp_path):
        """Test a file on disk is loaded with the given env."""
        path = tmp_path / ".specbridge.yaml"
        path.write_text(yaml.safe_dump(minimal_config()))

        config = load_config(path, env=ENV)

        assert config.targets[0].config.token == "ghp_secret"

    def test_env_from_dotenv(self, tmp_path, monkeypatch):
        """Test the default snapshot reads the project .env file."""
        monkeypatch.delenv("GITHUB_TOKEN", raising=False)
        (tmp_path / ".specbridge.yaml").write_text(yaml.safe_dump(minimal_config()))
        (tmp_path / ".env").write_text("GITHUB_TOKEN=from-dotenv\n")

        config = load_config(project_dir=tmp_path)

        assert config.targets[0].config.token == "from-dotenv"

    def test_default_template_loads(self, tmp_path):
        """Test the init template is a valid config."""
        path = tmp_path / ".specbridge.yaml"
        path.write_text(DEFAULT_CONFIG)

        config = load_config(path, env=ENV)

        assert config.source.type == "kiro"
        assert config.source.path == ".kiro/specs"
        assert config.targets[0].config.owner == "your-org"

    def test_default_template_needs_token(self, tmp_path):
        """Test the template fails clearly without GITHUB_TOKEN."""
        path = tmp_path / ".specbridge.yaml"
        path.write_text(DEFAULT_CONFIG)

        with pytest.raises(ConfigParseError, match="GITHUB_TOKEN"):
            load_config(path, env={})


def test_get_project_config_path(tmp_path):
    """Test the config path is in the project root."""
    assert get_project_config_path(tmp_path) == tmp_path / ".specbridge.yaml"
    assert get_project_config_path().name == ".specbridge.yaml"
    assert get_project_config_path().parent == Path.cwd()

"""
Pytest configuration and shared fixtures.

Provides spec directory trees, GitHub settings and an in-memory issue
repository used across the test suite.
"""

from pathlib import Path

import pytest

from specbridge.adapters.target.github.models import GitHubIssue, IssueDraft
from specbridge.core.config.models import GitHubSettings
from specbridge.core.errors import AdapterError

REQUIREMENTS_MD = """\
# Requirements Document

## Introduction

Login for the web app.

### Requirement 1: User login

**User Story:** As a user, I want to log in.

#### Acceptance Criteria

1. WHEN credentials are valid THEN the system SHALL log the user in

### Requirement 2: Password reset

Priority: high

Users can reset a forgotten password.
"""

DESIGN_MD = """\
---
status: draft
---
# Design

## Overview

Token based sessions.

## Components

AuthService and SessionStore.
"""

TASKS_MD = """\
# Implementation Plan

- [x] 1. Set up project structure
- [ ] 2. Implement login (@alice)
  - [-] 2.1 Write the session store
    - Store sessions in redis
  - [~] 2.2 Add rate limiting
- [ ] 3 Write docs
"""


def write_spec(directory: Path, requirements=REQUIREMENTS_MD, design=DESIGN_MD, tasks=TASKS_MD):
    """Write the three spec files (skipping any passed as None) into ``directory``."""
    directory.mkdir(parents=True, exist_ok=True)
    if requirements is not None:
        (directory / "requirements.md").write_text(requirements, encoding="utf-8")
    if design is not None:
        (directory / "design.md").write_text(design, encoding="utf-8")
    if tasks is not None:
        (directory / "tasks.md").write_text(tasks, encoding="utf-8")
    return directory


# ==============================================================================
# Directory Fixtures
# ==============================================================================


@pytest.fixture
def spec_dir(tmp_path):
    """A single spec directory holding all three documents."""
    return write_spec(tmp_path / "user-auth")


@pytest.fixture
def kiro_project(tmp_path):
    """
    A project with a .kiro/specs container holding two specs.

    Creates:
    - .kiro/specs/user-auth/{requirements,design,tasks}.md
    - .kiro/specs/billing/tasks.md
    """
    specs = tmp_path / ".kiro" / "specs"
    write_spec(specs / "user-auth")
    write_spec(
        specs / "billing",
        requirements=None,
        design=None,
        tasks="- [ ] 1. Add invoices\n",
    )
    return tmp_path


# ==============================================================================
# GitHub Fixtures
# ==============================================================================


class FakeIssueRepository:
    """In-memory IssueRepository that records every call."""

    def __init__(self, issues=None):
        self.issues: list[GitHubIssue] = list(issues or [])
        self.calls: list[tuple] = []
        self.comments: list[tuple[int, str]] = []
        self.fail_on_create: set[str] = set()
        self.validated = False

    def validate_access(self):
        self.validated = True

    def find_by_label(self, label):
        self.calls.append(("find", label))
        for issue in self.issues:
            if label in issue.labels:
                return issue
        return None

    def create(self, draft: IssueDraft):
        self.calls.append(("create", draft.title))
        if draft.title in self.fail_on_create:
            raise AdapterError("github", f"cannot create {draft.title}")
        issue = GitHubIssue(
            number=len(self.issues) + 1,
            title=draft.title,
            body=draft.body,
            state=draft.state or "open",
            labels=list(draft.labels),
            assignees=[draft.assignee] if draft.assignee else [],
        )
        self.issues.append(issue)
        return issue

    def update(self, existing, draft: IssueDraft):
        self.calls.append(("update", existing.number))
        updated = existing.model_copy(
            update={
                "title": draft.title,
                "body": draft.body,
                "state": draft.state or existing.state,
                "labels": list(draft.labels),
                "assignees": [draft.assignee] if draft.assignee else existing.assignees,
            }
        )
        self.issues = [updated if i.number == existing.number else i for i in self.issues]

    def add_comment(self, issue_number, body):
        self.calls.append(("comment", issue_number))
        self.comments.append((issue_number, body))


@pytest.fixture
def github_settings():
    """GitHub settings with token auth."""
    return GitHubSettings(owner="acme", repo="widgets", token="ghp_test")


@pytest.fixture
def fake_repo():
    """An empty in-memory issue repository."""
    return FakeIssueRepository()

"""
Tests for the GitHub REST API issue repository.

Requests are served by httpx.MockTransport, so no network access is needed.
"""

import json

import httpx
import pytest

from specbridge.adapters.target.github import (
    ApiIssueRepository,
    GitHubAdapter,
    GitHubIssue,
    IssueDraft,
)
from specbridge.core.errors import AdapterError, AuthenticationError, RateLimitError
from specbridge.core.models import Requirement

REPO = "/repos/acme/widgets"


def issue_json(number=1, title="Task", state="open", labels=("specbridge:task-id:1",), **extra):
    data = {
        "number": number,
        "title": title,
        "body": "body",
        "state": state,
        "labels": [{"name": label} for label in labels],
        "assignees": [],
        "html_url": f"https://github.com/acme/widgets/issues/{number}",
    }
    data.update(extra)
    return data


class Recorder:
    """Route handler that records requests and replays canned responses."""

    def __init__(self, responses):
        self.responses = responses
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = (request.method, request.url.path)
        response = self.responses.get(key)
        if response is None:
            return httpx.Response(404, json={"message": "Not Found"})
        if callable(response):
            return response(request)
        return response


def make_repo(github_settings, responses):
    recorder = Recorder(responses)
    client = httpx.Client(
        base_url=github_settings.api_url, transport=httpx.MockTransport(recorder)
    )
    return ApiIssueRepository(github_settings, client=client), recorder


# ==============================================================================
# Model Tests
# ==============================================================================


class TestGitHubIssueFromRest:
    """Tests for parsing REST issue objects."""

    def test_basic(self):
        """Test fields are mapped."""
        issue = GitHubIssue.from_rest(issue_json(number=5, labels=("a", "b")))

        assert issue.number == 5
        assert issue.labels == ["a", "b"]
        assert issue.url.endswith("/issues/5")
        assert issue.is_open

    def test_single_assignee_fallback(self):
        """Test the legacy assignee field is used when assignees is empty."""
        issue = GitHubIssue.from_rest(issue_json(assignee={"login": "bob"}))
        assert issue.assignee == "bob"

    def test_null_body(self):
        """Test a null body becomes an empty string."""
        issue = GitHubIssue.from_rest(issue_json(body=None))
        assert issue.body == ""


# ==============================================================================
# Repository Tests
# ==============================================================================


class TestFindByLabel:
    """Tests for label lookup."""

    def test_found(self, github_settings):
        """Test the first issue is returned and closed issues are searched."""
        repo, recorder = make_repo(
            github_settings,
            {("GET", f"{REPO}/issues"): httpx.Response(200, json=[issue_json(number=3)])},
        )

        issue = repo.find_by_label("specbridge:task-id:1")

        assert issue.number == 3
        params = recorder.requests[0].url.params
        assert params["labels"] == "specbridge:task-id:1"
        assert params["state"] == "all"

    def test_not_found(self, github_settings):
        """Test an empty list means no issue."""
        repo, _ = make_repo(
            github_settings, {("GET", f"{REPO}/issues"): httpx.Response(200, json=[])}
        )
        assert repo.find_by_label("x") is None

    def test_skips_pull_requests(self, github_settings):
        """Test pull requests in the listing are ignored."""
        listing = [issue_json(number=1, pull_request={"url": "x"}), issue_json(number=2)]
        repo, _ = make_repo(
            github_settings, {("GET", f"{REPO}/issues"): httpx.Response(200, json=listing)}
        )
        assert repo.find_by_label("x").number == 2


class TestCreateAndUpdate:
    """Tests for writes."""

    def test_create(self, github_settings):
        """Test create posts title, body, labels and assignee."""
        repo, recorder = make_repo(
            github_settings,
            {("POST", f"{REPO}/issues"): httpx.Response(201, json=issue_json(number=7))},
        )

        issue = repo.create(
            IssueDraft(title="Task", body="b", labels=["l"], assignee="alice")
        )

        assert issue.number == 7
        payload = json.loads(recorder.requests[0].content)
        assert payload == {"title": "Task", "body": "b", "labels": ["l"], "assignees": ["alice"]}

    def test_create_closed(self, github_settings):
        """Test a closed draft is closed right after creation."""
        repo, recorder = make_repo(
            github_settings,
            {
                ("POST", f"{REPO}/issues"): httpx.Response(201, json=issue_json(number=7)),
                ("PATCH", f"{REPO}/issues/7"): httpx.Response(200, json=issue_json(number=7)),
            },
        )

        issue = repo.create(IssueDraft(title="Task", body="b", state="closed"))

        assert issue.state == "closed"
        assert recorder.requests[1].method == "PATCH"
        assert json.loads(recorder.requests[1].content) == {"state": "closed"}

    def test_update(self, github_settings):
        """Test update patches state and labels, omitting assignees when unset."""
        repo, recorder = make_repo(
            github_settings,
            {("PATCH", f"{REPO}/issues/3"): httpx.Response(200, json=issue_json(number=3))},
        )

        repo.update(
            GitHubIssue(number=3, title="Old"),
            IssueDraft(title="New", body="b", labels=["m"], state="closed"),
        )

        payload = json.loads(recorder.requests[0].content)
        assert payload == {"title": "New", "body": "b", "state": "closed", "labels": ["m"]}

    def test_update_without_state(self, github_settings):
        """Test a draft without state or assignee leaves both untouched."""
        repo, recorder = make_repo(
            github_settings,
            {("PATCH", f"{REPO}/issues/3"): httpx.Response(200, json=issue_json(number=3))},
        )

        repo.update(
            GitHubIssue(number=3, title="Old", state="closed"),
            IssueDraft(title="New", body="b"),
        )

        payload = json.loads(recorder.requests[0].content)
        assert payload == {"title": "New", "body": "b", "labels": []}

    def test_requirement_update_keeps_closed_issue(self, github_settings):
        """Test syncing a requirement over REST never reopens its issue."""
        closed = issue_json(
            number=5, title="Login", state="closed", labels=("specbridge:req-id:req-1",)
        )
        repo, recorder = make_repo(
            github_settings,
            {
                ("GET", f"{REPO}/issues"): httpx.Response(200, json=[closed]),
                ("PATCH", f"{REPO}/issues/5"): httpx.Response(200, json=closed),
            },
        )
        adapter = GitHubAdapter(github_settings, repository=repo)

        result = adapter.sync_requirements(
            [Requirement(id="req-1", title="Login", description="Users log in")]
        )

        assert result.updated == 1
        patches = [r for r in recorder.requests if r.method == "PATCH"]
        assert len(patches) == 1
        assert "state" not in json.loads(patches[0].content)

    def test_add_comment(self, github_settings):
        """Test comments are posted to the issue."""
        repo, recorder = make_repo(
            github_settings,
            {("POST", f"{REPO}/issues/3/comments"): httpx.Response(201, json={"id": 1})},
        )

        repo.add_comment(3, "hello")

        assert json.loads(recorder.requests[0].content) == {"body": "hello"}


class TestErrorMapping:
    """Tests for HTTP error mapping."""

    def test_rate_limit_429(self, github_settings):
        """Test 429 raises RateLimitError with Retry-After."""
        repo, _ = make_repo(
            github_settings,
            {
                ("GET", f"{REPO}/issues"): httpx.Response(
                    429, headers={"Retry-After": "60"}, json={"message": "slow down"}
                )
            },
        )

        with pytest.raises(RateLimitError) as exc_info:
            repo.find_by_label("x")
        assert exc_info.value.retry_after == 60

    def test_rate_limit_403(self, github_settings):
        """Test 403 with no remaining quota is a rate limit."""
        repo, _ = make_repo(
            github_settings,
            {
                ("GET", f"{REPO}/issues"): httpx.Response(
                    403, headers={"x-ratelimit-remaining": "0"}, json={"message": "limit"}
                )
            },
        )
        with pytest.raises(RateLimitError):
            repo.find_by_label("x")

    def test_plain_403_is_adapter_error(self, github_settings):
        """Test other 403s are adapter errors."""
        repo, _ = make_repo(
            github_settings,
            {("GET", f"{REPO}/issues"): httpx.Response(403, json={"message": "Forbidden"})},
        )
        with pytest.raises(AdapterError, match="Forbidden"):
            repo.find_by_label("x")

    def test_401(self, github_settings):
        """Test 401 raises AuthenticationError."""
        repo, _ = make_repo(
            github_settings,
            {("GET", f"{REPO}/issues"): httpx.Response(401, json={"message": "Bad credentials"})},
        )
        with pytest.raises(AuthenticationError, match="Bad credentials"):
            repo.find_by_label("x")

    def test_server_error(self, github_settings):
        """Test 5xx raises AdapterError."""
        repo, _ = make_repo(
            github_settings,
            {("POST", f"{REPO}/issues"): httpx.Response(502, text="bad gateway")},
        )
        with pytest.raises(AdapterError, match="502"):
            repo.create(IssueDraft(title="t", body="b"))

    def test_transport_error(self, github_settings):
        """Test connection failures become AdapterError."""

        def boom(request):
            raise httpx.ConnectError("refused", request=request)

        repo, _ = make_repo(github_settings, {("GET", f"{REPO}/issues"): boom})
        with pytest.raises(AdapterError, match="refused"):
            repo.find_by_label("x")


class TestValidateAccess:
    """Tests for the access check."""

    def test_ok(self, github_settings):
        """Test a reachable repository passes."""
        repo, recorder = make_repo(
            github_settings, {("GET", REPO): httpx.Response(200, json={"name": "widgets"})}
        )
        repo.validate_access()
        assert recorder.requests[0].url.path == REPO

    def test_not_found(self, github_settings):
        """Test a missing repository is an authentication failure."""
        repo, _ = make_repo(github_settings, {})
        with pytest.raises(AuthenticationError):
            repo.validate_access()


def test_default_client_headers(github_settings):
    """Test the default client sends the bearer token."""
    repo = ApiIssueRepository(github_settings)
    try:
        assert repo.client.headers["Authorization"] == "Bearer ghp_test"
        assert str(repo.client.base_url).rstrip("/") == "https://api.github.com"
    finally:
        repo.close()

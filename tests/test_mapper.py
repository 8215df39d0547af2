"""Tests for the envelope mapper."""

import json
import logging

import pytest

from bridgeas import (
    BridgeasConfig,
    DecodeError,
    EnvelopeKind,
    JiraConfig,
    MissingField,
    UnknownEnvelopeError,
    build_issue_envelope_github,
    build_issue_envelope_jira,
    build_issue_envelope_jira_from_issue,
    build_repo_envelope,
    encode,
    envelope_kind,
    parse_envelope,
)
from bridgeas.github import GitHubIssue, GitHubIssueMessageBody, GitHubRepo, GitHubRepoMessageBody
from bridgeas.jira import (
    JiraIssue,
    JiraIssueFields,
    JiraIssueMessageBody,
    JiraIssueSimpleItem,
    JiraProject,
)


@pytest.fixture
def repo() -> GitHubRepo:
    return GitHubRepo(
        id=42,
        full_name="acme/widgets",
        html_url="https://github.com/acme/widgets",
        description=None,
    )


@pytest.fixture
def issue() -> GitHubIssue:
    return GitHubIssue(
        id=9001,
        html_url="https://github.com/acme/widgets/issues/12",
        number=12,
        title="Widgets are too small",
    )


@pytest.fixture
def jira_issue() -> JiraIssue:
    return JiraIssue(
        _self="https://jira.example.com/rest/api/2/issue/10042",
        id="10042",
        key="ENG-7",
        fields=JiraIssueFields(
            project=JiraProject(
                _self="https://jira.example.com/rest/api/2/project/10",
                id="10",
                key="ENG",
            )
        ),
    )


class TestBuildRepoEnvelope:
    """Tests for build_repo_envelope."""

    def test_example_output(self, repo):
        """Test the exact wire output for a repository."""
        envelope = build_repo_envelope(repo, "https://github.com/acme/widgets")

        assert encode(envelope) == (
            b'{"gk.bridgeas.github.repo":{"id":42,"name":"acme/widgets",'
            b'"url":"https://github.com/acme/widgets"},'
            b'"external_url":"https://github.com/acme/widgets"}'
        )

    def test_deterministic(self, repo):
        """Test identical inputs yield byte-identical output."""
        first = build_repo_envelope(repo, "https://github.com/acme/widgets")
        second = build_repo_envelope(repo, "https://github.com/acme/widgets")

        assert first.to_json() == second.to_json()

    def test_description_not_carried(self):
        """Test the repo description never reaches the envelope."""
        repo = GitHubRepo(id=1, full_name="a/b", html_url="https://github.com/a/b", description="text")
        data = build_repo_envelope(repo, "https://github.com/a/b").to_dict()

        assert "description" not in data["gk.bridgeas.github.repo"]


class TestBuildIssueEnvelopeGitHub:
    """Tests for build_issue_envelope_github."""

    def test_sub_objects(self, issue, repo):
        """Test the issue and repo sub-objects are filled from their records."""
        envelope = build_issue_envelope_github(issue, repo, issue.html_url)
        data = json.loads(envelope.to_json())

        assert data == {
            "gk.bridgeas.github.issue": {
                "id": 9001,
                "number": 12,
                "title": "Widgets are too small",
                "url": "https://github.com/acme/widgets/issues/12",
            },
            "gk.bridgeas.github.repo": {
                "id": 42,
                "name": "acme/widgets",
                "url": "https://github.com/acme/widgets",
            },
            "external_url": "https://github.com/acme/widgets/issues/12",
        }

    def test_unrelated_records_not_validated(self, issue):
        """Test the mapper does not check the issue belongs to the repo."""
        other = GitHubRepo(id=7, full_name="other/repo", html_url="https://github.com/other/repo")

        envelope = build_issue_envelope_github(issue, other, issue.html_url)

        assert envelope.repo.name == "other/repo"
        assert envelope.issue.number == 12


class TestBuildIssueEnvelopeJira:
    """Tests for the Jira envelope builders."""

    def test_direct_copy(self):
        """Test both items are copied without recomputing api_url."""
        issue = JiraIssueSimpleItem(id="10042", key="ENG-7", api_url="https://proxy.example.com/i/10042")
        project = JiraIssueSimpleItem(id="10", key="ENG", api_url="https://proxy.example.com/p/10")

        envelope = build_issue_envelope_jira(issue, project, "https://jira.example.com/browse/ENG-7")

        assert envelope.jira_issue is issue
        assert envelope.jira_project is project
        assert list(envelope.to_dict()) == [
            "gk.bridgeas.jira.issue",
            "gk.bridgeas.jira.project",
            "external_url",
        ]

    def test_from_issue(self, jira_issue):
        """Test building from a full issue flattens the issue and its project."""
        envelope = build_issue_envelope_jira_from_issue(jira_issue)

        assert envelope.to_dict() == {
            "gk.bridgeas.jira.issue": {
                "id": "10042",
                "key": "ENG-7",
                "api_url": "https://jira.example.com/rest/api/2/issue/10042",
            },
            "gk.bridgeas.jira.project": {
                "id": "10",
                "key": "ENG",
                "api_url": "https://jira.example.com/rest/api/2/project/10",
            },
            "external_url": "https://jira.example.com/browse/ENG-7",
        }

    def test_from_issue_config_override(self, jira_issue):
        """Test the configured Jira URL is used for the external link."""
        config = BridgeasConfig(jira=JiraConfig(url="https://company.atlassian.net"))

        envelope = build_issue_envelope_jira_from_issue(jira_issue, config=config)

        assert envelope.external_url == "https://company.atlassian.net/browse/ENG-7"

    def test_from_issue_explicit_external_url(self, jira_issue):
        """Test an explicit external URL wins over the derived one."""
        envelope = build_issue_envelope_jira_from_issue(jira_issue, "https://example.com/x")
        assert envelope.external_url == "https://example.com/x"

    def test_self_key_never_emitted(self, jira_issue):
        """Test no 'self' key appears anywhere in the envelope output."""
        data = json.loads(build_issue_envelope_jira_from_issue(jira_issue).to_json())

        assert "self" not in data
        for sub_object in (data["gk.bridgeas.jira.issue"], data["gk.bridgeas.jira.project"]):
            assert "self" not in sub_object
            assert "_self" not in sub_object

    def test_ids_stay_strings(self, jira_issue):
        """Test numeric-looking Jira ids are emitted as JSON strings."""
        raw = build_issue_envelope_jira_from_issue(jira_issue).to_json()

        assert b'"id":"10"' in raw
        assert b'"id":"10042"' in raw


class TestEnvelopeKind:
    """Tests for envelope_kind and parse_envelope."""

    def test_kinds_by_tags(self):
        """Test each tag set maps to its envelope kind."""
        assert envelope_kind({"gk.bridgeas.github.repo": {}, "external_url": ""}) == EnvelopeKind.GITHUB_REPO
        assert (
            envelope_kind({"gk.bridgeas.github.issue": {}, "gk.bridgeas.github.repo": {}})
            == EnvelopeKind.GITHUB_ISSUE
        )
        assert (
            envelope_kind({"gk.bridgeas.jira.issue": {}, "gk.bridgeas.jira.project": {}})
            == EnvelopeKind.JIRA_ISSUE
        )

    def test_unknown_tag_sets(self):
        """Test partial or mixed tag sets are rejected."""
        for data in (
            {"external_url": "https://example.com"},
            {"gk.bridgeas.github.issue": {}},
            {"gk.bridgeas.jira.issue": {}},
            {"gk.bridgeas.github.repo": {}, "gk.bridgeas.jira.issue": {}, "gk.bridgeas.jira.project": {}},
        ):
            with pytest.raises(UnknownEnvelopeError):
                envelope_kind(data)

    def test_parse_each_kind(self, repo, issue, jira_issue):
        """Test parse_envelope returns the matching record type."""
        repo_envelope = build_repo_envelope(repo, repo.html_url)
        issue_envelope = build_issue_envelope_github(issue, repo, issue.html_url)
        jira_envelope = build_issue_envelope_jira_from_issue(jira_issue)

        parsed = parse_envelope(repo_envelope.to_json())
        assert isinstance(parsed, GitHubRepoMessageBody)
        assert parsed == repo_envelope

        parsed = parse_envelope(issue_envelope.to_json())
        assert isinstance(parsed, GitHubIssueMessageBody)
        assert parsed == issue_envelope

        parsed = parse_envelope(jira_envelope.to_json().decode("utf-8"))
        assert isinstance(parsed, JiraIssueMessageBody)
        assert parsed == jira_envelope

    def test_parse_malformed(self):
        """Test malformed envelope JSON raises DecodeError."""
        with pytest.raises(DecodeError):
            parse_envelope(b"not json")

    def test_parse_not_object(self):
        """Test a non-object envelope is rejected."""
        with pytest.raises(UnknownEnvelopeError):
            parse_envelope(b'["gk.bridgeas.github.repo"]')

    def test_parse_failure_logged(self, caplog):
        """Test a broken sub-object is logged at debug level."""
        raw = b'{"gk.bridgeas.jira.issue":{"id":"1","key":"E-1"},"gk.bridgeas.jira.project":{},"external_url":"u"}'

        with caplog.at_level(logging.DEBUG, logger="bridgeas.mapper"):
            with pytest.raises(MissingField):
                parse_envelope(raw)

        assert "Failed to decode JiraIssueMessageBody" in caplog.text

    def test_parse_bad_sub_object(self):
        """Test a recognized envelope with a broken sub-object fails to decode."""
        raw = b'{"gk.bridgeas.github.repo":{"id":"42","name":"a/b","url":"u"},"external_url":"u"}'

        with pytest.raises(DecodeError) as exc_info:
            parse_envelope(raw)

        assert exc_info.value.path == "gk.bridgeas.github.repo.id"

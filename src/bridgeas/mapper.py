"""Envelope mapper: provider records to notification envelopes and back.

Every builder is a pure function of its arguments. None of them check that
the records passed together are related (that an issue belongs to the given
repository or project). Callers source both records from the same API call
and own that guarantee.
"""

import logging
from enum import Enum
from typing import Any

from .codec import Record, decode, load_json
from .config import BridgeasConfig
from .errors import DecodeError
from .github.models import (
    GITHUB_ISSUE_TAG,
    GITHUB_REPO_TAG,
    GitHubIssue,
    GitHubIssueMessageBody,
    GitHubIssueMessageBodyIssue,
    GitHubIssueMessageBodyRepo,
    GitHubRepo,
    GitHubRepoMessageBody,
)
from .jira.models import (
    JIRA_ISSUE_TAG,
    JIRA_PROJECT_TAG,
    JiraIssue,
    JiraIssueMessageBody,
    JiraIssueSimpleItem,
    jira_browse_url,
)

logger = logging.getLogger(__name__)

__all__ = [
    "EnvelopeKind",
    "UnknownEnvelopeError",
    "build_repo_envelope",
    "build_issue_envelope_github",
    "build_issue_envelope_jira",
    "build_issue_envelope_jira_from_issue",
    "decode",
    "envelope_kind",
    "parse_envelope",
]


class UnknownEnvelopeError(DecodeError):
    """Envelope tags match no known envelope kind."""

    pass


class EnvelopeKind(Enum):
    """Envelope kinds, keyed by the namespace tags they carry."""

    GITHUB_REPO = "github.repo"
    GITHUB_ISSUE = "github.issue"
    JIRA_ISSUE = "jira.issue"


ENVELOPE_TAGS: dict[EnvelopeKind, frozenset[str]] = {
    EnvelopeKind.GITHUB_REPO: frozenset({GITHUB_REPO_TAG}),
    EnvelopeKind.GITHUB_ISSUE: frozenset({GITHUB_ISSUE_TAG, GITHUB_REPO_TAG}),
    EnvelopeKind.JIRA_ISSUE: frozenset({JIRA_ISSUE_TAG, JIRA_PROJECT_TAG}),
}

ENVELOPE_TYPES: dict[EnvelopeKind, type[Record]] = {
    EnvelopeKind.GITHUB_REPO: GitHubRepoMessageBody,
    EnvelopeKind.GITHUB_ISSUE: GitHubIssueMessageBody,
    EnvelopeKind.JIRA_ISSUE: JiraIssueMessageBody,
}

_ALL_TAGS = frozenset().union(*ENVELOPE_TAGS.values())


def _repo_sub_object(repo: GitHubRepo) -> GitHubIssueMessageBodyRepo:
    return GitHubIssueMessageBodyRepo(
        id=repo.id,
        name=repo.full_name,
        url=repo.html_url,
    )


def build_repo_envelope(repo: GitHubRepo, external_url: str) -> GitHubRepoMessageBody:
    """Build the envelope announcing a GitHub repository.

    Args:
        repo: Decoded repository
        external_url: Human-facing link to the repository

    Returns:
        GitHubRepoMessageBody with the repo under ``gk.bridgeas.github.repo``
    """
    envelope = GitHubRepoMessageBody(
        repo=_repo_sub_object(repo),
        external_url=external_url,
    )
    logger.debug("Built %s envelope for %s", EnvelopeKind.GITHUB_REPO.value, external_url)
    return envelope


def build_issue_envelope_github(
    issue: GitHubIssue, repo: GitHubRepo, external_url: str
) -> GitHubIssueMessageBody:
    """Build the envelope announcing a GitHub issue.

    The issue and repo sub-objects are filled independently.

    Args:
        issue: Decoded issue
        repo: Decoded repository the caller fetched alongside the issue
        external_url: Human-facing link to the issue
    """
    envelope = GitHubIssueMessageBody(
        issue=GitHubIssueMessageBodyIssue(
            id=issue.id,
            number=issue.number,
            title=issue.title,
            url=issue.html_url,
        ),
        repo=_repo_sub_object(repo),
        external_url=external_url,
    )
    logger.debug("Built %s envelope for %s", EnvelopeKind.GITHUB_ISSUE.value, external_url)
    return envelope


def build_issue_envelope_jira(
    issue: JiraIssueSimpleItem, project: JiraIssueSimpleItem, external_url: str
) -> JiraIssueMessageBody:
    """Build the envelope announcing a Jira issue.

    Both items are copied as they are; ``api_url`` is not recomputed.
    """
    envelope = JiraIssueMessageBody(
        jira_issue=issue,
        jira_project=project,
        external_url=external_url,
    )
    logger.debug("Built %s envelope for %s", EnvelopeKind.JIRA_ISSUE.value, external_url)
    return envelope


def build_issue_envelope_jira_from_issue(
    issue: JiraIssue,
    external_url: str | None = None,
    config: BridgeasConfig | None = None,
) -> JiraIssueMessageBody:
    """Build a Jira issue envelope straight from a full issue record.

    Args:
        issue: Decoded issue, including its embedded project
        external_url: Human-facing link; defaults to the issue's browse URL
        config: Optional configuration with a Jira browse URL override
    """
    if external_url is None:
        external_url = jira_browse_url(issue._self, issue.key, config)
    return build_issue_envelope_jira(
        JiraIssueSimpleItem.from_issue(issue),
        JiraIssueSimpleItem.from_project(issue.project),
        external_url,
    )


def envelope_kind(data: dict[str, Any]) -> EnvelopeKind:
    """Identify an envelope from the namespace tags present in it.

    Raises:
        UnknownEnvelopeError: The tag set matches no envelope kind.
    """
    if not isinstance(data, dict):
        raise UnknownEnvelopeError("envelope must be a JSON object")

    present = _ALL_TAGS.intersection(data)
    for kind, tags in ENVELOPE_TAGS.items():
        if present == tags:
            return kind

    raise UnknownEnvelopeError(
        f"unrecognized envelope tags: {sorted(present) or 'none'}"
    )


def parse_envelope(
    raw: bytes | str,
) -> GitHubRepoMessageBody | GitHubIssueMessageBody | JiraIssueMessageBody:
    """Decode raw envelope JSON into the matching envelope record.

    Raises:
        DecodeError: Malformed JSON or a malformed sub-object.
        UnknownEnvelopeError: The tag set matches no envelope kind.
    """
    data = load_json(raw, "envelope")
    kind = envelope_kind(data)
    record_type = ENVELOPE_TYPES[kind]
    try:
        return record_type.from_dict(data)
    except DecodeError as e:
        logger.debug("Failed to decode %s: %s", record_type.__name__, e)
        raise

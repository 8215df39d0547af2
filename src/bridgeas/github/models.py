"""GitHub-specific data models."""

from dataclasses import dataclass
from typing import Any

from ..codec import Record, UInt64

GITHUB_REPO_TAG = "gk.bridgeas.github.repo"
GITHUB_ISSUE_TAG = "gk.bridgeas.github.issue"


@dataclass(frozen=True)
class GitHubRepo(Record):
    """Minimal representation of a GitHub repository."""

    id: UInt64
    full_name: str  # e.g., "acme/widgets"
    html_url: str
    description: str | None = None

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "GitHubRepo":
        """Create a GitHubRepo from GitHub API response."""
        return cls.from_dict(data)


@dataclass(frozen=True)
class GitHubIssue(Record):
    """Minimal representation of a GitHub issue."""

    id: UInt64
    html_url: str
    number: UInt64
    title: str

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "GitHubIssue":
        """Create a GitHubIssue from GitHub API response."""
        return cls.from_dict(data)


@dataclass(frozen=True)
class GitHubIssueMessageBodyRepo(Record):
    """Repository sub-object of a GitHub envelope."""

    id: UInt64
    name: str
    url: str


@dataclass(frozen=True)
class GitHubIssueMessageBodyIssue(Record):
    """Issue sub-object of a GitHub issue envelope."""

    id: UInt64
    number: UInt64
    title: str
    url: str


@dataclass(frozen=True)
class GitHubRepoMessageBody(Record):
    """Envelope announcing a GitHub repository."""

    WIRE_NAMES = {"repo": GITHUB_REPO_TAG}

    repo: GitHubIssueMessageBodyRepo
    external_url: str


@dataclass(frozen=True)
class GitHubIssueMessageBody(Record):
    """Envelope announcing a GitHub issue."""

    WIRE_NAMES = {"issue": GITHUB_ISSUE_TAG, "repo": GITHUB_REPO_TAG}

    issue: GitHubIssueMessageBodyIssue
    repo: GitHubIssueMessageBodyRepo
    external_url: str

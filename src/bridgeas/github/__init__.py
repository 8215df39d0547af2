"""GitHub records and envelopes."""

from .models import (
    GITHUB_ISSUE_TAG,
    GITHUB_REPO_TAG,
    GitHubIssue,
    GitHubIssueMessageBody,
    GitHubIssueMessageBodyIssue,
    GitHubIssueMessageBodyRepo,
    GitHubRepo,
    GitHubRepoMessageBody,
)

__all__ = [
    "GITHUB_ISSUE_TAG",
    "GITHUB_REPO_TAG",
    "GitHubIssue",
    "GitHubIssueMessageBody",
    "GitHubIssueMessageBodyIssue",
    "GitHubIssueMessageBodyRepo",
    "GitHubRepo",
    "GitHubRepoMessageBody",
]

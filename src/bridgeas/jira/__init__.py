"""Jira records and envelopes."""

from .models import (
    JIRA_ISSUE_TAG,
    JIRA_PROJECT_TAG,
    JiraIssue,
    JiraIssueFields,
    JiraIssueLight,
    JiraIssueMessageBody,
    JiraIssueSimpleItem,
    JiraProject,
    JiraVersion,
    jira_browse_url,
)

__all__ = [
    "JIRA_ISSUE_TAG",
    "JIRA_PROJECT_TAG",
    "JiraIssue",
    "JiraIssueFields",
    "JiraIssueLight",
    "JiraIssueMessageBody",
    "JiraIssueSimpleItem",
    "JiraProject",
    "JiraVersion",
    "jira_browse_url",
]

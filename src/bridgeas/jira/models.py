"""Jira-specific data models."""

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import urlsplit

from ..codec import Record

if TYPE_CHECKING:
    from ..config import BridgeasConfig

JIRA_ISSUE_TAG = "gk.bridgeas.jira.issue"
JIRA_PROJECT_TAG = "gk.bridgeas.jira.project"

# Jira returns a "self" link on most objects. It is kept as ``_self`` so it
# does not shadow the instance argument.
SELF_LINK = {"_self": "self"}


@dataclass(frozen=True)
class JiraProject(Record):
    """Representation of a Jira project reference."""

    WIRE_NAMES = SELF_LINK

    _self: str  # REST API link
    id: str  # Opaque, even when numeric-looking
    key: str  # e.g., "ENG"


@dataclass(frozen=True)
class JiraIssueFields(Record):
    """The subset of an issue's ``fields`` object this layer reads."""

    project: JiraProject


@dataclass(frozen=True)
class JiraIssue(Record):
    """Representation of a Jira issue."""

    WIRE_NAMES = SELF_LINK

    _self: str
    id: str
    key: str  # e.g., "ENG-123"
    fields: JiraIssueFields

    @property
    def project(self) -> JiraProject:
        """The project the issue belongs to."""
        return self.fields.project

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "JiraIssue":
        """Create a JiraIssue from Jira API response."""
        return cls.from_dict(data)


@dataclass(frozen=True)
class JiraIssueLight(Record):
    """Issue reference used where the project is already known."""

    WIRE_NAMES = SELF_LINK

    _self: str
    key: str


@dataclass(frozen=True)
class JiraIssueSimpleItem(Record):
    """Flattened issue or project reference carried inside envelopes."""

    id: str
    key: str
    api_url: str

    @classmethod
    def from_issue(cls, issue: JiraIssue) -> "JiraIssueSimpleItem":
        """Flatten an issue, carrying its self link as ``api_url``."""
        return cls(id=issue.id, key=issue.key, api_url=issue._self)

    @classmethod
    def from_project(cls, project: JiraProject) -> "JiraIssueSimpleItem":
        """Flatten a project, carrying its self link as ``api_url``."""
        return cls(id=project.id, key=project.key, api_url=project._self)


@dataclass(frozen=True)
class JiraIssueMessageBody(Record):
    """Envelope announcing a Jira issue."""

    WIRE_NAMES = {"jira_issue": JIRA_ISSUE_TAG, "jira_project": JIRA_PROJECT_TAG}

    jira_issue: JiraIssueSimpleItem
    jira_project: JiraIssueSimpleItem
    external_url: str


@dataclass(frozen=True)
class JiraVersion(Record):
    """Representation of a Jira project version."""

    WIRE_NAMES = {"_self": "self", "project_id": "projectId"}

    _self: str
    id: str
    description: str
    name: str
    project_id: str

    @classmethod
    def from_api_response(cls, data: dict[str, Any]) -> "JiraVersion":
        """Create a JiraVersion from Jira API response."""
        return cls.from_dict(data)


def jira_browse_url(
    api_url: str, key: str, config: "BridgeasConfig | None" = None
) -> str:
    """Build the human-facing browse link for an issue or project key.

    Uses the configured Jira URL when set, otherwise the part of the REST
    self link before ``/rest/`` (which keeps any context path),
    falling back to the link's origin.

    Args:
        api_url: REST self link of the object
        key: Issue or project key (e.g., ENG-123)
        config: Optional configuration with a Jira browse URL override

    Returns:
        URL of the form ``<base>/browse/<key>``
    """
    if config is not None and config.jira.is_configured():
        base = config.jira.url.rstrip("/")
    else:
        idx = api_url.find("/rest/")
        if idx != -1:
            base = api_url[:idx]
        else:
            parts = urlsplit(api_url)
            base = f"{parts.scheme}://{parts.netloc}"
    return f"{base}/browse/{key}"

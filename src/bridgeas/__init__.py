"""bridgeas - GitHub and Jira records mapped to bridge notification envelopes."""

from .codec import Record, decode, encode
from .config import BridgeasConfig, CodecConfig, JiraConfig, load_config
from .errors import BridgeasError, ConfigError, DecodeError, MissingField
from .mapper import (
    EnvelopeKind,
    UnknownEnvelopeError,
    build_issue_envelope_github,
    build_issue_envelope_jira,
    build_issue_envelope_jira_from_issue,
    build_repo_envelope,
    envelope_kind,
    parse_envelope,
)

__version__ = "0.1.0"

__all__ = [
    "BridgeasError",
    "DecodeError",
    "MissingField",
    "UnknownEnvelopeError",
    "ConfigError",
    "Record",
    "encode",
    "decode",
    "BridgeasConfig",
    "CodecConfig",
    "JiraConfig",
    "load_config",
    "EnvelopeKind",
    "build_repo_envelope",
    "build_issue_envelope_github",
    "build_issue_envelope_jira",
    "build_issue_envelope_jira_from_issue",
    "envelope_kind",
    "parse_envelope",
]

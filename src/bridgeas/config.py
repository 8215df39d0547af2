"""Configuration model for bridgeas."""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .errors import ConfigError


@dataclass
class CodecConfig:
    """JSON output options for encoded records."""

    sort_keys: bool = False
    ensure_ascii: bool = False
    indent: int | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return {
            "sort_keys": self.sort_keys,
            "ensure_ascii": self.ensure_ascii,
            "indent": self.indent,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CodecConfig":
        """Create a CodecConfig from a dictionary."""
        return cls(
            sort_keys=data.get("sort_keys", False),
            ensure_ascii=data.get("ensure_ascii", False),
            indent=data.get("indent"),
        )


@dataclass
class JiraConfig:
    """Jira link configuration."""

    url: str | None = None  # Browse host, e.g. https://company.atlassian.net

    def is_configured(self) -> bool:
        """Check if a browse URL override is set."""
        return bool(self.url)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return {"url": self.url}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "JiraConfig":
        """Create a JiraConfig from a dictionary."""
        return cls(url=data.get("url"))


@dataclass
class BridgeasConfig:
    """Top-level bridgeas configuration."""

    version: str = "0.1"
    codec: CodecConfig = field(default_factory=CodecConfig)
    jira: JiraConfig = field(default_factory=JiraConfig)

    def to_dict(self) -> dict[str, Any]:
        """Convert config to dictionary for JSON serialization."""
        return {
            "version": self.version,
            "codec": self.codec.to_dict(),
            "jira": self.jira.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "BridgeasConfig":
        """Create a BridgeasConfig from a dictionary."""
        codec_data = data.get("codec", {})
        jira_data = data.get("jira", {})
        return cls(
            version=data.get("version", "0.1"),
            codec=CodecConfig.from_dict(codec_data) if codec_data else CodecConfig(),
            jira=JiraConfig.from_dict(jira_data) if jira_data else JiraConfig(),
        )


def load_config(path: str | Path) -> BridgeasConfig:
    """Load configuration from a JSON file.

    Raises:
        FileNotFoundError: The file does not exist.
        ConfigError: The file is not a JSON object.
    """
    path = Path(path)
    with open(path) as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Invalid config file {path}: expected a JSON object")
    return BridgeasConfig.from_dict(data)

"""Exceptions raised by bridgeas."""


class BridgeasError(Exception):
    """Base exception for bridgeas errors."""

    pass


class DecodeError(BridgeasError):
    """Raw JSON could not be decoded into the requested record."""

    def __init__(self, message: str, path: str = ""):
        self.path = path
        super().__init__(f"{path}: {message}" if path else message)


class MissingField(DecodeError):
    """A required wire field was absent."""

    def __init__(self, field_name: str, path: str = ""):
        self.field_name = field_name
        super().__init__(f"missing required field '{field_name}'", path)


class ConfigError(BridgeasError):
    """Configuration content could not be read."""

    pass

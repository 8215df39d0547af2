"""JSON wire codec shared by provider records and envelopes."""

import json
import logging
import types
import typing
from dataclasses import fields
from functools import lru_cache
from typing import Any, ClassVar, Iterable, NewType, TypeVar, Union

from .config import CodecConfig
from .errors import BridgeasError, DecodeError, MissingField

logger = logging.getLogger(__name__)

__all__ = [
    "BridgeasError",
    "DecodeError",
    "MissingField",
    "Record",
    "UInt64",
    "UINT64_MAX",
    "decode",
    "encode",
    "load_json",
]

# GitHub ids and issue numbers are fixed-width unsigned integers.
UInt64 = NewType("UInt64", int)
UINT64_MAX = 2**64 - 1

R = TypeVar("R", bound="Record")


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    return "object"


def _optional_inner(tp: Any) -> Any | None:
    """Return X for an ``X | None`` annotation, None otherwise."""
    if typing.get_origin(tp) in (Union, types.UnionType):
        args = typing.get_args(tp)
        if len(args) == 2 and type(None) in args:
            return args[0] if args[1] is type(None) else args[1]
    return None


@lru_cache(maxsize=None)
def _field_types(cls: type) -> dict[str, Any]:
    hints = typing.get_type_hints(cls)
    return {f.name: hints[f.name] for f in fields(cls)}


def _check_uint64(value: Any) -> str | None:
    """Return why value is not a uint64, or None when it is one."""
    if isinstance(value, bool) or not isinstance(value, int):
        return f"expected unsigned integer, got {_json_type(value)}"
    if not 0 <= value <= UINT64_MAX:
        return f"integer {value} out of range for uint64"
    return None


def _decode_value(tp: Any, value: Any, path: str) -> Any:
    if tp is UInt64:
        problem = _check_uint64(value)
        if problem:
            raise DecodeError(problem, path)
        return value

    if tp is str:
        if not isinstance(value, str):
            raise DecodeError(f"expected string, got {_json_type(value)}", path)
        # JSON allows lone surrogate escapes, which cannot be re-encoded
        try:
            value.encode("utf-8")
        except UnicodeEncodeError as e:
            raise DecodeError(f"invalid unicode string: {e.reason}", path) from e
        return value

    if isinstance(tp, type) and issubclass(tp, Record):
        return tp.from_dict(value, path=path)

    raise TypeError(f"Unsupported field type {tp!r} at {path}")


class Record:
    """Base for dataclass records exchanged as JSON.

    ``WIRE_NAMES`` maps internal field names to their wire names, for the
    fields whose names differ on the wire. That one table drives both the
    plain-dict marshalling (``to_dict``/``from_dict``) and the JSON codec.
    Optional fields set to None are omitted on output, and decode to None
    when absent or null on input.
    """

    WIRE_NAMES: ClassVar[dict[str, str]] = {}

    def __post_init__(self) -> None:
        for name, tp in _field_types(type(self)).items():
            if tp is UInt64:
                problem = _check_uint64(getattr(self, name))
                if problem:
                    raise ValueError(f"{type(self).__name__}.{name}: {problem}")

    @classmethod
    def wire_name(cls, name: str) -> str:
        """Return the wire name for an internal field name."""
        return cls.WIRE_NAMES.get(name, name)

    def to_dict(self, exclude: Iterable[str] = ()) -> dict[str, Any]:
        """Convert the record to a dict keyed by wire names.

        Args:
            exclude: Internal field names to leave out, at every nesting level.
        """
        skipped = frozenset(exclude)
        data: dict[str, Any] = {}
        for f in fields(self):
            if f.name in skipped:
                continue
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, Record):
                value = value.to_dict(exclude=skipped)
            data[self.wire_name(f.name)] = value
        return data

    @classmethod
    def from_dict(cls: type[R], data: Any, path: str = "") -> R:
        """Create a record from a dict keyed by wire names.

        Unknown keys are ignored. Raises MissingField for an absent required
        field and DecodeError for a value of the wrong type.
        """
        if not isinstance(data, dict):
            raise DecodeError(f"expected object, got {_json_type(data)}", path)

        kwargs: dict[str, Any] = {}
        for name, tp in _field_types(cls).items():
            wire = cls.wire_name(name)
            field_path = f"{path}.{wire}" if path else wire
            inner = _optional_inner(tp)

            if inner is not None:
                value = data.get(wire)
                kwargs[name] = (
                    None if value is None else _decode_value(inner, value, field_path)
                )
                continue

            if wire not in data:
                raise MissingField(wire, path)
            kwargs[name] = _decode_value(tp, data[wire], field_path)

        return cls(**kwargs)

    def to_json(
        self, exclude: Iterable[str] = (), config: CodecConfig | None = None
    ) -> bytes:
        """Encode the record as UTF-8 JSON."""
        return encode(self, exclude=exclude, config=config)

    @classmethod
    def from_json(cls: type[R], raw: bytes | str) -> R:
        """Decode UTF-8 JSON into a record."""
        return decode(cls, raw)


def encode(
    record: Record,
    *,
    exclude: Iterable[str] = (),
    config: CodecConfig | None = None,
) -> bytes:
    """Encode a record as UTF-8 JSON.

    With the default config the output is compact and keys follow field
    order, so equal records always encode to identical bytes.
    """
    config = config or CodecConfig()
    separators = (",", ": ") if config.indent is not None else (",", ":")
    text = json.dumps(
        record.to_dict(exclude=exclude),
        separators=separators,
        ensure_ascii=config.ensure_ascii,
        sort_keys=config.sort_keys,
        indent=config.indent,
    )
    return text.encode("utf-8")


def load_json(raw: bytes | str, what: str) -> Any:
    """Parse raw UTF-8 JSON, raising DecodeError on failure.

    Args:
        raw: JSON text or UTF-8 bytes
        what: Name of the expected payload, for log messages
    """
    try:
        text = raw.decode("utf-8") if isinstance(raw, (bytes, bytearray)) else raw
        return json.loads(text)
    except UnicodeDecodeError as e:
        logger.debug("Invalid UTF-8 for %s: %s", what, e)
        raise DecodeError(f"invalid UTF-8: {e}") from e
    except json.JSONDecodeError as e:
        logger.debug("Malformed JSON for %s: %s", what, e)
        raise DecodeError(f"malformed JSON: {e}") from e


def decode(record_type: type[R], raw: bytes | str) -> R:
    """Decode raw JSON into a record of the given type.

    Raises:
        DecodeError: Invalid UTF-8, malformed JSON or a type mismatch.
        MissingField: A required field is absent.
    """
    data = load_json(raw, record_type.__name__)
    try:
        return record_type.from_dict(data)
    except DecodeError as e:
        logger.debug("Failed to decode %s: %s", record_type.__name__, e)
        raise

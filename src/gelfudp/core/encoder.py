"""Turn raw messages into the bytes that go on the wire.

Three kinds of input are accepted:

* a mapping, which is validated and serialized as compact UTF-8 JSON;
* text that looks like a JSON object (its first non-blank character is
  ``{``), which is decoded so it can be validated and then sent unchanged;
* any other text, which is opaque message content and is sent verbatim.

Field values are restricted to the JSON value space: ``str``, ``int``,
``float``, ``bool``, ``None`` and nested mappings and sequences of those.
Anything else raises :class:`EncodeError` instead of being coerced.
"""

from __future__ import annotations

import json
import math
import socket
import time
from typing import AbstractSet, Any, Dict, Mapping, Sequence, Union

from ..config.schema import RESERVED_FIELDS
from .errors import DecodeError, EncodeError
from .validation import validate_record

__all__ = [
    "FieldValue",
    "RawMessage",
    "GELF_VERSION",
    "check_field_value",
    "decode_message",
    "encode_message",
    "build_gelf_payload",
]

GELF_VERSION = "1.1"

FieldValue = Union[
    str,
    int,
    float,
    bool,
    None,
    Mapping[str, "FieldValue"],
    Sequence["FieldValue"],
]
RawMessage = Union[str, bytes, Mapping[str, FieldValue]]


def _to_json_value(value: Any, path: str) -> Any:
    if value is None or isinstance(value, (str, bool, int)):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            raise EncodeError(f"Non-finite number at {path}: {value!r}")
        return value
    if isinstance(value, Mapping):
        result: Dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                raise EncodeError(f"Non-string key at {path}: {key!r}")
            result[key] = _to_json_value(item, f"{path}.{key}")
        return result
    if isinstance(value, (list, tuple)):
        return [_to_json_value(item, f"{path}[{index}]") for index, item in enumerate(value)]
    raise EncodeError(f"Unsupported value at {path}: {type(value).__name__}")


def check_field_value(value: Any, path: str = "$") -> None:
    """Raise :class:`EncodeError` if ``value`` is outside the JSON value space."""

    _to_json_value(value, path)


def _as_text(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise DecodeError(f"Message is not valid UTF-8: {exc}") from exc
    return raw


def _looks_like_object(text: str) -> bool:
    return text.lstrip().startswith("{")


def decode_message(text: str | bytes) -> Dict[str, Any]:
    """Decode JSON text into a record, raising :class:`DecodeError` on failure."""

    try:
        decoded = json.loads(_as_text(text))
    except json.JSONDecodeError as exc:
        raise DecodeError(f"Message is not valid JSON: {exc.msg} (line {exc.lineno}, column {exc.colno})") from exc
    if not isinstance(decoded, dict):
        raise DecodeError(f"Expected a JSON object, got {type(decoded).__name__}")
    return decoded


def encode_message(raw: RawMessage, reserved: AbstractSet[str] = RESERVED_FIELDS) -> bytes:
    """Validate ``raw`` and return the bytes to transmit."""

    if isinstance(raw, Mapping):
        record = _to_json_value(raw, "$")
        validate_record(record, reserved)
        return json.dumps(record, ensure_ascii=False, separators=(",", ":"), allow_nan=False).encode("utf-8")

    if isinstance(raw, (str, bytes)):
        text = _as_text(raw)
        if _looks_like_object(text):
            validate_record(decode_message(text), reserved)
        return text.encode("utf-8")

    raise EncodeError(f"Unsupported message type: {type(raw).__name__}")


def build_gelf_payload(
    short_message: str,
    *,
    host: str | None = None,
    level: int | None = None,
    timestamp: float | None = None,
    full_message: str | None = None,
    fields: Mapping[str, FieldValue] | None = None,
    reserved: AbstractSet[str] = RESERVED_FIELDS,
) -> Dict[str, FieldValue]:
    """Build a GELF 1.1 message mapping.

    Additional ``fields`` are prefixed with ``_`` unless they already are.
    A field whose prefixed name is reserved raises :class:`ForbiddenFieldError`.
    """

    payload: Dict[str, FieldValue] = {
        "version": GELF_VERSION,
        "host": host or socket.gethostname(),
        "short_message": short_message,
        "timestamp": time.time() if timestamp is None else timestamp,
    }
    if level is not None:
        payload["level"] = level
    if full_message:
        payload["full_message"] = full_message
    for key, value in (fields or {}).items():
        name = key if key.startswith("_") else f"_{key}"
        payload[name] = value
    validate_record(payload, reserved)
    return payload

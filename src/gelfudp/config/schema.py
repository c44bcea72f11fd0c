"""Configuration schema definition for gelfudp."""

from __future__ import annotations

from copy import deepcopy
from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Iterable, Mapping

from ..core.errors import ConfigurationError

RESERVED_FIELDS: FrozenSet[str] = frozenset({"_id"})

DEFAULT_CONFIG: Dict[str, Any] = {
    "graylog_hostname": "127.0.0.1",
    "graylog_port": 12201,
    "connection": "wan",
    "max_chunk_size_wan": 1420,
    "max_chunk_size_lan": 8154,
    "reserved_fields": sorted(RESERVED_FIELDS),
}


def default_config() -> Dict[str, Any]:
    """Return a deep copy of the default configuration mapping."""

    return deepcopy(DEFAULT_CONFIG)


@dataclass(frozen=True, slots=True)
class GelfConfig:
    """Destination and framing settings for a :class:`~gelfudp.client.GelfClient`.

    ``connection`` selects the chunk ceiling: ``"lan"`` picks
    ``max_chunk_size_lan``, any other value picks ``max_chunk_size_wan``.
    """

    graylog_hostname: str = "127.0.0.1"
    graylog_port: int = 12201
    connection: str = "wan"
    max_chunk_size_wan: int = 1420
    max_chunk_size_lan: int = 8154
    reserved_fields: FrozenSet[str] = field(default=RESERVED_FIELDS)

    @property
    def destination(self) -> tuple[str, int]:
        return (self.graylog_hostname, self.graylog_port)


def _to_int(data: Mapping[str, Any], key: str) -> int:
    raw = data.get(key, DEFAULT_CONFIG[key])
    if isinstance(raw, bool):
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}")
    try:
        return int(raw)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from exc


def _to_reserved(raw: Any) -> FrozenSet[str]:
    if raw is None:
        return RESERVED_FIELDS
    if isinstance(raw, str):
        return frozenset({raw})
    if isinstance(raw, Mapping):
        return frozenset(str(item) for item in raw.keys())
    if isinstance(raw, Iterable):
        return frozenset(str(item) for item in raw)
    raise ConfigurationError(f"reserved_fields must be a list of names, got {raw!r}")


def build_config(data: Mapping[str, Any]) -> GelfConfig:
    return GelfConfig(
        graylog_hostname=str(data.get("graylog_hostname", DEFAULT_CONFIG["graylog_hostname"])).strip(),
        graylog_port=_to_int(data, "graylog_port"),
        connection=str(data.get("connection", DEFAULT_CONFIG["connection"])),
        max_chunk_size_wan=_to_int(data, "max_chunk_size_wan"),
        max_chunk_size_lan=_to_int(data, "max_chunk_size_lan"),
        reserved_fields=_to_reserved(data.get("reserved_fields")),
    )

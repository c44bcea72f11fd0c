"""Record and configuration validation helpers."""

from __future__ import annotations

from typing import AbstractSet, Any, Mapping

from ..config.schema import RESERVED_FIELDS, GelfConfig
from .errors import ConfigurationError, ForbiddenFieldError

__all__ = ["validate_record", "validate_configuration"]


def validate_record(record: Mapping[str, Any], reserved: AbstractSet[str] = RESERVED_FIELDS) -> None:
    """Raise :class:`ForbiddenFieldError` if ``record`` has a reserved top-level key."""

    for key in record:
        if key in reserved:
            raise ForbiddenFieldError(key)


def validate_configuration(config: GelfConfig) -> None:
    """Ensure destination and chunk ceilings are usable."""

    if not config.graylog_hostname:
        raise ConfigurationError("graylog_hostname must not be empty")

    if isinstance(config.graylog_port, bool) or not isinstance(config.graylog_port, int):
        raise ConfigurationError(f"graylog_port must be an integer, got {config.graylog_port!r}")
    if not 1 <= config.graylog_port <= 65535:
        raise ConfigurationError(f"graylog_port must be within 1-65535, got {config.graylog_port}")

    for name in ("max_chunk_size_wan", "max_chunk_size_lan"):
        value = getattr(config, name)
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigurationError(f"{name} must be an integer, got {value!r}")
        if value <= 0:
            raise ConfigurationError(f"{name} must be positive, got {value}")

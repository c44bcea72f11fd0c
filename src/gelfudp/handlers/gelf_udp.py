"""GELF UDP logging handler."""

from __future__ import annotations

import logging
import socket
from typing import Any, Dict

from ..client import GelfClient
from ..config.schema import GelfConfig
from ..core.encoder import FieldValue, build_gelf_payload, check_field_value
from ..core.errors import EncodeError
from ..core.levels import ensure_level, to_syslog_level

__all__ = ["GELFUDPHandler", "build_gelf_udp_handler"]

_INTERNAL_LOGGER = "gelfudp"

_STANDARD_ATTRS = {
    "name",
    "msg",
    "args",
    "levelname",
    "levelno",
    "pathname",
    "filename",
    "module",
    "exc_info",
    "exc_text",
    "stack_info",
    "lineno",
    "funcName",
    "created",
    "msecs",
    "relativeCreated",
    "thread",
    "threadName",
    "processName",
    "process",
    "taskName",
    "asctime",
    "message",
}


def _field_value(value: Any) -> Any:
    """Keep JSON-shaped extras as they are and fall back to ``repr`` otherwise."""

    try:
        check_field_value(value)
    except EncodeError:
        return repr(value)
    return value


class GELFUDPHandler(logging.Handler):
    """Send log records to Graylog as GELF, chunking large ones."""

    def __init__(self, client: GelfClient, *, host: str | None = None) -> None:
        super().__init__()
        self.client = client
        self.host = host or socket.gethostname()

    def make_payload(self, record: logging.LogRecord) -> Dict[str, FieldValue]:
        fields: Dict[str, Any] = {
            "logger": record.name,
            "file": record.pathname,
            "line": record.lineno,
            "function": record.funcName,
            "thread_name": record.threadName,
        }
        for key, value in record.__dict__.items():
            if key in _STANDARD_ATTRS:
                continue
            fields[key] = _field_value(value)

        full_message = None
        if record.exc_info:
            formatter = self.formatter or logging.Formatter()
            full_message = formatter.formatException(record.exc_info)

        return build_gelf_payload(
            record.getMessage(),
            host=self.host,
            level=to_syslog_level(record.levelno),
            timestamp=record.created,
            full_message=full_message,
            fields=fields,
            reserved=self.client.config.reserved_fields,
        )

    def emit(self, record: logging.LogRecord) -> None:  # type: ignore[override]
        if record.name == _INTERNAL_LOGGER or record.name.startswith(_INTERNAL_LOGGER + "."):
            return
        try:
            self.client.log(self.make_payload(record))
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        try:
            self.client.close()
        finally:
            super().close()


def build_gelf_udp_handler(config: GelfConfig | None = None, *, level: int | str = logging.NOTSET) -> logging.Handler:
    handler = GELFUDPHandler(GelfClient(config))
    handler.setLevel(ensure_level(level))
    return handler

"""Exception hierarchy for gelfudp."""

from __future__ import annotations

__all__ = [
    "GelfError",
    "ConfigurationError",
    "ForbiddenFieldError",
    "DecodeError",
    "EncodeError",
    "MessageTooLargeError",
    "TransportError",
]


class GelfError(Exception):
    """Base class for every error raised by gelfudp."""


class ConfigurationError(GelfError, ValueError):
    """Raised when configuration validation fails."""


class ForbiddenFieldError(GelfError, ValueError):
    """Raised when a record carries a field reserved by Graylog."""

    def __init__(self, field: str) -> None:
        super().__init__(f"Field '{field}' is reserved and must not be sent")
        self.field = field


class DecodeError(GelfError, ValueError):
    """Raised when message text is not valid JSON."""


class EncodeError(GelfError, TypeError):
    """Raised when a message or one of its values cannot be encoded."""


class MessageTooLargeError(GelfError, ValueError):
    """Raised when a payload needs more chunks than GELF allows."""

    def __init__(self, size: int, chunk_count: int, max_chunks: int) -> None:
        super().__init__(
            f"Payload of {size} bytes needs {chunk_count} chunks; GELF allows at most {max_chunks}"
        )
        self.size = size
        self.chunk_count = chunk_count
        self.max_chunks = max_chunks


class TransportError(GelfError, OSError):
    """Raised when writing datagrams to the socket fails."""

    def __init__(self, message: str, *, sent: int = 0) -> None:
        super().__init__(message)
        self.sent = sent

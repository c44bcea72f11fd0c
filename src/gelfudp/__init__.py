"""gelfudp public API."""

import logging

from .api import configure, get_client, log, shutdown
from .client import GelfClient
from .config.schema import GelfConfig
from .core.errors import (
    ConfigurationError,
    DecodeError,
    EncodeError,
    ForbiddenFieldError,
    GelfError,
    MessageTooLargeError,
    TransportError,
)
from .handlers.gelf_udp import GELFUDPHandler, build_gelf_udp_handler
from .version import __version__

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "configure",
    "get_client",
    "log",
    "shutdown",
    "GelfClient",
    "GelfConfig",
    "GELFUDPHandler",
    "build_gelf_udp_handler",
    "GelfError",
    "ConfigurationError",
    "DecodeError",
    "EncodeError",
    "ForbiddenFieldError",
    "MessageTooLargeError",
    "TransportError",
    "__version__",
]

"""Public API surface for gelfudp."""

from __future__ import annotations

from typing import Any, Dict

from .client import GelfClient
from .config.loader import load_configuration
from .core.encoder import RawMessage

_CLIENT: GelfClient | None = None


def configure(overrides: Dict[str, Any] | None = None) -> GelfClient:
    """Build the default client from configuration sources plus ``overrides``."""

    global _CLIENT
    config = load_configuration(overrides or {})
    client = GelfClient(config)
    shutdown()
    _CLIENT = client
    return client


def get_client() -> GelfClient:
    """Return the default client, configuring it on first use."""

    if _CLIENT is None:
        return configure({})
    return _CLIENT


def log(message: RawMessage) -> int:
    """Send ``message`` through the default client."""

    return get_client().log(message)


def shutdown() -> None:
    """Close the default client's socket."""

    global _CLIENT
    if _CLIENT is not None:
        _CLIENT.close()
        _CLIENT = None

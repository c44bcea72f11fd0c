"""UDP datagram transport."""

from __future__ import annotations

import logging
import socket
import threading
from typing import Any, Iterable, Tuple

from ..core.errors import TransportError

__all__ = ["UDPTransport"]

logger = logging.getLogger(__name__)


class UDPTransport:
    """Fire-and-forget sender of datagrams to one destination.

    The destination is resolved on first use and the socket is kept open
    until :meth:`close`. Writes hold a lock so the datagrams of one
    :meth:`send` call are not interleaved with another thread's.
    """

    def __init__(self, host: str, port: int) -> None:
        self.host = host
        self.port = port
        self._lock = threading.Lock()
        self._sock: socket.socket | None = None
        self._address: Tuple[Any, ...] | None = None
        self._closed = False

    # ------------------------------------------------------------------
    def _resolve(self) -> None:
        try:
            infos = socket.getaddrinfo(self.host, self.port, 0, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
        except socket.gaierror as exc:
            raise TransportError(f"Cannot resolve {self.host}:{self.port}: {exc}") from exc
        if not infos:
            raise TransportError(f"No UDP address found for {self.host}:{self.port}")
        family, socktype, proto, _, address = infos[0]
        try:
            self._sock = socket.socket(family, socktype, proto)
        except OSError as exc:
            raise TransportError(f"Cannot open UDP socket: {exc}") from exc
        self._address = address
        logger.debug("Resolved %s:%s to %s", self.host, self.port, address)

    def send(self, packets: Iterable[bytes]) -> int:
        """Write each packet as one datagram and return how many were sent."""

        sent = 0
        with self._lock:
            if self._closed:
                raise TransportError("Transport is closed")
            if self._sock is None:
                self._resolve()
            assert self._sock is not None and self._address is not None
            for packet in packets:
                try:
                    self._sock.sendto(packet, self._address)
                except OSError as exc:
                    raise TransportError(
                        f"Failed to send datagram {sent + 1} to {self.host}:{self.port}: {exc}",
                        sent=sent,
                    ) from exc
                sent += 1
        return sent

    def close(self) -> None:
        with self._lock:
            self._closed = True
            if self._sock is not None:
                self._sock.close()
                self._sock = None

    @property
    def closed(self) -> bool:
        return self._closed

    def __enter__(self) -> "UDPTransport":
        return self

    def __exit__(self, exc_type, exc: BaseException | None, tb) -> None:  # type: ignore[override]
        self.close()

"""GELF UDP client tying encoding, chunking and transport together."""

from __future__ import annotations

import logging
from typing import List

from .config.schema import GelfConfig
from .core.chunker import MessageIdGenerator, build_chunk_packet, chunk, chunk_ceiling
from .core.encoder import RawMessage, encode_message
from .core.validation import validate_configuration
from .transport.udp import UDPTransport

__all__ = ["GelfClient"]

logger = logging.getLogger(__name__)


class GelfClient:
    """Send GELF messages to a Graylog UDP input."""

    def __init__(self, config: GelfConfig | None = None) -> None:
        self.config = config or GelfConfig()
        validate_configuration(self.config)
        self._ids = MessageIdGenerator()
        self._transport = UDPTransport(self.config.graylog_hostname, self.config.graylog_port)

    @property
    def chunk_size(self) -> int:
        return chunk_ceiling(self.config)

    def packets(self, raw: RawMessage) -> List[bytes]:
        """Return the datagrams ``raw`` would be sent as, without sending them."""

        payload = encode_message(raw, self.config.reserved_fields)
        return chunk(payload, self.chunk_size, id_factory=self._ids)

    def create_chunked_message(self, sequence: int, total: int, message_id: bytes, data: bytes) -> bytes:
        return build_chunk_packet(message_id, sequence, total, data)

    def log(self, raw: RawMessage) -> int:
        """Validate, encode, chunk and send ``raw``; return the datagram count.

        Errors from any stage propagate. Encoding and size errors are raised
        before anything is written; a transport failure part way through a
        chunked message leaves the earlier chunks sent.
        """

        packets = self.packets(raw)
        sent = self._transport.send(packets)
        logger.debug("Sent %d datagram(s) to %s:%s", sent, *self.config.destination)
        return sent

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "GelfClient":
        return self

    def __exit__(self, exc_type, exc: BaseException | None, tb) -> None:  # type: ignore[override]
        self.close()

"""GELF chunking: message ids, chunk packets and ceiling selection."""

from __future__ import annotations

import logging
import math
import os
import random
import struct
import threading
import time
from typing import Callable, List

from ..config.schema import GelfConfig
from .errors import MessageTooLargeError

__all__ = [
    "CHUNK_MAGIC",
    "MAX_CHUNKS",
    "MESSAGE_ID_SIZE",
    "CHUNK_HEADER_SIZE",
    "MessageIdGenerator",
    "build_chunk_packet",
    "chunk",
    "chunk_ceiling",
]

logger = logging.getLogger(__name__)

CHUNK_MAGIC = b"\x1e\x0f"
MAX_CHUNKS = 128
MESSAGE_ID_SIZE = 8
CHUNK_HEADER_SIZE = len(CHUNK_MAGIC) + MESSAGE_ID_SIZE + 2

_ID_STRUCT = struct.Struct("!II")
_SEQ_STRUCT = struct.Struct("!BB")


class MessageIdGenerator:
    """Produce 8-byte message ids from a nanosecond clock and a private PRNG.

    Each generator owns its own ``random.Random``; draws are serialized so
    one generator can be shared by threads logging through the same client.
    """

    def __init__(self, seed: int | None = None) -> None:
        if seed is None:
            seed = int.from_bytes(os.urandom(8), "big")
        self._random = random.Random(seed)
        self._lock = threading.Lock()

    def __call__(self) -> bytes:
        stamp = time.time_ns() & 0xFFFFFFFF
        with self._lock:
            noise = self._random.getrandbits(32)
        return _ID_STRUCT.pack(stamp, noise)


def build_chunk_packet(message_id: bytes, sequence: int, total: int, data: bytes) -> bytes:
    """Return one chunk datagram: magic, id, sequence index, total count, data."""

    if len(message_id) != MESSAGE_ID_SIZE:
        raise ValueError(f"Message id must be {MESSAGE_ID_SIZE} bytes, got {len(message_id)}")
    if not 1 <= total <= MAX_CHUNKS:
        raise ValueError(f"Chunk count must be within 1-{MAX_CHUNKS}, got {total}")
    if not 0 <= sequence < total:
        raise ValueError(f"Sequence index {sequence} out of range for {total} chunks")
    return b"".join((CHUNK_MAGIC, message_id, _SEQ_STRUCT.pack(sequence, total), data))


def chunk(
    payload: bytes,
    max_chunk_size: int,
    *,
    id_factory: Callable[[], bytes] | None = None,
) -> List[bytes]:
    """Frame ``payload`` as one plain datagram or a sequence of chunk packets.

    Payloads that fit in ``max_chunk_size`` are returned unchanged as a
    single-element list. Larger payloads are split into slices of at most
    ``max_chunk_size`` bytes sharing one message id. Needing more than
    :data:`MAX_CHUNKS` slices raises :class:`MessageTooLargeError`.
    """

    if max_chunk_size <= 0:
        raise ValueError(f"max_chunk_size must be positive, got {max_chunk_size}")

    size = len(payload)
    if size <= max_chunk_size:
        return [payload]

    total = math.ceil(size / max_chunk_size)
    if total > MAX_CHUNKS:
        raise MessageTooLargeError(size, total, MAX_CHUNKS)

    message_id = (id_factory or MessageIdGenerator())()
    packets = [
        build_chunk_packet(message_id, index, total, payload[offset : offset + max_chunk_size])
        for index, offset in enumerate(range(0, size, max_chunk_size))
    ]
    logger.debug("Split %d bytes into %d chunks (id=%s)", size, total, message_id.hex())
    return packets


def chunk_ceiling(config: GelfConfig) -> int:
    """Return the chunk ceiling for ``config.connection``."""

    if config.connection == "lan":
        return config.max_chunk_size_lan
    return config.max_chunk_size_wan

from __future__ import annotations

import math
import threading

import pytest

from gelfudp.config.schema import GelfConfig
from gelfudp.core.chunker import (
    CHUNK_HEADER_SIZE,
    CHUNK_MAGIC,
    MAX_CHUNKS,
    MessageIdGenerator,
    build_chunk_packet,
    chunk,
    chunk_ceiling,
)
from gelfudp.core.errors import MessageTooLargeError


def test_small_payload_is_returned_unchanged() -> None:
    payload = b'{"short_message":"hi"}'
    calls: list[int] = []

    def factory() -> bytes:
        calls.append(1)
        return b"\x00" * 8

    assert chunk(payload, len(payload), id_factory=factory) == [payload]
    assert calls == []


@pytest.mark.parametrize("size, ceiling", [(11, 5), (10, 3), (1420 * 3 + 1, 1420), (128, 1)])
def test_large_payload_splits_into_ordered_chunks(size: int, ceiling: int, parse_chunk) -> None:
    payload = bytes(index % 251 for index in range(size))

    packets = chunk(payload, ceiling)

    assert len(packets) == math.ceil(size / ceiling)
    parsed = [parse_chunk(packet) for packet in packets]
    assert {message_id for message_id, _, _, _ in parsed} == {parsed[0][0]}
    assert [sequence for _, sequence, _, _ in parsed] == list(range(len(packets)))
    assert {total for _, _, total, _ in parsed} == {len(packets)}
    assert all(len(data) <= ceiling for _, _, _, data in parsed)
    assert b"".join(data for _, _, _, data in parsed) == payload


def test_every_chunk_starts_with_magic_bytes() -> None:
    packets = chunk(b"x" * 50, 7)

    assert all(packet[:2] == b"\x1e\x0f" for packet in packets)


def test_exactly_max_chunks_is_allowed(parse_chunk) -> None:
    packets = chunk(b"a" * MAX_CHUNKS, 1)

    assert len(packets) == MAX_CHUNKS
    assert parse_chunk(packets[-1])[1:3] == (MAX_CHUNKS - 1, MAX_CHUNKS)


def test_more_than_max_chunks_raises() -> None:
    with pytest.raises(MessageTooLargeError) as info:
        chunk(b"a" * (MAX_CHUNKS + 1), 1)

    assert info.value.chunk_count == MAX_CHUNKS + 1
    assert info.value.max_chunks == MAX_CHUNKS


def test_non_positive_ceiling_is_rejected() -> None:
    with pytest.raises(ValueError):
        chunk(b"abc", 0)


def test_injected_id_factory_is_used_once_per_message(parse_chunk) -> None:
    ids = iter([b"ABCDEFGH", b"IJKLMNOP"])

    packets = chunk(b"0123456789", 4, id_factory=lambda: next(ids))

    assert {parse_chunk(packet)[0] for packet in packets} == {b"ABCDEFGH"}


def test_build_chunk_packet_layout() -> None:
    packet = build_chunk_packet(b"myId\x00\x00\x00\x01", 13, 42, b"message")

    assert packet == CHUNK_MAGIC + b"myId\x00\x00\x00\x01" + bytes([13, 42]) + b"message"
    assert len(packet) == CHUNK_HEADER_SIZE + len(b"message")


@pytest.mark.parametrize(
    "message_id, sequence, total",
    [(b"short", 0, 1), (b"12345678", 1, 1), (b"12345678", 0, 0), (b"12345678", 0, 129), (b"12345678", -1, 2)],
)
def test_build_chunk_packet_rejects_invalid_header(message_id: bytes, sequence: int, total: int) -> None:
    with pytest.raises(ValueError):
        build_chunk_packet(message_id, sequence, total, b"data")


def test_message_ids_are_eight_bytes_and_distinct() -> None:
    generator = MessageIdGenerator()

    ids = {generator() for _ in range(1000)}

    assert len(ids) == 1000
    assert all(len(message_id) == 8 for message_id in ids)


def test_message_ids_are_distinct_across_threads() -> None:
    generator = MessageIdGenerator()
    results: list[bytes] = []
    lock = threading.Lock()

    def worker() -> None:
        local = [generator() for _ in range(200)]
        with lock:
            results.extend(local)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(set(results)) == len(results) == 1600


@pytest.mark.parametrize(
    "connection, expected",
    [("lan", 1337), ("wan", 42), ("wlan", 42), ("LAN", 42), ("", 42)],
)
def test_chunk_ceiling_selects_by_connection(connection: str, expected: int) -> None:
    config = GelfConfig(connection=connection, max_chunk_size_wan=42, max_chunk_size_lan=1337)

    assert chunk_ceiling(config) == expected

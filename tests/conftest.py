from __future__ import annotations

import os
import socket
from pathlib import Path
from typing import Callable, Dict, Iterator, List

import pytest

from gelfudp import api
from gelfudp.config import loader
from gelfudp.core.chunker import CHUNK_MAGIC, MESSAGE_ID_SIZE

Reassembler = Callable[[socket.socket, int], Dict[bytes, bytes]]


@pytest.fixture(autouse=True)
def reset_gelfudp(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    user_dir = tmp_path / "user-config"
    user_dir.mkdir()
    monkeypatch.setattr(loader, "user_config_dir", lambda _: str(user_dir))
    workdir = tmp_path / "work"
    workdir.mkdir()
    monkeypatch.chdir(workdir)
    for key in list(os.environ):
        if key.startswith("GELFUDP__"):
            monkeypatch.delenv(key)
    yield
    api.shutdown()


@pytest.fixture
def udp_receiver() -> Iterator[socket.socket]:
    sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM)
    sock.bind(("127.0.0.1", 0))
    sock.settimeout(2.0)
    try:
        yield sock
    finally:
        sock.close()


def parse_chunk(packet: bytes) -> tuple[bytes, int, int, bytes]:
    assert packet[:2] == CHUNK_MAGIC
    header_end = 2 + MESSAGE_ID_SIZE
    message_id = packet[2:header_end]
    sequence, total = packet[header_end], packet[header_end + 1]
    return message_id, sequence, total, packet[header_end + 2 :]


def _reassemble(sock: socket.socket, messages: int) -> Dict[bytes, bytes]:
    """Read datagrams until ``messages`` complete messages have arrived.

    Unchunked datagrams are keyed by their arrival number.
    """

    pending: Dict[bytes, Dict[int, bytes]] = {}
    totals: Dict[bytes, int] = {}
    done: Dict[bytes, bytes] = {}
    plain: List[bytes] = []
    while len(done) < messages:
        packet, _ = sock.recvfrom(65535)
        if not packet.startswith(CHUNK_MAGIC):
            plain.append(packet)
            done[str(len(plain)).encode()] = packet
            continue
        message_id, sequence, total, data = parse_chunk(packet)
        assert totals.setdefault(message_id, total) == total
        slots = pending.setdefault(message_id, {})
        assert sequence not in slots
        slots[sequence] = data
        if len(slots) == total:
            done[message_id] = b"".join(slots[index] for index in range(total))
    return done


@pytest.fixture
def reassemble() -> Reassembler:
    return _reassemble


@pytest.fixture(name="parse_chunk")
def parse_chunk_fixture() -> Callable[[bytes], tuple[bytes, int, int, bytes]]:
    return parse_chunk

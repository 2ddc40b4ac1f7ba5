"""Shared test doubles: an in-memory connection and a loopback status server."""

from collections.abc import Callable, Iterator
import socket
import threading

import pytest

from mcslp.varint import BytesReader, pack_varint

STATUS_JSON = (
    '{"description":{"text":"A Test Server"},'
    '"players":{"max":20,"online":0},'
    '"version":{"name":"1.20","protocol":763}}'
)


def status_frame(payload: bytes, packet_id: int = 0x00) -> bytes:
    """Build a status response frame the way a server sends it."""
    body = bytes([packet_id]) + pack_varint(len(payload)) + payload
    return pack_varint(len(body)) + body


class FakeConnection:
    """Connection double fed from a byte string; records writes and closes."""

    def __init__(self, response: bytes, latency: int | None = 3) -> None:
        self.reader = BytesReader(response)
        self.written = bytearray()
        self.latency = latency
        self.close_calls = 0

    def write(self, data: bytes) -> None:
        self.written += data

    def read_byte(self) -> int:
        return self.reader.read_byte()

    def read_exact(self, size: int) -> bytes:
        return self.reader.read_exact(size)

    def close(self) -> None:
        self.close_calls += 1

    def __enter__(self) -> "FakeConnection":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


def _recv_request(conn: socket.socket) -> bytes:
    # handshake ... next_state(0x01) followed by the status request 0x01 0x00
    data = b""
    while not data.endswith(b"\x01\x01\x00"):
        chunk = conn.recv(1024)
        if not chunk:
            break
        data += chunk
    return data


@pytest.fixture
def status_server() -> Iterator[Callable[[bytes], tuple[int, list[bytes]]]]:
    """Start one-shot loopback servers replying with a given raw response.

    Returns a factory: ``port, requests = start(response)``. Each server accepts
    a single connection, reads the handshake and status request, sends
    ``response`` and closes.
    """
    servers: list[tuple[socket.socket, threading.Thread]] = []

    def start(response: bytes) -> tuple[int, list[bytes]]:
        server = socket.create_server(("127.0.0.1", 0))
        server.settimeout(5)
        requests: list[bytes] = []

        def serve() -> None:
            try:
                conn, _ = server.accept()
            except OSError:
                return
            with conn:
                conn.settimeout(5)
                requests.append(_recv_request(conn))
                conn.sendall(response)

        thread = threading.Thread(target=serve, daemon=True)
        thread.start()
        servers.append((server, thread))
        return server.getsockname()[1], requests

    yield start

    for server, thread in servers:
        thread.join(timeout=5)
        server.close()


@pytest.fixture
def silent_server() -> Iterator[int]:
    """A loopback server that accepts a connection and never answers."""
    server = socket.create_server(("127.0.0.1", 0))
    server.settimeout(5)
    done = threading.Event()

    def serve() -> None:
        try:
            conn, _ = server.accept()
        except OSError:
            return
        with conn:
            done.wait(5)

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()
    yield server.getsockname()[1]
    done.set()
    thread.join(timeout=5)
    server.close()


@pytest.fixture
def closed_port() -> int:
    """A loopback port with nothing listening on it."""
    sock = socket.create_server(("127.0.0.1", 0))
    port = sock.getsockname()[1]
    sock.close()
    return port

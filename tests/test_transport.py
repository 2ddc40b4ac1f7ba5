import pytest

from mcslp.endpoint import Endpoint
from mcslp.exceptions import ProbeTimeoutError, ProtocolError, SlpConnectionError
from mcslp.transport import Connection


def test_connection_reads_exact_bytes_and_closes(status_server) -> None:
    port, _ = status_server(b"\x05hello")

    with Connection.open(Endpoint("127.0.0.1", port), timeout=2) as conn:
        conn.write(b"\x00\x01\x01\x00")
        assert conn.read_byte() == 5
        assert conn.read_exact(5) == b"hello"
        with pytest.raises(ProtocolError, match="Connection closed after 0 of 1 bytes"):
            conn.read_exact(1)

    assert conn.closed
    conn.close()


def test_connection_read_timeout(silent_server: int) -> None:
    with Connection.open(Endpoint("127.0.0.1", silent_server), timeout=0.2) as conn:
        assert conn.latency is not None
        with pytest.raises(ProbeTimeoutError):
            conn.read_byte()


def test_connection_refused(closed_port: int) -> None:
    with pytest.raises(SlpConnectionError):
        Connection.open(Endpoint("127.0.0.1", closed_port), timeout=2)

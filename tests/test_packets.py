import pytest

from mcslp.packets import (
    DEFAULT_PROTOCOL_VERSION,
    NextState,
    build_handshake,
    build_status_request,
)
from mcslp.varint import BytesReader, pack_varint, unpack_varint


def test_handshake_is_byte_exact() -> None:
    packet = build_handshake("localhost", 25565, 1, protocol_version=1156)

    body = (
        b"\x00"
        + pack_varint(1156)
        + pack_varint(9)
        + b"localhost"
        + b"\x63\xdd"
        + pack_varint(1)
    )
    assert packet == pack_varint(len(body)) + body
    assert packet == b"\x10\x00\x84\x09\x09localhost\x63\xdd\x01"


def test_handshake_defaults_to_status_state_and_default_protocol() -> None:
    assert DEFAULT_PROTOCOL_VERSION == 1156
    assert build_handshake("localhost", 25565) == build_handshake(
        "localhost", 25565, NextState.STATUS, 1156
    )


def test_handshake_length_prefix_covers_whole_body() -> None:
    packet = build_handshake("mc.example.com", 19132, NextState.LOGIN, 763)
    reader = BytesReader(packet)

    assert unpack_varint(reader) == reader.remaining
    assert packet.endswith(b"\x4a\xbc\x02")


def test_handshake_address_length_counts_utf8_bytes() -> None:
    address = "例子.测试"
    packet = build_handshake(address, 25565, protocol_version=0)
    encoded = address.encode("utf8")

    # length, packet id, protocol version 0, then the address byte length
    assert packet[3] == len(encoded)
    assert packet[4 : 4 + len(encoded)] == encoded


@pytest.mark.parametrize("port", [-1, 65536])
def test_handshake_rejects_out_of_range_port(port: int) -> None:
    with pytest.raises(ValueError):
        build_handshake("localhost", port)


def test_status_request_is_constant() -> None:
    assert build_status_request() == b"\x01\x00"
    assert build_status_request() == build_status_request()

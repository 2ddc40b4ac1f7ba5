# minestat.py - A Minecraft server status checker
# Copyright (C) 2016-2023 Lloyd Dilley, Felix Ern (MindSolve)
# http://www.dilley.me/
#
# This program is free software; you can redistribute it and/or modify
# it under the terms of the GNU General Public License as published by
# the Free Software Foundation; either version 3 of the License, or
# (at your option) any later version.
#
# This program is distributed in the hope that it will be useful,
# but WITHOUT ANY WARRANTY; without even the implied warranty of
# MERCHANTABILITY or FITNESS FOR A PARTICULAR PURPOSE. See the
# GNU General Public License for more details.
#
# You should have received a copy of the GNU General Public License along
# with this program; if not, write to the Free Software Foundation, Inc.,
# 51 Franklin Street, Fifth Floor, Boston, MA 02110-1301 USA.
#
# 本文件由 @molanp 进行优化与需求定制

from typing import Protocol

from loguru import logger

from .exceptions import ProtocolError
from .varint import unpack_varint, varint_size

STATUS_RESPONSE_PACKET_ID = 0x00


class FrameSource(Protocol):
    def read_byte(self) -> int: ...

    def read_exact(self, size: int) -> bytes: ...


def read_status_frame(connection: FrameSource, *, strict: bool = False) -> bytes:
    """
    从连接中读取状态响应帧，返回其中的 JSON 负载字节。

    帧格式：`varint(外层长度)` `包 ID` `varint(JSON 长度)` `JSON`。
    外层长度只被读出并丢弃，但必须消费掉以保持读取位置对齐。

    :param connection: 提供 `read_byte()` 与 `read_exact()` 的对象
    :param strict: 为 True 时校验包 ID 为 0x00 且外层长度与实际内容一致
    :raises ProtocolError: VarInt 过长、提前 EOF，或严格模式下校验失败
    """
    # Receive answer: full packet length as varint
    packet_len = unpack_varint(connection)
    # Receive actual packet id
    packet_id = connection.read_byte()
    # Receive & unpack payload length
    content_len = unpack_varint(connection)

    if strict:
        if packet_id != STATUS_RESPONSE_PACKET_ID:
            raise ProtocolError(f"Unexpected packet id 0x{packet_id:02x}")
        expected_len = 1 + varint_size(content_len) + content_len
        if packet_len != expected_len:
            raise ProtocolError(
                f"Packet length {packet_len} does not match its content ({expected_len})"
            )

    logger.debug(
        f"Status frame: length={packet_len} id=0x{packet_id:02x} json={content_len} bytes"
    )
    # Receive full payload
    return connection.read_exact(content_len)

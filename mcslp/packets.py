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

"""
Outbound packets of the status handshake.

See https://minecraft.wiki/w/Java_Edition_protocol/Server_List_Ping
"""

from enum import IntEnum
import struct

from .varint import pack_varint

DEFAULT_PROTOCOL_VERSION = 1156
"""握手包默认声明的协议版本号"""
HANDSHAKE_PACKET_ID = 0x00
STATUS_REQUEST = b"\x01\x00"
"""状态请求包：长度 1，包 ID 0x00，无负载"""


class NextState(IntEnum):
    """握手包中的下一阶段"""

    STATUS = 1
    LOGIN = 2


def build_handshake(
    server_address: str,
    server_port: int,
    next_state: int = NextState.STATUS,
    protocol_version: int = DEFAULT_PROTOCOL_VERSION,
) -> bytes:
    """
    构造完整（带长度前缀）的握手包。

    :param server_address: 服务器地址，按 UTF-8 编码写入
    :param server_port: 服务器端口，写为大端无符号 short
    :param next_state: 下一阶段（1 表示状态查询）
    :param protocol_version: 声明的协议版本号
    :returns: 握手包字节
    """
    if not 0 <= server_port <= 0xFFFF:
        raise ValueError(f"{server_port} is not a valid port")

    address = server_address.encode("utf8")

    # Construct Handshake packet
    req_data = bytearray([HANDSHAKE_PACKET_ID])
    req_data += pack_varint(protocol_version)
    # Server address, prefixed by its byte length
    req_data += pack_varint(len(address))
    req_data += address
    req_data += struct.pack(">H", server_port)
    # Next packet state (1 for status, 2 for login)
    req_data += pack_varint(next_state)

    # Prepend full packet length
    return pack_varint(len(req_data)) + bytes(req_data)


def build_status_request() -> bytes:
    return STATUS_REQUEST

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
VarInt 编解码。

每个字节低 7 位为数据，最高位 (0x80) 表示后面还有字节；
低位组在前，最多 5 个字节。

详见 https://minecraft.wiki/w/Java_Edition_protocol/Data_types#VarInt_and_VarLong
"""

from typing import Protocol

from .exceptions import ProtocolError

VARINT_MAX_BYTES = 5
UINT32_MASK = 0xFFFFFFFF


class ByteSource(Protocol):
    def read_byte(self) -> int: ...


def pack_varint(value: int) -> bytes:
    """
    将一个 uint32 编码为 1 到 5 个字节的 VarInt。

    负数按 Java int 处理，先与 `0xFFFFFFFF` 做掩码，因此 `-1` 编码为 5 个字节。

    :param value: 需要编码的整数
    :returns: 编码后的字节
    """
    if value > UINT32_MASK:
        raise ValueError(f"{value} does not fit in 32 bits")
    value &= UINT32_MASK

    ordinal = bytearray()
    while True:
        if value & ~0x7F == 0:
            ordinal.append(value)
            return bytes(ordinal)
        ordinal.append((value & 0x7F) | 0x80)
        value >>= 7


def unpack_varint(source: ByteSource) -> int:
    """
    从字节流中逐字节读取一个 VarInt。

    :param source: 提供 `read_byte()` 的对象，例如 `Connection` 或 `BytesReader`
    :returns: 解码后的无符号 32 位整数
    :raises ProtocolError: 第 6 个字节仍带有继续位
    """
    data = 0
    for i in range(VARINT_MAX_BYTES):
        byte = source.read_byte()
        data |= (byte & 0x7F) << 7 * i
        if not byte & 0x80:
            return data & UINT32_MASK

    raise ProtocolError("VarInt too long")


def varint_size(value: int) -> int:
    """`pack_varint(value)` 产生的字节数"""
    return len(pack_varint(value))


class BytesReader:
    """Small in-memory byte source, mirrors the read side of `Connection`."""

    def __init__(self, data: bytes | bytearray) -> None:
        self._data = bytes(data)
        self._pos = 0

    @property
    def remaining(self) -> int:
        return len(self._data) - self._pos

    def read_byte(self) -> int:
        return self.read_exact(1)[0]

    def read_exact(self, size: int) -> bytes:
        if size > self.remaining:
            raise ProtocolError(
                f"Unexpected end of data: wanted {size} bytes, {self.remaining} left"
            )
        chunk = self._data[self._pos : self._pos + size]
        self._pos += size
        return chunk

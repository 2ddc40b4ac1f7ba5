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

import socket
from time import perf_counter

from loguru import logger

from .config import config
from .endpoint import Endpoint
from .exceptions import ProbeTimeoutError, ProtocolError, SlpConnectionError


class Connection:
    """
    单次请求/响应使用的 TCP 连接，带读取超时。

    作为上下文管理器使用时，无论成功与否都会关闭套接字::

        with Connection.open(endpoint) as conn:
            conn.write(data)
            conn.read_exact(5)
    """

    def __init__(self, sock: socket.socket, endpoint: Endpoint) -> None:
        self.sock = sock
        self.endpoint = endpoint
        self.latency: int | None = None
        """建立连接所用时间（毫秒）"""
        self.closed = False

    @classmethod
    def open(cls, endpoint: Endpoint, timeout: float | None = None) -> "Connection":
        """
        连接到 `endpoint`。

        :param endpoint: 已解析的地址
        :param timeout: 连接与读取超时（秒），默认取 `config.timeout`
        :raises ProbeTimeoutError: 连接超时
        :raises SlpConnectionError: 无法建立连接
        """
        if timeout is None:
            timeout = config.timeout
        family = socket.AF_INET6 if endpoint.ip_type == "IPv6" else socket.AF_INET
        sock = socket.socket(family, socket.SOCK_STREAM)
        sock.settimeout(timeout)

        conn = cls(sock, endpoint)
        start_time = perf_counter()
        try:
            sock.connect((endpoint.address, endpoint.port))
        except TimeoutError as e:
            sock.close()
            raise ProbeTimeoutError(f"Timed out connecting to {endpoint}") from e
        except OSError as e:
            sock.close()
            raise SlpConnectionError(f"Unable to connect to {endpoint}: {e}") from e
        conn.latency = round((perf_counter() - start_time) * 1000)
        logger.debug(f"Connected to {endpoint} in {conn.latency}ms")
        return conn

    def write(self, data: bytes) -> None:
        try:
            self.sock.sendall(data)
        except TimeoutError as e:
            raise ProbeTimeoutError(f"Timed out writing to {self.endpoint}") from e
        except OSError as e:
            raise SlpConnectionError(f"Error writing to {self.endpoint}: {e}") from e

    def read_byte(self) -> int:
        return self.read_exact(1)[0]

    def read_exact(self, size: int) -> bytes:
        """
        接收恰好 `size` 个字节，弥补 `socket.recv` 可能只返回部分数据的问题。

        :raises ProtocolError: 数据未读完时对端关闭了连接
        :raises ProbeTimeoutError: 读取超时
        """
        data = bytearray()
        while len(data) < size:
            try:
                temp_data = self.sock.recv(size - len(data))
            except TimeoutError as e:
                raise ProbeTimeoutError(f"Timed out reading from {self.endpoint}") from e
            except OSError as e:
                raise SlpConnectionError(f"Error reading from {self.endpoint}: {e}") from e
            if not temp_data:
                raise ProtocolError(
                    f"Connection closed after {len(data)} of {size} bytes"
                )
            data += temp_data
        return bytes(data)

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self.sock.close()

    def __enter__(self) -> "Connection":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

"""
Minecraft Java 版服务器状态查询（Server List Ping），支持 IPv6 与 SRV 记录。

用法::

    from mcslp import probe

    status = probe("mc.example.com:25565")
    print(status.record.motd, status.record.players.online)

日志默认关闭，需要时调用 `loguru.logger.enable("mcslp")`。
"""

from loguru import logger

from .client import async_probe, probe, probe_many
from .config import SlpConfig, config
from .endpoint import Endpoint, parse_host, resolve_endpoint
from .exceptions import (
    ConnStatus,
    DecodeError,
    EndpointError,
    ProbeTimeoutError,
    ProtocolError,
    SlpConnectionError,
    SlpError,
)
from .models import ServerStatus, StatusRecord, decode_status, strip_motd_formatting
from .packets import build_handshake, build_status_request
from .reader import read_status_frame
from .transport import Connection
from .varint import pack_varint, unpack_varint

VERSION = "0.1.0"

logger.disable(__name__)

__all__ = [
    "VERSION",
    "Connection",
    "ConnStatus",
    "DecodeError",
    "Endpoint",
    "EndpointError",
    "ProbeTimeoutError",
    "ProtocolError",
    "ServerStatus",
    "SlpConfig",
    "SlpConnectionError",
    "SlpError",
    "StatusRecord",
    "async_probe",
    "build_handshake",
    "build_status_request",
    "config",
    "decode_status",
    "pack_varint",
    "parse_host",
    "probe",
    "probe_many",
    "read_status_frame",
    "resolve_endpoint",
    "strip_motd_formatting",
    "unpack_varint",
]

from enum import Enum


class ConnStatus(Enum):
    """
    包含可能的连接状态
    - `SUCCESS`：SLP 查询成功（请求和响应解析正常）
    - `CONNFAIL`：无法建立到服务器的套接字连接。服务器离线、主机名或端口错误？
    - `TIMEOUT`：连接超时。（服务器负载过高？防火墙规则是否正确？）
    - `UNKNOWN`：连接已建立，但服务器的响应不是可识别的 SLP 状态响应
    """

    def __str__(self) -> str:
        return str(self.name)

    SUCCESS = 0
    """SLP 查询成功（请求和响应解析正常）"""

    CONNFAIL = -1
    """无法建立与服务器的套接字连接。（服务器离线，主机名或端口错误？）"""

    TIMEOUT = -2
    """连接超时。（服务器负载过高？防火墙规则是否正确？）"""

    UNKNOWN = -3
    """连接已建立，但服务器的响应不是可识别的 SLP 状态响应"""


class SlpError(Exception):
    """所有查询错误的基类"""

    status: ConnStatus = ConnStatus.UNKNOWN


class ProtocolError(SlpError):
    """对端违反了协议格式：VarInt 过长、帧读取中途 EOF 等"""


class SlpConnectionError(SlpError, ConnectionError):
    """TCP 连接失败或连接过程中发生 I/O 错误"""

    status = ConnStatus.CONNFAIL


class EndpointError(SlpConnectionError):
    """地址或端口无效，或主机名无法解析。在打开任何套接字之前抛出"""


class ProbeTimeoutError(SlpError, TimeoutError):
    """连接或读取超时"""

    status = ConnStatus.TIMEOUT


class DecodeError(SlpError, ValueError):
    """状态 JSON 无法解码（格式错误，或不是状态响应）"""

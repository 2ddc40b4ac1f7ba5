import asyncio
from collections.abc import Callable, Iterable

from loguru import logger

from .config import config
from .endpoint import Endpoint, resolve_endpoint
from .exceptions import ConnStatus, SlpError
from .models import ServerStatus, StatusRecord, decode_status
from .packets import NextState, build_handshake, build_status_request
from .reader import read_status_frame
from .transport import Connection

Target = str | Endpoint | tuple[str, int]


def probe(
    host: str | Endpoint,
    port: int | None = None,
    *,
    timeout: float | None = None,
    protocol_version: int | None = None,
    strict: bool | None = None,
    decoder: Callable[[bytes], StatusRecord] = decode_status,
    connector: Callable[[Endpoint, float | None], Connection] = Connection.open,
) -> ServerStatus:
    """
    Query a modern (MC Java >= 1.7) server with the JSON Server List Ping.

    Resolve the endpoint, connect, send the handshake (next state: status) and
    the status request, read the response frame and decode its JSON payload.
    The connection is closed on every path. Nothing is retried; any failure is
    raised to the caller.

    :param host: 主机名或 IP（可写作 `host:port`），或已解析的 `Endpoint`
    :param port: 端口号，默认从 `host` 中解析
    :param timeout: 连接与读取超时（秒），默认取 `config.timeout`
    :param protocol_version: 握手包中声明的协议版本号，默认取 `config.protocol_version`
    :param strict: 是否校验响应帧，默认取 `config.strict_frame`
    :param decoder: JSON 解码服务
    :param connector: 建立连接的工厂，签名同 `Connection.open`
    :raises EndpointError: 地址无效或无法解析
    :raises SlpConnectionError: 无法连接或连接中断
    :raises ProbeTimeoutError: 超时
    :raises ProtocolError: 响应不符合帧格式
    :raises DecodeError: JSON 无法解码
    """
    endpoint = host if isinstance(host, Endpoint) else resolve_endpoint(host, port)
    if protocol_version is None:
        protocol_version = config.protocol_version
    if strict is None:
        strict = config.strict_frame

    logger.debug(f"Probing {endpoint} (refer={endpoint.refer})")
    try:
        with connector(endpoint, timeout) as conn:
            conn.write(
                build_handshake(
                    endpoint.refer, endpoint.port, NextState.STATUS, protocol_version
                )
            )
            logger.debug("Handshake sent")
            conn.write(build_status_request())
            logger.debug("Status request sent")
            payload = read_status_frame(conn, strict=strict)
            record = decoder(payload)
            latency = getattr(conn, "latency", None)
    except SlpError as e:
        logger.debug(f"Probe of {endpoint} failed: {type(e).__name__}: {e}")
        raise

    logger.debug(f"Probe of {endpoint} succeeded ({len(payload)} bytes)")
    return ServerStatus(
        record=record,
        raw_json=payload.decode("utf8", errors="replace"),
        endpoint=endpoint,
        latency=latency,
    )


async def async_probe(
    host: str | Endpoint, port: int | None = None, **kwargs
) -> ServerStatus:
    """在工作线程中执行 `probe`，供事件循环内的调用方使用"""
    return await asyncio.to_thread(probe, host, port, **kwargs)


async def _probe_status(
    target: Target, timeout: float | None
) -> tuple[ServerStatus | None, ConnStatus]:
    host, port = target if isinstance(target, tuple) else (target, None)
    try:
        status = await async_probe(host, port, timeout=timeout)
    except SlpError as e:
        logger.warning(f"{target}: {e.status} ({e})")
        return None, e.status
    except Exception:
        logger.exception(f"{target}: unexpected error")
        return None, ConnStatus.UNKNOWN
    return status, ConnStatus.SUCCESS


async def probe_many(
    targets: Iterable[Target], *, timeout: float | None = None
) -> list[tuple[ServerStatus | None, ConnStatus]]:
    """
    并发查询多个服务器，每个查询使用独立的线程与连接。

    查询失败不会抛出异常，而是返回 `(None, 对应的 ConnStatus)`。

    :param targets: 地址列表，元素可以是 `host[:port]`、`(host, port)` 或 `Endpoint`
    :param timeout: 每次查询的超时（秒）
    :returns: 与 `targets` 顺序一致的 `(结果, 状态)` 列表
    """
    return list(
        await asyncio.gather(*(_probe_status(target, timeout) for target in targets))
    )

import contextlib
from dataclasses import dataclass
import ipaddress
import re
import socket
from typing import Literal

import dns.exception
import dns.resolver
import idna
from loguru import logger

from .config import config
from .exceptions import EndpointError

IpType = Literal["IPv4", "IPv6"]

@dataclass(frozen=True)
class Endpoint:
    """
    一个可直接连接的服务器地址。

    :param host: 调用方给出的主机名或 IP
    :param port: 端口号，必须在 0-65535 范围内
    :param address: 可连接的 IP 地址，默认与 `host` 相同
    :param ip_type: 地址类型，默认根据 `address` 推断
    :param refer: 握手包中发送的主机名，默认与 `host` 相同
    :param srv: 是否由 SRV 记录重定向而来
    """

    host: str
    port: int
    address: str = ""
    ip_type: IpType | None = None
    refer: str = ""
    srv: bool = False

    def __post_init__(self) -> None:
        port = self.port
        if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
            raise EndpointError(f"{port} is not a valid port")
        if not self.address:
            object.__setattr__(self, "address", self.host)
        if self.ip_type is None:
            object.__setattr__(
                self, "ip_type", "IPv6" if is_ipv6(self.address) else "IPv4"
            )
        if not self.refer:
            object.__setattr__(self, "refer", self.host)

    def __str__(self) -> str:
        if self.ip_type == "IPv6":
            return f"[{self.address}]:{self.port}"
        return f"{self.address}:{self.port}"


def parse_host(host_name: str) -> tuple[str, int | None]:
    """
    解析主机名（可选端口）。

    支持 `host`、`host:port`、`[IPv6]:port` 以及全角冒号 `：`。

    :params host_name: 主机名，可能包含端口。

    :returns: 一个元组，包含两个元素：
    - 第一个元素是主机的地址
    - 第二个元素是主机的端口号，如果主机名中未指定端口，则为 None。
    """
    host_name = host_name.strip()
    # 裸 IPv6 地址本身含有冒号，不能按端口拆分
    if is_ipv6(host_name):
        return host_name, None

    pattern = r"(?:\[(.+?)\]|(.+?))(?:[:：](\d+))?$"
    if not (match := re.match(pattern, host_name)):
        return host_name, None

    address = match[1] or match[2]
    port = int(match[3]) if match[3] else None
    return address, port


def is_validity_address(address: str) -> bool:
    """判断给定的地址是否为有效的域名或IP地址。"""
    return is_domain(address) or is_ipv4(address) or is_ipv6(address)


def is_domain(address: str) -> bool:
    """
    判断给定的地址是否为域名。

    :params address: 需要验证的地址。

    :returns: 如果地址为域名则返回True，否则返回False。
    """
    try:
        punycode_address = idna.encode(address, uts46=True).decode("utf-8")
    except idna.IDNAError:
        return False

    domain_pattern = re.compile(
        r"^(?!-)(?:[A-Za-z0-9-]{1,63}\.)+(?:[A-Za-z]{2,}|xn--[A-Za-z0-9-]{2,})$|^(localhost)$"
    )
    return bool(domain_pattern.match(punycode_address))


def is_ipv4(address: str) -> bool:
    try:
        return isinstance(ipaddress.ip_address(address), ipaddress.IPv4Address)
    except ValueError:
        return False


def is_ipv6(address: str) -> bool:
    try:
        return isinstance(ipaddress.ip_address(address), ipaddress.IPv6Address)
    except ValueError:
        return False


def get_ip_type(address: str) -> Literal["IPv4", "IPv6", "Domain"]:
    """获取地址类型"""
    if not is_validity_address(address):
        raise EndpointError(f"[{address}] is not a valid IPv4/IPv6 address or domain")
    if is_ipv4(address):
        return "IPv4"
    elif is_ipv6(address):
        return "IPv6"
    else:
        return "Domain"


def _make_resolver() -> dns.resolver.Resolver | None:
    try:
        resolver = dns.resolver.Resolver()
    except dns.resolver.NoResolverConfiguration:
        logger.debug("No DNS resolver configuration, using the system resolver only")
        return None
    resolver.timeout = config.dns_timeout
    resolver.lifetime = config.dns_lifetime
    return resolver


def _resolve_srv(resolver, domain: str) -> tuple[str, int] | None:
    with contextlib.suppress(dns.exception.DNSException, IndexError):
        srv_response = resolver.resolve(f"_minecraft._tcp.{domain}", "SRV")
        for rdata in srv_response:
            return str(rdata.target).rstrip("."), rdata.port
    return None


def _resolve_address(resolver, domain: str) -> tuple[str, IpType] | None:
    if resolver is not None:
        for rdtype, ip_type in (("A", "IPv4"), ("AAAA", "IPv6")):
            # NoAnswer, NXDOMAIN, Timeout, NameTooLong, ...
            with contextlib.suppress(dns.exception.DNSException):
                response = resolver.resolve(domain, rdtype)
                for rdata in response:
                    return str(rdata.address), ip_type

    # DNS 查不到的名字（如 hosts 文件中的 localhost）交给系统解析器
    try:
        infos = socket.getaddrinfo(domain, None, proto=socket.IPPROTO_TCP)
    except (socket.gaierror, UnicodeError):
        return None
    for family, *_, sockaddr in infos:
        if family == socket.AF_INET:
            return sockaddr[0], "IPv4"
        if family == socket.AF_INET6:
            return sockaddr[0], "IPv6"
    return None


def resolve_endpoint(
    host: str,
    port: int | None = None,
    *,
    resolve_srv: bool | None = None,
    resolver=None,
) -> Endpoint:
    """
    将主机名与端口解析为可连接的 `Endpoint`。

    端口范围在进行任何 DNS 查询或建立套接字之前校验。
    如果是域名且未指定端口，首先尝试解析 `_minecraft._tcp` SRV 记录，
    然后依次解析 A、AAAA 记录。

    :param host: 主机名或 IP，未给出 `port` 时可写作 `host:port`
    :param port: 端口号，默认从 `host` 中解析，仍缺省时使用 `config.default_port`
    :param resolve_srv: 是否解析 SRV 记录，默认取 `config.resolve_srv`
    :param resolver: dnspython 兼容的解析器，默认新建 `dns.resolver.Resolver`
    :raises EndpointError: 端口无效、地址无效或无法解析
    """
    if port is None:
        host, port = parse_host(host)
    explicit_port = port is not None
    if port is None:
        port = config.default_port
    if isinstance(port, bool) or not isinstance(port, int) or not 0 <= port <= 65535:
        raise EndpointError(f"{port} is not a valid port")

    ip_type = get_ip_type(host)
    if ip_type != "Domain":
        return Endpoint(host, port, host, ip_type, host)

    refer = idna.encode(host, uts46=True).decode("utf-8")
    if resolver is None:
        resolver = _make_resolver()
    if resolve_srv is None:
        resolve_srv = config.resolve_srv

    srv = None
    if resolver is not None and resolve_srv and not explicit_port:
        srv = _resolve_srv(resolver, refer)
    if srv is not None:
        target, srv_port = srv
        logger.debug(f"SRV record for {refer}: {target}:{srv_port}")
        target_type = get_ip_type(target)
        if target_type != "Domain":
            return Endpoint(host, srv_port, target, target_type, target, srv=True)
        if resolved := _resolve_address(resolver, target):
            return Endpoint(host, srv_port, *resolved, target, srv=True)
        raise EndpointError(f"Unable to resolve SRV target {target} of {host}")

    if resolved := _resolve_address(resolver, refer):
        logger.debug(f"Resolved {refer} to {resolved[0]} ({resolved[1]})")
        return Endpoint(host, port, *resolved, refer)
    raise EndpointError(f"Unable to resolve {host}")

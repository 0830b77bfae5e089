"""Blocking connections to loopback, private, link-local or listed networks."""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Union

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]
IPNetwork = Union[ipaddress.IPv4Network, ipaddress.IPv6Network]

_PRIVATE = tuple(
    ipaddress.ip_network(n) for n in ("10.0.0.0/8", "172.16.0.0/12", "192.168.0.0/16", "fc00::/7")
)
_LINK_LOCAL_UNICAST = tuple(ipaddress.ip_network(n) for n in ("169.254.0.0/16", "fe80::/10"))
_LINK_LOCAL_MULTICAST_V4 = ipaddress.ip_network("224.0.0.0/24")


class UnauthorizedRequest(Exception):
    """A connection to a blocked address was attempted."""

    def __init__(self) -> None:
        super().__init__("unauthorized request")


def _split_host(address: str) -> str:
    if address.startswith("["):
        end = address.find("]")
        if end < 0:
            raise ValueError(f"missing ']' in address {address!r}")
        if not address[end + 1:].startswith(":"):
            raise ValueError(f"missing port in address {address!r}")
        return address[1:end]
    host, sep, _ = address.rpartition(":")
    if not sep:
        raise ValueError(f"missing port in address {address!r}")
    if ":" in host:
        raise ValueError(f"too many colons in address {address!r}")
    return host


def _parse_ip(host: str) -> IPAddress | None:
    try:
        ip = ipaddress.ip_address(host)
    except ValueError:
        return None
    if isinstance(ip, ipaddress.IPv6Address) and ip.ipv4_mapped is not None:
        return ip.ipv4_mapped
    return ip


def _in_any(ip: IPAddress, networks) -> bool:
    return any(ip.version == net.version and ip in net for net in networks)


def _is_link_local_multicast(ip: IPAddress) -> bool:
    if isinstance(ip, ipaddress.IPv4Address):
        return ip in _LINK_LOCAL_MULTICAST_V4
    packed = ip.packed
    return packed[0] == 0xFF and packed[1] & 0x0F == 0x02


def _to_network(value) -> IPNetwork:
    if isinstance(value, (ipaddress.IPv4Network, ipaddress.IPv6Network)):
        return value
    return ipaddress.ip_network(value, strict=False)


@dataclass
class NetworkGuard:
    """Rejects connection addresses that fall in blocked networks."""

    block_loopback: bool = False
    block_link_local: bool = False
    block_private: bool = False
    block_networks: list[IPNetwork] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.block_networks = [_to_network(n) for n in self.block_networks]

    def check(self, address: str) -> None:
        """Raise UnauthorizedRequest when the host:port address is blocked."""
        ip = _parse_ip(_split_host(address))
        if ip is None:
            return
        if self.block_loopback and ip.is_loopback:
            raise UnauthorizedRequest()
        if self.block_link_local and (
            _in_any(ip, _LINK_LOCAL_UNICAST) or _is_link_local_multicast(ip)
        ):
            raise UnauthorizedRequest()
        if self.block_private and _in_any(ip, _PRIVATE):
            raise UnauthorizedRequest()
        if _in_any(ip, self.block_networks):
            raise UnauthorizedRequest()
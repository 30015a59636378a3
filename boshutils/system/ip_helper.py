"""IPv4 network and broadcast address calculation."""

from __future__ import annotations

import ipaddress

_ALL_ONES = 0xFFFFFFFF


def _parse(text: str) -> ipaddress.IPv4Address | ipaddress.IPv6Address | None:
    if "%" in text:
        return None
    try:
        return ipaddress.ip_address(text)
    except ValueError:
        return None


def _as_v4(addr: ipaddress.IPv4Address | ipaddress.IPv6Address) -> ipaddress.IPv4Address | None:
    if isinstance(addr, ipaddress.IPv4Address):
        return addr
    return addr.ipv4_mapped


def _prefix_length(mask: int) -> int:
    ones = bin(mask).count("1")
    canonical = _ALL_ONES ^ ((1 << (32 - ones)) - 1)
    return ones if mask == canonical else 0


def calculate_network_and_broadcast(ip_address: str, netmask: str) -> tuple[str, str, int]:
    """Return ``(network, broadcast, mask_size)`` for an IPv4 address and netmask.

    Non-IPv4 input yields ``("", "", 0)``; unparsable input raises ValueError.
    A netmask that is not a run of leading ones has a mask size of 0.
    """
    ip = _parse(ip_address)
    if ip is None:
        raise ValueError(f"Invalid IP '{ip_address}'")

    mask = _parse(netmask)
    if mask is None:
        raise ValueError(f"Invalid netmask '{netmask}'")

    ip4 = _as_v4(ip)
    mask4 = _as_v4(mask)
    if ip4 is None or mask4 is None:
        return "", "", 0

    ip_int = int(ip4)
    mask_int = int(mask4)
    network = ipaddress.IPv4Address(ip_int & mask_int)
    broadcast = ipaddress.IPv4Address(ip_int | (~mask_int & _ALL_ONES))
    return str(network), str(broadcast), _prefix_length(mask_int)
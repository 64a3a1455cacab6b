# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/netinfo/address.py
"""
Address parsing and the Address record.

Parsing rules for a configured address, in priority order:
  1. "addr/prefixlen" in the address text itself
  2. an explicit prefix length (PREFIXLEN)
  3. IPv4 only: a dotted netmask (NETMASK), leading one bits counted
  4. the family width (32 for IPv4, 128 for IPv6)
"""

from __future__ import annotations

import ipaddress
import re
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from ..core.exceptions import MalformedAddress, MalformedNetmask, MalformedPrefix
from ..core.list_utils import dedup_preserve_order
from .names import AddrFamily

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

# "127", "10.1", "192.168.0" are accepted as network shorthand when a prefix is given
_SHORT_V4_RE = re.compile(r"[0-9]{1,3}(\.[0-9]{1,3}){0,2}")
_HWADDR_RE = re.compile(r"[0-9A-Fa-f]{1,2}(:[0-9A-Fa-f]{1,2})+")


def parse_ip(text: Optional[str], family: Optional[AddrFamily] = None) -> IPAddress:
    """Parse a single IPv4/IPv6 address, optionally requiring a family."""
    s = (text or "").strip()
    try:
        addr = ipaddress.ip_address(s)
    except ValueError as e:
        raise MalformedAddress(msg=f"cannot parse address {s!r}", cause=e, context={"value": s})
    if family is not None and AddrFamily.of(addr) is not family:
        raise MalformedAddress(
            msg=f"address {s!r} is not {family.value}",
            context={"value": s, "family": family.value},
        )
    return addr


def _expand_v4_shorthand(text: str) -> str:
    parts = text.split(".")
    return ".".join(parts + ["0"] * (4 - len(parts)))


def netmask_bits(mask: IPAddress) -> int:
    """Length of the leading run of one bits in a netmask."""
    width = mask.max_prefixlen
    value = int(mask)
    bits = 0
    for shift in range(width - 1, -1, -1):
        if not (value >> shift) & 1:
            break
        bits += 1
    return bits


def parse_prefixlen(text: Optional[str], family: AddrFamily) -> int:
    s = (text or "").strip()
    if not (s.isascii() and s.isdigit()):
        raise MalformedPrefix(msg=f"cannot parse prefix length {s!r}", context={"value": s})
    plen = int(s, 10)
    if plen > family.width:
        raise MalformedPrefix(
            msg=f"prefix length {plen} exceeds {family.width} bits for {family.value}",
            context={"value": s, "family": family.value},
        )
    return plen


def parse_netmask(text: Optional[str], family: AddrFamily) -> int:
    """Parse a dotted netmask of the given family and return its prefix length."""
    s = (text or "").strip()
    try:
        mask = ipaddress.ip_address(s)
    except ValueError as e:
        raise MalformedNetmask(msg=f"cannot parse netmask {s!r}", cause=e, context={"value": s})
    if AddrFamily.of(mask) is not family:
        raise MalformedNetmask(
            msg=f"netmask {s!r} does not match address family {family.value}",
            context={"value": s, "family": family.value},
        )
    return netmask_bits(mask)


def parse_prefix(text: Optional[str]) -> Tuple[IPAddress, Optional[int]]:
    """
    Parse "addr" or "addr/prefixlen".

    Returns (address, prefixlen) where prefixlen is None when the text
    carries no prefix.
    """
    s = (text or "").strip()
    if "/" not in s:
        return parse_ip(s), None

    addr_s, _, plen_s = s.partition("/")
    if _SHORT_V4_RE.fullmatch(addr_s):
        addr_s = _expand_v4_shorthand(addr_s)
    addr = parse_ip(addr_s)
    return addr, parse_prefixlen(plen_s, AddrFamily.of(addr))


def parse_address(
    text: Optional[str],
    *,
    prefixlen: Optional[str] = None,
    netmask: Optional[str] = None,
) -> Tuple[AddrFamily, IPAddress, int]:
    """
    Resolve (family, address, prefix length) for a configured address.

    `prefixlen` and `netmask` are the raw texts of the companion variables,
    None when not configured.
    """
    addr, plen = parse_prefix(text)
    family = AddrFamily.of(addr)

    if plen is None:
        if prefixlen is not None and prefixlen.strip():
            plen = parse_prefixlen(prefixlen, family)
        elif family is AddrFamily.IPV4 and netmask is not None and netmask.strip():
            plen = parse_netmask(netmask, family)
        else:
            plen = family.width

    return family, addr, plen


def prefix_match(prefixlen: int, a: Optional[IPAddress], b: Optional[IPAddress]) -> bool:
    """True when a and b share the same leading prefixlen bits (same family required)."""
    if a is None or b is None or a.version != b.version:
        return False
    if prefixlen > a.max_prefixlen:
        return False
    shift = a.max_prefixlen - prefixlen
    return (int(a) >> shift) == (int(b) >> shift)


def parse_hwaddr(text: Optional[str]) -> str:
    """
    Parse a colon separated link layer address ("00:11:22:33:44:55").

    Returns the normalized lowercase, zero-padded form.
    """
    s = (text or "").strip()
    if not _HWADDR_RE.fullmatch(s):
        raise MalformedAddress(msg=f"cannot parse hardware address {s!r}", context={"value": s})
    return ":".join(f"{int(octet, 16):02x}" for octet in s.split(":"))


@dataclass
class Address:
    family: AddrFamily
    prefixlen: int
    local: IPAddress
    broadcast: Optional[IPAddress] = None
    peer: Optional[IPAddress] = None
    anycast: Optional[IPAddress] = None
    expires: Optional[float] = None

    @classmethod
    def parse(cls, text: str, *, prefixlen: Optional[str] = None, netmask: Optional[str] = None) -> "Address":
        family, local, plen = parse_address(text, prefixlen=prefixlen, netmask=netmask)
        return cls(family=family, prefixlen=plen, local=local)

    @property
    def key(self) -> Tuple[Any, ...]:
        """Identity of an address on an interface."""
        return (self.family, self.prefixlen, self.local, self.peer, self.anycast)

    @property
    def network(self) -> Union[ipaddress.IPv4Network, ipaddress.IPv6Network]:
        return ipaddress.ip_network(f"{self.local}/{self.prefixlen}", strict=False)

    def is_expired(self, now: Optional[float] = None) -> bool:
        if not self.expires:
            return False
        return self.expires <= (time.time() if now is None else now)

    def can_reach(self, gateway: Optional[IPAddress]) -> bool:
        """
        Whether gateway is on-link for this address.

        The peer is always on-link. A full-width address with a peer reaches
        only that peer; otherwise the gateway must fall inside the subnet.
        """
        if gateway is None or AddrFamily.of(gateway) is not self.family:
            return False
        if self.peer is not None:
            if self.peer == gateway:
                return True
            if self.prefixlen == self.family.width:
                return False
        return prefix_match(self.prefixlen, self.local, gateway)

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "family": self.family.value,
            "local": f"{self.local}/{self.prefixlen}",
        }
        if self.broadcast is not None:
            d["broadcast"] = str(self.broadcast)
        if self.peer is not None:
            d["peer"] = str(self.peer)
        if self.anycast is not None:
            d["anycast"] = str(self.anycast)
        if self.expires:
            d["expires"] = self.expires
        return d

    def __str__(self) -> str:
        s = f"{self.local}/{self.prefixlen}"
        if self.peer is not None:
            s += f" peer {self.peer}"
        return s


def address_list_find(addrs: Iterable[Address], local: IPAddress) -> Optional[Address]:
    for ap in addrs:
        if ap.local == local:
            return ap
    return None


def address_list_dedup(addrs: List[Address]) -> List[Address]:
    """Collapse entries with the same (family, prefixlen, local, peer, anycast)."""
    return dedup_preserve_order(addrs, key=lambda ap: ap.key)


__all__ = [
    "IPAddress",
    "Address",
    "parse_ip",
    "parse_prefix",
    "parse_prefixlen",
    "parse_netmask",
    "parse_address",
    "parse_hwaddr",
    "netmask_bits",
    "prefix_match",
    "address_list_find",
    "address_list_dedup",
]

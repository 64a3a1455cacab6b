# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/netinfo/names.py
"""
Symbolic names for link types, address families and addrconf mechanisms.

Each enum value is the canonical name used in serialized output; from_name()
maps a name back to the member (None for unknown names).
"""

from __future__ import annotations

from enum import Enum
from typing import Optional, Type, TypeVar

E = TypeVar("E", bound="_NamedEnum")


class _NamedEnum(Enum):
    @classmethod
    def from_name(cls: Type[E], name: Optional[str]) -> Optional[E]:
        if not name:
            return None
        want = name.strip().lower()
        for member in cls:
            if member.value == want:
                return member
        return None

    def __str__(self) -> str:
        return str(self.value)


class LinkType(_NamedEnum):
    UNKNOWN = "unknown"
    LOOPBACK = "loopback"
    ETHERNET = "ethernet"
    BRIDGE = "bridge"
    BOND = "bond"
    VLAN = "vlan"
    WIRELESS = "wireless"
    INFINIBAND = "infiniband"
    PPP = "ppp"
    SLIP = "slip"
    SIT = "sit"
    GRE = "gre"
    ISDN = "isdn"
    TUNNEL = "tunnel"
    TUNNEL6 = "tunnel6"
    TUN = "virtual-tunnel"
    TAP = "virtual-tap"
    DUMMY = "dummy"


class AddrFamily(_NamedEnum):
    IPV4 = "ipv4"
    IPV6 = "ipv6"

    @property
    def width(self) -> int:
        """Address width in bits (the host-route prefix length)."""
        return 32 if self is AddrFamily.IPV4 else 128

    @classmethod
    def of(cls, addr) -> "AddrFamily":
        return cls.IPV4 if addr.version == 4 else cls.IPV6


class AddrconfMode(_NamedEnum):
    DHCP = "dhcp"
    STATIC = "static"
    AUTOCONF = "auto"
    IBFT = "ibft"


class AddrconfState(_NamedEnum):
    NONE = "none"
    REQUESTING = "requesting"
    GRANTED = "granted"
    RELEASING = "releasing"
    RELEASED = "released"
    FAILED = "failed"


__all__ = [
    "LinkType",
    "AddrFamily",
    "AddrconfMode",
    "AddrconfState",
]

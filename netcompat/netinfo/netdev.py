# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/netinfo/netdev.py
"""
Runtime network interface objects.

A NetDev is shared by everything holding a handle on it (the NetConfig
interface table, transient lookups). Holders call get()/put(); the object is
torn down when the last handle is released. All list mutation assumes a
single writer; callers serialize externally.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Optional

from ..core.exceptions import InvalidInterfaceName
from ..core.logging_utils import safe_logger
from .address import Address, IPAddress, address_list_dedup
from .lease import Lease
from .names import AddrconfMode, AddrFamily, LinkType
from .route import Route

IFNAMSIZ = 16

_IFNAME_RE = re.compile(r"[A-Za-z0-9][A-Za-z0-9._-]*")

# name prefix followed by a digit -> link type
_IFNAME_TYPES = (
    ("ib", LinkType.INFINIBAND),
    ("ip6tunl", LinkType.TUNNEL6),
    ("ipip", LinkType.TUNNEL),
    ("sit", LinkType.SIT),
    ("tun", LinkType.TUN),
)


def valid_ifname(name: Optional[str]) -> bool:
    """Kernel-acceptable interface name: 1..15 chars, alnum first, then alnum or -_."""
    if not name or len(name) >= IFNAMSIZ:
        return False
    return _IFNAME_RE.fullmatch(name) is not None


def check_ifname(name: Optional[str]) -> str:
    if not valid_ifname(name):
        raise InvalidInterfaceName(msg=f"rejecting suspect interface name {name!r}", context={"ifname": name})
    return name  # type: ignore[return-value]


def guess_link_type(name: Optional[str]) -> LinkType:
    if not name:
        return LinkType.UNKNOWN
    if name == "lo":
        return LinkType.LOOPBACK
    for prefix, link_type in _IFNAME_TYPES:
        rest = name[len(prefix):]
        if name.startswith(prefix) and rest[:1].isdigit():
            return link_type
    return LinkType.ETHERNET


@dataclass(eq=False)
class NetDev:
    name: str
    index: int = 0
    link_type: LinkType = LinkType.UNKNOWN
    hwaddr: Optional[str] = None
    mtu: Optional[int] = None
    addrs: List[Address] = field(default_factory=list)
    routes: List[Route] = field(default_factory=list)
    leases: List[Lease] = field(default_factory=list)
    users: int = 1
    logger: Optional[logging.Logger] = field(default=None, repr=False)

    def __post_init__(self) -> None:
        check_ifname(self.name)
        self.logger = safe_logger(self.logger)

    # ------------------------------------------------------------------
    # Reference counting
    # ------------------------------------------------------------------

    @property
    def destroyed(self) -> bool:
        return self.users == 0

    def get(self) -> Optional["NetDev"]:
        """Take another handle; None once the object has been torn down."""
        if not self.users:
            return None
        self.users += 1
        return self

    def put(self) -> int:
        """Drop a handle and return the remaining count."""
        if not self.users:
            self.logger.error("%s: put() on a released interface", self.name)
            return 0
        self.users -= 1
        if self.users == 0:
            self._teardown()
        return self.users

    def _teardown(self) -> None:
        self.clear_addresses()
        self.clear_routes()
        for lease in self.leases:
            lease.release()
        self.leases.clear()
        self.logger.debug("%s: interface object released", self.name)

    # ------------------------------------------------------------------
    # Addresses and routes
    # ------------------------------------------------------------------

    def add_address(self, ap: Address) -> Address:
        self.addrs.append(ap)
        return ap

    def dedup_addresses(self) -> None:
        self.addrs = address_list_dedup(self.addrs)

    def clear_addresses(self) -> None:
        self.addrs.clear()

    def add_route(
        self,
        prefixlen: int,
        destination: Optional[IPAddress] = None,
        gateway: Optional[IPAddress] = None,
    ) -> Route:
        rp = Route.new(prefixlen, destination, gateway)
        self.routes.append(rp)
        return rp

    def clear_routes(self) -> None:
        self.routes.clear()

    # ------------------------------------------------------------------
    # Leases
    # ------------------------------------------------------------------

    def _find_lease(self, family: AddrFamily, mode: AddrconfMode, *, remove: bool = False) -> Optional[Lease]:
        for i, lease in enumerate(self.leases):
            if lease.family is family and lease.mode is mode:
                if remove:
                    del self.leases[i]
                return lease
        return None

    def set_lease(self, lease: Lease) -> Lease:
        """Attach a lease, discarding any lease with the same (family, mode)."""
        self.unset_lease(lease.family, lease.mode)
        self.leases.append(lease)
        return lease

    def unset_lease(self, family: AddrFamily, mode: AddrconfMode) -> bool:
        old = self._find_lease(family, mode, remove=True)
        if old is None:
            return False
        old.release()
        return True

    def get_lease(self, family: AddrFamily, mode: AddrconfMode) -> Optional[Lease]:
        return self._find_lease(family, mode)

    def get_lease_by_owner(self, owner: str) -> Optional[Lease]:
        for lease in self.leases:
            if lease.owner == owner:
                return lease
        return None

    def address_to_lease(self, ap: Address, now: Optional[float] = None) -> Optional[Lease]:
        for lease in self.leases:
            if lease.owns_address(ap, now):
                return lease
        return None

    def route_to_lease(self, rp: Optional[Route]) -> Optional[Lease]:
        if rp is None:
            return None
        for lease in self.leases:
            if lease.implies_route(rp) or lease.owns_route(rp) is not None:
                return lease
        return None

    # ------------------------------------------------------------------

    def guess_type(self) -> LinkType:
        if self.link_type is LinkType.UNKNOWN:
            self.link_type = guess_link_type(self.name)
        return self.link_type

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "index": self.index,
            "type": self.link_type.value,
            "hwaddr": self.hwaddr,
            "mtu": self.mtu,
            "addresses": [ap.to_dict() for ap in self.addrs],
            "routes": [rp.to_dict() for rp in self.routes],
            "leases": [lease.to_dict() for lease in self.leases],
        }


class NetConfig:
    """The interface table; holds one handle per interface."""

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = safe_logger(logger)
        self.interfaces: List[NetDev] = []

    def __iter__(self) -> Iterator[NetDev]:
        return iter(self.interfaces)

    def __len__(self) -> int:
        return len(self.interfaces)

    def new_interface(self, name: str, index: int = 0) -> NetDev:
        dev = NetDev(name=name, index=index, logger=self.logger)
        self.interfaces.append(dev)
        return dev

    def by_name(self, name: str) -> Optional[NetDev]:
        for dev in self.interfaces:
            if dev.name == name:
                return dev
        return None

    def by_index(self, index: int) -> Optional[NetDev]:
        for dev in self.interfaces:
            if dev.index == index:
                return dev
        return None

    def remove(self, dev: NetDev) -> None:
        self.interfaces.remove(dev)
        dev.put()

    def destroy(self) -> None:
        while self.interfaces:
            self.interfaces.pop(0).put()


__all__ = [
    "IFNAMSIZ",
    "valid_ifname",
    "check_ifname",
    "guess_link_type",
    "NetDev",
    "NetConfig",
]

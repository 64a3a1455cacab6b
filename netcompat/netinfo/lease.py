# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/netinfo/lease.py
"""
Address leases and the rules deciding which lease owns an address or route.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .address import Address, prefix_match
from .names import AddrconfMode, AddrconfState, AddrFamily
from .route import Route


@dataclass
class Lease:
    family: AddrFamily
    mode: AddrconfMode
    owner: Optional[str] = None
    state: AddrconfState = AddrconfState.NONE
    addrs: List[Address] = field(default_factory=list)
    routes: List[Route] = field(default_factory=list)
    acquired: Optional[float] = None
    released: bool = False

    @property
    def key(self) -> Tuple[AddrFamily, AddrconfMode]:
        """An interface holds at most one lease per key."""
        return (self.family, self.mode)

    @property
    def is_ipv6_autoconf(self) -> bool:
        return self.family is AddrFamily.IPV6 and self.mode is AddrconfMode.AUTOCONF

    def release(self) -> None:
        self.addrs.clear()
        self.routes.clear()
        self.state = AddrconfState.RELEASED
        self.released = True

    def owns_address(self, match: Address, now: Optional[float] = None) -> bool:
        """
        Whether this lease owns the given address.

        IPv6 autoconf leases record prefixes, not the addresses the kernel
        eventually picks inside them, so ownership there is a prefix match.
        Everything else needs the same local, peer and anycast address.
        """
        if match.family is not self.family:
            return False
        if now is None:
            now = time.time()

        if self.is_ipv6_autoconf:
            for rp in self.routes:
                if rp.prefixlen != match.prefixlen or rp.is_expired(now):
                    continue
                if prefix_match(rp.prefixlen, rp.destination, match.local):
                    return True

        for ap in self.addrs:
            if ap.prefixlen != match.prefixlen or ap.is_expired(now):
                continue

            if self.is_ipv6_autoconf:
                if not prefix_match(match.prefixlen, ap.local, match.local):
                    continue
            elif ap.local != match.local:
                continue

            if ap.peer == match.peer and ap.anycast == match.anycast:
                return True
        return False

    def owns_route(self, rp: Route) -> Optional[Route]:
        """Return the lease's own route equal to rp, if any."""
        for own in self.routes:
            if own.same_as(rp):
                return own
        return None

    def implies_route(self, rp: Route) -> bool:
        """Whether rp is the on-link route of one of the lease addresses."""
        for ap in self.addrs:
            if rp.prefixlen == ap.prefixlen and prefix_match(ap.prefixlen, rp.destination, ap.local):
                return True
        return False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "family": self.family.value,
            "mode": self.mode.value,
            "owner": self.owner,
            "state": self.state.value,
            "addresses": [ap.to_dict() for ap in self.addrs],
            "routes": [rp.to_dict() for rp in self.routes],
        }


__all__ = ["Lease"]

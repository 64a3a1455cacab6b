# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/netinfo/route.py
from __future__ import annotations

import copy
import ipaddress
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .address import IPAddress
from .names import AddrFamily


@dataclass
class NextHop:
    gateway: Optional[IPAddress] = None
    device: Optional[str] = None


@dataclass
class Route:
    """
    A route: destination/prefixlen via nh.

    A route without a gateway is a local (interface) route. Route lists are
    plain Python lists; their order is the order routes get applied.
    """

    family: AddrFamily
    prefixlen: int
    destination: IPAddress
    nh: NextHop = field(default_factory=NextHop)
    expires: Optional[float] = None

    @classmethod
    def new(
        cls,
        prefixlen: int,
        destination: Optional[IPAddress] = None,
        gateway: Optional[IPAddress] = None,
        device: Optional[str] = None,
    ) -> "Route":
        """
        Build a route; the family comes from the destination, else the gateway.

        Raises ValueError when neither is given or when their families differ.
        """
        if destination is None and gateway is None:
            raise ValueError("route needs a destination or a gateway")
        if destination is not None and gateway is not None and destination.version != gateway.version:
            raise ValueError(f"destination {destination} and gateway {gateway} differ in address family")

        family = AddrFamily.of(destination if destination is not None else gateway)
        if destination is None:
            destination = ipaddress.ip_address("0.0.0.0" if family is AddrFamily.IPV4 else "::")
        if not 0 <= prefixlen <= family.width:
            raise ValueError(f"prefix length {prefixlen} out of range for {family.value}")

        return cls(family=family, prefixlen=prefixlen, destination=destination, nh=NextHop(gateway, device))

    @property
    def gateway(self) -> Optional[IPAddress]:
        return self.nh.gateway

    @property
    def device(self) -> Optional[str]:
        return self.nh.device

    @property
    def is_default(self) -> bool:
        return self.prefixlen == 0

    @property
    def is_local(self) -> bool:
        return self.nh.gateway is None

    def is_expired(self, now: Optional[float] = None) -> bool:
        if not self.expires:
            return False
        return self.expires <= (time.time() if now is None else now)

    def clone(self) -> "Route":
        return copy.deepcopy(self)

    def same_as(self, other: "Route") -> bool:
        """Equality of what the kernel sees; expiry is not part of it."""
        return (
            self.family is other.family
            and self.prefixlen == other.prefixlen
            and self.destination == other.destination
            and self.nh.gateway == other.nh.gateway
            and self.nh.device == other.nh.device
        )

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "family": self.family.value,
            "destination": "default" if self.is_default else f"{self.destination}/{self.prefixlen}",
        }
        if self.nh.gateway is not None:
            d["gateway"] = str(self.nh.gateway)
        if self.nh.device:
            d["device"] = self.nh.device
        if self.expires:
            d["expires"] = self.expires
        return d

    def __str__(self) -> str:
        dest = "default" if self.is_default else f"{self.destination}/{self.prefixlen}"
        s = dest
        if self.nh.gateway is not None:
            s += f" via {self.nh.gateway}"
        if self.nh.device:
            s += f" dev {self.nh.device}"
        return s


__all__ = ["NextHop", "Route"]

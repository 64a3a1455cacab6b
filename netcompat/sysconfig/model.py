# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/sysconfig/model.py
"""
Normalized interface model produced by the sysconfig translator.

This file contains:
- link variants (one dataclass per link type; exactly one per interface)
- ControlPolicy and the STARTMODE table
- DHCP option records
- InterfaceConfig, the per-file result
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Union

from ..netinfo.address import Address
from ..netinfo.bonding import Bonding
from ..netinfo.bridge import Bridge as BridgeParams
from ..netinfo.names import LinkType
from ..netinfo.route import Route

# Timeouts are seconds; this value means "wait forever".
INFINITE_TIMEOUT = 0xFFFFFFFF
DEFAULT_IFUP_TIMEOUT = 30


# Link variants


@dataclass
class Loopback:
    link_type = LinkType.LOOPBACK

    def to_dict(self) -> Dict[str, Any]:
        return {}


@dataclass
class Ethernet:
    link_type = LinkType.ETHERNET

    ethtool_options: Dict[str, str] = field(default_factory=dict)
    raw: Optional[str] = None  # ETHTOOL_OPTIONS text that could not be decoded

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {}
        if self.ethtool_options:
            d["ethtool"] = dict(self.ethtool_options)
        if self.raw:
            d["ethtool-raw"] = self.raw
        return d


@dataclass
class Bond:
    link_type = LinkType.BOND

    bonding: Bonding = field(default_factory=Bonding)

    @property
    def slaves(self) -> List[str]:
        return self.bonding.slaves

    def to_dict(self) -> Dict[str, Any]:
        return self.bonding.to_dict()


@dataclass
class Bridge:
    link_type = LinkType.BRIDGE

    bridge: BridgeParams = field(default_factory=BridgeParams)

    @property
    def ports(self):
        return self.bridge.ports

    def to_dict(self) -> Dict[str, Any]:
        return self.bridge.to_dict()


@dataclass
class Vlan:
    link_type = LinkType.VLAN

    parent_device: str
    tag: int

    def to_dict(self) -> Dict[str, Any]:
        return {"device": self.parent_device, "tag": self.tag}


@dataclass
class Wireless:
    link_type = LinkType.WIRELESS

    essid: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {"essid": self.essid} if self.essid else {}


@dataclass
class Tunnel:
    kind: LinkType = LinkType.TUNNEL

    @property
    def link_type(self) -> LinkType:
        return self.kind

    def to_dict(self) -> Dict[str, Any]:
        return {}


@dataclass
class Unknown:
    link_type = LinkType.UNKNOWN

    def to_dict(self) -> Dict[str, Any]:
        return {}


Link = Union[Loopback, Ethernet, Bond, Bridge, Vlan, Wireless, Tunnel, Unknown]


# Control policy


@dataclass(frozen=True)
class ControlPolicy:
    """When and how an interface is brought up (derived from STARTMODE)."""

    mode: str = "manual"
    link_class: Optional[str] = None  # None, "boot", "ignore", "off"
    require_link: Optional[str] = None
    mandatory: bool = True
    persistent: bool = False
    timeout: int = DEFAULT_IFUP_TIMEOUT

    @property
    def infinite_timeout(self) -> bool:
        return self.timeout == INFINITE_TIMEOUT

    @classmethod
    def from_startmode(cls, mode: Optional[str]) -> "ControlPolicy":
        """Policy for a STARTMODE value; unknown or missing modes are "manual"."""
        return STARTMODES.get((mode or "").strip().lower(), STARTMODES["manual"])

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode,
            "link-class": self.link_class,
            "require-link": self.require_link,
            "mandatory": self.mandatory,
            "persistent": self.persistent,
            "timeout": "infinite" if self.infinite_timeout else self.timeout,
        }


def _boot(mode: str) -> ControlPolicy:
    return ControlPolicy(mode=mode, link_class="boot", mandatory=False, persistent=True)


STARTMODES: Dict[str, ControlPolicy] = {
    "manual": ControlPolicy(),
    "auto": _boot("auto"),
    "boot": _boot("boot"),
    "onboot": _boot("onboot"),
    "on": _boot("on"),
    "hotplug": ControlPolicy(mode="hotplug", link_class="boot", mandatory=False),
    "ifplugd": ControlPolicy(mode="ifplugd", link_class="ignore", mandatory=False),
    "nfsroot": ControlPolicy(
        mode="nfsroot",
        link_class="boot",
        require_link="localfs",
        mandatory=True,
        persistent=True,
        timeout=INFINITE_TIMEOUT,
    ),
    "off": ControlPolicy(mode="off", link_class="off", mandatory=False, timeout=0),
}


# DHCP options


@dataclass
class Dhcp4Options:
    enabled: bool = False
    hostname: Optional[str] = None
    client_id: Optional[str] = None
    vendor_class: Optional[str] = None
    acquire_timeout: Optional[int] = None  # INFINITE_TIMEOUT for "wait forever"
    lease_time: Optional[int] = None  # INFINITE_TIMEOUT for "infinite lease"

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"enabled": self.enabled}
        for key, value in (
            ("hostname", self.hostname),
            ("client-id", self.client_id),
            ("vendor-class", self.vendor_class),
            ("acquire-timeout", self.acquire_timeout),
            ("lease-time", self.lease_time),
        ):
            if value is None:
                continue
            if key in ("acquire-timeout", "lease-time") and value == INFINITE_TIMEOUT:
                value = "infinite"
            d[key] = value
        return d


@dataclass
class Dhcp6Options:
    enabled: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {"enabled": self.enabled}


# Interface


@dataclass
class InterfaceConfig:
    name: str
    link: Link = field(default_factory=Unknown)
    mtu: Optional[int] = None
    hwaddr: Optional[str] = None
    control: ControlPolicy = field(default_factory=ControlPolicy)
    addresses: List[Address] = field(default_factory=list)
    routes: List[Route] = field(default_factory=list)
    dhcp4: Dhcp4Options = field(default_factory=Dhcp4Options)
    dhcp6: Dhcp6Options = field(default_factory=Dhcp6Options)
    autoip4: bool = False
    source: Optional[str] = None
    warnings: List[str] = field(default_factory=list)

    def warn(self, logger: logging.Logger, msg: str, *args: Any) -> None:
        """Record a non-fatal translation problem and log it."""
        text = msg % args if args else msg
        self.warnings.append(text)
        logger.warning("%s", text)

    @property
    def link_type(self) -> LinkType:
        return self.link.link_type

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "name": self.name,
            "type": self.link_type.value,
            "control": self.control.to_dict(),
        }
        link = self.link.to_dict()
        if link:
            d[self.link_type.value] = link
        if self.mtu is not None:
            d["mtu"] = self.mtu
        if self.hwaddr:
            d["lladdr"] = self.hwaddr
        d["addresses"] = [ap.to_dict() for ap in self.addresses]
        d["routes"] = [rp.to_dict() for rp in self.routes]
        d["dhcp4"] = self.dhcp4.to_dict()
        d["dhcp6"] = self.dhcp6.to_dict()
        if self.autoip4:
            d["autoip4"] = True
        if self.source:
            d["source"] = self.source
        if self.warnings:
            d["warnings"] = list(self.warnings)
        return d


__all__ = [
    "INFINITE_TIMEOUT",
    "Loopback",
    "Ethernet",
    "Bond",
    "Bridge",
    "Vlan",
    "Wireless",
    "Tunnel",
    "Unknown",
    "Link",
    "ControlPolicy",
    "STARTMODES",
    "Dhcp4Options",
    "Dhcp6Options",
    "InterfaceConfig",
]

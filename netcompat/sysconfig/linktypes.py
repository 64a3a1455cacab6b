# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/sysconfig/linktypes.py
"""
Link type recognizers.

Each recognizer looks at one ifcfg file and either returns the link variant it
recognized or None to let the next one try. They run in RECOGNIZERS order and
the first match wins. Parse/validation problems raise; details that are
merely not translated are recorded as warnings on the InterfaceConfig.
"""

from __future__ import annotations

import logging
import math
import re
from typing import Callable, Dict, List, Optional, Tuple

from ..core.exceptions import (
    BridgeValidationError,
    InvalidInterfaceName,
    InvalidVlanTag,
    MalformedBridgeOption,
    VlanSelfReference,
)
from ..netinfo.bonding import Bonding
from ..netinfo.bridge import Bridge as BridgeParams
from ..netinfo.names import LinkType
from ..netinfo.netdev import check_ifname
from .model import Bond, Bridge, Ethernet, InterfaceConfig, Link, Loopback, Tunnel, Unknown, Vlan, Wireless
from .sysconfig import Sysconfig, parse_integer

VLAN_TAG_MAX = 4094

TUNNEL_TYPES: Dict[str, LinkType] = {
    "tun": LinkType.TUN,
    "tap": LinkType.TAP,
    "sit": LinkType.SIT,
    "gre": LinkType.GRE,
    "ipip": LinkType.TUNNEL,
    "ip6tnl": LinkType.TUNNEL6,
}

Recognizer = Callable[[Sysconfig, InterfaceConfig, logging.Logger], Optional[Link]]

_TRAILING_DIGITS_RE = re.compile(r"[0-9]*$")


def try_loopback(sc: Sysconfig, ifc: InterfaceConfig, log: logging.Logger) -> Optional[Link]:
    # "lo" is reserved for the loopback device
    if ifc.name != "lo":
        return None
    return Loopback()


def try_bonding(sc: Sysconfig, ifc: InterfaceConfig, log: logging.Logger) -> Optional[Link]:
    if not sc.get_boolean("BONDING_MASTER"):
        return None

    bonding = Bonding()
    for _suffix, slave in sc.indexed("BONDING_SLAVE"):
        bonding.add_slave(slave)

    opts = sc.get_value("BONDING_MODULE_OPTS")
    if opts is not None:
        bonding.set_module_options(opts)

    bonding.validate()
    log.debug("bond with %d slave(s), mode %s", len(bonding.slaves), bonding.mode)
    return Bond(bonding=bonding)


def _bridge_int(key: str, text: str) -> int:
    try:
        return parse_integer(text)
    except ValueError as e:
        raise MalformedBridgeOption(msg=f"cannot parse {key}={text!r}", cause=e, context={"option": key, "value": text})


def _bridge_float(key: str, text: str) -> float:
    try:
        value = float(text.strip())
    except ValueError as e:
        raise MalformedBridgeOption(msg=f"cannot parse {key}={text!r}", cause=e, context={"option": key, "value": text})
    if not math.isfinite(value):
        raise MalformedBridgeOption(msg=f"cannot parse {key}={text!r}", context={"option": key, "value": text})
    return value


def _bridge_stp(text: str) -> bool:
    v = text.strip().lower()
    if v in ("yes", "on"):
        return True
    if v in ("no", "off"):
        return False
    raise MalformedBridgeOption(msg=f"cannot parse BRIDGE_STP={text!r}", context={"option": "BRIDGE_STP", "value": text})


def _apply_port_values(sc: Sysconfig, bridge: BridgeParams, key: str, attr: str) -> None:
    """Apply a per-port list (BRIDGE_PORTPRIORITIES, BRIDGE_PATHCOSTS) aligned with BRIDGE_PORTS."""
    value = sc.get_value(key)
    if value is None:
        return
    # extra entries beyond the port list are ignored
    for port, item in zip(bridge.ports, value.split()):
        if item == "-":
            continue
        try:
            setattr(port, attr, parse_integer(item))
        except ValueError as e:
            raise MalformedBridgeOption(
                msg=f"{key}={value!r}: cannot parse value {item!r} of port {port.name}",
                cause=e,
                context={"option": key, "value": value, "port": port.name},
            )


def try_bridge(sc: Sysconfig, ifc: InterfaceConfig, log: logging.Logger) -> Optional[Link]:
    if not sc.get_boolean("BRIDGE"):
        return None

    bridge = BridgeParams()

    value = sc.get_value("BRIDGE_STP")
    if value is not None:
        bridge.stp = _bridge_stp(value)

    value = sc.get_value("BRIDGE_PRIORITY")
    if value is not None:
        bridge.priority = _bridge_int("BRIDGE_PRIORITY", value)

    for key, attr in (
        ("BRIDGE_AGEINGTIME", "ageing_time"),
        ("BRIDGE_FORWARDDELAY", "forward_delay"),
        ("BRIDGE_HELLOTIME", "hello_time"),
        ("BRIDGE_MAXAGE", "max_age"),
    ):
        value = sc.get_value(key)
        if value is not None:
            setattr(bridge, attr, _bridge_float(key, value))

    value = sc.get_value("BRIDGE_PORTS")
    if value is not None:
        for name in value.split():
            try:
                check_ifname(name)
            except InvalidInterfaceName as e:
                raise BridgeValidationError(
                    msg=f"BRIDGE_PORTS={value!r}: rejecting suspect port name {name!r}",
                    cause=e,
                    context={"port": name},
                )
            bridge.add_port(name)

    _apply_port_values(sc, bridge, "BRIDGE_PORTPRIORITIES", "priority")
    _apply_port_values(sc, bridge, "BRIDGE_PATHCOSTS", "path_cost")

    bridge.validate()
    return Bridge(bridge=bridge)


def parse_vlan_tag(text: Optional[str]) -> int:
    """A VLAN tag: all digits, at most VLAN_TAG_MAX."""
    s = text or ""
    if not s.isdigit() or not s.isascii():
        raise InvalidVlanTag(msg=f"cannot parse VLAN tag {s!r}", context={"value": s})
    tag = int(s, 10)
    if tag > VLAN_TAG_MAX:
        raise InvalidVlanTag(msg=f"VLAN tag {tag} is out of numerical range", context={"value": s})
    return tag


def vlan_tag_from_name(name: str) -> str:
    """Tag text implied by an interface name: "eth0.100" -> "100", "vlan50" -> "50"."""
    if "." in name:
        return name.rsplit(".", 1)[1]
    m = _TRAILING_DIGITS_RE.search(name)
    return m.group(0) if m else ""


def try_vlan(sc: Sysconfig, ifc: InterfaceConfig, log: logging.Logger) -> Optional[Link]:
    etherdev = sc.get_value("ETHERDEVICE")
    if etherdev is None:
        return None

    if etherdev == ifc.name:
        raise VlanSelfReference(
            msg=f"ETHERDEVICE={etherdev!r} self-reference",
            context={"value": etherdev},
        )

    vlan_id = sc.get_value("VLAN_ID")
    try:
        tag = parse_vlan_tag(vlan_id if vlan_id is not None else vlan_tag_from_name(ifc.name))
    except InvalidVlanTag as e:
        source = f"VLAN_ID={vlan_id!r}" if vlan_id is not None else "the interface name"
        raise e.with_context(source=source)

    return Vlan(parent_device=etherdev, tag=tag)


def try_wireless(sc: Sysconfig, ifc: InterfaceConfig, log: logging.Logger) -> Optional[Link]:
    if not sc.has("WIRELESS_ESSID"):
        return None
    ifc.warn(log, "ifcfg-%s: conversion of wireless interfaces not yet supported", ifc.name)
    return Wireless(essid=sc.get_value("WIRELESS_ESSID"))


def try_tunnel(sc: Sysconfig, ifc: InterfaceConfig, log: logging.Logger) -> Optional[Link]:
    kind = TUNNEL_TYPES.get(sc.get_value("TUNNEL") or "")
    if kind is None:
        return None
    return Tunnel(kind=kind)


def parse_ethtool_options(text: str) -> Tuple[Dict[str, str], Optional[str]]:
    """
    Decode ETHTOOL_OPTIONS.

    Two flavors exist:
      - "-K iface tso off": a full ethtool command line (kept raw)
      - "speed 1000 duplex full": arguments to "ethtool -s iface" (decoded)

    Returns (settings, raw) where raw is the text when it was not decoded.
    """
    tokens: List[str] = text.split()
    if not tokens or tokens[0].startswith("-") or len(tokens) % 2:
        return {}, text
    return dict(zip(tokens[0::2], tokens[1::2])), None


def try_ethernet(sc: Sysconfig, ifc: InterfaceConfig, log: logging.Logger) -> Optional[Link]:
    value = sc.get_value("ETHTOOL_OPTIONS")
    if value is None:
        return None
    settings, raw = parse_ethtool_options(value)
    if raw is not None:
        ifc.warn(log, "ifcfg-%s: ETHTOOL_OPTIONS=%r not translated", ifc.name, raw)
    return Ethernet(ethtool_options=settings, raw=raw)


RECOGNIZERS: Tuple[Tuple[str, Recognizer], ...] = (
    ("loopback", try_loopback),
    ("bonding", try_bonding),
    ("bridge", try_bridge),
    ("vlan", try_vlan),
    ("wireless", try_wireless),
    ("tunnel", try_tunnel),
    ("ethernet", try_ethernet),
)


def recognize_link(sc: Sysconfig, ifc: InterfaceConfig, log: logging.Logger) -> Link:
    """Run the recognizers in order; Unknown when none matches."""
    for name, recognizer in RECOGNIZERS:
        link = recognizer(sc, ifc, log)
        if link is not None:
            log.debug("ifcfg-%s: recognized as %s", ifc.name, name)
            return link
    return Unknown()


__all__ = [
    "VLAN_TAG_MAX",
    "TUNNEL_TYPES",
    "RECOGNIZERS",
    "try_loopback",
    "try_bonding",
    "try_bridge",
    "try_vlan",
    "try_wireless",
    "try_tunnel",
    "try_ethernet",
    "parse_vlan_tag",
    "vlan_tag_from_name",
    "parse_ethtool_options",
    "recognize_link",
]

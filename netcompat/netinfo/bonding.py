# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/netinfo/bonding.py
"""
Bonding (link aggregation) parameters as accepted by the kernel bonding driver.

Options use the bonding module option names (mode, miimon, arp_ip_target, ...)
and accept either the symbolic or the numeric form where the driver does.
"""

from __future__ import annotations

import ipaddress
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..core.exceptions import BondValidationError, MalformedBondOption
from ..core.list_utils import duplicates

BOND_MODES = (
    "balance-rr",
    "active-backup",
    "balance-xor",
    "broadcast",
    "802.3ad",
    "balance-tlb",
    "balance-alb",
)
# modes in which a primary slave is meaningful
_PRIMARY_MODES = ("active-backup", "balance-tlb", "balance-alb")

_ENUM_OPTIONS: Dict[str, Tuple[str, ...]] = {
    "mode": BOND_MODES,
    "lacp_rate": ("slow", "fast"),
    "xmit_hash_policy": ("layer2", "layer3+4", "layer2+3", "encap2+3", "encap3+4"),
    "arp_validate": ("none", "active", "backup", "all", "filter", "filter_active", "filter_backup"),
    "arp_all_targets": ("any", "all"),
    "fail_over_mac": ("none", "active", "follow"),
    "ad_select": ("stable", "bandwidth", "count"),
    "primary_reselect": ("always", "better", "failure"),
}

# option -> inclusive (min, max); None means unbounded
_INT_OPTIONS: Dict[str, Tuple[int, Optional[int]]] = {
    "miimon": (0, None),
    "updelay": (0, None),
    "downdelay": (0, None),
    "arp_interval": (0, None),
    "num_grat_arp": (0, 255),
    "num_unsol_na": (0, 255),
    "resend_igmp": (0, 255),
    "min_links": (0, None),
    "packets_per_slave": (0, 65535),
    "lp_interval": (1, None),
    "use_carrier": (0, 1),
    "all_slaves_active": (0, 1),
    "tlb_dynamic_lb": (0, 1),
}


def _parse_enum(option: str, value: str) -> str:
    names = _ENUM_OPTIONS[option]
    v = value.strip().lower()
    if v.isascii() and v.isdigit():
        idx = int(v)
        if idx < len(names):
            return names[idx]
    elif v in names:
        return v
    raise MalformedBondOption(
        msg=f"invalid value {value!r} for bonding option {option}",
        context={"option": option, "value": value},
    )


def _parse_int(option: str, value: str) -> int:
    lo, hi = _INT_OPTIONS[option]
    v = value.strip()
    if not (v.isascii() and v.isdigit()) or int(v) < lo or (hi is not None and int(v) > hi):
        raise MalformedBondOption(
            msg=f"invalid value {value!r} for bonding option {option}",
            context={"option": option, "value": value},
        )
    return int(v)


def _parse_arp_targets(option: str, value: str) -> List[str]:
    targets = []
    for t in value.split(","):
        t = t.strip()
        if not t:
            continue
        try:
            targets.append(str(ipaddress.IPv4Address(t)))
        except ValueError as e:
            raise MalformedBondOption(
                msg=f"invalid ARP target {t!r} for bonding option {option}",
                cause=e,
                context={"option": option, "value": value},
            )
    return targets


@dataclass
class Bonding:
    mode: str = "balance-rr"
    slaves: List[str] = field(default_factory=list)
    miimon: int = 0
    updelay: int = 0
    downdelay: int = 0
    arp_interval: int = 0
    arp_ip_target: List[str] = field(default_factory=list)
    primary: Optional[str] = None
    options: Dict[str, Any] = field(default_factory=dict)

    def add_slave(self, name: str) -> None:
        self.slaves.append(name)

    def set_option(self, option: str, value: str) -> None:
        """Apply one "option=value" module option; raise MalformedBondOption if invalid."""
        key = option.strip().lower()
        parsed: Any
        if key in _ENUM_OPTIONS:
            parsed = _parse_enum(key, value)
        elif key in _INT_OPTIONS:
            parsed = _parse_int(key, value)
        elif key == "arp_ip_target":
            parsed = _parse_arp_targets(key, value)
        elif key in ("primary", "active_slave"):
            parsed = value.strip()
        else:
            raise MalformedBondOption(
                msg=f"unknown bonding option {option!r}",
                context={"option": option, "value": value},
            )

        if key in ("mode", "miimon", "updelay", "downdelay", "arp_interval", "arp_ip_target", "primary"):
            setattr(self, key, parsed)
        else:
            self.options[key] = parsed

    def set_module_options(self, text: str) -> None:
        """Parse a BONDING_MODULE_OPTS style "k=v k=v" string."""
        for item in text.split():
            key, sep, val = item.partition("=")
            if not sep or not key or not val:
                raise MalformedBondOption(
                    msg=f"unable to parse bonding options {text!r}",
                    context={"value": text, "item": item},
                )
            self.set_option(key, val)

    def validate(self) -> None:
        """Check aggregate invariants; raise BondValidationError on the first violation."""
        checks: Tuple[Tuple[Callable[[], bool], str], ...] = (
            (lambda: self.mode in BOND_MODES, f"unsupported bonding mode {self.mode!r}"),
            (lambda: bool(self.slaves), "bond has no slave devices"),
            (lambda: not duplicates(self.slaves), f"duplicate slave devices {duplicates(self.slaves)}"),
            (
                lambda: not (self.miimon and self.arp_interval),
                "MII and ARP link monitoring are mutually exclusive",
            ),
            (
                lambda: not self.arp_interval or bool(self.arp_ip_target),
                "ARP monitoring enabled without arp_ip_target",
            ),
            (
                lambda: self.primary is None or self.mode in _PRIMARY_MODES,
                f"primary slave is not supported in mode {self.mode}",
            ),
            (
                lambda: self.primary is None or self.primary in self.slaves,
                f"primary {self.primary!r} is not a slave of this bond",
            ),
        )
        for ok, err in checks:
            if not ok():
                raise BondValidationError(msg=f"bonding validation: {err}", context={"mode": self.mode})

    def to_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {"mode": self.mode, "slaves": list(self.slaves)}
        if self.miimon:
            d["miimon"] = {"frequency": self.miimon, "updelay": self.updelay, "downdelay": self.downdelay}
        if self.arp_interval:
            d["arpmon"] = {"interval": self.arp_interval, "targets": list(self.arp_ip_target)}
        if self.primary:
            d["primary"] = self.primary
        d.update(self.options)
        return d


__all__ = ["BOND_MODES", "Bonding"]

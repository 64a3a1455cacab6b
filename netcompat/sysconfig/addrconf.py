# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/sysconfig/addrconf.py
"""
Address configuration of one interface: static addresses and routes, DHCP
options and the BOOTPROTO dispatch between them.
"""

from __future__ import annotations

import ipaddress
import logging
from typing import Optional

from ..core.exceptions import MalformedAddress, ParseError
from ..netinfo.address import Address, IPAddress, address_list_dedup, address_list_find, parse_address, parse_ip
from ..netinfo.names import AddrFamily
from ..netinfo.route import Route
from .files import routes_path_for
from .globals import GlobalDefaults
from .model import INFINITE_TIMEOUT, InterfaceConfig
from .routes import read_routes
from .sysconfig import Sysconfig

LEASE_TIME_MAX = 2**31 - 1

_LOOPBACK_ADDRESSES = (
    (AddrFamily.IPV4, 8, ipaddress.ip_address("127.0.0.1")),
    (AddrFamily.IPV6, 128, ipaddress.ip_address("::1")),
)


class AddressConfigBuilder:
    """Static addresses (IPADDR*) and routes (ifroute-<name>, global routes)."""

    def __init__(self, sc: Sysconfig, ifc: InterfaceConfig, defaults: GlobalDefaults, logger: logging.Logger):
        self.sc = sc
        self.ifc = ifc
        self.defaults = defaults
        self.logger = logger

    def _override(self, key: str, family: AddrFamily) -> Optional[IPAddress]:
        """BROADCAST<n>/REMOTE_IPADDR<n>; discarded with a warning unless it parses as `family`."""
        value = self.sc.get_value(key)
        if value is None:
            return None
        try:
            return parse_ip(value, family)
        except MalformedAddress:
            self.ifc.warn(self.logger, "%s: ignoring %s=%s (wrong address family)", self.sc.pathname, key, value)
            return None

    def build_address(self, suffix: str, value: str) -> Address:
        sc = self.sc
        try:
            family, local, plen = parse_address(
                value,
                prefixlen=sc.get_value("PREFIXLEN" + suffix),
                netmask=sc.get_value("NETMASK" + suffix),
            )
        except ParseError as e:
            raise e.with_context(variable="IPADDR" + suffix)

        ap = Address(family=family, prefixlen=plen, local=local)
        if family is AddrFamily.IPV4:
            ap.broadcast = self._override("BROADCAST" + suffix, family)
        ap.peer = self._override("REMOTE_IPADDR" + suffix, family)
        return ap

    def add_addresses(self) -> None:
        for suffix, value in self.sc.indexed("IPADDR"):
            self.ifc.addresses.append(self.build_address(suffix, value))

        if self.ifc.name == "lo":
            for family, plen, local in _LOOPBACK_ADDRESSES:
                if address_list_find(self.ifc.addresses, local) is None:
                    self.ifc.addresses.append(Address(family=family, prefixlen=plen, local=local))

    def add_interface_routes(self) -> None:
        if not self.sc.pathname:
            return
        path = routes_path_for(self.sc.pathname, self.ifc.name)
        if path.is_file():
            self.ifc.routes.extend(read_routes(path, logger=self.logger))

    def _global_route_applies(self, rp: Route) -> bool:
        if rp.family is AddrFamily.IPV4:
            if rp.device and rp.device != self.ifc.name:
                return False
            return any(ap.family is AddrFamily.IPV4 and ap.can_reach(rp.gateway) for ap in self.ifc.addresses)
        # IPv6 global routes need an explicit device binding
        return rp.device is not None and rp.device == self.ifc.name

    def add_global_routes(self) -> None:
        for rp in self.defaults.routes:
            if self._global_route_applies(rp):
                self.ifc.routes.append(rp.clone())

    def build(self) -> None:
        self.add_addresses()
        self.add_interface_routes()
        self.add_global_routes()
        self.ifc.addresses = address_list_dedup(self.ifc.addresses)


class DhcpOptionsBuilder:
    """DHCP options: `dhcp` defaults first, then the interface's own values."""

    def __init__(self, sc: Sysconfig, ifc: InterfaceConfig, defaults: GlobalDefaults, logger: logging.Logger):
        self.sc = sc
        self.ifc = ifc
        self.defaults = defaults
        self.logger = logger

    def _integer(self, src: Sysconfig, key: str) -> Optional[int]:
        try:
            return src.get_integer(key)
        except ValueError:
            self.ifc.warn(self.logger, "%s: cannot parse %s=%r", src.pathname or self.ifc.name, key, src.get_value(key))
            return None

    def _apply_dhcp4(self, src: Sysconfig) -> None:
        opts = self.ifc.dhcp4

        value = src.get_value("DHCLIENT_HOSTNAME_OPTION")
        if value is not None and value.lower() != "auto":
            opts.hostname = value
        value = src.get_value("DHCLIENT_CLIENT_ID")
        if value is not None:
            opts.client_id = value
        value = src.get_value("DHCLIENT_VENDOR_CLASS_ID")
        if value is not None:
            opts.vendor_class = value

        wait = self._integer(src, "DHCLIENT_WAIT_AT_BOOT")
        if wait is not None:
            if wait < 0:
                self.ifc.warn(self.logger, "%s: ignoring negative DHCLIENT_WAIT_AT_BOOT=%d", src.pathname, wait)
            else:
                opts.acquire_timeout = wait or INFINITE_TIMEOUT

        lease = self._integer(src, "DHCLIENT_LEASE_TIME")
        if lease is not None:
            opts.lease_time = lease if 0 <= lease <= LEASE_TIME_MAX else INFINITE_TIMEOUT

    def enable_dhcp4(self) -> None:
        if self.ifc.dhcp4.enabled:
            return
        if self.defaults.dhcp is not None:
            self._apply_dhcp4(self.defaults.dhcp)
        self._apply_dhcp4(self.sc)
        self.ifc.dhcp4.enabled = True

    def enable_dhcp6(self) -> None:
        # No DHCPv6 option is translated; the client runs with its defaults.
        self.ifc.dhcp6.enabled = True


def apply_bootproto(sc: Sysconfig, ifc: InterfaceConfig, defaults: GlobalDefaults, logger: logging.Logger) -> None:
    """
    Dispatch on BOOTPROTO.

    none / ibft         no address configuration at all
    static / 6to4       static only
    dhcp, dhcp4, dhcp6, autoip joined by "+"
                        the dynamic mechanisms, then static
    """
    value = sc.get_value("BOOTPROTO")
    if value is None or ifc.name == "lo":
        value = "static"

    mode = value.lower()
    if mode in ("none", "ibft"):
        return

    if mode not in ("static", "6to4"):
        dhcp = DhcpOptionsBuilder(sc, ifc, defaults, logger)
        for token in (t for t in mode.split("+") if t):
            if token == "dhcp":
                dhcp.enable_dhcp4()
                dhcp.enable_dhcp6()
            elif token == "dhcp4":
                dhcp.enable_dhcp4()
            elif token == "dhcp6":
                dhcp.enable_dhcp6()
            elif token == "autoip":
                ifc.autoip4 = True
            else:
                ifc.warn(logger, "ifcfg-%s: unknown BOOTPROTO value %r", ifc.name, token)

    AddressConfigBuilder(sc, ifc, defaults, logger).build()


__all__ = ["AddressConfigBuilder", "DhcpOptionsBuilder", "apply_bootproto", "LEASE_TIME_MAX"]

# SPDX-License-Identifier: LGPL-3.0-or-later
"""End-to-end translation of sysconfig directories."""
from __future__ import annotations

import logging

import pytest

from netcompat.core.exceptions import (
    BondValidationError,
    InvalidInterfaceName,
    MalformedPrefix,
    MissingOrBlacklistedFile,
    RouteFileParseError,
)
from netcompat.netinfo.names import LinkType
from netcompat.sysconfig import SysconfigTranslator, get_interfaces

NETWORK = {
    "config": "NETCONFIG_MODULES_ORDER='dns-resolver dns-bind'\n",
    "dhcp": "DHCLIENT_WAIT_AT_BOOT=20\nDHCLIENT_LEASE_TIME=''\n",
    "routes": "default 192.168.1.1 - -\n",
    "ifcfg-lo": "IPADDR=127.0.0.1\nNETMASK=255.0.0.0\nSTARTMODE=nfsroot\n",
    "ifcfg-eth0": "BOOTPROTO=dhcp\nSTARTMODE=auto\nDHCLIENT_WAIT_AT_BOOT=5\n",
    "ifcfg-eth0.old": "BOOTPROTO=broken-on-purpose\nIPADDR=999\n",
    "ifcfg-eth1": "BOOTPROTO=static\nSTARTMODE=hotplug\nIPADDR=192.168.1.20/24\nMTU=9000\nLLADDR=00:11:22:33:44:55\n",
    "ifroute-eth1": "10.10.0.0/16 192.168.1.254 - eth1\n",
    "ifcfg-bond0": (
        "BONDING_MASTER=yes\nBONDING_SLAVE0=eth2\nBONDING_SLAVE1=eth3\n"
        "BONDING_MODULE_OPTS='mode=active-backup miimon=100'\nBOOTPROTO=none\nSTARTMODE=onboot\n"
    ),
    "ifcfg-br0": "BRIDGE=yes\nBRIDGE_PORTS='eth4 eth5'\nBRIDGE_STP=off\nBOOTPROTO=dhcp4\n",
    "ifcfg-eth0.100": "ETHERDEVICE=eth0\nBOOTPROTO=static\nIPADDR=10.100.0.1/24\n",
    "ifcfg-wlan0": "WIRELESS_ESSID=office\nBOOTPROTO=dhcp\n",
}


def by_name(interfaces):
    return {ifc.name: ifc for ifc in interfaces}


@pytest.mark.integration
class TestDirectory:
    def test_full_scan(self, sysconfig_dir):
        d = sysconfig_dir(NETWORK)
        interfaces = get_interfaces(d)

        assert [i.name for i in interfaces] == ["bond0", "br0", "eth0", "eth0.100", "eth1", "lo", "wlan0"]
        ifs = by_name(interfaces)

        assert ifs["lo"].link_type is LinkType.LOOPBACK
        assert ifs["lo"].control.infinite_timeout
        assert sorted(str(a) for a in ifs["lo"].addresses) == ["127.0.0.1/8", "::1/128"]

        eth0 = ifs["eth0"]
        assert eth0.control.link_class == "boot"
        assert eth0.dhcp4.enabled and eth0.dhcp6.enabled
        assert eth0.dhcp4.acquire_timeout == 5

        eth1 = ifs["eth1"]
        assert (eth1.mtu, eth1.hwaddr) == (9000, "00:11:22:33:44:55")
        assert [str(r) for r in eth1.routes] == ["10.10.0.0/16 via 192.168.1.254 dev eth1", "default via 192.168.1.1"]

        assert ifs["bond0"].link.slaves == ["eth2", "eth3"]
        assert ifs["bond0"].addresses == []
        assert ifs["br0"].link.bridge.stp is False
        assert ifs["br0"].dhcp4.acquire_timeout == 20
        assert (ifs["eth0.100"].link.parent_device, ifs["eth0.100"].link.tag) == ("eth0", 100)
        assert ifs["wlan0"].link_type is LinkType.WIRELESS
        assert ifs["wlan0"].warnings

    def test_global_route_not_attached_when_unreachable(self, sysconfig_dir):
        d = sysconfig_dir(NETWORK)
        ifs = by_name(get_interfaces(d))
        assert ifs["eth0.100"].routes == []

    def test_one_bad_file_fails_the_scan(self, sysconfig_dir):
        d = sysconfig_dir({**NETWORK, "ifcfg-bond1": "BONDING_MASTER=yes\n"})
        with pytest.raises(BondValidationError) as ei:
            get_interfaces(d)
        assert ei.value.context["ifname"] == "bond1"
        assert ei.value.context["file"].endswith("ifcfg-bond1")

    def test_non_ascii_prefixlen_fails_with_file_context(self, sysconfig_dir):
        d = sysconfig_dir({**NETWORK, "ifcfg-eth7": "IPADDR=10.5.0.1\nPREFIXLEN=²\n"})
        with pytest.raises(MalformedPrefix) as ei:
            get_interfaces(d)
        assert ei.value.context["ifname"] == "eth7"
        assert ei.value.context["file"].endswith("ifcfg-eth7")

    def test_octal_bridge_priority_is_accepted(self, sysconfig_dir):
        d = sysconfig_dir({**NETWORK, "ifcfg-br1": "BRIDGE=yes\nBRIDGE_PRIORITY=0100\nBOOTPROTO=none\n"})
        assert by_name(get_interfaces(d))["br1"].link.bridge.priority == 64

    def test_bad_global_routes_fail_the_scan(self, sysconfig_dir):
        d = sysconfig_dir({**NETWORK, "routes": "default - - -\n"})
        with pytest.raises(RouteFileParseError):
            get_interfaces(d)

    def test_bad_interface_routes_fail_the_scan(self, sysconfig_dir):
        d = sysconfig_dir({**NETWORK, "ifroute-eth1": "10.10.0.0/99\n"})
        with pytest.raises(RouteFileParseError):
            get_interfaces(d)

    def test_bad_interface_name(self, sysconfig_dir):
        d = sysconfig_dir({"ifcfg-" + "x" * 20: "BOOTPROTO=dhcp\n"})
        with pytest.raises(InvalidInterfaceName):
            get_interfaces(d)

    def test_empty_directory(self, tmp_path):
        with pytest.raises(MissingOrBlacklistedFile):
            get_interfaces(tmp_path)

    def test_logs_summary(self, sysconfig_dir, caplog):
        d = sysconfig_dir({"ifcfg-eth0": "BOOTPROTO=dhcp\n"})
        with caplog.at_level(logging.INFO, logger="netcompat"):
            SysconfigTranslator().get_interfaces(d)
        assert any(r.getMessage().startswith("Translated 1 interface ") for r in caplog.records)


@pytest.mark.integration
class TestSingleFile:
    def test_uses_directory_defaults(self, sysconfig_dir):
        d = sysconfig_dir(NETWORK)
        [eth1] = get_interfaces(d / "ifcfg-eth1")
        assert eth1.name == "eth1"
        assert len(eth1.routes) == 2

    def test_blacklisted_file(self, sysconfig_dir):
        d = sysconfig_dir(NETWORK)
        with pytest.raises(MissingOrBlacklistedFile):
            get_interfaces(d / "ifcfg-eth0.old")

    def test_missing_file(self, tmp_path):
        with pytest.raises(MissingOrBlacklistedFile):
            get_interfaces(tmp_path / "ifcfg-eth0")

    def test_read_interface_explicit_name(self, sysconfig_dir):
        d = sysconfig_dir({"eth-custom": "ETHERDEVICE=eth0\nVLAN_ID=12\n"})
        ifc = SysconfigTranslator().read_interface(d / "eth-custom", ifname="vlan12")
        assert ifc.link.tag == 12
        assert ifc.source == str(d / "eth-custom")

    def test_translate_warnings_for_link_settings(self, sysconfig_dir):
        d = sysconfig_dir({"ifcfg-eth0": "MTU=big\nLLADDR=zz\nMTU=also-big\n"})
        [eth0] = get_interfaces(d / "ifcfg-eth0")
        assert eth0.mtu is None and eth0.hwaddr is None
        assert len(eth0.warnings) == 3

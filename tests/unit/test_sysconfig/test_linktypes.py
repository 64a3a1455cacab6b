# SPDX-License-Identifier: LGPL-3.0-or-later
"""Link type recognition."""
from __future__ import annotations

import logging

import pytest

from netcompat.core.exceptions import (
    BondValidationError,
    BridgeValidationError,
    InvalidVlanTag,
    MalformedBondOption,
    MalformedBridgeOption,
    VlanSelfReference,
)
from netcompat.netinfo.names import LinkType
from netcompat.sysconfig.linktypes import (
    parse_ethtool_options,
    parse_vlan_tag,
    recognize_link,
    vlan_tag_from_name,
)
from netcompat.sysconfig.model import Bond, Bridge, Ethernet, InterfaceConfig, Tunnel, Unknown, Vlan, Wireless
from netcompat.sysconfig.sysconfig import Sysconfig

LOG = logging.getLogger("netcompat.test.linktypes")


def recognize(name, text):
    ifc = InterfaceConfig(name=name)
    link = recognize_link(Sysconfig.parse(text), ifc, LOG)
    return link, ifc


@pytest.mark.unit
class TestOrder:
    def test_loopback_by_name(self):
        link, _ = recognize("lo", "BONDING_MASTER=yes\n")
        assert link.link_type is LinkType.LOOPBACK

    def test_bonding_before_bridge(self):
        link, _ = recognize("bond0", "BONDING_MASTER=yes\nBONDING_SLAVE0=eth0\nBRIDGE=yes\n")
        assert isinstance(link, Bond)

    def test_nothing_matches(self):
        link, ifc = recognize("eth0", "BOOTPROTO=dhcp\n")
        assert isinstance(link, Unknown)
        assert ifc.warnings == []


@pytest.mark.unit
class TestBonding:
    def test_slaves_and_options(self):
        link, _ = recognize(
            "bond0",
            "BONDING_MASTER=yes\nBONDING_SLAVE0=eth0\nBONDING_SLAVE_1=eth1\n"
            "BONDING_MODULE_OPTS='mode=active-backup miimon=100'\n",
        )
        assert link.slaves == ["eth0", "eth1"]
        assert link.bonding.mode == "active-backup"
        assert link.to_dict()["miimon"]["frequency"] == 100

    def test_no_slaves(self):
        with pytest.raises(BondValidationError):
            recognize("bond0", "BONDING_MASTER=yes\n")

    def test_bad_options(self):
        with pytest.raises(MalformedBondOption):
            recognize("bond0", "BONDING_MASTER=yes\nBONDING_SLAVE0=eth0\nBONDING_MODULE_OPTS='mode'\n")


@pytest.mark.unit
class TestBridge:
    def test_full(self):
        link, _ = recognize(
            "br0",
            "BRIDGE=yes\nBRIDGE_STP=on\nBRIDGE_PRIORITY=0x1000\nBRIDGE_FORWARDDELAY=4\n"
            "BRIDGE_HELLOTIME=2.5\nBRIDGE_AGEINGTIME=300\n"
            "BRIDGE_PORTS='eth0 eth1'\nBRIDGE_PORTPRIORITIES='10 -'\nBRIDGE_PATHCOSTS='- 100 7'\n",
        )
        assert isinstance(link, Bridge)
        br = link.bridge
        assert br.stp is True
        assert br.priority == 4096
        assert (br.forward_delay, br.hello_time, br.ageing_time) == (4.0, 2.5, 300.0)
        assert [(p.name, p.priority, p.path_cost) for p in link.ports] == [("eth0", 10, None), ("eth1", None, 100)]

    @pytest.mark.parametrize("value, expected", [("off", False), ("NO", False), ("yes", True)])
    def test_stp(self, value, expected):
        link, _ = recognize("br0", f"BRIDGE=yes\nBRIDGE_STP={value}\n")
        assert link.bridge.stp is expected

    def test_unset_values_stay_unset(self):
        link, _ = recognize("br0", "BRIDGE=yes\n")
        assert link.bridge.stp is None
        assert link.bridge.max_age is None
        assert link.ports == []

    def test_leading_zero_integers_are_octal(self):
        link, _ = recognize(
            "br0", "BRIDGE=yes\nBRIDGE_PRIORITY=0100\nBRIDGE_PORTS='eth0 eth1'\nBRIDGE_PORTPRIORITIES='010 -'\n"
        )
        assert link.bridge.priority == 64
        assert [p.priority for p in link.ports] == [8, None]

    @pytest.mark.parametrize(
        "extra",
        [
            "BRIDGE_STP=maybe",
            "BRIDGE_PRIORITY=high",
            "BRIDGE_PRIORITY=\u0663",
            "BRIDGE_MAXAGE=nan",
            "BRIDGE_PORTS=eth0\nBRIDGE_PATHCOSTS=x",
        ],
    )
    def test_malformed(self, extra):
        with pytest.raises(MalformedBridgeOption):
            recognize("br0", f"BRIDGE=yes\n{extra}\n")

    def test_out_of_range(self):
        with pytest.raises(BridgeValidationError):
            recognize("br0", "BRIDGE=yes\nBRIDGE_FORWARDDELAY=40\n")

    def test_bad_port_name(self):
        with pytest.raises(BridgeValidationError):
            recognize("br0", "BRIDGE=yes\nBRIDGE_PORTS='eth0 eth/1'\n")


@pytest.mark.unit
class TestVlan:
    @pytest.mark.parametrize("name, tag", [("eth0.100", 100), ("vlan50", 50), ("eth0.4094", 4094)])
    def test_tag_from_name(self, name, tag):
        link, _ = recognize(name, "ETHERDEVICE=eth0\n")
        assert isinstance(link, Vlan)
        assert (link.parent_device, link.tag) == ("eth0", tag)

    def test_vlan_id_wins(self):
        link, _ = recognize("vlan50", "ETHERDEVICE=eth0\nVLAN_ID=7\n")
        assert link.tag == 7

    def test_out_of_range(self):
        with pytest.raises(InvalidVlanTag) as ei:
            recognize("eth0.4095", "ETHERDEVICE=eth0\n")
        assert ei.value.context["source"] == "the interface name"

    @pytest.mark.parametrize("name", ["myvlan", "eth0.abc"])
    def test_no_tag(self, name):
        with pytest.raises(InvalidVlanTag):
            recognize(name, "ETHERDEVICE=eth0\n")

    def test_self_reference(self):
        with pytest.raises(VlanSelfReference):
            recognize("eth0", "ETHERDEVICE=eth0\nVLAN_ID=5\n")

    def test_helpers(self):
        assert vlan_tag_from_name("bond0.12") == "12"
        assert vlan_tag_from_name("vlan") == ""
        assert parse_vlan_tag("0") == 0
        with pytest.raises(InvalidVlanTag):
            parse_vlan_tag("-1")
        with pytest.raises(InvalidVlanTag):
            parse_vlan_tag(None)


@pytest.mark.unit
class TestOtherTypes:
    def test_wireless_warns(self, caplog):
        with caplog.at_level(logging.WARNING, logger="netcompat.test.linktypes"):
            link, ifc = recognize("wlan0", "WIRELESS_ESSID=home\n")
        assert isinstance(link, Wireless)
        assert link.essid == "home"
        assert ifc.warnings == ["ifcfg-wlan0: conversion of wireless interfaces not yet supported"]
        assert any("wireless" in r.getMessage() for r in caplog.records)

    @pytest.mark.parametrize(
        "kind, expected",
        [("tap", LinkType.TAP), ("tun", LinkType.TUN), ("sit", LinkType.SIT), ("gre", LinkType.GRE), ("ipip", LinkType.TUNNEL), ("ip6tnl", LinkType.TUNNEL6)],
    )
    def test_tunnel(self, kind, expected):
        link, _ = recognize("tun0", f"TUNNEL={kind}\n")
        assert isinstance(link, Tunnel)
        assert link.link_type is expected

    def test_unknown_tunnel_falls_through_to_ethernet(self):
        link, _ = recognize("eth0", "TUNNEL=vxlan\nETHTOOL_OPTIONS='speed 1000'\n")
        assert isinstance(link, Ethernet)

    def test_ethernet_settings(self):
        link, ifc = recognize("eth0", "ETHTOOL_OPTIONS='speed 1000 duplex full autoneg off'\n")
        assert link.ethtool_options == {"speed": "1000", "duplex": "full", "autoneg": "off"}
        assert link.raw is None
        assert ifc.warnings == []

    def test_ethernet_raw(self):
        link, ifc = recognize("eth0", "ETHTOOL_OPTIONS='-K iface tso off'\n")
        assert link.ethtool_options == {}
        assert link.raw == "-K iface tso off"
        assert len(ifc.warnings) == 1

    def test_parse_ethtool_odd_tokens(self):
        assert parse_ethtool_options("speed") == ({}, "speed")

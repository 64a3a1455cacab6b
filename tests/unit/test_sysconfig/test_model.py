# SPDX-License-Identifier: LGPL-3.0-or-later
"""Control policy table and the serialized interface model."""
from __future__ import annotations

import logging

import pytest

from netcompat.netinfo.address import Address
from netcompat.sysconfig.model import (
    DEFAULT_IFUP_TIMEOUT,
    INFINITE_TIMEOUT,
    ControlPolicy,
    InterfaceConfig,
    Vlan,
)


@pytest.mark.unit
class TestStartmode:
    @pytest.mark.parametrize("mode", ["auto", "boot", "onboot", "on"])
    def test_boot_modes(self, mode):
        cp = ControlPolicy.from_startmode(mode)
        assert (cp.link_class, cp.mandatory, cp.persistent) == ("boot", False, True)

    def test_hotplug(self):
        cp = ControlPolicy.from_startmode("hotplug")
        assert (cp.link_class, cp.mandatory, cp.persistent) == ("boot", False, False)

    def test_ifplugd(self):
        cp = ControlPolicy.from_startmode("ifplugd")
        assert (cp.link_class, cp.mandatory) == ("ignore", False)

    def test_nfsroot(self):
        cp = ControlPolicy.from_startmode("nfsroot")
        assert cp.require_link == "localfs"
        assert cp.mandatory and cp.persistent
        assert cp.infinite_timeout
        assert cp.to_dict()["timeout"] == "infinite"

    def test_off(self):
        cp = ControlPolicy.from_startmode("off")
        assert (cp.link_class, cp.timeout) == ("off", 0)

    @pytest.mark.parametrize("mode", [None, "", "manual", "whenever"])
    def test_manual_fallback(self, mode):
        cp = ControlPolicy.from_startmode(mode)
        assert cp.mode == "manual"
        assert cp.link_class is None
        assert cp.mandatory
        assert cp.timeout == DEFAULT_IFUP_TIMEOUT

    def test_case_insensitive(self):
        assert ControlPolicy.from_startmode("NFSRoot").timeout == INFINITE_TIMEOUT


@pytest.mark.unit
class TestInterfaceConfig:
    def test_warn_records_and_logs(self, caplog):
        ifc = InterfaceConfig(name="eth0")
        logger = logging.getLogger("netcompat.test.model")
        with caplog.at_level(logging.WARNING, logger="netcompat.test.model"):
            ifc.warn(logger, "%s: odd value %r", "eth0", "x")
        assert ifc.warnings == ["eth0: odd value 'x'"]
        assert caplog.records[-1].getMessage() == "eth0: odd value 'x'"

    def test_to_dict(self):
        ifc = InterfaceConfig(name="eth0.5", link=Vlan(parent_device="eth0", tag=5), mtu=1400)
        ifc.addresses.append(Address.parse("10.0.0.1/24"))
        d = ifc.to_dict()

        assert d["type"] == "vlan"
        assert d["vlan"] == {"device": "eth0", "tag": 5}
        assert d["mtu"] == 1400
        assert d["addresses"] == [{"family": "ipv4", "local": "10.0.0.1/24"}]
        assert d["dhcp4"] == {"enabled": False}
        assert "warnings" not in d
        assert "autoip4" not in d

    def test_unknown_link_has_no_section(self):
        d = InterfaceConfig(name="eth0").to_dict()
        assert d["type"] == "unknown"
        assert "unknown" not in d

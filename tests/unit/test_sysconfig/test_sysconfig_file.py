# SPDX-License-Identifier: LGPL-3.0-or-later
"""KEY=value file parsing and typed lookups."""
from __future__ import annotations

import pytest

from netcompat.core.exceptions import UnreadableConfigFile
from netcompat.sysconfig.sysconfig import Sysconfig


@pytest.mark.unit
class TestParse:
    def test_quotes_and_comments(self):
        sc = Sysconfig.parse(
            "\n".join(
                [
                    "# comment",
                    "BOOTPROTO='dhcp'",
                    'NAME="Ethernet # 1"',
                    "STARTMODE=auto # inline",
                    'MTU="9000" # trailing',
                    "not an assignment",
                    "  ",
                ]
            )
        )
        assert sc.get("BOOTPROTO") == "dhcp"
        assert sc.get("NAME") == "Ethernet # 1"
        assert sc.get("STARTMODE") == "auto"
        assert sc.get("MTU") == "9000"
        assert len(sc) == 4

    def test_keys_case_insensitive(self):
        sc = Sysconfig.parse("bootproto=static\n")
        assert "BOOTPROTO" in sc
        assert sc.get_value("BootProto") == "static"

    def test_duplicate_key_last_wins_with_warning(self):
        sc = Sysconfig.parse("MTU=1500\nIPADDR=10.0.0.1\nMTU=9000\n", pathname="ifcfg-eth0")
        assert sc.get("MTU") == "9000"
        assert sc.duplicates == {"MTU": [1, 3]}
        assert sc.warnings == ["ifcfg-eth0: duplicate key MTU on lines [1, 3] (last one wins)"]

    def test_read_missing_file(self, tmp_path):
        with pytest.raises(UnreadableConfigFile):
            Sysconfig.read(tmp_path / "nope")


@pytest.mark.unit
class TestLookups:
    def test_empty_value_is_unset(self):
        sc = Sysconfig.parse("ETHERDEVICE=''\n")
        assert sc.has("ETHERDEVICE")
        assert sc.get_value("ETHERDEVICE") is None

    @pytest.mark.parametrize("value, expected", [("yes", True), ("ON", True), ("1", True), ("no", False), ("0", False), ("maybe", False)])
    def test_boolean(self, value, expected):
        assert Sysconfig.parse(f"BRIDGE={value}\n").get_boolean("BRIDGE") is expected

    def test_integer(self):
        sc = Sysconfig.parse("A=42\nB=0x10\nC=010\nD=12abc\nE=\u0663\n")
        assert sc.get_integer("A") == 42
        assert sc.get_integer("B") == 16
        assert sc.get_integer("C") == 8
        assert sc.get_integer("MISSING") is None
        with pytest.raises(ValueError):
            sc.get_integer("D")
        with pytest.raises(ValueError):
            sc.get_integer("E")

    def test_indexed_in_file_order_skipping_empty(self):
        sc = Sysconfig.parse("IPADDR=10.0.0.1/24\nIPADDR_1=''\nIPADDR_x=10.0.1.1/24\nIPADDR2=10.0.2.1/24\nNETMASK=255.0.0.0\n")
        assert sc.indexed("IPADDR") == [("", "10.0.0.1/24"), ("_X", "10.0.1.1/24"), ("2", "10.0.2.1/24")]
        assert sc.find_matching("ipaddr") == ["IPADDR", "IPADDR_1", "IPADDR_X", "IPADDR2"]

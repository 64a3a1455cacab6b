# SPDX-License-Identifier: LGPL-3.0-or-later
"""Address parsing: prefix sources, netmasks, shorthand and hardware addresses."""
from __future__ import annotations

import ipaddress

import pytest

from netcompat.core.exceptions import MalformedAddress, MalformedNetmask, MalformedPrefix
from netcompat.netinfo.address import (
    Address,
    address_list_dedup,
    address_list_find,
    netmask_bits,
    parse_address,
    parse_hwaddr,
    parse_prefix,
    prefix_match,
)
from netcompat.netinfo.names import AddrFamily

ip = ipaddress.ip_address


@pytest.mark.unit
class TestParseAddress:
    def test_prefix_in_text_wins(self):
        family, addr, plen = parse_address("10.0.0.1/16", prefixlen="24", netmask="255.0.0.0")
        assert (family, addr, plen) == (AddrFamily.IPV4, ip("10.0.0.1"), 16)

    def test_prefixlen_variable_before_netmask(self):
        assert parse_address("10.0.0.1", prefixlen="24", netmask="255.0.0.0")[2] == 24

    def test_netmask_bits_counted(self):
        assert parse_address("10.0.0.1", netmask="255.255.255.0")[2] == 24

    def test_netmask_ignored_for_ipv6(self):
        assert parse_address("fe80::1", netmask="255.255.255.0")[2] == 128

    def test_family_width_default(self):
        assert parse_address("192.168.1.5")[2] == 32
        assert parse_address("2001:db8::1")[2] == 128

    def test_malformed_address(self):
        with pytest.raises(MalformedAddress):
            parse_address("10.0.0.300")

    def test_malformed_netmask(self):
        with pytest.raises(MalformedNetmask):
            parse_address("10.0.0.1", netmask="255.255.x.0")

    def test_netmask_wrong_family(self):
        with pytest.raises(MalformedNetmask):
            parse_address("10.0.0.1", netmask="ffff::")

    @pytest.mark.parametrize("plen", ["33", "abc", "-1", "", "\u00b2", "\u0663"])
    def test_malformed_prefix(self, plen):
        with pytest.raises(MalformedPrefix):
            parse_prefix(f"10.0.0.1/{plen}")

    def test_non_ascii_digit_prefixlen_variable(self):
        with pytest.raises(MalformedPrefix):
            parse_address("10.0.0.1", prefixlen="\u00b2")

    def test_ipv6_prefix_up_to_128(self):
        assert parse_prefix("2001:db8::/64") == (ip("2001:db8::"), 64)
        with pytest.raises(MalformedPrefix):
            parse_prefix("2001:db8::/129")

    def test_v4_shorthand_with_prefix(self):
        assert parse_prefix("127/8") == (ip("127.0.0.0"), 8)
        assert parse_prefix("10.1/16") == (ip("10.1.0.0"), 16)

    def test_shorthand_needs_a_prefix(self):
        with pytest.raises(MalformedAddress):
            parse_prefix("127")


@pytest.mark.unit
class TestNetmaskBits:
    def test_contiguous(self):
        assert netmask_bits(ip("255.255.255.0")) == 24
        assert netmask_bits(ip("0.0.0.0")) == 0
        assert netmask_bits(ip("255.255.255.255")) == 32

    def test_non_contiguous_counts_leading_run(self):
        assert netmask_bits(ip("255.0.255.0")) == 8


@pytest.mark.unit
class TestPrefixMatch:
    def test_match(self):
        assert prefix_match(24, ip("10.0.0.1"), ip("10.0.0.200"))
        assert not prefix_match(24, ip("10.0.0.1"), ip("10.0.1.1"))

    def test_family_mismatch(self):
        assert not prefix_match(0, ip("10.0.0.1"), ip("::1"))

    def test_zero_prefix_matches_everything(self):
        assert prefix_match(0, ip("1.2.3.4"), ip("200.1.1.1"))


@pytest.mark.unit
class TestAddressRecord:
    def test_can_reach_subnet(self):
        ap = Address.parse("192.168.1.10/24")
        assert ap.can_reach(ip("192.168.1.1"))
        assert not ap.can_reach(ip("192.168.2.1"))
        assert not ap.can_reach(ip("fe80::1"))

    def test_host_address_with_peer_reaches_only_peer(self):
        ap = Address.parse("10.0.0.1/32")
        ap.peer = ip("10.0.0.2")
        assert ap.can_reach(ip("10.0.0.2"))
        assert not ap.can_reach(ip("10.0.0.3"))

    def test_subnet_address_with_peer_still_reaches_subnet(self):
        ap = Address.parse("10.0.0.1/24")
        ap.peer = ip("10.1.0.2")
        assert ap.can_reach(ip("10.1.0.2"))
        assert ap.can_reach(ip("10.0.0.254"))
        assert not ap.can_reach(ip("10.2.0.1"))

    def test_expiry(self):
        ap = Address.parse("10.0.0.1/8")
        assert not ap.is_expired(now=1e12)
        ap.expires = 100.0
        assert ap.is_expired(now=100.0)
        assert not ap.is_expired(now=99.0)

    def test_dedup_collapses_duplicates_in_order(self):
        a = Address.parse("10.0.0.1/24")
        b = Address.parse("10.0.0.2/24")
        dup = Address.parse("10.0.0.1/24")
        other_plen = Address.parse("10.0.0.1/16")

        out = address_list_dedup([a, b, dup, other_plen])
        assert out == [a, b, other_plen]
        assert out[0] is a

    def test_find(self):
        a = Address.parse("10.0.0.1/24")
        assert address_list_find([a], ip("10.0.0.1")) is a
        assert address_list_find([a], ip("10.0.0.9")) is None

    def test_to_dict(self):
        ap = Address.parse("10.0.0.1", netmask="255.255.255.0")
        ap.broadcast = ip("10.0.0.255")
        assert ap.to_dict() == {"family": "ipv4", "local": "10.0.0.1/24", "broadcast": "10.0.0.255"}


@pytest.mark.unit
class TestHwaddr:
    def test_normalized(self):
        assert parse_hwaddr("00:1B:21:a:0b:0C") == "00:1b:21:0a:0b:0c"

    @pytest.mark.parametrize("text", ["", "00-11-22-33-44-55", "0011.2233.4455", "zz:11"])
    def test_malformed(self, text):
        with pytest.raises(MalformedAddress):
            parse_hwaddr(text)

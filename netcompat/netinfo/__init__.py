# netcompat/netinfo/__init__.py
from .address import Address, parse_address
from .lease import Lease
from .names import AddrconfMode, AddrconfState, AddrFamily, LinkType
from .netdev import NetConfig, NetDev, check_ifname, valid_ifname
from .route import NextHop, Route

__all__ = [
    "Address",
    "parse_address",
    "Lease",
    "AddrconfMode",
    "AddrconfState",
    "AddrFamily",
    "LinkType",
    "NetConfig",
    "NetDev",
    "check_ifname",
    "valid_ifname",
    "NextHop",
    "Route",
]

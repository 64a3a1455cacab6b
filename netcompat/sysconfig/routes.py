# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/sysconfig/routes.py
"""
Parser for sysconfig route files (routes, ifroute-<name>).

Each line reads:

    destination  gateway  netmask  device  type

Text after '#' is a comment; missing trailing columns and "-" mean "not set";
columns past the type are ignored. A file either parses completely or not at
all: the first bad line raises RouteFileParseError and no routes are returned.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..core.exceptions import NetcompatError, RouteFileParseError
from ..core.logger import Log
from ..core.logging_utils import safe_logger
from ..netinfo.address import parse_ip, parse_netmask, parse_prefix
from ..netinfo.names import AddrFamily
from ..netinfo.route import Route


def _unset(field: Optional[str]) -> bool:
    return field is None or field == "-"


def parse_route_line(line: str) -> Optional[Route]:
    """
    Parse one line; returns None for blank/comment lines.

    Raises ValueError or a NetcompatError parse error on malformed input.
    """
    fields = line.split("#", 1)[0].split()
    if not fields:
        return None
    fields += [None] * (5 - len(fields))  # type: ignore[list-item]
    dest, gw, mask, ifname, _type = fields[:5]

    gateway = None if _unset(gw) else parse_ip(gw)

    if dest == "default":
        if gateway is None:
            raise ValueError("default route without a gateway")
        destination = None
        prefixlen = 0
    else:
        destination, prefixlen = parse_prefix(dest)
        if prefixlen is None:
            family = AddrFamily.of(destination)
            prefixlen = family.width if _unset(mask) else parse_netmask(mask, family)

    device = None if _unset(ifname) else ifname
    return Route.new(prefixlen, destination=destination, gateway=gateway, device=device)


def parse_routes(lines: Union[str, Iterable[str]], filename: str = "<routes>") -> List[Route]:
    """Parse route file content; all-or-nothing."""
    if isinstance(lines, str):
        lines = lines.splitlines()

    routes: List[Route] = []
    for lineno, line in enumerate(lines, start=1):
        try:
            rp = parse_route_line(line)
        except (ValueError, NetcompatError) as e:
            raise RouteFileParseError(
                msg=f"{filename}:{lineno}: cannot parse route {line.strip()!r}: {e}",
                cause=e,
                context={"file": filename, "line": lineno},
            )
        if rp is not None:
            routes.append(rp)
    return routes


def read_routes(path: Union[str, Path], logger: Optional[logging.Logger] = None) -> List[Route]:
    """Read and parse a route file; an unreadable file is a RouteFileParseError."""
    log = safe_logger(logger)
    p = Path(path)
    try:
        text = p.read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise RouteFileParseError(
            msg=f"unable to open {p}: {e.strerror or e}",
            cause=e,
            context={"file": str(p)},
        )
    routes = parse_routes(text, filename=str(p))
    Log.trace(log, "%s: %d route(s)", p, len(routes))
    return routes


__all__ = ["parse_route_line", "parse_routes", "read_routes"]

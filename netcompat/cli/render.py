# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/cli/render.py
"""
Output of translated interfaces: a rich table for people, JSON/YAML for tools.
"""
from __future__ import annotations

import json
from typing import IO, Any, Dict, List, Optional

import yaml
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from ..sysconfig.model import InterfaceConfig

FORMATS = ("table", "json", "yaml")


def _addrconf_summary(ifc: InterfaceConfig) -> str:
    parts: List[str] = []
    if ifc.dhcp4.enabled:
        parts.append("dhcp4")
    if ifc.dhcp6.enabled:
        parts.append("dhcp6")
    if ifc.autoip4:
        parts.append("autoip")
    if ifc.addresses:
        parts.append("static")
    return "+".join(parts) or "-"


def _link_summary(ifc: InterfaceConfig) -> str:
    link = ifc.link.to_dict()
    if "slaves" in link:
        return f"{link.get('mode')} [{' '.join(link['slaves'])}]"
    if "ports" in link:
        return " ".join(p["device"] for p in link["ports"]) or "-"
    if "tag" in link:
        return f"{link['device']} tag {link['tag']}"
    if "essid" in link:
        return f"essid {link['essid']}"
    return ""


def build_table(interfaces: List[InterfaceConfig]) -> Table:
    table = Table(show_header=True, header_style="bold")
    table.add_column("Interface", style="cyan")
    table.add_column("Type")
    table.add_column("Start")
    table.add_column("Addrconf")
    table.add_column("Addresses")
    table.add_column("Routes")
    table.add_column("Link")

    for ifc in interfaces:
        cells = (
            ifc.name,
            ifc.link_type.value,
            ifc.control.mode,
            _addrconf_summary(ifc),
            "\n".join(str(ap) for ap in ifc.addresses) or "-",
            "\n".join(str(rp) for rp in ifc.routes) or "-",
            _link_summary(ifc) or "-",
        )
        table.add_row(*(escape(cell) for cell in cells))
    return table


def to_documents(interfaces: List[InterfaceConfig]) -> List[Dict[str, Any]]:
    return [ifc.to_dict() for ifc in interfaces]


def render(interfaces: List[InterfaceConfig], fmt: str = "table", stream: Optional[IO[str]] = None) -> None:
    if fmt == "json":
        out = json.dumps(to_documents(interfaces), indent=2, sort_keys=False)
        print(out, file=stream)
    elif fmt == "yaml":
        out = yaml.safe_dump(to_documents(interfaces), sort_keys=False, default_flow_style=False)
        print(out, end="", file=stream)
    else:
        Console(file=stream).print(build_table(interfaces))
        err = Console(stderr=True) if stream is None else Console(file=stream)
        for ifc in interfaces:
            for w in ifc.warnings:
                err.print(f"[yellow]warning:[/yellow] {escape(ifc.name)}: {escape(w)}")


__all__ = ["FORMATS", "build_table", "to_documents", "render"]

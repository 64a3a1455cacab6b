# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/sysconfig/core.py
"""
Sysconfig translator orchestrator.

Turns a sysconfig network directory (or a single ifcfg file) into a list of
InterfaceConfig records. The pipeline for a directory:

1. Defaults: load `config`, `dhcp` and `routes` once for the directory
2. Discovery: list the ifcfg-* candidates (backup files skipped)
3. Translation: one InterfaceConfig per file
   - control policy (STARTMODE), MTU, LLADDR
   - link type (first recognizer that matches)
   - BOOTPROTO: DHCP options, static addresses and routes
4. Release the defaults, whatever happened

The scan is all-or-nothing: the first file that fails aborts it and no
partial result is returned.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..core.exceptions import MalformedAddress, MissingOrBlacklistedFile, NetcompatError
from ..core.logger import Log
from ..core.logging_utils import log_step, plural, safe_logger
from ..netinfo.address import parse_hwaddr
from ..netinfo.netdev import check_ifname
from .addrconf import apply_bootproto
from .files import (
    DEFAULT_SYSCONFIG_DIR,
    IFCFG_PREFIX,
    check_config_file,
    ifname_from_filename,
    scan_ifcfg_files,
    valid_suffix,
)
from .globals import GlobalDefaults, global_defaults
from .linktypes import recognize_link
from .model import ControlPolicy, InterfaceConfig
from .sysconfig import Sysconfig

PathLike = Union[str, Path]


class SysconfigTranslator:
    """
    Translate ifcfg files into InterfaceConfig records.

    Helpers never keep state between files; the directory defaults are passed
    explicitly to every translation.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = safe_logger(logger)

    # ---------------------------
    # Entry points
    # ---------------------------

    def get_interfaces(self, path: Optional[PathLike] = None) -> List[InterfaceConfig]:
        """
        Translate a directory (every ifcfg-* in it) or a single ifcfg file.

        An empty path means the default directory. For a single file the
        defaults come from the file's directory.
        """
        p = Path(path) if path else Path(DEFAULT_SYSCONFIG_DIR)

        if p.is_dir():
            with log_step(self.logger, f"Reading {p}"):
                return self._read_directory(p)

        config = check_config_file(p)
        with global_defaults(config.parent, logger=self.logger) as defaults:
            return [self.read_interface(config, defaults)]

    def _read_directory(self, directory: Path) -> List[InterfaceConfig]:
        result: List[InterfaceConfig] = []
        with global_defaults(directory, logger=self.logger) as defaults:
            files = scan_ifcfg_files(directory, logger=self.logger)
            if not files:
                raise MissingOrBlacklistedFile(
                    msg=f"no {IFCFG_PREFIX}* files found in {directory}",
                    context={"file": str(directory)},
                )
            for config in files:
                result.append(self.read_interface(config, defaults, ifname=config.name[len(IFCFG_PREFIX):]))
        self.logger.info("Translated %s from %s", plural(len(result), "interface"), directory)
        return result

    def read_interface(
        self,
        path: PathLike,
        defaults: Optional[GlobalDefaults] = None,
        *,
        ifname: Optional[str] = None,
    ) -> InterfaceConfig:
        """
        Translate one ifcfg file.

        Without an explicit ifname the name comes from the file name, which
        must then carry the ifcfg- prefix and no backup suffix.
        """
        p = Path(path)
        try:
            if ifname is None:
                if not valid_suffix(p.name):
                    raise MissingOrBlacklistedFile(
                        msg=f"rejecting blacklisted {IFCFG_PREFIX}file {p}",
                        context={"file": str(p)},
                    )
                ifname = ifname_from_filename(p)
            check_ifname(ifname)

            sc = Sysconfig.read(p)
            return self.translate(sc, ifname, defaults if defaults is not None else GlobalDefaults())
        except NetcompatError as e:
            raise e.with_context(ifname=ifname, file=str(p))

    # ---------------------------
    # Translation of one file
    # ---------------------------

    def translate(self, sc: Sysconfig, ifname: str, defaults: GlobalDefaults) -> InterfaceConfig:
        """Build the InterfaceConfig for an already parsed file."""
        log = Log.bind(self.logger, ifname=ifname)
        ifc = InterfaceConfig(name=ifname, source=sc.pathname)
        for w in sc.warnings:
            ifc.warn(log, w)

        ifc.control = ControlPolicy.from_startmode(sc.get_value("STARTMODE"))
        self._read_link_settings(sc, ifc, log)
        ifc.link = recognize_link(sc, ifc, log)
        apply_bootproto(sc, ifc, defaults, log)

        Log.trace(
            log,
            "ifcfg-%s: %s, %s, %s",
            ifname,
            ifc.link_type,
            plural(len(ifc.addresses), "address", "es"),
            plural(len(ifc.routes), "route"),
        )
        return ifc

    def _read_link_settings(self, sc: Sysconfig, ifc: InterfaceConfig, log: logging.Logger) -> None:
        try:
            ifc.mtu = sc.get_integer("MTU")
        except ValueError:
            ifc.warn(log, "ifcfg-%s: cannot parse MTU=%r", ifc.name, sc.get_value("MTU"))

        value = sc.get_value("LLADDR")
        if value is not None:
            try:
                ifc.hwaddr = parse_hwaddr(value)
            except MalformedAddress:
                ifc.warn(log, "ifcfg-%s: cannot parse LLADDR=%r", ifc.name, value)


def get_interfaces(path: Optional[PathLike] = None, logger: Optional[logging.Logger] = None) -> List[InterfaceConfig]:
    return SysconfigTranslator(logger=logger).get_interfaces(path)


__all__ = ["SysconfigTranslator", "get_interfaces"]

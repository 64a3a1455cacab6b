# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/sysconfig/files.py
"""
Naming conventions of the sysconfig network directory.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Union

from ..core.exceptions import MissingOrBlacklistedFile, UnreadableConfigFile
from ..core.logging_utils import safe_logger

DEFAULT_SYSCONFIG_DIR = "/etc/sysconfig/network"

IFCFG_PREFIX = "ifcfg-"
ROUTES_PREFIX = "ifroute-"

GLOBAL_CONFIG = "config"
GLOBAL_DHCP = "dhcp"
GLOBAL_ROUTES = "routes"

# editor/package-manager leftovers that must never be read as configuration
BLACKLIST_SUFFIXES = (
    "~",
    ".old",
    ".bak",
    ".orig",
    ".scpmbackup",
    ".rpmnew",
    ".rpmsave",
    ".rpmorig",
)


def valid_suffix(filename: str) -> bool:
    return not filename.endswith(BLACKLIST_SUFFIXES)


def valid_prefix(filename: str) -> bool:
    return filename.startswith(IFCFG_PREFIX) and len(filename) > len(IFCFG_PREFIX)


def is_ifcfg_candidate(filename: str) -> bool:
    return valid_prefix(filename) and valid_suffix(filename)


def ifname_from_filename(path: Union[str, Path]) -> str:
    """"ifcfg-eth0" -> "eth0"."""
    name = Path(path).name
    if not valid_prefix(name):
        raise MissingOrBlacklistedFile(
            msg=f"{name} is not an {IFCFG_PREFIX}<name> file",
            context={"file": str(path)},
        )
    return name[len(IFCFG_PREFIX):]


def routes_path_for(config_path: Union[str, Path], ifname: Optional[str] = None) -> Path:
    """ifroute-<name> next to the config file; the name defaults to the one in ifcfg-<name>."""
    p = Path(config_path)
    return p.with_name(ROUTES_PREFIX + (ifname or ifname_from_filename(p)))


def check_config_file(path: Union[str, Path]) -> Path:
    """Single-file mode gate: the file must exist and not carry a backup suffix."""
    p = Path(path)
    if not p.is_file():
        raise MissingOrBlacklistedFile(msg=f"configuration file {p} does not exist", context={"file": str(p)})
    if not valid_suffix(p.name):
        raise MissingOrBlacklistedFile(
            msg=f"ignoring blacklisted configuration file {p}",
            context={"file": str(p)},
        )
    return p


def scan_ifcfg_files(directory: Union[str, Path], logger: Optional[logging.Logger] = None) -> List[Path]:
    """Candidate ifcfg-* files in directory, sorted by name."""
    log = safe_logger(logger)
    d = Path(directory)
    try:
        names = sorted(entry.name for entry in d.iterdir())
    except OSError as e:
        raise UnreadableConfigFile(
            msg=f"unable to scan {d}: {e.strerror or e}",
            cause=e,
            context={"file": str(d)},
        )

    out: List[Path] = []
    for name in names:
        if not valid_prefix(name):
            continue
        if not valid_suffix(name):
            log.debug("Skipping blacklisted file %s", name)
            continue
        p = d / name
        if p.is_file():
            out.append(p)
    return out


__all__ = [
    "DEFAULT_SYSCONFIG_DIR",
    "IFCFG_PREFIX",
    "ROUTES_PREFIX",
    "GLOBAL_CONFIG",
    "GLOBAL_DHCP",
    "GLOBAL_ROUTES",
    "BLACKLIST_SUFFIXES",
    "valid_suffix",
    "valid_prefix",
    "is_ifcfg_candidate",
    "ifname_from_filename",
    "routes_path_for",
    "check_config_file",
    "scan_ifcfg_files",
]

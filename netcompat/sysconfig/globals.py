# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/sysconfig/globals.py
"""
Directory-wide defaults: the `config`, `dhcp` and `routes` files.

All three are optional. They are loaded once per translation run and
released when the run ends, whichever way it ends.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Generator, List, Optional, Union

from ..core.logging_utils import safe_logger
from ..netinfo.route import Route
from .files import GLOBAL_CONFIG, GLOBAL_DHCP, GLOBAL_ROUTES
from .routes import read_routes
from .sysconfig import Sysconfig


@dataclass
class GlobalDefaults:
    directory: Optional[str] = None
    config: Optional[Sysconfig] = None
    dhcp: Optional[Sysconfig] = None
    routes: List[Route] = field(default_factory=list)
    released: bool = False

    @classmethod
    def load(cls, directory: Union[str, Path], logger: Optional[logging.Logger] = None) -> "GlobalDefaults":
        """
        Load the defaults of directory.

        Parse failures propagate (UnreadableConfigFile, RouteFileParseError);
        a missing file is simply absent.
        """
        log = safe_logger(logger)
        d = Path(directory)
        defaults = cls(directory=str(d))

        p = d / GLOBAL_CONFIG
        if p.is_file():
            defaults.config = Sysconfig.read(p)
            log.debug("Loaded generic defaults from %s", p)

        p = d / GLOBAL_DHCP
        if p.is_file():
            defaults.dhcp = Sysconfig.read(p)
            log.debug("Loaded DHCP defaults from %s", p)

        p = d / GLOBAL_ROUTES
        if p.is_file():
            defaults.routes = read_routes(p, logger=log)
            log.debug("Loaded %d global route(s) from %s", len(defaults.routes), p)

        return defaults

    def release(self) -> None:
        self.config = None
        self.dhcp = None
        self.routes = []
        self.released = True


@contextmanager
def global_defaults(
    directory: Optional[Union[str, Path]],
    logger: Optional[logging.Logger] = None,
) -> Generator[GlobalDefaults, None, None]:
    """
    Scope the defaults of directory to a with-block.

    directory=None yields empty defaults.
    """
    defaults = GlobalDefaults() if directory is None else GlobalDefaults.load(directory, logger=logger)
    try:
        yield defaults
    finally:
        defaults.release()


__all__ = ["GlobalDefaults", "global_defaults"]

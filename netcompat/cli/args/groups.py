# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# netcompat/cli/args/groups.py
from __future__ import annotations

import argparse

from ...sysconfig.files import DEFAULT_SYSCONFIG_DIR
from ..render import FORMATS


def _add_global_config_logging(p: argparse.ArgumentParser) -> None:
    # ------------------------------------------------------------------
    # Global config/logging (two-phase parse relies on these)
    # ------------------------------------------------------------------
    from ... import __version__

    p.add_argument(
        "--config",
        action="append",
        default=[],
        help="YAML/JSON config file (repeatable; later overrides earlier).",
    )
    p.add_argument("--dump-config", action="store_true", help="Print merged config and exit.")
    p.add_argument("--version", action="version", version=__version__)
    p.add_argument("-v", "--verbose", action="count", default=0, help="Verbosity: -v, -vv, -vvv")
    p.add_argument("-q", "--quiet", action="count", default=0, help="Only report errors.")
    p.add_argument("--log-file", dest="log_file", default=None, help="Write logs to file.")
    p.add_argument("--json-logs", dest="json_logs", action="store_true", help="Emit logs as NDJSON.")


def _add_input_paths(p: argparse.ArgumentParser) -> None:
    p.add_argument(
        "path",
        nargs="?",
        default=DEFAULT_SYSCONFIG_DIR,
        help="sysconfig network directory, or a single ifcfg-<name> file.",
    )


def _add_output(p: argparse.ArgumentParser) -> None:
    p.add_argument("--format", dest="format", default="table", choices=FORMATS, help="Output format.")
    p.add_argument(
        "--interface",
        dest="interface",
        action="append",
        default=None,
        help="Only show this interface (repeatable).",
    )

# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# netcompat/cli/args/__init__.py
"""
Argument parser modules for the netcompat CLI.
"""
from __future__ import annotations

from .builder import HelpFormatter, _build_epilog
from .groups import _add_global_config_logging, _add_input_paths, _add_output
from .parser import build_parser, parse_args_with_config

__all__ = [
    "HelpFormatter",
    "_build_epilog",
    "_add_global_config_logging",
    "_add_input_paths",
    "_add_output",
    "build_parser",
    "parse_args_with_config",
]

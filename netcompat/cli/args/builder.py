# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
# netcompat/cli/args/builder.py
from __future__ import annotations

import argparse

from ...core.logger import c

YAML_EXAMPLE = """\
  # netcompat.yaml
  path: /etc/sysconfig/network
  format: json
  interface: [eth0, br0]
  verbose: 1
"""


class HelpFormatter(argparse.RawDescriptionHelpFormatter, argparse.ArgumentDefaultsHelpFormatter):
    """Combines raw description formatting with default value display in help."""


def _build_epilog() -> str:
    return c("YAML example:\n", "cyan", ["bold"]) + c(YAML_EXAMPLE, "cyan")

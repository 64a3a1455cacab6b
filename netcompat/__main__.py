# SPDX-License-Identifier: LGPL-3.0-or-later
#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import sys
import traceback
from typing import List, Optional, Sequence

from .cli.args.parser import parse_args_with_config
from .cli.render import render
from .core.exceptions import Fatal, NetcompatError, format_exception_for_cli
from .core.logger import Log
from .sysconfig.core import SysconfigTranslator
from .sysconfig.model import InterfaceConfig


def _print_stderr(msg: str) -> None:
    print(msg, file=sys.stderr)


def _safe_log(logger, level: str, msg: str) -> None:
    """
    Best-effort logging without assuming logger exists or has a given method.
    """
    if logger is None:
        _print_stderr(msg)
        return

    fn = getattr(logger, level, None)
    if callable(fn):
        fn(msg)
    else:
        _print_stderr(msg)


def _select(interfaces: List[InterfaceConfig], names: Optional[Sequence[str]]) -> List[InterfaceConfig]:
    if not names:
        return interfaces
    known = {ifc.name for ifc in interfaces}
    missing = [n for n in names if n not in known]
    if missing:
        raise Fatal(code=2, msg=f"no configuration for interface(s): {', '.join(missing)}")
    return [ifc for ifc in interfaces if ifc.name in names]


def main(argv: Optional[Sequence[str]] = None) -> None:
    logger = None
    verbose = 0

    # Phase 1: parse (Fatal can happen here)
    try:
        args, _conf, logger = parse_args_with_config(argv)
        verbose = args.verbose
    except Fatal as e:
        _safe_log(logger, "error", f"💥 {format_exception_for_cli(e, verbose=1)}")
        raise SystemExit(e.code)
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        raise SystemExit(130)

    # Phase 2: translate and print
    try:
        Log.step(logger, f"Translating {args.path}", format=args.format)
        interfaces = SysconfigTranslator(logger=logger).get_interfaces(args.path)
        render(_select(interfaces, args.interface), args.format)
        rc = 0
    except NetcompatError as e:
        _safe_log(logger, "error", format_exception_for_cli(e, verbose=max(verbose, 1)))
        rc = e.code
    except KeyboardInterrupt:
        _safe_log(logger, "warning", "Interrupted by user (Ctrl+C).")
        rc = 130
    except Exception as e:
        # Hard guardrail: unexpected exceptions should not fail silently.
        _safe_log(logger, "error", f"💥 UNHANDLED {type(e).__name__}: {e}")
        _safe_log(logger, "debug", traceback.format_exc())
        rc = 1

    raise SystemExit(rc)


if __name__ == "__main__":
    main()

# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/config/config_loader.py
"""
YAML/JSON configuration files for the netcompat CLI.

Several files may be given; they are merged in order (later wins, nested
dicts merged key by key) and the result becomes the argparse defaults, so
explicit command line flags still override them.
"""
from __future__ import annotations

import argparse
import glob
import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List

import yaml

from ..core.exceptions import Fatal, wrap_fatal

# config keys the CLI understands; anything else is reported and ignored
KNOWN_KEYS = ("path", "format", "interface", "verbose", "log_file", "json_logs")


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in override.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _deep_merge(out[k], v)
        else:
            out[k] = v
    return out


class Config:
    @staticmethod
    def expand_configs(logger: logging.Logger, paths: Iterable[str]) -> List[Path]:
        """Expand ~ and glob patterns; a pattern matching nothing is an error."""
        out: List[Path] = []
        for raw in paths:
            pattern = str(Path(raw).expanduser())
            if glob.has_magic(pattern):
                matches = sorted(glob.glob(pattern))
                if not matches:
                    raise Fatal(code=2, msg=f"config pattern matched nothing: {raw}", context={"config": raw})
                out.extend(Path(m) for m in matches)
            else:
                out.append(Path(pattern))
        logger.debug("Config files: %s", [str(p) for p in out])
        return out

    @staticmethod
    def load_file(logger: logging.Logger, path: Path) -> Dict[str, Any]:
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise wrap_fatal(f"cannot read config {path}: {e.strerror or e}", e, code=2, config=str(path))

        try:
            if path.suffix.lower() == ".json":
                data = json.loads(text) if text.strip() else {}
            else:
                data = yaml.safe_load(text) or {}
        except (ValueError, yaml.YAMLError) as e:
            raise wrap_fatal(f"cannot parse config {path}: {e}", e, code=2, config=str(path))

        if not isinstance(data, dict):
            raise Fatal(
                code=2,
                msg=f"config {path} must be a mapping, got {type(data).__name__}",
                context={"config": str(path)},
            )
        logger.debug("Loaded config %s (%d keys)", path, len(data))
        return data

    @staticmethod
    def load_many(logger: logging.Logger, paths: Iterable[Path]) -> Dict[str, Any]:
        merged: Dict[str, Any] = {}
        for p in paths:
            merged = _deep_merge(merged, Config.load_file(logger, Path(p)))
        return merged

    @staticmethod
    def apply_as_defaults(logger: logging.Logger, parser: argparse.ArgumentParser, conf: Dict[str, Any]) -> None:
        """Make config values the parser defaults (only for destinations the parser knows)."""
        dests = {a.dest for a in parser._actions}
        defaults: Dict[str, Any] = {}
        for k, v in conf.items():
            key = str(k).replace("-", "_")
            if key in KNOWN_KEYS and key in dests:
                defaults[key] = v
            else:
                logger.warning("Ignoring unknown config key %r", k)
        if defaults:
            parser.set_defaults(**defaults)


__all__ = ["Config", "KNOWN_KEYS"]

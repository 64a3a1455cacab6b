# SPDX-License-Identifier: LGPL-3.0-or-later
# netcompat/sysconfig/sysconfig.py
"""
Reader for sysconfig style KEY=value files (ifcfg-*, dhcp, config).

- Parses KEY=VALUE (supports single/double quoted values).
- Keys are case-insensitive (stored upper-cased); the last assignment wins.
- Duplicated keys are recorded as warnings rather than silently dropped.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Tuple, Union

from ..core.exceptions import UnreadableConfigFile

_ASSIGN_RE = re.compile(r"\s*([A-Za-z0-9_]+)\s*=\s*(.*?)\s*")

_TRUE_WORDS = ("yes", "on", "true")


def parse_integer(text: str) -> int:
    """
    Parse a sysconfig integer: decimal, 0x hex, or leading-zero octal.

    Raises ValueError when text is not an integer.
    """
    s = text.strip()
    if not s.isascii():
        raise ValueError(f"invalid integer {text!r}")
    if len(s) > 1 and s.startswith("0") and s[1:].isdigit():
        return int(s, 8)
    return int(s, 0)


@dataclass
class Sysconfig:
    """
    Parsed sysconfig file.

    `variables` keeps file order of first appearance, which indexed lookups
    (IPADDR, IPADDR_1, IPADDR_foo ...) rely on.
    """

    pathname: Optional[str] = None
    variables: Dict[str, str] = field(default_factory=dict)
    duplicates: Dict[str, List[int]] = field(default_factory=dict)  # key -> line numbers (1-based)
    warnings: List[str] = field(default_factory=list)

    @staticmethod
    def _strip_inline_comment_unquoted(val: str) -> str:
        """
        Strip inline comments from an unquoted value (conservative).

        Example:
          FOO=bar # comment  -> "bar"
          FOO="bar # ok"     -> unchanged (handled by quoted parsing)
          FOO=bar#baz        -> unchanged
        """
        m = re.search(r"\s+#", val)
        if m:
            return val[: m.start()].rstrip()
        return val

    @staticmethod
    def _unquote(val: str) -> str:
        if len(val) >= 2 and val[0] == val[-1] and val[0] in ("'", '"'):
            return val[1:-1]
        if val[:1] in ("'", '"'):
            # Opening quote without a matching close: value runs to the first closing quote, if any.
            q = val[0]
            end = val.find(q, 1)
            return val[1:end] if end > 0 else val[1:]
        return Sysconfig._strip_inline_comment_unquoted(val)

    @classmethod
    def parse(cls, text: str, pathname: Optional[str] = None) -> "Sysconfig":
        variables: Dict[str, str] = {}
        first_line: Dict[str, int] = {}
        dups: Dict[str, List[int]] = {}
        warnings: List[str] = []

        for lineno, ln in enumerate(text.splitlines(), start=1):
            if not ln.strip() or ln.lstrip().startswith("#"):
                continue

            m = _ASSIGN_RE.fullmatch(ln)
            if not m:
                continue

            key = m.group(1).upper()
            val = cls._unquote(m.group(2))

            if key in dups:
                dups[key].append(lineno)
            elif key in first_line:
                dups[key] = [first_line[key], lineno]
            else:
                first_line[key] = lineno

            variables[key] = val

        where = f"{pathname}: " if pathname else ""
        for k, lines in sorted(dups.items()):
            warnings.append(f"{where}duplicate key {k} on lines {lines} (last one wins)")

        return cls(pathname=pathname, variables=variables, duplicates=dups, warnings=warnings)

    @classmethod
    def read(cls, path: Union[str, Path]) -> "Sysconfig":
        p = Path(path)
        try:
            text = p.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            raise UnreadableConfigFile(
                msg=f"unable to read {p}: {e.strerror or e}",
                cause=e,
                context={"file": str(p)},
            )
        return cls.parse(text, pathname=str(p))

    # -- lookups --------------------------------------------------------------

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.variables.get(key.upper(), default)

    def get_value(self, key: str) -> Optional[str]:
        """Value of key, None when missing or empty."""
        v = self.variables.get(key.upper())
        return v if v else None

    def has(self, key: str) -> bool:
        return key.upper() in self.variables

    def get_boolean(self, key: str) -> bool:
        """yes/on/true (any case) or a non-zero integer is true; anything else is false."""
        v = (self.get_value(key) or "").strip().lower()
        if v in _TRUE_WORDS:
            return True
        try:
            return int(v, 0) != 0
        except ValueError:
            return False

    def get_integer(self, key: str) -> Optional[int]:
        """
        Integer value of key (decimal, 0x hex, 0 octal), None when unset.

        Raises ValueError when the value is set but not an integer.
        """
        v = self.get_value(key)
        if v is None:
            return None
        return parse_integer(v)

    def find_matching(self, prefix: str) -> List[str]:
        """Names of all variables starting with prefix, in file order."""
        p = prefix.upper()
        return [k for k in self.variables if k.startswith(p)]

    def indexed(self, base: str) -> List[Tuple[str, str]]:
        """
        Ordered (suffix, value) pairs for every BASE<suffix> variable with a
        non-empty value, e.g. IPADDR, IPADDR_0, IPADDR1 -> ("", ...), ("_0", ...), ("1", ...).
        """
        b = base.upper()
        out: List[Tuple[str, str]] = []
        for name in self.find_matching(b):
            value = self.variables[name]
            if value:
                out.append((name[len(b):], value))
        return out

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has(key)

    def __len__(self) -> int:
        return len(self.variables)


__all__ = ["Sysconfig", "parse_integer"]

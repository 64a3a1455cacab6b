# SPDX-License-Identifier: LGPL-3.0-or-later
# -*- coding: utf-8 -*-
"""Shared list manipulation utilities"""
from __future__ import annotations

from typing import Callable, Hashable, Iterable, List, Optional, TypeVar

T = TypeVar("T")


def dedup_preserve_order(items: Iterable[T], key: Optional[Callable[[T], Hashable]] = None) -> List[T]:
    """Remove duplicates from a list while preserving order.

    Args:
        items: Items (may contain duplicates)
        key: Identity function; defaults to the item itself (must be hashable)

    Returns:
        New list with duplicates removed, first occurrence preserved

    Example:
        >>> dedup_preserve_order(['a', 'b', 'a', 'c', 'b'])
        ['a', 'b', 'c']
        >>> dedup_preserve_order(['eth0', 'ETH0'], key=str.lower)
        ['eth0']
    """
    seen = set()
    result = []
    for item in items:
        k = key(item) if key is not None else item
        if k not in seen:
            seen.add(k)
            result.append(item)
    return result


def duplicates(items: Iterable[T]) -> List[T]:
    """Return items seen more than once, in order of their second appearance."""
    seen = set()
    dups: List[T] = []
    for item in items:
        if item in seen and item not in dups:
            dups.append(item)
        seen.add(item)
    return dups


__all__ = [
    "dedup_preserve_order",
    "duplicates",
]

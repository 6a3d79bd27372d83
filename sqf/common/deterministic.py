"""Helpers for deterministic ordering."""

from __future__ import annotations

from typing import Callable, Iterable, TypeVar

T = TypeVar("T")


def stable_sorted(items: Iterable[T], key: Callable[[T], object]) -> list[T]:
    return sorted(items, key=key)


def ordered_union(groups: Iterable[Iterable[T]]) -> list[T]:
    """Union of all items, in order of first appearance."""
    return list(dict.fromkeys(item for group in groups for item in group))

"""
Deduplication and merge algorithms for entry sequences.

These functions work on plain lists and know nothing about guards or
formats; Playlist calls them while holding its guard.

Dedup Strategy:
    1. Every entry is a KeyedEntry   -> one pass with a set of seen keys, O(n)
    2. Otherwise, entries define __eq__ -> compare against survivors, O(n^2)
    3. Otherwise (identity equality only) -> compare default keys
       (reference, info text), O(n)

In all cases the first entry of each equality class survives and the
relative order of survivors is kept.
"""

from typing import Hashable, Iterable, TypeVar

from playlist_mangler.core.logger import get_logger
from playlist_mangler.playlist.capabilities import Entry, KeyedEntry, default_entry_key

logger = get_logger(__name__)

E = TypeVar("E", bound=Entry)


def _has_key(entry: Entry) -> bool:
    return isinstance(entry, KeyedEntry)


def _has_value_equality(entry: Entry) -> bool:
    return type(entry).__eq__ is not object.__eq__


def _dedup_by_key(entries: list[E], key) -> list[E]:
    seen: set[Hashable] = set()
    survivors: list[E] = []
    for entry in entries:
        k = key(entry)
        if k in seen:
            continue
        seen.add(k)
        survivors.append(entry)
    return survivors


def _dedup_pairwise(entries: list[E]) -> list[E]:
    survivors: list[E] = []
    for entry in entries:
        if any(entry == kept for kept in survivors):
            continue
        survivors.append(entry)
    return survivors


def dedup_entries(entries: list[E]) -> int:
    """
    Remove duplicate entries from a list in place.

    Args:
        entries: The list to deduplicate. It is modified in place.

    Returns:
        Number of entries removed.
    """
    if not entries:
        return 0

    if all(_has_key(entry) for entry in entries):
        strategy = "key"
        survivors = _dedup_by_key(entries, lambda entry: entry.dedup_key())
    elif all(_has_value_equality(entry) for entry in entries):
        strategy = "pairwise"
        survivors = _dedup_pairwise(entries)
    else:
        strategy = "default-key"
        survivors = _dedup_by_key(entries, default_entry_key)

    removed = len(entries) - len(survivors)
    entries[:] = survivors
    logger.debug(f"Dedup ({strategy}) removed {removed} of {removed + len(survivors)} entries")
    return removed


def merge_entries(first: Iterable[E], second: Iterable[E]) -> list[E]:
    """
    Concatenate two entry sequences into fresh copies.

    Args:
        first: Entries that come first, in order.
        second: Entries appended after them, in order.

    Returns:
        A new list of copied entries. The inputs are not modified and share
        no entry objects with the result.
    """
    merged = [entry.copy() for entry in first]
    merged.extend(entry.copy() for entry in second)
    return merged

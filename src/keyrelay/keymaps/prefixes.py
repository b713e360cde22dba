"""Prefix index answering "could this still become a binding?" in O(1)."""

from __future__ import annotations

from typing import Iterable, Iterator


class PrefixIndex:
    """Set of every strict prefix of every bound sequence, across all scopes.

    The index is derived data. It is only ever rebuilt wholesale from the
    current bindings, never patched, so it cannot drift from the store.
    """

    def __init__(self) -> None:
        self._prefixes: frozenset[str] = frozenset()

    def rebuild(self, sequences: Iterable[str]) -> None:
        prefixes: set[str] = set()
        for sequence in sequences:
            for size in range(1, len(sequence)):
                prefixes.add(sequence[:size])
        self._prefixes = frozenset(prefixes)

    def __contains__(self, candidate: object) -> bool:
        return candidate in self._prefixes

    def __len__(self) -> int:
        return len(self._prefixes)

    def __iter__(self) -> Iterator[str]:
        return iter(sorted(self._prefixes))


__all__ = ["PrefixIndex"]

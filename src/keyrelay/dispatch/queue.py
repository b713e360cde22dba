"""Single-slot bridge for emitting multi-unit text one callback at a time."""

from __future__ import annotations


class InjectQueue:
    """Holds the units still owed to the editor.

    Every write hands back the head unit for the current callback and keeps
    the tail. ``push`` overwrites the tail (handler injects), ``replay``
    prepends to it (flushes of an abandoned sequence).
    """

    def __init__(self) -> None:
        self._units = ""

    @property
    def contents(self) -> str:
        return self._units

    def __bool__(self) -> bool:
        return bool(self._units)

    def __len__(self) -> int:
        return len(self._units)

    def push(self, text: str) -> str:
        if not text:
            return ""
        self._units = text[1:]
        return text[0]

    def replay(self, text: str) -> str:
        if not text:
            return ""
        self._units = text[1:] + self._units
        return text[0]

    def pop(self) -> str:
        head, self._units = self._units[:1], self._units[1:]
        return head

    def clear(self) -> str:
        dropped, self._units = self._units, ""
        return dropped


__all__ = ["InjectQueue"]

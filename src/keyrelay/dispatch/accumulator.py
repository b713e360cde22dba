"""Tracks the in-progress key sequence and when it was last extended."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class SequenceAccumulator:
    """Pending sequence state; empty ``text`` means idle."""

    text: str = ""
    updated_at: float = 0.0

    def __bool__(self) -> bool:
        return bool(self.text)

    def candidate(self, unit: str) -> str:
        return self.text + unit

    def advance(self, candidate: str, now: float) -> None:
        self.text = candidate
        self.updated_at = now

    def is_stale(self, now: float, timeout: float) -> bool:
        return bool(self.text) and now - self.updated_at > timeout

    def take(self) -> str:
        text = self.text
        self.clear()
        return text

    def clear(self) -> None:
        self.text = ""
        self.updated_at = 0.0


__all__ = ["SequenceAccumulator"]

"""Per-callback records exchanged with the host editor, plus the event bus."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Dict, Literal, Optional

from keyrelay.keymaps.models import Binding, Mode


@dataclass(slots=True)
class KeyEvent:
    """One editor callback: the typed unit, the line around it, the output slot.

    ``output`` starts out equal to ``unit`` (pass-through). The engine leaves
    it alone, clears it to suppress the unit, or replaces it with a single
    unit of replayed or injected text.
    """

    unit: str
    line: str = ""
    cursor: int = 0
    mode: Mode | str | bool = Mode.INSERT
    output: Optional[str] = None

    def __post_init__(self) -> None:
        if len(self.unit) != 1:
            raise ValueError(f"KeyEvent expects exactly one unit, got {self.unit!r}")
        if self.output is None:
            self.output = self.unit

    @property
    def suppressed(self) -> bool:
        return self.output == ""


DispatchStatus = Literal[
    "drain",
    "timeout",
    "match",
    "pending",
    "replay",
    "passthrough",
    "handler_error",
]


@dataclass(frozen=True, slots=True)
class DispatchResult:
    """What a single dispatch did with its unit."""

    status: DispatchStatus
    output: str
    binding: Optional[Binding] = None
    pending: str = ""
    replayed: str = ""

    @property
    def consumed(self) -> bool:
        return self.status != "passthrough"


@dataclass(frozen=True, slots=True)
class HandlerFailure:
    """Payload published on ``handler.error``."""

    binding: Binding
    error: BaseException


@dataclass
class EventBus:
    """Minimal bus carrying mode changes, replays and handler failures."""

    _subscribers: Dict[str, list[Callable[[object], None]]] = field(
        default_factory=dict
    )

    def subscribe(self, event: str, callback: Callable[[object], None]) -> None:
        self._subscribers.setdefault(event, []).append(callback)

    def unsubscribe(self, event: str, callback: Callable[[object], None]) -> None:
        callbacks = self._subscribers.get(event, [])
        if callback in callbacks:
            callbacks.remove(callback)

    def emit(self, event: str, payload: object | None = None) -> None:
        for callback in list(self._subscribers.get(event, [])):
            callback(payload)


__all__ = [
    "DispatchResult",
    "DispatchStatus",
    "EventBus",
    "HandlerFailure",
    "KeyEvent",
]

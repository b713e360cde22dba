"""Bridges Textual key presses into a DispatchEngine."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from keyrelay.dispatch import DispatchEngine, HandlerFailure, KeyEvent
from keyrelay.keymaps import Mode


def _noop(*_args, **_kwargs) -> None:  # pragma: no cover - default hook
    return None


@dataclass(slots=True)
class TextualUIHooks:
    """Callbacks the adapter uses to update the hosting widgets."""

    insert_text: Callable[[str], None]
    update_status: Callable[[str], None] = _noop
    handle_event: Callable[[str, object | None], None] = _noop
    log: Callable[[str], None] = _noop


class TextualKeyAdapter:
    """Feeds one unit per key press and pumps queued output to the widget.

    Textual lets the host re-enter dispatch as often as it likes, so queued
    units are drained immediately instead of waiting for further key presses.
    """

    def __init__(self, engine: DispatchEngine, hooks: TextualUIHooks) -> None:
        self.engine = engine
        self.hooks = hooks
        self._subscribe_events()

    def handle_textual_key(
        self,
        unit: str,
        *,
        line: str = "",
        cursor: int = 0,
        command_mode: bool = False,
    ) -> str:
        """Dispatch ``unit`` and return every unit the editor should receive."""

        self._log_state("key ->", unit=unit, cursor=cursor, command_mode=command_mode)
        result = self.engine.dispatch(
            KeyEvent(unit=unit, line=line, cursor=cursor, mode=command_mode)
        )
        emitted = [result.output]
        while self.engine.queued:
            drained = self.engine.dispatch(
                KeyEvent(unit=unit, line=line, cursor=cursor, mode=command_mode)
            )
            emitted.append(drained.output)
        text = "".join(emitted)
        if text:
            self.hooks.insert_text(text)
        self.hooks.update_status(result.status)
        self._log_state("result <-", status=result.status, output=text)
        return text

    def process_timeouts(self) -> str:
        """Expire a stale pending sequence and hand its units to the widget."""

        stale = self.engine.flush_stale()
        if stale:
            self.hooks.insert_text(stale)
            self.hooks.update_status("timeout")
            self._log_state("timeout ->", output=stale)
        return stale

    def _subscribe_events(self) -> None:
        bus = self.engine.bus
        for event in ("mode.change", "sequence.replay", "handler.error"):
            bus.subscribe(
                event, lambda payload, name=event: self._handle_event(name, payload)
            )

    def _handle_event(self, name: str, payload: object | None) -> None:
        self._log_state("event ->", event=name, payload=payload)
        self.hooks.handle_event(name, payload)
        if name == "mode.change" and isinstance(payload, Mode):
            self.hooks.update_status(f"mode::{payload.value}")
        elif name == "handler.error" and isinstance(payload, HandlerFailure):
            self.hooks.update_status(
                f"error::{payload.binding.sequence!r}: {payload.error}"
            )

    def _log_state(self, prefix: str, **fields: object) -> None:
        snapshot: dict[str, object] = {
            "mode": self.engine.mode.value,
            "pending": self.engine.pending,
            "queued": self.engine.queued,
        }
        snapshot.update({k: v for k, v in fields.items() if v is not None})
        parts = [prefix] + [f"{key}={value!r}" for key, value in snapshot.items()]
        self.hooks.log(" ".join(parts))


__all__ = ["TextualKeyAdapter", "TextualUIHooks"]

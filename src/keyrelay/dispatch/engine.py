"""Keystroke dispatch state machine.

The host editor calls :meth:`DispatchEngine.dispatch` once per typed unit and
can only accept a single output unit back. The engine layers on top of that:

* single-unit and multi-unit bindings, scoped to insert mode, command mode
  or both;
* timeout disambiguation between a bound sequence and its own prefixes;
* arbitrary-length text injection, delivered one unit per later callback.

Everything here is synchronous and single-threaded. A sequence that goes
stale is only noticed when the next unit arrives; hosts that own a timer can
call :meth:`DispatchEngine.flush_stale` to expire it sooner.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Callable, Optional

from keyrelay.keymaps.models import Binding, Handler, Mode, Scope
from keyrelay.keymaps.store import BindingStore
from keyrelay.runtime import telemetry
from keyrelay.runtime.settings import EngineSettings

from .accumulator import SequenceAccumulator
from .events import DispatchResult, DispatchStatus, EventBus, HandlerFailure, KeyEvent
from .queue import InjectQueue


class DispatchStateError(RuntimeError):
    """Raised when the engine is driven outside its calling contract."""


@dataclass(slots=True)
class HandlerContext:
    """Argument passed to every bound handler."""

    engine: "DispatchEngine"
    event: KeyEvent
    binding: Binding

    @property
    def line(self) -> str:
        return self.event.line

    @property
    def cursor(self) -> int:
        return self.event.cursor

    @property
    def mode(self) -> Mode:
        return self.engine.mode

    def inject(self, text: str) -> None:
        self.engine.inject(text)


class DispatchEngine:
    """Owns bindings, the pending sequence, the inject queue and the mode."""

    def __init__(
        self,
        settings: EngineSettings | None = None,
        *,
        store: BindingStore | None = None,
        bus: EventBus | None = None,
        clock: Callable[[], float] | None = None,
        logger_name: str = "keyrelay.dispatch",
    ) -> None:
        self.settings = settings or EngineSettings()
        self.store = store or BindingStore(logger_name="keyrelay.keymaps")
        self.bus = bus or EventBus()
        self._clock = clock or time.monotonic
        self._logger_name = logger_name
        self._queue = InjectQueue()
        self._pending = SequenceAccumulator()
        self._mode = self.settings.initial_mode
        self._active_event: Optional[KeyEvent] = None
        self._dispatching = False

    @property
    def timeout(self) -> float:
        return self.settings.sequence_timeout

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def pending(self) -> str:
        return self._pending.text

    @property
    def queued(self) -> str:
        return self._queue.contents

    def bind(
        self,
        sequence: str,
        scope: Scope | str,
        handler: Handler,
        *,
        description: str = "",
    ) -> Binding:
        return self.store.bind(sequence, scope, handler, description=description)

    def unbind(self, sequence: str, scope: Scope | str) -> Optional[Binding]:
        return self.store.unbind(sequence, scope)

    def inject(self, text: str) -> None:
        """Emit ``text`` starting with the current callback's output slot.

        Only valid while a handler is running. The first unit is delivered
        immediately; the rest replaces whatever was queued.
        """

        if self._active_event is None:
            raise DispatchStateError("inject() is only valid while a handler runs")
        if not text:
            return
        self._active_event.output = self._queue.push(text)

    def dispatch(self, event: KeyEvent) -> DispatchResult:
        if self._dispatching:
            raise DispatchStateError("dispatch() re-entered while a handler runs")
        self._dispatching = True
        try:
            with telemetry.span(
                "dispatch::key",
                logger_name=self._logger_name,
                metadata={"unit": event.unit},
            ) as handle:
                result = self._dispatch(event)
                handle.add_metadata("status", result.status)
                return result
        finally:
            self._dispatching = False

    def flush_stale(self, now: float | None = None) -> str:
        """Expire a pending sequence older than the timeout.

        Returns the abandoned units so the host can insert them itself, or an
        empty string when nothing was stale. Never called by the engine.
        """

        if self._dispatching:
            raise DispatchStateError("flush_stale() called during dispatch")
        current = self._clock() if now is None else now
        if not self._pending.is_stale(current, self.timeout):
            return ""
        stale = self._pending.take()
        self._publish_replay(stale, reason="expired")
        return stale

    def reset(self) -> None:
        """Forget the pending sequence and any queued output."""

        self._pending.clear()
        dropped = self._queue.clear()
        if dropped:
            telemetry.record_event(
                "queue.reset",
                level="debug",
                data={"dropped": dropped},
                logger_name=self._logger_name,
            )

    def _dispatch(self, event: KeyEvent) -> DispatchResult:
        if self._queue:
            event.output = self._queue.pop()
            return DispatchResult("drain", output=event.output)

        mode = Mode.from_flag(event.mode)
        self._observe_mode(mode)

        now = self._clock()
        if self._pending.is_stale(now, self.timeout):
            return self._replay(event, "timeout")

        candidate = self._pending.candidate(event.unit)
        binding = self.store.lookup(candidate, mode)
        if binding is not None:
            self._pending.clear()
            event.output = ""
            return self._invoke(binding, event)

        if candidate in self.store.prefixes:
            self._pending.advance(candidate, now)
            event.output = ""
            return DispatchResult("pending", output="", pending=candidate)

        if self._pending:
            return self._replay(event, "replay")

        return DispatchResult("passthrough", output=event.output or "")

    def _observe_mode(self, mode: Mode) -> None:
        if mode is self._mode:
            return
        previous, self._mode = self._mode, mode
        telemetry.record_event(
            "mode.change",
            level="debug",
            data={"from": previous.value, "to": mode.value},
            logger_name=self._logger_name,
        )
        self.bus.emit("mode.change", mode)

    def _replay(self, event: KeyEvent, status: DispatchStatus) -> DispatchResult:
        stale = self._pending.take()
        event.output = self._queue.replay(stale + event.unit)
        self._publish_replay(stale, reason=status)
        return DispatchResult(status, output=event.output, replayed=stale)

    def _publish_replay(self, stale: str, *, reason: str) -> None:
        telemetry.record_event(
            "sequence.replay",
            level="debug",
            data={"units": stale, "reason": reason},
            logger_name=self._logger_name,
        )
        self.bus.emit("sequence.replay", stale)

    def _invoke(self, binding: Binding, event: KeyEvent) -> DispatchResult:
        context = HandlerContext(engine=self, event=event, binding=binding)
        self._active_event = event
        try:
            with telemetry.span(
                "dispatch::handler",
                logger_name=self._logger_name,
                component="dispatch",
                metadata={"sequence": binding.sequence, "scope": binding.scope.value},
            ):
                binding.handler(context)
        except Exception as exc:
            telemetry.record_event(
                "handler.error",
                level="error",
                data={
                    "sequence": binding.sequence,
                    "scope": binding.scope.value,
                    "error": repr(exc),
                },
                logger_name=self._logger_name,
            )
            self.bus.emit("handler.error", HandlerFailure(binding=binding, error=exc))
            return DispatchResult(
                "handler_error", output=event.output or "", binding=binding
            )
        finally:
            self._active_event = None
        return DispatchResult("match", output=event.output or "", binding=binding)


__all__ = [
    "DispatchEngine",
    "DispatchStateError",
    "HandlerContext",
]

"""Per-keystroke dispatch: pending sequences, injection and replay."""

from .accumulator import SequenceAccumulator
from .engine import DispatchEngine, DispatchStateError, HandlerContext
from .events import DispatchResult, EventBus, HandlerFailure, KeyEvent
from .queue import InjectQueue

__all__ = [
    "DispatchEngine",
    "DispatchResult",
    "DispatchStateError",
    "EventBus",
    "HandlerContext",
    "HandlerFailure",
    "InjectQueue",
    "KeyEvent",
    "SequenceAccumulator",
]

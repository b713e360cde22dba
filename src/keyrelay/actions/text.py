"""Handlers that answer a key sequence with literal text."""

from __future__ import annotations

from typing import Callable

from keyrelay.dispatch.engine import HandlerContext


def send_text(text: str) -> Callable[[HandlerContext], None]:
    """Build a handler that injects ``text`` in place of the sequence."""

    def handler(context: HandlerContext) -> None:
        context.inject(text)

    handler.__name__ = f"send_text({text!r})"
    return handler


def swallow(context: HandlerContext) -> None:
    """Consume the sequence without producing output."""

    del context


__all__ = ["send_text", "swallow"]

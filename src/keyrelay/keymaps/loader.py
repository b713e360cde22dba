"""Declarative keymap tables and the ``SCOPE:SEQUENCE=TEXT`` shorthand."""

from __future__ import annotations

from typing import Callable, Mapping, Protocol, Union

from keyrelay.actions.text import send_text

from .models import Binding, ConfigError, Handler, Scope

KeymapTarget = Union[str, Handler]
KeymapTable = Mapping[str, Mapping[str, KeymapTarget]]


class SupportsBind(Protocol):
    def bind(
        self,
        sequence: str,
        scope: Scope | str,
        handler: Handler,
        *,
        description: str = "",
    ) -> Binding: ...


def _as_handler(sequence: str, target: KeymapTarget) -> tuple[Handler, str]:
    if isinstance(target, str):
        return send_text(target), f"send {target!r}"
    if callable(target):
        return target, getattr(target, "__doc__", None) or ""
    raise ConfigError(f"binding for {sequence!r} must be text or a callable")


def load_keymaps(
    target: SupportsBind,
    table: KeymapTable,
    *,
    handler_factory: Callable[[str, KeymapTarget], tuple[Handler, str]] = _as_handler,
) -> list[Binding]:
    """Bind every ``{scope: {sequence: text-or-handler}}`` entry in ``table``.

    Text targets become :func:`send_text` handlers. Scopes are validated
    before anything is bound, so a bad table leaves ``target`` untouched.
    """

    scopes = {name: Scope.parse(name) for name in table}
    bound: list[Binding] = []
    for name, entries in table.items():
        for sequence, entry in entries.items():
            handler, description = handler_factory(sequence, entry)
            bound.append(
                target.bind(sequence, scopes[name], handler, description=description)
            )
    return bound


def parse_bind_spec(spec: str) -> tuple[Scope, str, str]:
    """Split ``"insert:jk=\\x1b"`` into scope, sequence and replacement text.

    The scope prefix is optional and defaults to ``any``; a leading run of
    letters before the first ``:`` is always read as a scope, so bind a
    sequence such as ``a:b`` with ``any:a:b=...``. Backslash escapes in the
    sequence and the text are decoded.
    """

    head, sep, text = spec.partition("=")
    if not sep:
        raise ConfigError(f"bind spec {spec!r} is missing '='")
    scope: Scope | str = Scope.ANY
    sequence = head
    prefix, colon, rest = head.partition(":")
    if colon and prefix.isalpha():
        scope, sequence = prefix, rest
    sequence = _unescape(sequence)
    if not sequence:
        raise ConfigError(f"bind spec {spec!r} has an empty sequence")
    return Scope.parse(scope), sequence, _unescape(text)


def _unescape(value: str) -> str:
    try:
        return value.encode("latin-1", "backslashreplace").decode("unicode_escape")
    except UnicodeError as exc:
        raise ConfigError(f"invalid escape in {value!r}") from exc


__all__ = [
    "KeymapTable",
    "load_keymaps",
    "parse_bind_spec",
]

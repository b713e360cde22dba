"""Scoped binding tables plus the prefix index derived from them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterator, Optional

from keyrelay.runtime.telemetry import span

from .models import Binding, ConfigError, Handler, Mode, Scope
from .prefixes import PrefixIndex


@dataclass(slots=True)
class StoreStats:
    """Lightweight snapshot describing store state."""

    binding_count: int
    prefix_count: int
    per_scope: tuple[tuple[str, int], ...]


class BindingStore:
    """Owns the insert, command and any tables and keeps the index current."""

    def __init__(self, *, logger_name: str | None = None) -> None:
        self._tables: Dict[Scope, Dict[str, Binding]] = {scope: {} for scope in Scope}
        self._prefixes = PrefixIndex()
        self._logger_name = logger_name
        self._revision = 0

    @property
    def prefixes(self) -> PrefixIndex:
        return self._prefixes

    def revision(self) -> int:
        return self._revision

    def bind(
        self,
        sequence: str,
        scope: Scope | str,
        handler: Handler,
        *,
        description: str = "",
    ) -> Binding:
        """Bind ``sequence`` in ``scope``, replacing any existing entry."""

        with span(
            "keymaps::bind",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"sequence": sequence, "scope": scope},
        ) as handle:
            binding = Binding(
                sequence=sequence,
                scope=Scope.parse(scope),
                handler=handler,
                description=description,
            )
            table = self._tables[binding.scope]
            if sequence in table:
                handle.add_metadata("replaced", True)
            table[sequence] = binding
            self._touch()
            return binding

    def unbind(self, sequence: str, scope: Scope | str) -> Optional[Binding]:
        """Drop the binding if present; absent bindings are not an error."""

        with span(
            "keymaps::unbind",
            logger_name=self._logger_name,
            component="keymaps",
            metadata={"sequence": sequence, "scope": scope},
        ) as handle:
            removed = self._tables[Scope.parse(scope)].pop(sequence, None)
            if removed is None:
                handle.add_metadata("missing", True)
            self._touch()
            return removed

    def get(self, sequence: str, scope: Scope | str) -> Optional[Binding]:
        return self._tables[Scope.parse(scope)].get(sequence)

    def lookup(self, sequence: str, mode: Mode) -> Optional[Binding]:
        """Resolve ``sequence`` for ``mode``; mode tables shadow ``any``."""

        specific = self._tables[Scope.for_mode(mode)].get(sequence)
        if specific is not None:
            return specific
        return self._tables[Scope.ANY].get(sequence)

    def iter_bindings(self, scope: Scope | str | None = None) -> Iterator[Binding]:
        if scope is None:
            for table in self._tables.values():
                yield from table.values()
            return
        yield from self._tables[Scope.parse(scope)].values()

    def clear(self, scope: Scope | str | None = None) -> None:
        if scope is None:
            for table in self._tables.values():
                table.clear()
        else:
            self._tables[Scope.parse(scope)].clear()
        self._touch()

    def stats(self) -> StoreStats:
        per_scope = tuple((scope.value, len(self._tables[scope])) for scope in Scope)
        return StoreStats(
            binding_count=sum(count for _, count in per_scope),
            prefix_count=len(self._prefixes),
            per_scope=per_scope,
        )

    def _touch(self) -> None:
        self._prefixes.rebuild(
            binding.sequence for binding in self.iter_bindings()
        )
        self._revision += 1


__all__ = [
    "BindingStore",
    "ConfigError",
    "StoreStats",
]

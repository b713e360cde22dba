"""Scopes, modes and binding records shared by the keymap layer."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable


class ConfigError(ValueError):
    """Raised when a binding or engine setting is malformed."""


class Mode(str, Enum):
    """Editing mode reported by the host editor."""

    INSERT = "insert"
    COMMAND = "command"

    @classmethod
    def from_flag(cls, flag: "Mode | str | bool") -> "Mode":
        """Map a host mode flag onto a Mode.

        Booleans are read as "command mode active"; strings are matched
        case-insensitively against the mode names.
        """

        if isinstance(flag, Mode):
            return flag
        if isinstance(flag, bool):
            return cls.COMMAND if flag else cls.INSERT
        try:
            return cls(str(flag).strip().lower())
        except ValueError as exc:
            raise ConfigError(f"Unknown editing mode '{flag}'") from exc


class Scope(str, Enum):
    """Table a binding lives in."""

    INSERT = "insert"
    COMMAND = "command"
    ANY = "any"

    @classmethod
    def parse(cls, value: "Scope | str") -> "Scope":
        if isinstance(value, Scope):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        raise ConfigError(
            f"Unknown scope {value!r}; expected one of "
            f"{', '.join(scope.value for scope in cls)}"
        )

    @classmethod
    def for_mode(cls, mode: Mode) -> "Scope":
        return cls.COMMAND if mode is Mode.COMMAND else cls.INSERT


Handler = Callable[..., Any]


@dataclass(frozen=True, slots=True)
class Binding:
    """A unit sequence bound to a handler inside one scope."""

    sequence: str
    scope: Scope
    handler: Handler
    description: str = ""

    def __post_init__(self) -> None:
        if not isinstance(self.sequence, str) or not self.sequence:
            raise ConfigError("binding sequence cannot be empty")
        if not callable(self.handler):
            raise ConfigError(f"handler for {self.sequence!r} must be callable")
        object.__setattr__(self, "scope", Scope.parse(self.scope))

    @property
    def prefixes(self) -> tuple[str, ...]:
        """Strict, non-empty prefixes of the sequence, shortest first."""

        return tuple(self.sequence[:size] for size in range(1, len(self.sequence)))


__all__ = [
    "Binding",
    "ConfigError",
    "Handler",
    "Mode",
    "Scope",
]

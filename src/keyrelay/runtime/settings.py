"""Engine settings with environment overrides."""

from __future__ import annotations

import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from keyrelay.keymaps.models import ConfigError, Mode

ENV_PREFIX = "KEYRELAY_"
DEFAULT_SEQUENCE_TIMEOUT = 0.2


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Tunables for a DispatchEngine.

    ``sequence_timeout`` is the idle gap, in seconds, after which a pending
    sequence is replayed as literal input on the next keystroke.
    ``initial_mode`` is the mode the engine assumes before the first
    callback reports one.
    """

    sequence_timeout: float = DEFAULT_SEQUENCE_TIMEOUT
    initial_mode: Mode = Mode.INSERT

    def __post_init__(self) -> None:
        if not math.isfinite(self.sequence_timeout) or self.sequence_timeout <= 0:
            raise ConfigError("sequence_timeout must be a positive, finite number")
        object.__setattr__(self, "initial_mode", Mode.from_flag(self.initial_mode))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "EngineSettings":
        env = os.environ if environ is None else environ
        raw_timeout = env.get(f"{ENV_PREFIX}SEQUENCE_TIMEOUT")
        timeout = DEFAULT_SEQUENCE_TIMEOUT
        if raw_timeout:
            try:
                timeout = float(raw_timeout)
            except ValueError as exc:
                raise ConfigError(
                    f"{ENV_PREFIX}SEQUENCE_TIMEOUT must be a number, got {raw_timeout!r}"
                ) from exc
        mode = env.get(f"{ENV_PREFIX}INITIAL_MODE") or Mode.INSERT
        return cls(sequence_timeout=timeout, initial_mode=Mode.from_flag(mode))


__all__ = ["EngineSettings", "DEFAULT_SEQUENCE_TIMEOUT"]

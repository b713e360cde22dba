"""telelog plumbing for the dispatch engine.

Dispatch happens on every keystroke, so the surface is kept small:

``configure(...)`` -- adopt an explicit telelog config or a named preset
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit ``event::<name>`` with key/value data
``span(name, ...)`` -- profile a block; closes with ``span::end`` or ``span::fail``
"""

from __future__ import annotations

import os
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional, cast

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "KEYRELAY_"
TRUTHY = frozenset({"1", "true", "yes", "on"})

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional[Any] = None


def _setting(name: str) -> str:
    return os.environ.get(f"{ENV_PREFIX}{name}", "")


def _enabled(name: str, *, default: bool = False) -> bool:
    raw = _setting(name)
    return raw.lower() in TRUTHY if raw else default


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (dict, list, tuple, set)):
        return repr(value)
    return str(getattr(value, "value", value))


def _log(logger: Any, level: str, message: str, payload: Mapping[str, Any]) -> None:
    """Write ``message`` with ``payload``, using ``<level>_with`` when telelog has it."""

    level = level.lower()
    structured = getattr(logger, f"{level}_with", None)
    if structured is not None:
        structured(message, [(str(key), _text(value)) for key, value in payload.items()])
        return
    plain = getattr(logger, level, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    pairs = " ".join(f"{key}={_text(value)}" for key, value in payload.items())
    plain(f"{message} {pairs}".rstrip())


def _default_config() -> Any:
    config = tl.Config()
    config.with_min_level((_setting("LOG_LEVEL") or "WARNING").upper())
    console = not _enabled("DISABLE_CONSOLE")
    config.with_console_output(console)
    if console:
        config.with_colored_output(not _enabled("NO_COLOR"))
    if _enabled("LOG_JSON"):
        config.with_json_format(True)
    if _setting("LOG_FILE"):
        config.with_file_output(_setting("LOG_FILE"))
    if _enabled("LOG_BUFFERED"):
        config.with_buffering(True)
        config.with_buffer_size(int(_setting("LOG_BUFFER_SIZE") or "2048"))
    config.with_profiling(_enabled("PROFILE", default=True))
    return config


def _preset_config(preset: str) -> Any:
    config = tl.Config()
    key = preset.lower()
    if key == "development":
        config.with_min_level("DEBUG")
        config.with_console_output(True)
        config.with_colored_output(True)
    elif key == "production":
        # The host editor owns the terminal.
        config.with_min_level("WARNING")
        config.with_console_output(False)
        config.with_file_output(_setting("LOG_FILE") or "keyrelay.log")
        config.with_buffering(True)
    else:
        raise ValueError(f"Unknown preset '{preset}'.")
    return config


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration.

    ``config`` adopts an explicit ``telelog.Config``; ``preset`` builds
    ``"development"`` or ``"production"``. Cached loggers are dropped.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")
    if preset:
        config = _preset_config(preset)
    _ACTIVE_CONFIG = config if config is not None else _default_config()
    _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Return the cached ``telelog.Logger`` for ``name``."""

    global _ACTIVE_CONFIG
    logger_name = name or _setting("LOGGER") or "keyrelay"
    if logger_name not in _LOGGER_CACHE:
        if _ACTIVE_CONFIG is None:
            _ACTIVE_CONFIG = _default_config()
        _LOGGER_CACHE[logger_name] = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
    return _LOGGER_CACHE[logger_name]


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    _log(get_logger(logger_name), level, f"event::{name}", {"event": name, **(data or {})})


@dataclass
class SpanHandle:
    """Collects outcome metadata written when the span closes."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, str] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _text(value)

    def payload(self, **extra: Any) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        payload.update(extra)
        return payload

    def end(self) -> None:
        _log(self.logger, "debug", "span::end", self.payload())

    def fail(self, reason: str) -> None:
        _log(self.logger, "error", "span::fail", self.payload(reason=reason))


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block, optionally tracked as a telelog component.

    ``metadata`` is pushed as logger context while the block runs. Whatever
    the block adds through the handle is written by ``span::end`` on success
    or ``span::fail`` when an exception escapes.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None
    context = {key: _text(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(
        logger=log,
        span_name=name,
        component_name=cast(Optional[str], component_name),
        metadata=dict(context),
    )

    with ExitStack() as stack:
        for key, value in context.items():
            log.add_context(key, value)
            stack.callback(log.remove_context, key)
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        handle.end()


__all__ = [
    "SpanHandle",
    "configure",
    "get_logger",
    "record_event",
    "span",
]

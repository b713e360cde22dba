"""Executable Textual app hosting the dispatch engine in a single-line editor."""

from __future__ import annotations

import argparse
from typing import Callable, Optional, Sequence

try:  # pragma: no cover - imported only when demo is run
    from textual import events
    from textual.app import App, ComposeResult
    from textual.widgets import Footer, Header, Input, Static
except ModuleNotFoundError as exc:  # pragma: no cover - friendly error for missing dep
    raise RuntimeError(
        "Install the 'textual' package to use keyrelay.adapters.textual.app"
    ) from exc

from keyrelay.dispatch import DispatchEngine
from keyrelay.keymaps import ConfigError, Scope
from keyrelay.keymaps.loader import load_keymaps, parse_bind_spec
from keyrelay.runtime import telemetry
from keyrelay.runtime.settings import EngineSettings

from .controller import TextualKeyAdapter, TextualUIHooks

ESCAPE = "\x1b"


class RelayInput(Input):
    """Input widget that routes printable units through the engine first."""

    def __init__(self, on_unit: Callable[[str], None], **kwargs: object) -> None:
        super().__init__(**kwargs)  # type: ignore[arg-type]
        self._on_unit = on_unit

    async def on_key(self, event: events.Key) -> None:
        if event.key == "escape":
            unit = ESCAPE
        elif event.is_printable and event.character and len(event.character) == 1:
            unit = event.character
        else:
            return
        event.prevent_default()
        event.stop()
        self._on_unit(unit)


class KeyRelayApp(App[None]):
    """Minimal vi-flavoured line editor driven by the dispatch engine."""

    CSS = """
	Screen {
		layout: vertical;
	}

	#line {
		margin: 1 1;
	}

	#status-line {
		height: 1;
		background: $surface-darken-1;
		padding: 0 1;
	}
	"""

    BINDINGS = [
        ("ctrl+c", "quit", "Quit"),
        ("ctrl+q", "quit", "Quit"),
    ]

    def __init__(self, engine: DispatchEngine) -> None:
        super().__init__()
        self.engine = engine
        self.command_mode = False
        self.adapter: TextualKeyAdapter | None = None
        self._input: RelayInput | None = None
        self._status_widget: Static | None = None

    def compose(self) -> ComposeResult:
        yield Header(show_clock=True)
        self._input = RelayInput(self._handle_unit, id="line", placeholder="type here")
        yield self._input
        self._status_widget = Static("", id="status-line")
        yield self._status_widget
        yield Footer()

    def on_mount(self) -> None:
        hooks = TextualUIHooks(
            insert_text=self._insert_text,
            update_status=self._update_status,
            log=self.log,
        )
        self.adapter = TextualKeyAdapter(self.engine, hooks)
        self.set_interval(self.engine.timeout / 2, self.adapter.process_timeouts)
        self._update_status("insert")

    def _handle_unit(self, unit: str) -> None:
        if not self.adapter or not self._input:
            return
        self.adapter.handle_textual_key(
            unit,
            line=self._input.value,
            cursor=self._input.cursor_position,
            command_mode=self.command_mode,
        )

    def _insert_text(self, text: str) -> None:
        if not self._input:
            return
        for unit in text:
            if unit == ESCAPE:
                self.command_mode = True
                self._update_status("command")
            elif self.command_mode:
                if unit == "i":
                    self.command_mode = False
                    self._update_status("insert")
            else:
                self._input.insert_text_at_cursor(unit)

    def _update_status(self, status: str) -> None:
        if self._status_widget:
            mode = "COMMAND" if self.command_mode else "INSERT"
            self._status_widget.update(f"{mode} | {status}")


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run the keyrelay dispatch engine inside a Textual line editor."
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="Sequence timeout in seconds (default: KEYRELAY_SEQUENCE_TIMEOUT or 0.2)",
    )
    parser.add_argument(
        "--bind",
        action="append",
        default=[],
        metavar="SCOPE:SEQUENCE=TEXT",
        help="Bind SEQUENCE to TEXT, e.g. 'insert:jk=\\x1b' (repeatable)",
    )
    parser.add_argument(
        "--log-preset",
        choices=("development", "production"),
        default=None,
        help="Telemetry preset to apply before starting",
    )
    return parser.parse_args(argv)


def build_engine(args: argparse.Namespace) -> DispatchEngine:
    settings = EngineSettings.from_env()
    if args.timeout is not None:
        settings = EngineSettings(
            sequence_timeout=args.timeout, initial_mode=settings.initial_mode
        )
    engine = DispatchEngine(settings)
    table: dict[str, dict[str, str]] = {}
    for spec in args.bind:
        scope, sequence, text = parse_bind_spec(spec)
        table.setdefault(scope.value, {})[sequence] = text
    if not table:
        table = {Scope.INSERT.value: {"jk": ESCAPE}}
    load_keymaps(engine, table)
    return engine


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = _parse_args(argv)
    if args.log_preset:
        telemetry.configure(preset=args.log_preset)
    try:
        engine = build_engine(args)
    except ConfigError as exc:
        raise SystemExit(f"keyrelay: {exc}") from exc
    KeyRelayApp(engine).run()


if __name__ == "__main__":  # pragma: no cover - manual demo
    main()

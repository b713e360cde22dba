from __future__ import annotations

from typing import List

from keyrelay.actions import send_text
from keyrelay.adapters.textual import TextualKeyAdapter, TextualUIHooks
from keyrelay.dispatch import DispatchEngine, HandlerContext
from keyrelay.keymaps import Scope
from keyrelay.runtime.settings import EngineSettings


def make_adapter(clock, **hook_overrides) -> tuple[TextualKeyAdapter, List[str]]:
    engine = DispatchEngine(EngineSettings(sequence_timeout=0.2), clock=clock)
    engine.bind("jk", Scope.INSERT, send_text("\x1b"))
    engine.bind(";sig", Scope.ANY, send_text("-- sent from keyrelay"))
    inserted: List[str] = []
    hooks = TextualUIHooks(insert_text=inserted.append, **hook_overrides)
    return TextualKeyAdapter(engine, hooks), inserted


def test_adapter_pumps_injected_text_in_one_key_press(clock) -> None:
    adapter, inserted = make_adapter(clock)

    for unit in ";si":
        assert adapter.handle_textual_key(unit) == ""
    text = adapter.handle_textual_key("g")

    assert text == "-- sent from keyrelay"
    assert inserted == ["-- sent from keyrelay"]
    assert adapter.engine.queued == ""


def test_adapter_replays_dead_prefix(clock) -> None:
    adapter, inserted = make_adapter(clock)

    adapter.handle_textual_key(";")
    adapter.handle_textual_key("s")
    text = adapter.handle_textual_key("x")

    assert text == ";sx"
    assert inserted == [";sx"]


def test_adapter_passthrough_and_status(clock) -> None:
    statuses: List[str] = []
    adapter, inserted = make_adapter(clock, update_status=statuses.append)

    adapter.handle_textual_key("a")
    adapter.handle_textual_key("j")

    assert inserted == ["a"]
    assert statuses == ["passthrough", "pending"]


def test_adapter_process_timeouts_flushes_stale_prefix(clock) -> None:
    statuses: List[str] = []
    adapter, inserted = make_adapter(clock, update_status=statuses.append)

    adapter.handle_textual_key("j")
    assert adapter.process_timeouts() == ""

    clock.advance(0.5)

    assert adapter.process_timeouts() == "j"
    assert inserted == ["j"]
    assert statuses[-1] == "timeout"


def test_adapter_relays_mode_and_error_events(clock) -> None:
    events: List[tuple[str, object | None]] = []
    statuses: List[str] = []
    adapter, _ = make_adapter(
        clock,
        handle_event=lambda name, payload: events.append((name, payload)),
        update_status=statuses.append,
    )

    def broken(context: HandlerContext) -> None:
        raise RuntimeError("nope")

    adapter.engine.bind("!", Scope.COMMAND, broken)
    adapter.handle_textual_key("!", command_mode=True)

    names = [name for name, _ in events]
    assert names == ["mode.change", "handler.error"]
    assert "mode::command" in statuses
    assert any(status.startswith("error::'!'") for status in statuses)


def test_adapter_emits_log_lines(clock) -> None:
    logs: List[str] = []
    adapter, _ = make_adapter(clock, log=logs.append)

    adapter.handle_textual_key("j")

    assert logs[0].startswith("key ->")
    assert "pending='j'" in logs[-1]

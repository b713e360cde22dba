from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, List, Tuple

import pytest

from keyrelay.dispatch import DispatchEngine, KeyEvent
from keyrelay.keymaps import BindingStore, Scope
from keyrelay.runtime import telemetry


class RecordingLogger:
    """Stand-in for ``telelog.Logger`` that keeps every structured record."""

    def __init__(self) -> None:
        self.records: List[Tuple[str, str, dict[str, str]]] = []
        self.context: dict[str, str] = {}
        self.components: List[str] = []
        self.profiled: List[str] = []

    def add_context(self, key: str, value: str) -> None:
        self.context[key] = value

    def remove_context(self, key: str) -> None:
        self.context.pop(key, None)

    @contextmanager
    def track_component(self, name: str) -> Iterator[None]:
        self.components.append(name)
        yield

    @contextmanager
    def profile(self, name: str) -> Iterator[None]:
        self.profiled.append(name)
        yield

    def debug_with(self, message: str, pairs: List[Tuple[str, str]]) -> None:
        self.records.append(("debug", message, dict(pairs)))

    def error_with(self, message: str, pairs: List[Tuple[str, str]]) -> None:
        self.records.append(("error", message, dict(pairs)))

    def messages(self, message: str) -> List[dict[str, str]]:
        return [data for _level, name, data in self.records if name == message]


@pytest.fixture
def logger(monkeypatch: pytest.MonkeyPatch) -> RecordingLogger:
    fake = RecordingLogger()
    monkeypatch.setattr(telemetry, "get_logger", lambda name=None: fake)
    return fake


def test_span_end_carries_metadata_added_in_block(logger: RecordingLogger) -> None:
    with telemetry.span("work", metadata={"unit": "j"}) as handle:
        assert logger.context == {"unit": "j"}
        handle.add_metadata("status", "pending")

    assert logger.messages("span::end") == [
        {"span": "work", "unit": "j", "status": "pending"}
    ]
    assert logger.context == {}
    assert logger.profiled == ["work"]


def test_span_fail_reports_reason_and_reraises(logger: RecordingLogger) -> None:
    with pytest.raises(KeyError):
        with telemetry.span("work", component=True) as handle:
            handle.add_metadata("step", 2)
            raise KeyError("boom")

    assert logger.messages("span::end") == []
    [failure] = logger.messages("span::fail")
    assert failure["step"] == "2"
    assert failure["component"] == "work"
    assert "boom" in failure["reason"]
    assert logger.components == ["work"]


def test_record_event_writes_enum_values(logger: RecordingLogger) -> None:
    telemetry.record_event("mode.change", level="debug", data={"to": Scope.COMMAND})

    assert logger.messages("event::mode.change") == [
        {"event": "mode.change", "to": "command"}
    ]


def test_dispatch_status_is_written_on_span_end(
    logger: RecordingLogger, clock
) -> None:
    engine = DispatchEngine(clock=clock)
    engine.bind("jk", Scope.INSERT, lambda context: None)

    engine.dispatch(KeyEvent(unit="j"))
    engine.dispatch(KeyEvent(unit="k"))

    statuses = [
        data["status"]
        for data in logger.messages("span::end")
        if data["span"] == "dispatch::key"
    ]
    assert statuses == ["pending", "match"]


def test_rebinding_marks_replacement(logger: RecordingLogger) -> None:
    store = BindingStore()
    store.bind("x", Scope.ANY, lambda context: None)
    store.bind("x", Scope.ANY, lambda context: None)

    binds = [
        data for data in logger.messages("span::end") if data["span"] == "keymaps::bind"
    ]
    assert [data.get("replaced") for data in binds] == [None, "True"]

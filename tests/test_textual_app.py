from __future__ import annotations

import asyncio

import pytest

pytest.importorskip("textual")

from keyrelay.adapters.textual.app import (
    KeyRelayApp,
    RelayInput,
    _parse_args,
    build_engine,
)


def test_relay_input_uses_public_key_handler() -> None:
    assert "on_key" in RelayInput.__dict__
    assert "_on_key" not in RelayInput.__dict__


def test_typed_keys_reach_the_engine_before_the_input() -> None:
    async def run() -> tuple[str, bool]:
        app = KeyRelayApp(build_engine(_parse_args([])))
        async with app.run_test() as pilot:
            await pilot.press("a", "b", "j", "k")
            await pilot.pause()
            line = app.query_one(RelayInput).value
            return line, app.command_mode

    line, command_mode = asyncio.run(run())

    assert line == "ab"
    assert command_mode is True

from __future__ import annotations

import asyncio

from conftest import FakeConsole

from mc_builder.command_runtime import CommandDispatcher, anchor_to_player
from mc_builder.connection_gate import ConnectionGate
from mc_builder.models import CommandStatus, Facing, PlayerContext, Position
from mc_builder.response_parser import parse_reply

STEVE = PlayerContext(name="Steve", position=Position(0, 64, 0), facing=Facing.NORTH)


def test_dispatch_anchors_every_command_to_the_player(console: FakeConsole) -> None:
    async def _run():
        gate = ConnectionGate(console)
        return await CommandDispatcher().dispatch_under_gate(STEVE, ["time set day", "weather clear"], gate)

    result = asyncio.run(_run())

    assert result.succeeded
    assert console.sent == [
        "execute at Steve as Steve run time set day",
        "execute at Steve as Steve run weather clear",
    ]
    assert result.outcomes[0].stdout == "executed: execute at Steve as Steve run time set day"


def test_dispatch_halts_at_first_failure() -> None:
    console = FakeConsole(fail_on="minecraft:lava")
    commands = [
        "setblock 0 64 0 minecraft:stone",
        "setblock 1 64 0 minecraft:lava",
        "setblock 2 64 0 minecraft:stone",
        "setblock 3 64 0 minecraft:stone",
    ]

    async def _run():
        gate = ConnectionGate(console)
        return await CommandDispatcher().dispatch_under_gate(STEVE, commands, gate)

    result = asyncio.run(_run())

    assert len(result.outcomes) == 2
    assert [outcome.status for outcome in result.outcomes] == [CommandStatus.SUCCEEDED, CommandStatus.FAILED]
    assert result.completed_count == 1
    assert "RuntimeError" in (result.failed_outcome.error or "")
    assert len(console.sent) == 2


def test_dispatch_reports_timeout_and_stops() -> None:
    console = FakeConsole(delay=0.2)

    async def _run():
        gate = ConnectionGate(console, command_timeout_seconds=0.02)
        return await CommandDispatcher().dispatch_under_gate(STEVE, ["say one", "say two"], gate)

    result = asyncio.run(_run())

    assert len(result.outcomes) == 1
    assert result.outcomes[0].status == CommandStatus.TIMED_OUT
    assert "timed out" in (result.outcomes[0].error or "")


def test_slash_and_bare_forms_dispatch_identically() -> None:
    with_slash = parse_reply("```\n/say hello\n```").commands
    bare = parse_reply("```\nsay hello\n```").commands

    assert [anchor_to_player("Alex", c) for c in with_slash] == [anchor_to_player("Alex", c) for c in bare]
    assert anchor_to_player("Alex", bare[0]) == "execute at Alex as Alex run say hello"


def test_empty_command_list_sends_nothing(console: FakeConsole) -> None:
    async def _run():
        gate = ConnectionGate(console)
        return await CommandDispatcher().dispatch_under_gate(STEVE, [], gate)

    result = asyncio.run(_run())

    assert result.outcomes == []
    assert result.succeeded
    assert console.sent == []

from __future__ import annotations

import asyncio

import pytest
from conftest import FakeConsole

from mc_builder.connection_gate import ConnectionGate
from mc_builder.errors import PlayerLookupError, PlayerNotFound
from mc_builder.game_state import PlayerDirectory, parse_entity_numbers, parse_player_list
from mc_builder.models import Facing, Position


def test_parse_player_list_modern_and_legacy_formats() -> None:
    assert parse_player_list("There are 2 of a max of 20 players online: Steve, Alex") == {"Steve", "Alex"}
    assert parse_player_list("There are 1/20 players online:\nNotch") == {"Notch"}
    assert parse_player_list("There are 0 of a max of 20 players online: ") == set()


def test_parse_player_list_rejects_unknown_reply() -> None:
    with pytest.raises(PlayerLookupError):
        parse_player_list("Unknown command")


def test_parse_entity_numbers_handles_suffixes_and_negatives() -> None:
    reply = "Steve has the following entity data: [-12.5d, 64.0d, 3.0E-4d]"

    assert parse_entity_numbers(reply, expected=3) == [-12.5, 64.0, 0.0003]


@pytest.mark.parametrize(
    ("yaw", "facing"),
    [
        (0.0, Facing.SOUTH),
        (90.0, Facing.WEST),
        (180.0, Facing.NORTH),
        (-180.0, Facing.NORTH),
        (-90.0, Facing.EAST),
        (270.0, Facing.EAST),
        (-30.0, Facing.SOUTH),
    ],
)
def test_facing_from_yaw(yaw: float, facing: Facing) -> None:
    assert Facing.from_yaw(yaw) == facing


def test_resolve_reads_position_and_facing() -> None:
    console = FakeConsole({"Steve": ([10.7, 64.0, -3.2], [-90.0, 10.0])})

    async def _run():
        return await PlayerDirectory(ConnectionGate(console)).resolve("Steve")

    player = asyncio.run(_run())

    assert player.name == "Steve"
    assert player.position == Position(10, 64, -4)
    assert player.facing == Facing.EAST
    assert console.sent == ["list", "data get entity Steve Pos", "data get entity Steve Rotation"]


def test_resolve_missing_player(console: FakeConsole) -> None:
    async def _run():
        gate = ConnectionGate(console)
        try:
            await PlayerDirectory(gate).resolve("Herobrine")
        finally:
            assert not gate.locked

    with pytest.raises(PlayerNotFound):
        asyncio.run(_run())


def test_console_fault_becomes_lookup_error() -> None:
    console = FakeConsole(fail_on="list")

    async def _run():
        return await PlayerDirectory(ConnectionGate(console)).resolve("Steve")

    with pytest.raises(PlayerLookupError):
        asyncio.run(_run())

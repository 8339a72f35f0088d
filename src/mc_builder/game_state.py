"""Helpers for resolving live player placement through vanilla console commands."""

from __future__ import annotations

import logging
import math
import re

from mc_builder.connection_gate import ConnectionGate, GateHandle
from mc_builder.errors import PlayerLookupError, PlayerNotFound
from mc_builder.models import Facing, PlayerContext, Position

_ONLINE_RE = re.compile(r"players?\s+online\s*:\s*(.*)\Z", re.IGNORECASE | re.DOTALL)
_ENTITY_LIST_RE = re.compile(r"\[([^\]]*)\]")
_NUMBER_RE = re.compile(r"(-?\d+(?:\.\d+)?(?:[eE][-+]?\d+)?)[dfDF]?")
_FORMATTING_CODE_RE = re.compile(r"§.")


def parse_player_list(reply: str) -> set[str]:
    """Parse the reply of ``list`` into the set of online player names."""
    match = _ONLINE_RE.search(reply.strip())
    if not match:
        raise PlayerLookupError(f"Unrecognized player list reply: {reply!r}")

    names = _FORMATTING_CODE_RE.sub("", match.group(1))
    return {name.strip() for name in re.split(r"[,\n]", names) if name.strip()}


def parse_entity_numbers(reply: str, expected: int) -> list[float]:
    """Pull the numeric list out of a ``data get entity`` reply."""
    match = _ENTITY_LIST_RE.search(reply)
    if not match:
        raise PlayerLookupError(f"Unrecognized entity data reply: {reply!r}")

    values = [float(value) for value in _NUMBER_RE.findall(match.group(1))]
    if len(values) != expected:
        raise PlayerLookupError(f"Expected {expected} values in entity data reply: {reply!r}")
    return values


class PlayerDirectory:
    """Looks up online players and their placement on the shared console."""

    def __init__(self, gate: ConnectionGate, *, logger: logging.Logger | None = None) -> None:
        self._gate = gate
        self._logger = logger or logging.getLogger("mc_builder.game_state")

    async def list_players(self, handle: GateHandle) -> set[str]:
        return parse_player_list(await self._query(handle, "list"))

    async def fetch_player(self, handle: GateHandle, name: str) -> PlayerContext:
        x, y, z = parse_entity_numbers(await self._query(handle, f"data get entity {name} Pos"), expected=3)
        yaw, _pitch = parse_entity_numbers(await self._query(handle, f"data get entity {name} Rotation"), expected=2)
        return PlayerContext(
            name=name,
            position=Position(math.floor(x), math.floor(y), math.floor(z)),
            facing=Facing.from_yaw(yaw),
        )

    async def resolve(self, name: str) -> PlayerContext:
        """Find ``name`` among online players and read their current placement.

        Holds the gate only for the lookup itself.
        """
        async with self._gate.session() as handle:
            players = await self.list_players(handle)
            if name not in players:
                raise PlayerNotFound(name)
            player = await self.fetch_player(handle, name)

        self._logger.info(
            "player_resolved",
            extra={"player": player.name, "position": player.position.describe(), "facing": player.facing.value},
        )
        return player

    async def _query(self, handle: GateHandle, command: str) -> str:
        try:
            return await handle.send(command)
        except Exception as exc:  # noqa: BLE001 - console faults become request failures.
            raise PlayerLookupError(f"Console query failed ({command}): {type(exc).__name__}: {exc}") from exc

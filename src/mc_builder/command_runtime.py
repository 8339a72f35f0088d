"""Ordered dispatch of synthesized commands through the connection gate."""

from __future__ import annotations

import asyncio
import logging
from typing import Sequence

from mc_builder.connection_gate import ConnectionGate, GateHandle
from mc_builder.models import CommandOutcome, CommandStatus, DispatchResult, PlayerContext


def anchor_to_player(player_name: str, command: str) -> str:
    """Rewrite ``command`` so it runs at and as the named player."""
    return f"execute at {player_name} as {player_name} run {command}"


class CommandDispatcher:
    """Sends a player's commands one at a time and stops at the first failure.

    Commands that already ran are not rolled back; a short result tells the
    caller the build stopped part way.
    """

    def __init__(self, *, logger: logging.Logger | None = None) -> None:
        self._logger = logger or logging.getLogger("mc_builder.command_runtime")

    async def dispatch(
        self,
        player: PlayerContext,
        commands: Sequence[str],
        handle: GateHandle,
        result: DispatchResult | None = None,
    ) -> DispatchResult:
        """Run ``commands`` in order through an already-held gate ``handle``.

        Outcomes are appended to ``result`` as they happen, so a caller that
        cancels the dispatch still sees which commands already ran.
        """
        result = result if result is not None else DispatchResult()
        for index, raw_command in enumerate(commands, start=1):
            command = anchor_to_player(player.name, raw_command)
            self._logger.info(
                "command_started",
                extra={"player": player.name, "index": index, "command": command},
            )
            try:
                outcome = await self._send(handle, command, index)
            except asyncio.CancelledError:
                # The command may or may not have reached the server.
                result.outcomes.append(
                    CommandOutcome(
                        command=command,
                        status=CommandStatus.TIMED_OUT,
                        error="Cancelled while waiting for the console",
                    )
                )
                raise
            result.outcomes.append(outcome)
            if not outcome.ok:
                self._logger.warning(
                    "dispatch_halted",
                    extra={
                        "player": player.name,
                        "completed": result.completed_count,
                        "skipped": len(commands) - index,
                    },
                )
                break
        return result

    async def dispatch_under_gate(
        self,
        player: PlayerContext,
        commands: Sequence[str],
        gate: ConnectionGate,
        result: DispatchResult | None = None,
    ) -> DispatchResult:
        """Hold ``gate`` for the whole sequence, then release it."""
        async with gate.session() as handle:
            return await self.dispatch(player, commands, handle, result)

    async def _send(self, handle: GateHandle, command: str, index: int) -> CommandOutcome:
        try:
            output = await handle.send(command)
        except asyncio.TimeoutError:
            self._logger.warning("command_timeout", extra={"index": index, "command": command})
            return CommandOutcome(
                command=command,
                status=CommandStatus.TIMED_OUT,
                error="Command timed out waiting for the console",
            )
        except Exception as exc:  # noqa: BLE001 - a failed command is reported, not raised.
            self._logger.exception("command_failed", extra={"index": index, "command": command})
            return CommandOutcome(
                command=command,
                status=CommandStatus.FAILED,
                error=f"{type(exc).__name__}: {exc}",
            )

        stdout = str(output) if output is not None else None
        self._logger.info("command_succeeded", extra={"index": index, "stdout": stdout})
        return CommandOutcome(command=command, status=CommandStatus.SUCCEEDED, stdout=stdout)

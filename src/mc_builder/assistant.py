from __future__ import annotations

import asyncio
import logging

from .command_runtime import CommandDispatcher
from .connection_gate import ConnectionGate
from .errors import BadRequest, BuildTimeout, DispatchFailure
from .game_state import PlayerDirectory
from .llm_client import ChatModel
from .models import BuildRequest, BuildResult, DispatchResult
from .prompting import build_messages
from .response_parser import parse_reply


class BuildAssistant:
    """Runs one build request end to end: player, prompt, model, parse, dispatch."""

    def __init__(
        self,
        *,
        gate: ConnectionGate,
        model: ChatModel,
        directory: PlayerDirectory | None = None,
        dispatcher: CommandDispatcher | None = None,
        request_timeout_seconds: float | None = 120.0,
        logger: logging.Logger | None = None,
    ):
        self.gate = gate
        self.model = model
        self.directory = directory or PlayerDirectory(gate)
        self.dispatcher = dispatcher or CommandDispatcher()
        self.request_timeout_seconds = request_timeout_seconds
        self._logger = logger or logging.getLogger("mc_builder.assistant")

    async def handle(self, request: BuildRequest) -> BuildResult:
        self.validate(request)
        dispatch = DispatchResult()
        try:
            return await asyncio.wait_for(self._run(request, dispatch), timeout=self.request_timeout_seconds)
        except asyncio.TimeoutError as exc:
            self._logger.warning(
                "build_timeout",
                extra={
                    "player": request.player_name,
                    "timeout_seconds": self.request_timeout_seconds,
                    "completed": dispatch.completed_count,
                },
            )
            raise BuildTimeout(f"Build request timed out after {self.request_timeout_seconds}s", dispatch) from exc

    async def close(self) -> None:
        """Release the model client; the console connection is owned by the caller."""
        await self.model.close()

    async def _run(self, request: BuildRequest, dispatch: DispatchResult) -> BuildResult:
        player = await self.directory.resolve(request.player_name)

        reply = await self.model.complete(build_messages(player, request.message))
        parsed = parse_reply(reply)
        if not parsed.commands:
            self._logger.warning("empty_command_list", extra={"player": player.name})

        await self.dispatcher.dispatch_under_gate(player, parsed.commands, self.gate, dispatch)
        failed = dispatch.failed_outcome
        if failed is not None:
            raise DispatchFailure(failed.command, dispatch, failed.error)

        self._logger.info(
            "build_completed",
            extra={"player": player.name, "commands": len(parsed.commands), "description": parsed.description},
        )
        return BuildResult(
            player=player,
            description=parsed.description,
            commands=parsed.commands,
            dispatch=dispatch,
            reply=reply,
        )

    @staticmethod
    def validate(request: BuildRequest) -> None:
        if not isinstance(request.player_name, str) or not request.player_name.strip():
            raise BadRequest("player_name must be a non-empty string")
        if not isinstance(request.message, str):
            raise BadRequest("message must be a string")

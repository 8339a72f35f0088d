"""CLI-side handler wrappers for one-shot builds."""

from __future__ import annotations

import asyncio

from mc_builder.assistant import BuildAssistant
from mc_builder.models import BuildRequest, BuildResult


class CliBuildHandler:
    """Simple sync-friendly facade over the async build assistant."""

    def __init__(self, assistant: BuildAssistant) -> None:
        self._assistant = assistant

    def run(self, player_name: str, message: str) -> BuildResult:
        """Run one build, then close the assistant's model client on the same event loop."""
        return asyncio.run(self._run(BuildRequest(player_name=player_name, message=message)))

    async def _run(self, request: BuildRequest) -> BuildResult:
        try:
            return await self._assistant.handle(request)
        finally:
            await self._assistant.close()

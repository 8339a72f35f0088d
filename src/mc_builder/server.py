"""FastAPI surface for build requests.

The RCON connection is opened once during startup; failing to open it
aborts the server since nothing can be built without it.
"""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from mc_builder.adapters import RconConsoleAdapter
from mc_builder.assistant import BuildAssistant
from mc_builder.config import Settings, settings
from mc_builder.connection_gate import ConnectionGate
from mc_builder.errors import (
    BadRequest,
    BuildTimeout,
    DispatchFailure,
    ParseFailure,
    PlayerLookupError,
    PlayerNotFound,
    UpstreamModelError,
)
from mc_builder.llm_client import OpenAIChatClient
from mc_builder.models import BuildRequest, BuildResult, DispatchResult

logger = logging.getLogger("mc_builder.server")


class BuildRequestBody(BaseModel):
    player_name: str
    message: str = ""


def serialize_dispatch(result: DispatchResult) -> list[dict]:
    return [
        {
            "command": outcome.command,
            "status": outcome.status.value,
            "stdout": outcome.stdout,
            "error": outcome.error,
        }
        for outcome in result.outcomes
    ]


def serialize_build(result: BuildResult) -> dict:
    return {
        "player": {
            "name": result.player.name,
            "position": {
                "x": result.player.position.x,
                "y": result.player.position.y,
                "z": result.player.position.z,
            },
            "facing": result.player.facing.value,
        },
        "description": result.description,
        "commands": list(result.commands),
        "results": serialize_dispatch(result.dispatch),
        "reply": result.reply,
    }


def build_assistant(config: Settings) -> tuple[BuildAssistant, RconConsoleAdapter]:
    """Connect to the console and wire the pipeline; raises ``ConsoleUnavailableError``."""
    adapter = RconConsoleAdapter(
        host=config.rcon_host,
        port=config.rcon_port,
        password=config.rcon_password,
        timeout_seconds=config.command_timeout_seconds,
    )
    adapter.connect()
    model = OpenAIChatClient(
        config.openai_api_key,
        model=config.openai_model,
        base_url=config.openai_base_url,
        timeout_seconds=config.openai_timeout_seconds,
    )
    gate = ConnectionGate(adapter, command_timeout_seconds=config.command_timeout_seconds)
    assistant = BuildAssistant(
        gate=gate,
        model=model,
        request_timeout_seconds=config.request_timeout_seconds,
    )
    return assistant, adapter


def create_app(assistant: BuildAssistant | None = None, config: Settings | None = None) -> FastAPI:
    """Create the HTTP app; a prebuilt ``assistant`` skips connecting at startup."""
    config = config or settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if assistant is not None:
            app.state.assistant = assistant
            yield
            return

        built, adapter = await asyncio.to_thread(build_assistant, config)
        app.state.assistant = built
        logger.info("server_ready", extra={"rcon": config.rcon_hostport, "model": config.openai_model})
        try:
            yield
        finally:
            await built.close()
            adapter.close()

    app = FastAPI(title=config.app_name, lifespan=lifespan)

    async def build(request: Request):
        try:
            payload = await request.json()
            body = BuildRequestBody.model_validate(payload)
        except ValueError as exc:
            return JSONResponse(status_code=400, content={"detail": f"malformed request body: {exc}"})

        build_request = BuildRequest(player_name=body.player_name, message=body.message)
        try:
            result = await app.state.assistant.handle(build_request)
        except BadRequest as exc:
            return JSONResponse(status_code=400, content={"detail": str(exc)})
        except PlayerNotFound as exc:
            return JSONResponse(status_code=404, content={"detail": str(exc)})
        except DispatchFailure as exc:
            return JSONResponse(
                status_code=500,
                content={
                    "detail": str(exc),
                    "error": "dispatch_failed",
                    "command": exc.command,
                    "completed": exc.completed,
                    "results": serialize_dispatch(exc.result),
                },
            )
        except ParseFailure as exc:
            return JSONResponse(status_code=500, content={"detail": str(exc), "error": exc.reason, "completed": 0})
        except (UpstreamModelError, PlayerLookupError) as exc:
            return JSONResponse(status_code=500, content={"detail": str(exc), "error": "upstream_failed", "completed": 0})
        except BuildTimeout as exc:
            return JSONResponse(
                status_code=504,
                content={
                    "detail": str(exc),
                    "error": "timeout",
                    "completed": exc.completed,
                    "results": serialize_dispatch(exc.result),
                },
            )

        return serialize_build(result)

    app.add_api_route("/", build, methods=["POST"])
    app.add_api_route("/build", build, methods=["POST"])

    @app.get("/health")
    async def health() -> dict:
        return {"status": "ok"}

    return app

"""CLI startup entrypoint for MC Builder."""

from __future__ import annotations

from pathlib import Path

import typer
from rich import print

from mc_builder.cli import CliBuildHandler
from mc_builder.config import settings
from mc_builder.errors import BuildError, BuildTimeout, ConsoleUnavailableError, DispatchFailure, ParseFailure
from mc_builder.models import Facing, PlayerContext, Position
from mc_builder.prompting import build_prompt
from mc_builder.response_parser import parse_reply
from mc_builder.server import build_assistant, create_app, serialize_build, serialize_dispatch
from mc_builder.telemetry.logging import configure_logging

app = typer.Typer(help="MC Builder service entrypoint")


def _mask(secret: str | None) -> str | None:
    if not secret:
        return secret
    return f"{secret[:3]}***" if len(secret) > 6 else "***"


@app.command()
def start() -> None:
    """Show runtime backend configuration."""
    print(
        {
            "app_name": settings.app_name,
            "rcon": f"{settings.rcon_host}:{settings.rcon_port}",
            "rcon_password": _mask(settings.rcon_password),
            "openai_api_key": _mask(settings.openai_api_key),
            "openai_model": settings.openai_model,
            "openai_base_url": settings.openai_base_url,
            "http": f"{settings.http_host}:{settings.http_port}",
        }
    )


@app.command()
def serve(
    host: str = typer.Option(None, help="Bind address (defaults to MC_BUILDER_HTTP_HOST)"),
    port: int = typer.Option(None, help="Bind port (defaults to MC_BUILDER_HTTP_PORT)"),
) -> None:
    """Run the HTTP build service."""
    import uvicorn

    configure_logging(settings.log_level)
    uvicorn.run(
        create_app(),
        host=host or settings.http_host,
        port=port or settings.http_port,
        log_config=None,
    )


@app.command()
def prompt(
    message: str = typer.Argument(..., help="Build request text"),
    x: int = typer.Option(0, help="Player X"),
    y: int = typer.Option(64, help="Player Y"),
    z: int = typer.Option(0, help="Player Z"),
    facing: Facing = typer.Option(Facing.NORTH, help="Player facing"),
    player: str = typer.Option("player", help="Player name"),
) -> None:
    """Print the model prompt for a player placement without calling anything."""
    system_message, user_message = build_prompt(
        PlayerContext(name=player, position=Position(x, y, z), facing=facing),
        message,
    )
    print(system_message)
    print(user_message)


@app.command()
def parse(reply_file: Path = typer.Argument(..., help="File holding a saved model reply")) -> None:
    """Parse a saved model reply into commands and description."""
    text = reply_file.read_text(encoding="utf-8")
    try:
        outcome = parse_reply(text)
    except ParseFailure as exc:
        print({"error": exc.reason, "detail": str(exc)})
        raise typer.Exit(code=1)

    print({"commands": list(outcome.commands), "description": outcome.description})


@app.command()
def build(
    player: str = typer.Argument(..., help="Online player to build for"),
    message: str = typer.Argument(..., help="Build request text"),
) -> None:
    """Run one build request through the full pipeline."""
    configure_logging(settings.log_level)
    try:
        assistant, adapter = build_assistant(settings)
    except ConsoleUnavailableError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=2)

    try:
        result = CliBuildHandler(assistant).run(player, message)
    except (DispatchFailure, BuildTimeout) as exc:
        print({"error": str(exc), "completed": exc.completed, "results": serialize_dispatch(exc.result)})
        raise typer.Exit(code=1)
    except BuildError as exc:
        print({"error": str(exc)})
        raise typer.Exit(code=1)
    finally:
        adapter.close()

    print(serialize_build(result))


if __name__ == "__main__":
    app()

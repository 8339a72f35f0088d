"""Failures surfaced by the build pipeline.

Every error here is scoped to a single request except
``ConsoleUnavailableError`` raised while connecting at startup.
"""

from __future__ import annotations

from mc_builder.models import DispatchResult


class BuildError(Exception):
    """Base class for request-level build failures."""


class BadRequest(BuildError):
    """Raised when the inbound request body is malformed."""


class PlayerNotFound(BuildError):
    """Raised when the requesting player is not online."""

    def __init__(self, player_name: str) -> None:
        super().__init__(f"player not found: {player_name}")
        self.player_name = player_name


class UpstreamModelError(BuildError):
    """Raised when the chat-completion call fails or returns no usable choice."""


class ParseFailure(BuildError):
    """Raised when the model reply cannot be turned into commands."""

    NO_FENCED_BLOCK = "no_fenced_block"

    def __init__(self, reason: str, message: str | None = None) -> None:
        super().__init__(message or reason)
        self.reason = reason


class DispatchFailure(BuildError):
    """Raised when a console command fails after ``completed`` commands already ran.

    Commands that ran before the failure have changed the world and are not undone.
    """

    def __init__(self, command: str, result: DispatchResult, error: str | None) -> None:
        self.command = command
        self.result = result
        self.completed = result.completed_count
        super().__init__(f"command failed after {self.completed} succeeded: {command} ({error or 'unknown error'})")


class BuildTimeout(BuildError):
    """Raised when a request exceeds its overall time budget.

    ``result`` holds whatever was dispatched before the deadline; a non-zero
    ``completed`` means the world was already changed.
    """

    def __init__(self, message: str, result: DispatchResult | None = None) -> None:
        super().__init__(message)
        self.result = result if result is not None else DispatchResult()
        self.completed = self.result.completed_count


class ConsoleUnavailableError(RuntimeError):
    """Raised when the remote console connection cannot be established."""


class GateClosedError(RuntimeError):
    """Raised when a released gate handle is used to send a command."""


class PlayerLookupError(BuildError):
    """Raised when the console cannot report the player list or a player's placement."""

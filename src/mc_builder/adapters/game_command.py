"""Boundary for remote-console command transports."""

from dataclasses import dataclass
from typing import Protocol


@dataclass(slots=True)
class ConsoleCommand:
    """Canonical command payload directed to the game server console."""

    command: str


class ConsoleAdapter(Protocol):
    """Interface to send commands to a running Minecraft server."""

    def connect(self) -> None:
        """Open (or reopen) the console session."""

    def send(self, payload: ConsoleCommand) -> str:
        """Dispatch a command and return the server's textual acknowledgement."""

    def close(self) -> None:
        """Release the console session."""

"""Remote-console adapters (RCON integration)."""

from .game_command import ConsoleAdapter, ConsoleCommand
from .rcon_console import RconConsoleAdapter, parse_hostport

__all__ = [
    "ConsoleAdapter",
    "ConsoleCommand",
    "RconConsoleAdapter",
    "parse_hostport",
]

"""Live Minecraft console adapter.

Wraps a single persistent ``rcon`` session. The adapter itself is not
safe for concurrent use; callers reach it only through
``mc_builder.connection_gate.ConnectionGate``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from rcon.exceptions import WrongPassword
from rcon.source import Client

from mc_builder.adapters.game_command import ConsoleAdapter, ConsoleCommand
from mc_builder.errors import ConsoleUnavailableError

DEFAULT_RCON_PORT = 25575

logger = logging.getLogger("mc_builder.adapters.rcon")


def parse_hostport(hostport: str, default_port: int = DEFAULT_RCON_PORT) -> tuple[str, int]:
    """Split ``host:port`` into its parts, falling back to ``default_port``."""
    host, sep, port = hostport.strip().rpartition(":")
    if not sep:
        return hostport.strip(), default_port
    if not port.isdigit():
        raise ValueError(f"Invalid RCON port in {hostport!r}")
    return host or "127.0.0.1", int(port)


@dataclass(slots=True)
class RconConsoleAdapter(ConsoleAdapter):
    """Adapter that sends commands over one authenticated RCON connection."""

    host: str
    port: int
    password: str
    timeout_seconds: float | None = 5.0
    _client: Client | None = field(default=None, init=False, repr=False)

    def connect(self) -> None:
        self.close()
        client = Client(self.host, self.port, timeout=self.timeout_seconds, passwd=self.password)
        try:
            client.connect(login=True)
        except WrongPassword as exc:
            client.close()
            raise ConsoleUnavailableError(f"RCON login rejected by {self.host}:{self.port}") from exc
        except OSError as exc:
            client.close()
            raise ConsoleUnavailableError(f"Unable to reach RCON at {self.host}:{self.port}: {exc}") from exc
        self._client = client
        logger.info("rcon_connected", extra={"host": self.host, "port": self.port})

    def send(self, payload: ConsoleCommand) -> str:
        if self._client is None:
            self.connect()
        result = self._client.run(payload.command)
        return "" if result is None else str(result)

    def close(self) -> None:
        if self._client is None:
            return
        client, self._client = self._client, None
        try:
            client.close()
        except OSError:
            logger.warning("rcon_close_failed", extra={"host": self.host, "port": self.port})

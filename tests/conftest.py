from __future__ import annotations

import threading
import time

import pytest

from mc_builder.adapters import ConsoleCommand


class FakeConsole:
    """In-process stand-in for an RCON session that records every command."""

    def __init__(
        self,
        players: dict[str, tuple[list[float], list[float]]] | None = None,
        *,
        fail_on: str | None = None,
        delay: float = 0.0,
        broken: bool = False,
    ) -> None:
        self.players = players if players is not None else {"Steve": ([10.7, 64.0, -3.2], [180.0, 0.0])}
        self.fail_on = fail_on
        self.delay = delay
        self.broken = broken
        self.sent: list[str] = []
        self.connects = 0
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def connect(self) -> None:
        self.connects += 1
        self.broken = False

    def close(self) -> None:
        pass

    def send(self, payload: ConsoleCommand) -> str:
        with self._lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            return self._reply(payload.command)
        finally:
            with self._lock:
                self.in_flight -= 1

    def _reply(self, command: str) -> str:
        if self.broken:
            raise ConnectionResetError("connection reset by peer")
        self.sent.append(command)
        if self.fail_on and self.fail_on in command:
            raise RuntimeError("boom")
        if command == "list":
            names = ", ".join(self.players)
            return f"There are {len(self.players)} of a max of 20 players online: {names}"
        if command.startswith("data get entity "):
            name, path = command.split()[3:5]
            if name not in self.players:
                return "No entity was found"
            position, rotation = self.players[name]
            values, suffix = (position, "d") if path == "Pos" else (rotation, "f")
            return f"{name} has the following entity data: [{', '.join(f'{v}{suffix}' for v in values)}]"
        return f"executed: {command}"


class FakeModel:
    def __init__(self, reply: str) -> None:
        self.reply = reply
        self.calls: list[list[dict[str, str]]] = []
        self.closed = False

    async def complete(self, messages: list[dict[str, str]]) -> str:
        self.calls.append(messages)
        return self.reply

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def console() -> FakeConsole:
    return FakeConsole()

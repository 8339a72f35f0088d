"""Mutual exclusion around the single shared console connection."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator
from uuid import uuid4

from mc_builder.adapters import ConsoleAdapter, ConsoleCommand
from mc_builder.errors import GateClosedError


class GateHandle:
    """Proof of exclusive access; valid from ``acquire`` until ``release``."""

    def __init__(self, gate: ConnectionGate, handle_id: str) -> None:
        self._gate = gate
        self.id = handle_id
        self._open = True

    @property
    def is_open(self) -> bool:
        return self._open

    async def send(self, command: str) -> str:
        """Run one command/response round trip on the shared connection."""
        if not self._open:
            raise GateClosedError(f"Gate handle {self.id} was already released")
        return await self._gate._round_trip(command)

    def _close(self) -> None:
        self._open = False


class ConnectionGate:
    """Serializes access to one console adapter across concurrent requests.

    A holder keeps the gate for its whole command sequence, so sequences
    from different requests never interleave. Waiters are served in
    arrival order.
    """

    def __init__(
        self,
        adapter: ConsoleAdapter,
        *,
        command_timeout_seconds: float = 5.0,
        logger: logging.Logger | None = None,
    ) -> None:
        self._adapter = adapter
        self._command_timeout_seconds = command_timeout_seconds
        self._logger = logger or logging.getLogger("mc_builder.connection_gate")
        self._lock = asyncio.Lock()
        self._holder: GateHandle | None = None
        self._stale = False

    @property
    def locked(self) -> bool:
        return self._lock.locked()

    @property
    def command_timeout_seconds(self) -> float:
        return self._command_timeout_seconds

    async def acquire(self) -> GateHandle:
        """Wait until the connection is free and return a handle for it."""
        await self._lock.acquire()
        handle = GateHandle(self, uuid4().hex)
        self._holder = handle
        self._logger.debug("gate_acquired", extra={"handle_id": handle.id})
        return handle

    def release(self, handle: GateHandle) -> None:
        if handle is not self._holder:
            raise GateClosedError(f"Gate handle {handle.id} does not hold the gate")
        handle._close()
        self._holder = None
        self._lock.release()
        self._logger.debug("gate_released", extra={"handle_id": handle.id})

    @asynccontextmanager
    async def session(self) -> AsyncIterator[GateHandle]:
        """Hold the gate for the duration of the ``async with`` block."""
        handle = await self.acquire()
        try:
            yield handle
        finally:
            self.release(handle)

    async def _round_trip(self, command: str) -> str:
        if self._stale:
            self._logger.warning("console_reconnecting")
            await asyncio.to_thread(self._adapter.connect)
            self._stale = False

        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self._adapter.send, ConsoleCommand(command=command)),
                timeout=self._command_timeout_seconds,
            )
        except BaseException:
            # A failed, abandoned or desynced exchange leaves the session unusable.
            self._stale = True
            raise

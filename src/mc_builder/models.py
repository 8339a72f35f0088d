"""Value types shared across the build pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


@dataclass(frozen=True, slots=True)
class Position:
    """Integer block coordinate in the world."""

    x: int
    y: int
    z: int

    def describe(self) -> str:
        return f"(X: {self.x}, Y: {self.y}, Z: {self.z})"


class Facing(str, Enum):
    """Cardinal direction a player looks towards.

    north is -Z, south is +Z, east is +X and west is -X.
    """

    NORTH = "north"
    SOUTH = "south"
    EAST = "east"
    WEST = "west"

    @classmethod
    def from_yaw(cls, yaw: float) -> Facing:
        """Map a Minecraft yaw in degrees (0 = south, 90 = west) onto a cardinal direction."""
        normalized = yaw % 360.0
        if normalized >= 315.0 or normalized < 45.0:
            return cls.SOUTH
        if normalized < 135.0:
            return cls.WEST
        if normalized < 225.0:
            return cls.NORTH
        return cls.EAST


@dataclass(frozen=True, slots=True)
class PlayerContext:
    """Player identity and placement, resolved fresh for every request."""

    name: str
    position: Position
    facing: Facing


@dataclass(frozen=True, slots=True)
class BuildRequest:
    player_name: str
    message: str = ""


@dataclass(frozen=True, slots=True)
class ParsedOutcome:
    """Commands in execution order plus the model's description of the build."""

    commands: tuple[str, ...]
    description: str = ""


class CommandStatus(str, Enum):
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    TIMED_OUT = "timed_out"


@dataclass(slots=True)
class CommandOutcome:
    """Result of one console round trip."""

    command: str
    status: CommandStatus
    stdout: str | None = None
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.status == CommandStatus.SUCCEEDED


@dataclass(slots=True)
class DispatchResult:
    """Ordered outcomes of a dispatch; stops at the first failed command."""

    outcomes: list[CommandOutcome] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return all(outcome.ok for outcome in self.outcomes)

    @property
    def completed_count(self) -> int:
        return sum(1 for outcome in self.outcomes if outcome.ok)

    @property
    def failed_outcome(self) -> CommandOutcome | None:
        for outcome in self.outcomes:
            if not outcome.ok:
                return outcome
        return None


@dataclass(slots=True)
class BuildResult:
    """Everything a caller learns about a finished build request."""

    player: PlayerContext
    description: str
    commands: tuple[str, ...]
    dispatch: DispatchResult
    reply: str

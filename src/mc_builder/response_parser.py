"""Turn free-form model replies into executable console commands."""

from __future__ import annotations

import re

from mc_builder.errors import ParseFailure
from mc_builder.models import ParsedOutcome

_CLOSED_BLOCK_RE = re.compile(r"```(.+?)```", re.DOTALL)
# Last fence up to end of text, closed or not; tolerates a missing closing fence.
_TRAILING_BLOCK_RE = re.compile(r"```([^`]+?)\Z", re.DOTALL)

_LANGUAGE_TAGS = frozenset({"mcfunction", "minecraft", "text", "bash", "sh", "shell", "plaintext"})


def parse_reply(reply: str) -> ParsedOutcome:
    """Extract the ordered command list and trailing description from ``reply``.

    Raises ``ParseFailure`` when the reply has no fenced block at all.
    """
    if "```" not in reply:
        raise ParseFailure(ParseFailure.NO_FENCED_BLOCK, "model reply contains no fenced command block")

    commands: list[str] = []
    for block in _CLOSED_BLOCK_RE.findall(reply):
        commands.extend(_block_commands(block))

    description_match = _TRAILING_BLOCK_RE.search(reply)
    description = description_match.group(1).strip() if description_match else ""

    return ParsedOutcome(commands=tuple(commands), description=description)


def strip_slash(command: str) -> str:
    """Drop exactly one leading ``/``; console commands are equivalent with or without it."""
    return command[1:] if command.startswith("/") else command


def _block_commands(block: str) -> list[str]:
    lines = block.split("\n")
    if lines and lines[0].strip().lower() in _LANGUAGE_TAGS:
        lines = lines[1:]

    commands: list[str] = []
    for line in lines:
        line = line.strip()
        if not line:
            continue
        commands.append(strip_slash(line))
    return commands

"""Prompt construction for the command-synthesis model.

The worked example in ``SYSTEM_PROMPT`` fixes the reply shape that
``mc_builder.response_parser`` relies on: one fenced block of commands
followed by a single line of description. Editing it changes how often
replies parse cleanly.
"""

from __future__ import annotations

from mc_builder.models import PlayerContext

FENCE = "```"

SYSTEM_PROMPT = f"""
The assistant possesses great Minecraft building skills and extensive knowledge of Minecraft commands.
The player is currently playing Minecraft Java Edition.
In Minecraft, the negative X-axis corresponds to facing west, while the positive X-axis corresponds to facing east.
Similarly, facing north corresponds to the negative Z-axis, and facing south corresponds to the positive Z-axis.
Position is specified as X, Y, Z order.

The assistant is capable of responding to certain commands and providing a description message.
These commands will execute in the Minecraft world with operator privileges.
The assistant's response follows a specific format, as demonstrated below:

{FENCE}
/setblock 100 64 120 minecraft:oak_planks
/fill 110 64 130 150 67 170 minecraft:oak_planks
{FENCE}

To place some oak planks blocks.
"""


def build_user_message(context: PlayerContext, request_text: str) -> str:
    return (
        f"\nThe player is currently at {context.position.describe()} and is facing {context.facing.value}.\n"
        "Tell me the commands that carry out the following request.\n\n"
        f"\t{request_text}"
    )


def build_prompt(context: PlayerContext, request_text: str) -> tuple[str, str]:
    """Return ``(system_message, user_message)`` for a build request."""
    return SYSTEM_PROMPT, build_user_message(context, request_text)


def build_messages(context: PlayerContext, request_text: str) -> list[dict[str, str]]:
    """Return the prompt as an ordered chat-completion message list."""
    system_message, user_message = build_prompt(context, request_text)
    return [
        {"role": "system", "content": system_message},
        {"role": "user", "content": user_message},
    ]

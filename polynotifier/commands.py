"""Bot commands and parsing of command messages."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import List, Tuple

GLOBAL_DESCRIPTION = "Available commands:"
PREFIX = "/"


class Command(str, enum.Enum):
    """Every command users can send to the bot."""

    START = "start"
    SUBSCRIBE = "subscribe"
    UNSUBSCRIBE = "unsubscribe"
    ALERT = "alert"
    LIST = "list"
    PRICES = "prices"
    TIMEZONE = "timezone"
    FEEDBACK = "feedback"
    HELP = "help"

    @property
    def description(self) -> str:
        return _DESCRIPTIONS[self]

    @property
    def takes_argument(self) -> bool:
        return self is Command.TIMEZONE


_DESCRIPTIONS = {
    Command.START: "Start the bot",
    Command.SUBSCRIBE: "Subscribe to a market",
    Command.UNSUBSCRIBE: "Unsubscribe from a market",
    Command.ALERT: "Set a price alert",
    Command.LIST: "List your subscriptions",
    Command.PRICES: "Check current prices",
    Command.TIMEZONE: "Set your timezone",
    Command.FEEDBACK: "Send feedback",
    Command.HELP: "Show help",
}


@dataclass(frozen=True)
class ParsedCommand:
    """A recognised command together with the text that followed it."""

    command: Command
    argument: str = ""


def parse_command(text: str, bot_name: str) -> ParsedCommand:
    """Parse ``/name[@bot] args`` into a command.

    Raises ValueError if the text is not a command, names another bot,
    names an unknown command, or has the wrong number of arguments.
    """
    if not text.startswith(PREFIX):
        raise ValueError("text is not a command")
    parts = text.split(None, 1)
    head = parts[0] if parts else ""
    argument = text[len(head):].lstrip() if parts else ""
    # Text after the first whitespace character is the argument string.
    head_end = len(head)
    if head_end < len(text):
        argument = text[head_end + 1:]
    name, _, addressed = head[len(PREFIX):].partition("@")
    if addressed and addressed.lower() != bot_name.lower():
        raise ValueError(f"command is addressed to another bot: {addressed}")
    try:
        command = Command(name)
    except ValueError:
        raise ValueError(f"unknown command: {name}") from None
    if command.takes_argument and " " in argument:
        raise ValueError(f"too many arguments for /{name}")
    return ParsedCommand(command, argument)


def descriptions() -> str:
    """Help text listing every command."""
    lines = [f"{PREFIX}{cmd.value} — {cmd.description}" for cmd in Command]
    return GLOBAL_DESCRIPTION + "\n\n" + "\n".join(lines)


def bot_commands() -> List[Tuple[str, str]]:
    """``(name, description)`` pairs to register with the chat platform."""
    return [(cmd.value, cmd.description) for cmd in Command]
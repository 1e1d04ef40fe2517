"""Parsing of trigger-prefixed commands and their --key=value arguments."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any

from .helpers import markdown_to_irc

MAX_CHUNK_BYTES = 450
TRIM_THRESHOLD_BYTES = 350

_INT_RE = re.compile(r"[+-]?\d+")


@dataclass
class Argument:
    key: str
    value: Any


@dataclass
class ParsedCommand:
    """A command's action, its free-text message and its arguments."""

    action: str = ""
    message: str = ""
    arguments: list[Argument] = field(default_factory=list)

    def find(self, name: str, default: Any = None) -> Any:
        """Value of the first argument with this key, or default."""
        return next((arg.value for arg in self.arguments if arg.key == name), default)

    def get_string(self, name: str, default: str = "") -> str:
        value = self.find(name, default)
        return value if isinstance(value, str) else default

    def get_int(self, name: str, default: int = 0) -> int:
        value = self.find(name, default)
        if isinstance(value, str) and _INT_RE.fullmatch(value):
            return int(value)
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return default

    def get_bool(self, name: str) -> bool:
        return self.find(name, False) is True

    def is_empty_message(self) -> bool:
        return self.message == ""


def _is_quote(char: str) -> bool:
    return char in ("'", '"')


def parse_arguments(message: str) -> tuple[str, list[Argument]]:
    """Split --flag, --key=value and --key="quoted value" out of a message.

    Returns the remaining words joined by single spaces, and the arguments in order.
    """
    words = message.split()
    remaining: list[str] = []
    arguments: list[Argument] = []
    i = 0
    while i < len(words):
        word = words[i]
        if not word.startswith("--"):
            remaining.append(word)
            i += 1
            continue

        key, sep, value = word[2:].partition("=")
        if not sep:
            arguments.append(Argument(key, True))
            i += 1
            continue

        if len(value) >= 2 and _is_quote(value[0]) and value[-1] == value[0]:
            arguments.append(Argument(key, value[1:-1]))
            i += 1
            continue
        if len(value) >= 2 and value[0] == "'" and value.endswith('"') or (
            len(value) >= 2 and value[0] == '"' and value.endswith("'")
        ):
            arguments.append(Argument(key, value[1:-1]))
            i += 1
            continue

        if value and _is_quote(value[0]):
            quote = value[0]
            parts = [value[1:]]
            i += 1
            while i < len(words):
                part = words[i]
                if part.endswith(quote):
                    parts.append(part[:-1])
                    break
                parts.append(part)
                i += 1
            arguments.append(Argument(key, " ".join(parts)))
            i += 1
            continue

        arguments.append(Argument(key, value))
        i += 1

    return " ".join(remaining), arguments


def parse_command(text: str, trigger: str) -> ParsedCommand:
    """Parse '<trigger><action> <message>' into a command; ValueError without the trigger."""
    if not text.startswith(trigger):
        raise ValueError("no action trigger")
    action, _, rest = text[len(trigger):].partition(" ")
    message, arguments = parse_arguments(rest.strip())
    return ParsedCommand(action=action.strip(), message=message, arguments=arguments)


def _byte_len(text: str) -> int:
    return len(text.encode())


def chunk_message(message: str) -> list[str]:
    """Turn a reply into IRC-sized lines.

    Markdown is converted, lines of two bytes or fewer are dropped, and long
    lines are split at spaces once a piece passes the size limit.
    """
    out: list[str] = []
    for line in markdown_to_irc(message).split("\n"):
        if _byte_len(line) <= 2:
            continue
        pending = ""
        for chunk in line.split(" "):
            pending += chunk + " "
            if _byte_len(pending) > MAX_CHUNK_BYTES:
                out.append(pending)
                pending = ""
        if pending:
            out.append(pending)
    return out


def should_trim_output(message: str, trim_enabled: bool) -> bool:
    """Whether a reply should be uploaded and only excerpted in the channel."""
    return (trim_enabled and _byte_len(message) > TRIM_THRESHOLD_BYTES) or "<think>" in message
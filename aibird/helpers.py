"""Formatting and small utility helpers shared across the bot."""

from __future__ import annotations

import re
import time
from collections.abc import Iterable, Sequence

import requests

IP_ECHO_URL = "https://ifconfig.io"

_COLOURS = {
    "white": "\x0300",
    "black": "\x0301",
    "blue": "\x0302",
    "navy": "\x0302",
    "green": "\x0303",
    "red": "\x0304",
    "brown": "\x0305",
    "maroon": "\x0305",
    "purple": "\x0306",
    "gold": "\x0307",
    "olive": "\x0307",
    "orange": "\x0307",
    "yellow": "\x0308",
    "lightgreen": "\x0309",
    "lime": "\x0309",
    "teal": "\x0310",
    "cyan": "\x0311",
    "lightblue": "\x0312",
    "royal": "\x0312",
    "fuchsia": "\x0313",
    "lightpurple": "\x0313",
    "pink": "\x0313",
    "gray": "\x0314",
    "grey": "\x0314",
    "lightgrey": "\x0315",
    "silver": "\x0315",
}

_STYLES = {
    "bold": "\x02",
    "b": "\x02",
    "italic": "\x1d",
    "i": "\x1d",
    "underline": "\x1f",
    "ul": "\x1f",
    "u": "\x1f",
    "reset": "\x0f",
    "r": "\x0f",
    "clear": "\x03",
    "c": "\x03",
    "reverse": "\x16",
    "ctcp": "\x01",
}

_FMT_RE = re.compile(r"\{([a-z]+)(?:,([a-z]+))?\}")

_MODE_TO_PREFIX = {"o": "@", "v": "+", "h": "%", "a": "&", "q": "~"}
_PREFIX_TO_MODE = {prefix: mode for mode, prefix in _MODE_TO_PREFIX.items()}
_MODE_PREFIXES = frozenset("@+~&%")

_MARKDOWN_RULES = [
    (re.compile(r"^(#+)\s+(.*)$", re.M), r"{b}\2{b}"),
    (re.compile(r"^>\s+(.*)$", re.M), r"{green}> \1"),
    (re.compile(r"`(.*?)`"), r"{cyan}\1{c}"),
    (re.compile(r"\*\*(.*?)\*\*"), r"{b}\1{b}"),
    (re.compile(r"__(.*?)__"), r"{b}\1{b}"),
    (re.compile(r"\*(.*?)\*"), r"{i}\1{i}"),
    (re.compile(r"_(.*?)_"), r"{i}\1{i}"),
    (re.compile(r"^\s*[\*\-]\s+(.*)$", re.M), r"- \1"),
]

_DURATION_UNITS = [
    ("year", 365 * 24 * 3600),
    ("week", 7 * 24 * 3600),
    ("day", 24 * 3600),
    ("hour", 3600),
    ("minute", 60),
    ("second", 1),
]


def irc_format(text: str) -> str:
    """Replace {b}, {red}, {red,blue} style codes with IRC control characters."""

    def replace(match: re.Match[str]) -> str:
        name, background = match.group(1), match.group(2)
        if background is None:
            return _STYLES.get(name) or _COLOURS.get(name) or match.group(0)
        if name in _COLOURS and background in _COLOURS:
            return _COLOURS[name] + "," + _COLOURS[background][1:]
        return match.group(0)

    return _FMT_RE.sub(replace, text)


def append_slash_url(url: str) -> str:
    """Ensure a URL ends with a slash."""
    if not url:
        return "/"
    return url if url.endswith("/") else url + "/"


def make_url_with_port(url: str, port: str) -> str:
    return append_slash_url(f"{url}:{port}")


def wrap_text(text: str, limit: int) -> str:
    """Wrap each line of text at word boundaries so lines stay within limit."""
    wrapped_lines = []
    for line in text.split("\n"):
        if not line.strip():
            wrapped_lines.append(line)
            continue
        pieces: list[str] = []
        current = ""
        for word in line.split():
            if not current:
                current = word
            elif len(current) + len(word) + 1 <= limit:
                current += " " + word
            else:
                pieces.append(current)
                current = word
        pieces.append(current)
        wrapped_lines.append("\n".join(pieces))
    return "\n".join(wrapped_lines)


def format_duration(seconds: int) -> str:
    """Render a number of seconds as e.g. '2 hours 5 minutes 1 second'."""
    seconds = int(seconds)
    if seconds == 0:
        return "0 seconds"
    sign = "-" if seconds < 0 else ""
    remaining = abs(seconds)
    parts = []
    for name, size in _DURATION_UNITS:
        count, remaining = divmod(remaining, size)
        if count:
            parts.append(f"{count} {name}" + ("" if count == 1 else "s"))
    return sign + " ".join(parts)


def unix_time_to_human_readable(timestamp: int, now: float | None = None) -> str:
    """Describe how long ago a unix timestamp was, or 'never' for zero."""
    if timestamp == 0:
        return "never"
    current = int(time.time() if now is None else now)
    return format_duration(current - int(timestamp))


def status_indicator(value: str | bool) -> str:
    """Turn 'true'/'false'/'' (or a bool) into a bracketed status label."""
    if isinstance(value, bool):
        value = "true" if value else "false"
    if value == "":
        return "[N/A]"
    if value == "true":
        return "[YES]"
    if value == "false":
        return "[NO]"
    return "[?]"


def get_modes(modes: str) -> list[str]:
    """Pick the channel status prefixes out of a WHO flags string."""
    return [char for char in modes if char in _MODE_PREFIXES]


def mode_has(modes: Iterable[str], check_mode: str) -> bool:
    return check_mode in modes


def mode_map(mode: str) -> str:
    """Map a mode letter such as 'o' to its prefix '@'."""
    return _MODE_TO_PREFIX.get(mode, "")


def reverse_mode_map(mode: str) -> str:
    """Map a prefix such as '@' back to its mode letter 'o'."""
    return _PREFIX_TO_MODE.get(mode, "")


def find_channel_name(params: Sequence[str]) -> str:
    """Return the first parameter that looks like a channel name."""
    return next((param for param in params if param.startswith("#")), "")


def markdown_to_irc(message: str) -> str:
    """Convert a subset of markdown into IRC formatting codes."""
    in_code_block = False
    out = []
    for line in message.split("\n"):
        if line.startswith("```"):
            in_code_block = not in_code_block
            out.append("{cyan}[code]{clear}" if in_code_block else "{cyan}[/code]{clear}")
        elif in_code_block:
            out.append("{green}" + line)
        else:
            for pattern, replacement in _MARKDOWN_RULES:
                line = pattern.sub(replacement, line)
            out.append(line)
    return irc_format("\n".join(out))


def capitalise_first(text: str) -> str:
    if not text:
        return ""
    return text[0].upper() + text[1:]


def get_ip() -> str:
    """Fetch this host's public IP address from an echo service."""
    response = requests.get(IP_ECHO_URL, timeout=30)
    return response.text
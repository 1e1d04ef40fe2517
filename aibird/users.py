"""IRC users as tracked by the bot, with their channel modes and AI settings."""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

from .helpers import irc_format, status_indicator, unix_time_to_human_readable

_ACCESS_LEVEL_NAMES = {
    1: "Chat Pal Status",
    2: "Swan Squadron",
    3: "Sparrow Society",
    4: "Golden Toucans",
    5: "Free Bird",
}


@dataclass
class UserModes:
    """The mode prefixes a user holds in one channel."""

    channel: str
    modes: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return "{[" + " ".join(self.modes) + "] " + self.channel + "}"

    def to_dict(self) -> dict[str, Any]:
        return {"Modes": list(self.modes), "Channel": self.channel}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "UserModes":
        return cls(channel=data.get("Channel") or "", modes=list(data.get("Modes") or []))


_SCALAR_FIELDS = {
    "nick_name": "NickName",
    "ident": "Ident",
    "host": "Host",
    "latest_activity": "LatestActivity",
    "first_seen": "FirstSeen",
    "latest_chat": "LatestChat",
    "is_admin": "IsAdmin",
    "is_owner": "IsOwner",
    "ignored": "Ignored",
    "access_level": "AccessLevel",
    "ai_service": "AiService",
    "ai_model": "AiModel",
    "ai_base_prompt": "AiBasePrompt",
    "ai_personality": "AiPersonality",
}


def _modes_str(modes: list[UserModes]) -> str:
    return "[" + " ".join(str(m) for m in modes) + "]"


@dataclass
class User:
    nick_name: str = ""
    ident: str = ""
    host: str = ""
    latest_activity: int = 0
    first_seen: int = 0
    latest_chat: str = ""
    preserved_modes: list[UserModes] = field(default_factory=list)
    current_modes: list[UserModes] = field(default_factory=list)
    is_admin: bool = False
    is_owner: bool = False
    ignored: bool = False
    access_level: int = 0
    ai_service: str = ""
    ai_model: str = ""
    ai_base_prompt: str = ""
    ai_personality: str = ""

    def __str__(self) -> str:
        return irc_format(
            f"{{b}}PreservedModes{{b}}: {_modes_str(self.preserved_modes)}, "
            f"{{b}}CurrentModes{{b}}: {_modes_str(self.current_modes)} "
            f"{{b}}NickName{{b}}: {self.nick_name}, "
            f"{{b}}Ident{{b}}: {self.ident}, "
            f"{{b}}Host{{b}}: {self.host}, "
            f"{{b}}LatestActivity{{b}}: {unix_time_to_human_readable(self.latest_activity)}, "
            f"{{b}}FirstSeen{{b}}: {unix_time_to_human_readable(self.first_seen)} ago, "
            f"{{b}}IsAdmin{{b}}: {status_indicator(self.is_admin)}, "
            f"{{b}}IsOwner{{b}}: {status_indicator(self.is_owner)}, "
            f"{{b}}AccessLevel{{b}}: {self.access_level}, "
            f"{{b}}Ignored{{b}}: {status_indicator(self.ignored)}"
        )

    def touch(self, latest_chat: str) -> None:
        """Record activity now along with the latest line said."""
        self.latest_activity = int(time.time())
        self.latest_chat = latest_chat

    def update_nick(self, nick: str) -> None:
        self.nick_name = nick

    def update_ident_host(self, ident: str, host: str) -> None:
        self.ident = ident
        self.host = host

    def seen(self) -> str:
        if self.latest_activity == 0:
            return (
                f"I first saw {self.nick_name} {unix_time_to_human_readable(self.first_seen)} ago "
                "but have not seen any chats"
            )
        return f"{self.nick_name} was last seen {unix_time_to_human_readable(self.latest_activity)} ago"

    def can_skip_queue(self) -> bool:
        return self.access_level >= 2 or self.is_admin or self.is_owner

    def ignore(self) -> None:
        self.ignored = True

    def unignore(self) -> None:
        self.ignored = False

    def access_level_name(self) -> str:
        return _ACCESS_LEVEL_NAMES.get(self.access_level, "Free")

    def can_use_4090(self) -> bool:
        return self.access_level >= 2 or self.is_admin or self.is_owner

    def has_current_modes(self, channel: str) -> bool:
        return any(m.channel == channel for m in self.current_modes)

    def has_preserved_modes(self, channel: str) -> bool:
        return any(m.channel == channel for m in self.preserved_modes)

    def has_any_mode(self) -> bool:
        return any(m.modes for m in self.current_modes)

    def to_dict(self) -> dict[str, Any]:
        """Serialise with the field names used by the stored user lists."""
        data: dict[str, Any] = {key: getattr(self, attr) for attr, key in _SCALAR_FIELDS.items()}
        data["PreservedModes"] = [m.to_dict() for m in self.preserved_modes]
        data["CurrentModes"] = [m.to_dict() for m in self.current_modes]
        return data

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "User":
        kwargs = {attr: data[key] for attr, key in _SCALAR_FIELDS.items() if data.get(key) is not None}
        kwargs["preserved_modes"] = [UserModes.from_dict(m) for m in data.get("PreservedModes") or []]
        kwargs["current_modes"] = [UserModes.from_dict(m) for m in data.get("CurrentModes") or []]
        return cls(**kwargs)
"""IRC channels the bot sits in, and the mode bookkeeping for their users."""

from __future__ import annotations

import threading
from dataclasses import dataclass, field

from . import logger
from .helpers import irc_format, status_indicator
from .users import User, UserModes

_OP_PREFIXES = frozenset({"@", "~", "%"})


def _entry_for(entries: list[UserModes], channel: str) -> UserModes | None:
    return next((entry for entry in entries if entry.channel == channel), None)


@dataclass
class Channel:
    name: str = ""
    preserve_modes: bool = False
    ai: bool = False
    sd: bool = False
    image_describe: bool = False
    sound: bool = False
    video: bool = False
    action_trigger: str = ""
    users: list[User] = field(default_factory=list)
    trim_output: bool = False
    # Debounces WHO requests after joins.
    activity_timer: threading.Timer | None = field(default=None, repr=False, compare=False)

    def __str__(self) -> str:
        return irc_format(
            f"{{b}}Name{{b}}: {self.name} "
            f"{{b}}Users{{b}}: {len(self.users)} "
            f"{{b}}PreserveModes{{b}}: {status_indicator(self.preserve_modes)} "
            f"{{b}}Ai{{b}}: {status_indicator(self.ai)} "
            f"{{b}}Sd{{b}}: {status_indicator(self.sd)} "
            f"{{b}}ImageDescribe{{b}}: {status_indicator(self.image_describe)} "
            f"{{b}}Sound{{b}}: {status_indicator(self.sound)} "
            f"{{b}}ActionTrigger{{b}}: {self.action_trigger} "
            f"{{b}}TrimOutput{{b}}: {status_indicator(self.trim_output)}"
        )

    def get_user_with_nick(self, nick: str) -> User | None:
        """Return the most recently active user with this nick, or None."""
        matches = [user for user in self.users if user.nick_name == nick]
        if not matches:
            return None
        return max(matches, key=lambda user: user.latest_activity)

    def sync_user(self, user: User) -> bool:
        """Add the user unless one with the same nick, ident and host is present."""
        for existing in self.users:
            if (existing.nick_name, existing.ident, existing.host) == (user.nick_name, user.ident, user.host):
                return False
        self.users.append(user)
        return True

    def sync_current_modes(self, user: User | None, modes: list[str]) -> None:
        """Replace the user's current modes for this channel."""
        if user is None:
            logger.warn("SyncCurrentModes: User is nil")
            return
        entry = _entry_for(user.current_modes, self.name)
        if entry is not None:
            entry.modes = list(modes)
        else:
            user.current_modes.append(UserModes(channel=self.name, modes=list(modes)))

    def sync_preserved_modes(self, user: User | None, modes: list[str]) -> None:
        """Replace the user's preserved modes for this channel."""
        if user is None:
            logger.warn("SyncPreservedModes: User is nil")
            return
        entry = _entry_for(user.preserved_modes, self.name)
        if entry is not None:
            entry.modes = list(modes)
        else:
            user.preserved_modes.append(UserModes(channel=self.name, modes=list(modes)))

    def sync_mode(self, user: User | None, mode: str) -> None:
        """Record a newly granted mode in both the preserved and current modes."""
        if user is None:
            logger.warn("RememberChannelMode: User is nil")
            return
        for entries in (user.preserved_modes, user.current_modes):
            entry = _entry_for(entries, self.name)
            if entry is None:
                entries.append(UserModes(channel=self.name, modes=[mode]))
            elif mode not in entry.modes:
                entry.modes.append(mode)

    def forget_mode(self, user: User | None, mode: str) -> None:
        """Drop a removed mode; admins and owners keep their preserved modes."""
        if user is None:
            logger.warn("ForgetChannelMode: User is nil")
            return
        for entry in user.current_modes:
            if entry.channel == self.name:
                entry.modes = [m for m in entry.modes if m != mode]
        if user.is_owner or user.is_admin:
            return
        for entry in user.preserved_modes:
            if entry.channel == self.name:
                entry.modes = [m for m in entry.modes if m != mode]

    def can_user_op(self, user: User | None) -> bool:
        """Whether the user currently holds op, owner or half-op here."""
        if user is None:
            return False
        return any(
            mode in _OP_PREFIXES
            for entry in user.current_modes
            if entry.channel == self.name
            for mode in entry.modes
        )

    def all_users_forget_sync_modes(self, user: User | None, modes: list[str]) -> None:
        """Forget modes for one user, then sync them for every user in the channel."""
        if user is None:
            return
        for mode in modes:
            self.forget_mode(user, mode)
        for channel_user in self.users:
            for mode in modes:
                self.sync_mode(channel_user, mode)

    def remove_user(self, user: User | None) -> None:
        """Remove the first user in the channel with the same nick."""
        if user is None:
            return
        for index, existing in enumerate(self.users):
            if existing.nick_name == user.nick_name:
                del self.users[index]
                break
"""IRC networks: their servers, channels, known users and persistence."""

from __future__ import annotations

import json
import secrets
import threading
from dataclasses import dataclass, field

from . import logger
from .birdbase import BirdBase
from .channels import Channel
from .helpers import status_indicator
from .users import User

DEFAULT_MODES_AT_ONCE = 4
SAVE_DELAY_SECONDS = 3.0


@dataclass
class Server:
    host: str = ""
    port: int = 6667
    ssl: bool = False
    skip_ssl_verify: bool = False
    ipv6: bool = False


@dataclass
class Admin:
    host: str = ""
    ident: str = ""
    owner: bool = False


def _latest(users: list[User]) -> User | None:
    if not users:
        return None
    return max(users, key=lambda user: user.latest_activity)


@dataclass
class Network:
    enabled: bool = False
    network_name: str = ""
    nick: str = ""
    user: str = ""
    name: str = ""
    server_password: str = ""
    preserve_modes: bool = False
    ignored_nicks: list[str] = field(default_factory=list)
    nickserv_password: str = ""
    ping_delay: int = 0
    version: str = ""
    throttle: int = 0
    burst: int = 0
    action_trigger: str = ""
    modes_at_once: int = 0
    users: list[User] = field(default_factory=list)
    servers: list[Server] = field(default_factory=list)
    channels: list[Channel] = field(default_factory=list)
    admin_hosts: list[Admin] = field(default_factory=list)
    store: BirdBase | None = field(default=None, repr=False, compare=False)
    save_delay: float = field(default=SAVE_DELAY_SECONDS, repr=False, compare=False)
    _save_timer: threading.Timer | None = field(default=None, init=False, repr=False, compare=False)
    _save_lock: threading.Lock = field(default_factory=threading.Lock, init=False, repr=False, compare=False)

    def __str__(self) -> str:
        return (
            f"{{b}}Enabled{{b}}{status_indicator(self.enabled)}, "
            f"{{b}}NetworkName{{b}}: {self.network_name}, "
            f"{{b}}Nick{{b}}: {self.nick}, "
            f"{{b}}User{{b}}: {self.user}, "
            f"{{b}}Name{{b}}: {self.name}, "
            f"{{b}}ModesAtOnce{{b}}: {self.effective_modes_at_once()}, "
            f"{{b}}PingDelay{{b}}: {self.ping_delay}, "
            f"{{b}}Version{{b}}: {self.version}, "
            f"{{b}}Throttle{{b}}: {self.throttle}, "
            f"{{b}}Burst{{b}}: {self.burst}, "
            f"{{b}}ActionTrigger{{b}}: {self.action_trigger}, "
            f"{{b}}Users{{b}}: {len(self.users)}, "
            f"{{b}}Channels{{b}}: {len(self.channels)}, "
            f"{{b}}Servers{{b}}: {len(self.servers)}, "
            f"{{b}}AdminHosts{{b}}: {len(self.admin_hosts)}"
        )

    @property
    def _users_key(self) -> str:
        return self.network_name + "_users"

    def random_server(self) -> Server | None:
        """Pick one of the configured servers at random, or None if there are none."""
        if not self.servers:
            return None
        return secrets.choice(self.servers)

    def provide_state_init(self, channel_name: str, ident: str, host: str) -> tuple[Channel | None, User | None]:
        return self.get_channel(channel_name), self.get_user_with_ident_and_host(ident, host)

    def get_channel(self, channel_name: str) -> Channel | None:
        return next((channel for channel in self.channels if channel.name == channel_name), None)

    def get_user_with_ident_and_host(self, ident: str, host: str) -> User | None:
        """Return the most recently active user with this ident and host."""
        return _latest([u for u in self.users if u.ident == ident and u.host == host])

    def get_user_with_nick(self, nick: str) -> User | None:
        """Return the most recently active user with this nick."""
        return _latest([u for u in self.users if u.nick_name == nick])

    def effective_modes_at_once(self) -> int:
        return self.modes_at_once or DEFAULT_MODES_AT_ONCE

    def is_nick_ignored(self, nick: str) -> bool:
        return nick in self.ignored_nicks

    def is_ident_host_admin(self, ident: str, host: str) -> bool:
        return any(admin.host == host and admin.ident == ident for admin in self.admin_hosts)

    def is_ident_host_owner(self, ident: str, host: str) -> bool:
        return any(
            admin.host == host and admin.ident == ident and admin.owner for admin in self.admin_hosts
        )

    def _require_store(self) -> BirdBase:
        if self.store is None:
            raise RuntimeError(f"network {self.network_name!r} has no store")
        return self.store

    def save(self) -> None:
        """Persist the user list after a short delay, coalescing repeated calls."""
        with self._save_lock:
            if self._save_timer is not None:
                self._save_timer.cancel()
            timer = threading.Timer(self.save_delay, self._deferred_save)
            timer.daemon = True
            self._save_timer = timer
            timer.start()

    def _deferred_save(self) -> None:
        try:
            self.save_now()
        except Exception as exc:  # noqa: BLE001 - background thread must not die silently
            logger.error("Error saving network", error=str(exc))

    def save_now(self) -> None:
        """Persist the user list immediately."""
        payload = json.dumps([user.to_dict() for user in self.users]).encode()
        self._require_store().put_bytes(self._users_key, payload)

    def load(self) -> None:
        """Replace the user list with the stored one, if any was saved."""
        store = self._require_store()
        if not store.has(self._users_key):
            return
        try:
            raw = store.get(self._users_key)
        except KeyError:
            logger.error("Error loading network from birdbase", key=self._users_key)
            return
        try:
            data = json.loads(raw)
        except ValueError as exc:
            logger.error("Error unmarshalling network users", key=self._users_key, error=str(exc))
            return
        self.users = [User.from_dict(item) for item in data or []]
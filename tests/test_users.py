import json
import time

import pytest

from aibird.helpers import irc_format
from aibird.users import User, UserModes


def make_user(**kwargs):
    base = dict(nick_name="bird", ident="~bird", host="nest.example.com")
    base.update(kwargs)
    return User(**base)


@pytest.mark.parametrize(
    "level,name",
    [(0, "Free"), (1, "Chat Pal Status"), (2, "Swan Squadron"), (3, "Sparrow Society"),
     (4, "Golden Toucans"), (5, "Free Bird"), (9, "Free")],
)
def test_access_level_name(level, name):
    assert make_user(access_level=level).access_level_name() == name


@pytest.mark.parametrize(
    "kwargs,expected",
    [({}, False), ({"access_level": 1}, False), ({"access_level": 2}, True),
     ({"is_admin": True}, True), ({"is_owner": True}, True)],
)
def test_queue_and_gpu_privileges(kwargs, expected):
    user = make_user(**kwargs)
    assert user.can_skip_queue() is expected
    assert user.can_use_4090() is expected


def test_touch_records_activity():
    user = make_user()
    before = int(time.time())
    user.touch("!hello")
    assert before <= user.latest_activity <= int(time.time())
    assert user.latest_chat == "!hello"


def test_seen_without_chats():
    user = make_user(first_seen=int(time.time()) - 10)
    message = user.seen()
    assert message.startswith("I first saw bird ")
    assert message.endswith("but have not seen any chats")


def test_seen_with_activity():
    user = make_user()
    user.touch("hi")
    assert user.seen().startswith("bird was last seen ")


def test_ignore_toggle():
    user = make_user()
    user.ignore()
    assert user.ignored
    user.unignore()
    assert not user.ignored


def test_update_nick_and_ident_host():
    user = make_user()
    user.update_nick("newbird")
    user.update_ident_host("nb", "other.example.com")
    assert (user.nick_name, user.ident, user.host) == ("newbird", "nb", "other.example.com")


def test_mode_queries():
    user = make_user(
        current_modes=[UserModes("#a", []), UserModes("#b", ["@"])],
        preserved_modes=[UserModes("#c", ["+"])],
    )
    assert user.has_current_modes("#a")
    assert not user.has_current_modes("#c")
    assert user.has_preserved_modes("#c")
    assert not user.has_preserved_modes("#a")
    assert user.has_any_mode()


def test_has_any_mode_empty():
    assert not make_user().has_any_mode()
    assert not make_user(current_modes=[UserModes("#a", [])]).has_any_mode()


def test_dict_round_trip_through_json():
    user = make_user(
        access_level=3,
        is_admin=True,
        ai_service="ollama",
        preserved_modes=[UserModes("#birdnest", ["@", "+"])],
        current_modes=[UserModes("#birdnest", ["+"])],
    )
    restored = User.from_dict(json.loads(json.dumps(user.to_dict())))
    assert restored == user


def test_from_dict_handles_null_modes():
    user = User.from_dict({"NickName": "bird", "PreservedModes": None, "CurrentModes": None, "GircUser": None})
    assert user.nick_name == "bird"
    assert user.preserved_modes == []
    assert user.current_modes == []


def test_to_dict_uses_stored_field_names():
    data = make_user().to_dict()
    assert data["NickName"] == "bird"
    assert data["Ident"] == "~bird"


def test_str_contains_details():
    user = make_user(preserved_modes=[UserModes("#birdnest", ["@"])])
    text = str(user)
    assert irc_format("{b}NickName{b}: bird") in text
    assert "{[@] #birdnest}" in text
    assert "never" in text


def test_user_modes_str():
    assert str(UserModes("#chan", ["@", "+"])) == "{[@ +] #chan}"
from aibird.channels import Channel
from aibird.users import User, UserModes


def make_user(nick="alice", ident="~a", host="host.example.com", **kwargs):
    return User(nick_name=nick, ident=ident, host=host, **kwargs)


def modes_for(entries, channel):
    return [entry.modes for entry in entries if entry.channel == channel]


def test_str_contains_formatted_fields():
    channel = Channel(name="#birds", ai=True, users=[make_user()], action_trigger="!")
    text = str(channel)
    assert "\x02Name\x02: #birds" in text
    assert "\x02Users\x02: 1" in text
    assert "\x02Ai\x02: [YES]" in text
    assert "\x02Sd\x02: [NO]" in text
    assert "{b}" not in text


def test_get_user_with_nick_missing_returns_none():
    assert Channel(name="#c").get_user_with_nick("nobody") is None


def test_get_user_with_nick_prefers_latest_activity():
    old = make_user(ident="old", latest_activity=10)
    new = make_user(ident="new", latest_activity=20)
    other = make_user(nick="bob", latest_activity=99)
    channel = Channel(name="#c", users=[old, new, other])
    assert channel.get_user_with_nick("alice") is new


def test_get_user_with_nick_tie_keeps_first():
    first = make_user(ident="first", latest_activity=5)
    second = make_user(ident="second", latest_activity=5)
    channel = Channel(name="#c", users=[first, second])
    assert channel.get_user_with_nick("alice") is first


def test_sync_user_adds_once():
    channel = Channel(name="#c")
    user = make_user()
    assert channel.sync_user(user) is True
    assert channel.sync_user(make_user()) is False
    assert channel.users == [user]


def test_sync_user_different_host_is_added():
    channel = Channel(name="#c", users=[make_user()])
    assert channel.sync_user(make_user(host="other.example.com")) is True
    assert len(channel.users) == 2


def test_sync_current_modes_replaces_existing_entry():
    channel = Channel(name="#c")
    user = make_user()
    channel.sync_current_modes(user, ["+"])
    channel.sync_current_modes(user, ["@"])
    assert modes_for(user.current_modes, "#c") == [["@"]]


def test_sync_preserved_modes_adds_entry_per_channel():
    user = make_user(preserved_modes=[UserModes(channel="#other", modes=["+"])])
    Channel(name="#c").sync_preserved_modes(user, ["@"])
    assert modes_for(user.preserved_modes, "#c") == [["@"]]
    assert modes_for(user.preserved_modes, "#other") == [["+"]]


def test_sync_none_user_is_ignored():
    channel = Channel(name="#c")
    channel.sync_current_modes(None, ["@"])
    channel.sync_mode(None, "@")
    channel.forget_mode(None, "@")
    assert channel.users == []


def test_sync_mode_records_in_both_lists_without_duplicates():
    channel = Channel(name="#c")
    user = make_user()
    channel.sync_mode(user, "@")
    channel.sync_mode(user, "@")
    channel.sync_mode(user, "+")
    assert modes_for(user.preserved_modes, "#c") == [["@", "+"]]
    assert modes_for(user.current_modes, "#c") == [["@", "+"]]


def test_forget_mode_removes_from_both_for_regular_user():
    channel = Channel(name="#c")
    user = make_user()
    channel.sync_mode(user, "@")
    channel.sync_mode(user, "+")
    channel.forget_mode(user, "@")
    assert modes_for(user.current_modes, "#c") == [["+"]]
    assert modes_for(user.preserved_modes, "#c") == [["+"]]


def test_forget_mode_keeps_preserved_for_admin():
    channel = Channel(name="#c")
    user = make_user(is_admin=True)
    channel.sync_mode(user, "@")
    channel.forget_mode(user, "@")
    assert modes_for(user.current_modes, "#c") == [[]]
    assert modes_for(user.preserved_modes, "#c") == [["@"]]


def test_forget_mode_leaves_other_channels():
    user = make_user()
    Channel(name="#other").sync_mode(user, "@")
    Channel(name="#c").forget_mode(user, "@")
    assert modes_for(user.current_modes, "#other") == [["@"]]


def test_can_user_op():
    channel = Channel(name="#c")
    voiced = make_user(current_modes=[UserModes(channel="#c", modes=["+"])])
    halfop = make_user(current_modes=[UserModes(channel="#c", modes=["%"])])
    op_elsewhere = make_user(current_modes=[UserModes(channel="#x", modes=["@"])])
    assert channel.can_user_op(halfop) is True
    assert channel.can_user_op(voiced) is False
    assert channel.can_user_op(op_elsewhere) is False
    assert channel.can_user_op(None) is False


def test_all_users_forget_sync_modes():
    leaving = make_user(nick="leaver")
    stayer = make_user(nick="stayer")
    channel = Channel(name="#c", users=[stayer])
    channel.sync_mode(leaving, "@")
    channel.all_users_forget_sync_modes(leaving, ["@"])
    assert modes_for(leaving.current_modes, "#c") == [[]]
    assert modes_for(stayer.current_modes, "#c") == [["@"]]
    assert modes_for(stayer.preserved_modes, "#c") == [["@"]]


def test_remove_user_by_nick():
    alice = make_user()
    bob = make_user(nick="bob")
    channel = Channel(name="#c", users=[alice, bob])
    channel.remove_user(make_user(ident="different"))
    assert channel.users == [bob]
    channel.remove_user(None)
    assert channel.users == [bob]
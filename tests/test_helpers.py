import time

import pytest
import responses

from aibird import helpers


@pytest.fixture
def mocked():
    with responses.RequestsMock(assert_all_requests_are_fired=False) as rsps:
        yield rsps


def test_append_slash_url_empty():
    assert helpers.append_slash_url("") == "/"


def test_append_slash_url_adds_and_keeps():
    assert helpers.append_slash_url("http://host") == "http://host/"
    assert helpers.append_slash_url("http://host/") == "http://host/"


def test_make_url_with_port():
    assert helpers.make_url_with_port("http://host", "8080") == "http://host:8080/"


def test_wrap_text_respects_limit_and_keeps_words():
    text = "the quick brown fox jumps over the lazy dog again and again"
    wrapped = helpers.wrap_text(text, 12)
    assert wrapped.split() == text.split()
    assert all(len(line) <= 12 for line in wrapped.split("\n"))


def test_wrap_text_keeps_blank_lines():
    text = "alpha beta\n\ngamma"
    wrapped = helpers.wrap_text(text, 100)
    assert wrapped == text


def test_wrap_text_long_word_kept_whole():
    wrapped = helpers.wrap_text("a verylongwordhere b", 5)
    assert "verylongwordhere" in wrapped.split("\n")


def test_format_duration_units():
    assert helpers.format_duration(3661) == "1 hour 1 minute 1 second"


def test_format_duration_zero():
    assert helpers.format_duration(0) == "0 seconds"


def test_unix_time_never():
    assert helpers.unix_time_to_human_readable(0) == "never"


def test_unix_time_relative_to_now():
    now = 1_700_000_000
    assert helpers.unix_time_to_human_readable(now - 120, now) == helpers.format_duration(120)


def test_unix_time_default_now():
    stamp = int(time.time()) - 3600
    result = helpers.unix_time_to_human_readable(stamp)
    assert result.startswith(helpers.format_duration(3600).split()[0])


@pytest.mark.parametrize(
    "value,expected",
    [("", "[N/A]"), ("true", "[YES]"), ("false", "[NO]"), ("maybe", "[?]"), (True, "[YES]"), (False, "[NO]")],
)
def test_status_indicator(value, expected):
    assert helpers.status_indicator(value) == expected


def test_get_modes_filters_prefixes():
    assert helpers.get_modes("H@+x~") == ["@", "+", "~"]


def test_mode_has():
    assert helpers.mode_has(["@", "+"], "+")
    assert not helpers.mode_has(["@"], "+")


@pytest.mark.parametrize("letter", list("ovhaq"))
def test_mode_map_round_trip(letter):
    prefix = helpers.mode_map(letter)
    assert prefix
    assert helpers.reverse_mode_map(prefix) == letter


def test_mode_map_unknown():
    assert helpers.mode_map("z") == ""
    assert helpers.reverse_mode_map("!") == ""


def test_find_channel_name():
    assert helpers.find_channel_name(["nick", "#birdnest", "#other"]) == "#birdnest"
    assert helpers.find_channel_name(["nick", "text"]) == ""


def test_irc_format_bold():
    assert helpers.irc_format("{b}hi{b}") == "\x02hi\x02"


def test_irc_format_unknown_left_alone():
    assert helpers.irc_format("{nope} {[x] y}") == "{nope} {[x] y}"


def test_irc_format_background_pair():
    result = helpers.irc_format("{red,blue}x")
    assert result.startswith(helpers.irc_format("{red}") + ",")
    assert result.endswith("x")


def test_markdown_bold():
    assert helpers.markdown_to_irc("**bold**") == helpers.irc_format("{b}bold{b}")


def test_markdown_header_and_list():
    result = helpers.markdown_to_irc("# Title\n* item")
    assert result == helpers.irc_format("{b}Title{b}\n- item")


def test_markdown_inline_code():
    assert helpers.markdown_to_irc("`x`") == helpers.irc_format("{cyan}x{c}")


def test_markdown_code_block():
    result = helpers.markdown_to_irc("```\n**x**\n```")
    assert result == helpers.irc_format("{cyan}[code]{clear}\n{green}**x**\n{cyan}[/code]{clear}")


def test_capitalise_first():
    result = helpers.capitalise_first("élan vital")
    assert result[0].isupper()
    assert result[1:] == "lan vital"
    assert helpers.capitalise_first("") == ""


def test_get_ip(mocked):
    mocked.add(responses.GET, helpers.IP_ECHO_URL, body="192.0.2.1")
    assert helpers.get_ip() == "192.0.2.1"
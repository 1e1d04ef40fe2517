import json

import pytest

from aibird.commands import (
    CommandCategory,
    all_commands,
    all_commands_unfiltered,
    categorize,
    default_if_empty,
    is_admin_command,
    is_owner_command,
    is_queueable,
    is_sound_command,
    is_standard_command,
    is_text_command,
    is_valid_command,
    is_valid_command_for_channel,
    is_video_command,
)


def _write_workflow(directory, name, kind):
    toml_text = f'type = "{kind}"\ndescription = "desc"\n[promptTarget]\nnode = "Prompt"\nwidget_index = 0\n'
    data = {"nodes": [{"title": "aibird_meta", "widgets_values": [toml_text]}]}
    (directory / f"{name}.json").write_text(json.dumps(data))


@pytest.fixture
def flows(tmp_path):
    _write_workflow(tmp_path, "flux", "image")
    _write_workflow(tmp_path, "wan", "video")
    _write_workflow(tmp_path, "tts", "sound")
    (tmp_path / "broken.json").write_text("not json")
    return tmp_path


def test_all_commands_minimal_is_standard(tmp_path):
    names = all_commands(False, False, False, False, False, False, tmp_path)
    assert names == ["hello", "status", "help", "headlies", "ircnews", "seen", "support", "models"]


def test_all_commands_filters_by_feature(flows):
    with_sd = all_commands(False, True, False, False, False, False, flows)
    without_sd = all_commands(False, False, False, False, False, False, flows)
    assert "flux" in with_sd
    assert "flux" not in without_sd
    assert "wan" not in with_sd


def test_all_commands_owner_and_sound(flows):
    names = all_commands(False, False, True, False, False, True, flows)
    assert {"tts", "tts-add", "debug", "save", "ip"} <= set(names)
    assert "user" not in names


def test_unfiltered_contains_everything(flows):
    names = all_commands_unfiltered(flows)
    assert {"flux", "wan", "tts", "ai", "user", "debug"} <= set(names)
    assert "broken" not in names


def test_is_valid_command(flows):
    assert is_valid_command("flux", flows)
    assert not is_valid_command("nope", flows)


def test_is_valid_command_for_channel_admin(flows):
    assert not is_valid_command_for_channel("user", True, True, True, True, False, False, flows)
    assert is_valid_command_for_channel("user", False, False, False, False, True, False, flows)


def test_category_membership(flows):
    assert is_standard_command("seen")
    assert not is_standard_command("user")
    assert is_admin_command("clearqueue")
    assert is_owner_command("ip")
    assert is_sound_command("tts-add", flows)
    assert is_sound_command("tts", flows)
    assert is_video_command("wan", flows)
    assert not is_video_command("flux", flows)


def test_is_text_command_ignores_case():
    assert is_text_command("GEMINI")
    assert not is_text_command("hello")


def test_is_queueable(flows):
    assert is_queueable("ai", flows)
    assert not is_queueable("hello", flows)
    assert is_queueable("FLUX", flows)
    assert is_queueable("broken", flows)
    assert not is_queueable("", flows)
    assert not is_queueable("unknown", flows)


@pytest.mark.parametrize(
    "action, expected",
    [
        ("ai", CommandCategory.TEXT),
        ("flux", CommandCategory.IMAGE),
        ("WAN", CommandCategory.VIDEO),
        ("tts", CommandCategory.SOUND),
        ("tts-add", CommandCategory.SOUND),
        ("unknown", CommandCategory.IMAGE),
        ("broken", CommandCategory.IMAGE),
    ],
)
def test_categorize(flows, action, expected):
    assert categorize(action, flows) is expected


def test_default_if_empty():
    assert default_if_empty("", "openrouter") == "openrouter"
    assert default_if_empty("ollama", "openrouter") == "ollama"
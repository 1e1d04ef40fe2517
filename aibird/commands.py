"""Command lookup, validation and routing for incoming chat commands."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from enum import Enum
from os import PathLike
from pathlib import Path

from . import logger
from .help import (
    Help,
    admin_help,
    image_help,
    owner_help,
    sound_help,
    standard_help,
    text_help,
    video_help,
)
from .workflows import WORKFLOW_DIR, get_aibird_meta, list_workflows

Directory = str | PathLike[str]


class CommandCategory(str, Enum):
    """The handler family a queued command is routed to."""

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    SOUND = "sound"


def _names(items: Iterable[Help]) -> list[str]:
    return [item.name for item in items]


def all_commands(
    ai: bool = True,
    sd: bool = True,
    sound: bool = True,
    video: bool = True,
    is_admin: bool = True,
    is_owner: bool = True,
    directory: Directory = WORKFLOW_DIR,
    voices: Iterable[str] | None = None,
) -> list[str]:
    """Names of every command available given the channel's features and the user's rights."""
    voice_list = None if voices is None else list(voices)
    commands = _names(standard_help())
    if sd:
        commands += _names(image_help(directory, voice_list))
    if video:
        commands += _names(video_help(directory, voice_list))
    if ai:
        commands += _names(text_help())
    if sound:
        commands += _names(sound_help(directory, voice_list))
    if is_admin:
        commands += _names(admin_help())
    if is_owner:
        commands += [name for name in _names(owner_help()) if name]
    return commands


def all_commands_unfiltered(directory: Directory = WORKFLOW_DIR, voices: Iterable[str] | None = None) -> list[str]:
    """Every command regardless of channel features or user rights."""
    return all_commands(True, True, True, True, True, True, directory, voices)


def is_valid_command(command: str, directory: Directory = WORKFLOW_DIR, voices: Iterable[str] | None = None) -> bool:
    """Whether the command exists anywhere, ignoring channel settings."""
    return command in all_commands_unfiltered(directory, voices)


def is_valid_command_for_channel(
    command: str,
    ai: bool,
    sd: bool,
    sound: bool,
    video: bool,
    is_admin: bool,
    is_owner: bool,
    directory: Directory = WORKFLOW_DIR,
    voices: Iterable[str] | None = None,
) -> bool:
    """Whether the command is available in a channel with these features for this user."""
    return command in all_commands(ai, sd, sound, video, is_admin, is_owner, directory, voices)


def is_standard_command(command: str) -> bool:
    return command in _names(standard_help())


def is_admin_command(command: str) -> bool:
    return command in _names(admin_help())


def is_owner_command(command: str) -> bool:
    return command in _names(owner_help())


def is_sound_command(command: str, directory: Directory = WORKFLOW_DIR, voices: Iterable[str] | None = None) -> bool:
    return command in _names(sound_help(directory, voices))


def is_video_command(command: str, directory: Directory = WORKFLOW_DIR, voices: Iterable[str] | None = None) -> bool:
    return command in _names(video_help(directory, voices))


def is_text_command(action: str) -> bool:
    """Whether the action names a text command, ignoring case."""
    lowered = action.casefold()
    return any(lowered == name.casefold() for name in _names(text_help()))


def is_queueable(action: str, directory: Directory = WORKFLOW_DIR, voices: Iterable[str] | None = None) -> bool:
    """Whether a command should go through the GPU queue.

    Known commands use their help entry's flag; any other command naming a
    workflow file is queueable.
    """
    if not action:
        logger.debug("IsQueueableCommand: action is empty")
        return False
    voice_list = None if voices is None else list(voices)
    lowered = action.casefold()
    every_help = [
        *standard_help(),
        *image_help(directory, voice_list),
        *video_help(directory, voice_list),
        *text_help(),
        *sound_help(directory, voice_list),
        *admin_help(),
        *owner_help(),
    ]
    for item in every_help:
        if lowered == item.name.casefold():
            logger.debug("Found command in help system", action=action, queueable=item.queueable)
            return item.queueable
    if any(lowered == workflow.casefold() for workflow in list_workflows(directory)):
        logger.debug("Found ComfyUI workflow", action=action, queueable=True)
        return True
    logger.debug("Command not found in help system or workflows", action=action, queueable=False)
    return False


def _is_kind(
    action: str,
    kind: str,
    help_items: Callable[[], list[Help]],
    directory: Directory,
) -> bool:
    lowered = action.casefold()
    if any(lowered == item.name.casefold() for item in help_items()):
        return True
    for workflow in list_workflows(directory):
        if lowered != workflow.casefold():
            continue
        try:
            meta = get_aibird_meta(Path(directory) / f"{workflow}.json")
        except (OSError, ValueError):
            continue
        return meta.type == kind
    return False


def categorize(
    action: str, directory: Directory = WORKFLOW_DIR, voices: Iterable[str] | None = None
) -> CommandCategory:
    """Decide which handler family runs a queued command; unknown ones go to images."""
    voice_list = None if voices is None else list(voices)
    lowered = action.lower()
    if is_text_command(lowered):
        return CommandCategory.TEXT
    if _is_kind(lowered, "image", lambda: image_help(directory, voice_list), directory):
        return CommandCategory.IMAGE
    if _is_kind(lowered, "video", lambda: video_help(directory, voice_list), directory):
        return CommandCategory.VIDEO
    if _is_kind(lowered, "sound", lambda: sound_help(directory, voice_list), directory):
        return CommandCategory.SOUND
    logger.debug("Command categorized as default (image)", action=action)
    return CommandCategory.IMAGE


def default_if_empty(value: str, default: str) -> str:
    return value if value else default
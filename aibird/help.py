"""Help entries for every command the bot understands, and their formatting."""

from __future__ import annotations

import math
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from decimal import Decimal
from os import PathLike
from pathlib import Path
from typing import Any

from . import logger
from .workflows import WORKFLOW_DIR, get_aibird_meta, list_workflows

DYNAMIC_VOICES = "dynamically loaded"


@dataclass
class HelpArgument:
    """One argument a command accepts."""

    argument: str
    help: str
    values: str = ""


@dataclass
class Help:
    """Help text for one command."""

    name: str
    type: str
    help: str
    arguments: list[HelpArgument] = field(default_factory=list)
    queueable: bool = False
    example: str = ""


def _format_float(value: float, threshold: int) -> str:
    """Shortest decimal form, switching to exponent form outside [-4, threshold)."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "+Inf" if value > 0 else "-Inf"
    if value == 0:
        return "-0" if math.copysign(1.0, value) < 0 else "0"
    sign = "-" if value < 0 else ""
    parts = Decimal(repr(abs(value))).as_tuple()
    point = len(parts.digits) + int(parts.exponent)
    digits = "".join(str(d) for d in parts.digits).rstrip("0") or "0"
    exponent = point - 1
    if exponent < -4 or exponent >= threshold:
        mantissa = digits[0] + ("." + digits[1:] if len(digits) > 1 else "")
        return f"{sign}{mantissa}e{'-' if exponent < 0 else '+'}{abs(exponent):02d}"
    if point <= 0:
        return f"{sign}0.{'0' * -point}{digits}"
    if point >= len(digits):
        return sign + digits + "0" * (point - len(digits))
    return f"{sign}{digits[:point]}.{digits[point:]}"


def _format_number(value: float) -> str:
    return _format_float(float(value), 6)


def _format_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, int):
        return str(value)
    if isinstance(value, float):
        return _format_float(value, 21)
    if isinstance(value, list):
        return "[" + " ".join(_format_value(item) for item in value) + "]"
    if isinstance(value, dict):
        inner = " ".join(f"{key}:{_format_value(value[key])}" for key in sorted(value))
        return "map[" + inner + "]"
    return str(value)


def _args(*entries: tuple[str, str, str]) -> list[HelpArgument]:
    return [HelpArgument(argument, text, values) for argument, text, values in entries]


def _nick_arg(action: str) -> list[HelpArgument]:
    return _args(("<nickname>", f"Specify the nickname of the user to {action}.", ""))


def standard_help() -> list[Help]:
    return [
        Help("hello", "standard", "Greets the user."),
        Help("status", "standard", "Displays the current status of the airig GPUs."),
        Help("help", "standard", "Displays help information for available commands."),
        Help("headlies", "standard", "Summarizes the latest headlines from r/worldnews."),
        Help("ircnews", "standard", "Rewrites a random world news headline with an IRC theme."),
        Help(
            "seen",
            "standard",
            "Checks if a user has been active recently.",
            _args(("<nickname>", "Specify the nickname of the user to check.", "")),
        ),
        Help("support", "standard", "Provides information on how to support the project."),
        Help("models", "standard", "Lists all available image generation models/workflows."),
    ]


def text_help() -> list[Help]:
    gemini_args = (
        ("<message>", "Specify the message to process.", ""),
        ("--help", "Show this help message.", ""),
        ("--voice", "Specify the voice for TTS.", "e.g., woman"),
    )
    return [
        Help(
            "ai",
            "text",
            "Interact with the AI services for various tasks.",
            _args(
                ("help", "Show help information for AI commands.", ""),
                ("info", "Display current AI service and model information.", ""),
                ("--voice", "Specify the voice for TTS.", "e.g., woman"),
                ("setPersonality", "Set the AI personality.", ""),
                ("clearPersonality", "Clear the AI personality.", ""),
                ("setBasePrompt", "Set the base prompt for AI interactions.", ""),
                ("clearBasePrompt", "Clear the base prompt for AI interactions.", ""),
                ("setAiModel", "Set the AI model.", ""),
                ("clearAiModel", "Clear the AI model.", ""),
                ("setAiService", "Set the AI service. Options: ollama, openrouter", "ollama, openrouter"),
                ("clearAiService", "Reset the AI service to default (ollama).", ""),
            ),
            queueable=True,
        ),
        Help("bard", "text", "Process a Google Gemini request.", _args(*gemini_args)),
        Help("gemini", "text", "Process a Google Gemini request.", _args(*gemini_args)),
    ]


def owner_help() -> list[Help]:
    return [
        Help("debug", "owner", "Toggle debug mode or display debugging information."),
        Help("save", "owner", "Save current state to persistent storage."),
        Help("ip", "owner", "Display IP information."),
    ]


def admin_help() -> list[Help]:
    return [
        Help(
            "user",
            "admin",
            "Manage user settings and permissions.",
            _args(
                ("<nickname>", "Specify the nickname of the user.", ""),
                ("--latestActivity", "Set the latest activity timestamp.", "unix timestamp"),
                ("--firstSeen", "Set the first seen timestamp.", "unix timestamp"),
                ("--latestChat", "Set the latest chat message.", "text"),
                ("--isAdmin", "Set the admin status.", "true, false"),
                ("--isOwner", "Set the owner status.", "true, false"),
                ("--ignored", "Set the ignored status.", "true, false"),
                ("--accessLevel", "Set the access level.", "integer"),
                ("--aiService", "Set the AI service.", "ollama, openrouter"),
                ("--aiModel", "Set the AI model.", "model name"),
                ("--aiBasePrompt", "Set the AI base prompt.", "text"),
                ("--aiPersonality", "Set the AI personality.", "text"),
            ),
        ),
        Help(
            "channel",
            "admin",
            "Manage channel settings and permissions. No <channel_name> argument use the current channel.",
            _args(
                ("<channel_name>", "Specify the name of the channel.", ""),
                ("--ai", "Enable or disable AI features.", "true, false"),
                ("--sd", "Enable or disable Stable Diffusion image generation.", "true, false"),
                ("--imageDescribe", "Enable or disable image description features.", "true, false"),
                ("--sound", "Enable or disable sound features.", "true, false"),
                ("--video", "Enable or disable video features.", "true, false"),
                ("--actionTrigger", "Set the trigger for actions.", "text"),
                ("--trimOutput", "Enable or disable trimming of output for responses.", "true, false"),
            ),
        ),
        Help("network", "admin", "Display network information or modify network settings."),
        Help("sync", "admin", "Synchronize the current state with the network."),
        Help("op", "admin", "Grant operator privileges to a user.", _nick_arg("op")),
        Help("deop", "admin", "Remove operator privileges from a user.", _nick_arg("deop")),
        Help("voice", "admin", "Grant voice privileges to a user.", _nick_arg("voice")),
        Help("devoice", "admin", "Remove voice privileges from a user.", _nick_arg("devoice")),
        Help("kick", "admin", "Kick a user from a channel.", _nick_arg("kick")),
        Help("ban", "admin", "Ban a user from a channel.", _nick_arg("ban")),
        Help("unban", "admin", "Remove a ban from a user in a channel.", _nick_arg("unban")),
        Help(
            "topic",
            "admin",
            "Set or view the topic of the current channel.",
            _args(("<topic>", "Specify the new topic for the channel.", "")),
        ),
        Help(
            "join",
            "admin",
            "Join a channel.",
            _args(("<channel_name>", "Specify the name of the channel to join.", "")),
        ),
        Help(
            "part",
            "admin",
            "Leave a channel.",
            _args(("<channel_name>", "Specify the name of the channel to leave.", "")),
        ),
        Help("ignore", "admin", "Ignore messages from a specified user.", _nick_arg("ignore")),
        Help("unignore", "admin", "Stop ignoring messages from a specified user.", _nick_arg("unignore")),
        Help(
            "nick",
            "admin",
            "Change the bots nickname.",
            _args(("<nickname>", "Specify the new nickname.", "")),
        ),
        Help(
            "clearqueue",
            "admin",
            "Clear specified queue(s) or all queues.",
            _args(
                (
                    "[4090|2070|all]",
                    "Specify which queue(s) to clear. Use 'all' to clear both queues.",
                    "4090, 2070, all",
                )
            ),
        ),
        Help("removecurrent", "admin", "Remove the currently processing item from both queues."),
    ]


def _parameter_values(param_def: Any) -> str:
    parts = []
    if param_def.type:
        parts.append(param_def.type)
    if param_def.default is not None:
        parts.append(f"default: {_format_value(param_def.default)}")
    if param_def.min is not None and param_def.max is not None:
        parts.append(f"range: {_format_number(param_def.min)}-{_format_number(param_def.max)}")
    elif param_def.min is not None:
        parts.append(f"min: {_format_number(param_def.min)}")
    elif param_def.max is not None:
        parts.append(f"max: {_format_number(param_def.max)}")
    return ", ".join(parts)


def workflow_help(
    workflow_type: str,
    directory: str | PathLike[str] = WORKFLOW_DIR,
    voices: Iterable[str] | None = None,
) -> list[Help]:
    """Help entries for the workflows in directory whose metadata has the given type.

    A "voice" parameter lists the given voices, or says they load dynamically
    when none are given. Workflows whose metadata cannot be read are skipped.
    """
    voice_list = None if voices is None else list(voices)
    items = []
    for workflow_name in list_workflows(directory):
        try:
            meta = get_aibird_meta(Path(directory) / f"{workflow_name}.json")
        except (OSError, ValueError) as exc:
            logger.warn(
                "Skipping workflow for help generation due to error",
                workflow=workflow_name,
                error=str(exc),
            )
            continue
        if meta.type != workflow_type:
            continue

        arguments = []
        if meta.prompt_target.node:
            arguments.append(HelpArgument("<message>", "The main prompt for the generation."))
        for param_name, param_def in meta.parameters.items():
            if param_name == "voice":
                values = DYNAMIC_VOICES if voice_list is None else ", ".join(voice_list)
            else:
                values = _parameter_values(param_def)
            arguments.append(HelpArgument("--" + param_name, param_def.description, values))

        description = meta.description
        if meta.url:
            description = f"{description} (More Info: {meta.url})"

        items.append(
            Help(
                name=workflow_name,
                type=workflow_type,
                help=description,
                arguments=arguments,
                queueable=True,
                example=meta.example,
            )
        )
    return items


def image_help(directory: str | PathLike[str] = WORKFLOW_DIR, voices: Iterable[str] | None = None) -> list[Help]:
    return workflow_help("image", directory, voices)


def video_help(directory: str | PathLike[str] = WORKFLOW_DIR, voices: Iterable[str] | None = None) -> list[Help]:
    return workflow_help("video", directory, voices)


def sound_help(directory: str | PathLike[str] = WORKFLOW_DIR, voices: Iterable[str] | None = None) -> list[Help]:
    """Sound workflows plus the built-in voice-adding command."""
    items = workflow_help("sound", directory, voices)
    items.append(
        Help(
            "tts-add",
            "sound",
            "Add a new TTS voice from a URL. (Admin only)",
            _args(
                ("--url", "URL of the audio file.", "url"),
                ("--name", "Name for the new voice.", "string"),
                ("--start", "Start time of the clip.", "e.g., 00:01:23"),
                ("--duration", "Duration of the clip in seconds.", "e.g., 10"),
            ),
        )
    )
    return items


def format_help(items: Sequence[Help]) -> str:
    """Render help entries as a tree of arguments under each command."""
    out = []
    for item in items:
        marker = " [Queueable]" if item.queueable else ""
        out.append(f"{item.name} - {item.help}{marker}\n")
        last = len(item.arguments) - 1
        for position, arg in enumerate(item.arguments):
            prefix = " └  " if position == last else " ├  "
            line = f"{prefix}{arg.argument}: {arg.help}"
            if arg.values:
                line += f" (Values: {arg.values})"
            out.append(line + "\n")
        if item.example:
            out.append(f" Example: {item.example}\n")
        out.append("\n")
    return "".join(out)


def find_help(
    name: str,
    directory: str | PathLike[str] = WORKFLOW_DIR,
    voices: Iterable[str] | None = None,
) -> str:
    """Formatted help for the first command with this name, or '' if none."""
    voice_list = None if voices is None else list(voices)
    candidates = [
        *admin_help(),
        *sound_help(directory, voice_list),
        *image_help(directory, voice_list),
        *video_help(directory, voice_list),
        *standard_help(),
        *text_help(),
    ]
    found = next((item for item in candidates if item.name == name), None)
    return format_help([found] if found is not None else [])
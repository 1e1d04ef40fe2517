"""State, command parsing and help, workflow metadata, storage and upload helpers for an AI-assisted IRC bot."""

__version__ = "0.1.0"

__all__ = [
    "arguments",
    "birdbase",
    "birdhole",
    "channels",
    "commands",
    "help",
    "helpers",
    "imaging",
    "logger",
    "networks",
    "prompts",
    "request",
    "users",
    "workflows",
]
"""Workflow files on disk and the aibird_meta settings embedded in them."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from os import PathLike
from pathlib import Path
from typing import Any

WORKFLOW_DIR = "comfyuijson"
META_NODE_TITLE = "aibird_meta"


def _expect(value: Any, kind: type | tuple[type, ...], name: str) -> Any:
    if isinstance(value, bool) and kind is not bool and (kind is int or kind == (int, float)):
        raise ValueError(f"{name} must be {kind}, not bool")
    if not isinstance(value, kind):
        raise ValueError(f"{name} has the wrong type: {type(value).__name__}")
    return value


def _opt_float(value: Any, name: str) -> float | None:
    if value is None:
        return None
    return float(_expect(value, (int, float), name))


@dataclass
class Target:
    """A widget in a workflow node that receives a value."""

    node: str = ""
    widget_index: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Target":
        return cls(
            node=_expect(data.get("node", ""), str, "node"),
            widget_index=_expect(data.get("widget_index", 0), int, "widget_index"),
        )


@dataclass
class PromptTarget:
    """Where the main prompt text goes."""

    node: str = ""
    widget_index: int = 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PromptTarget":
        return cls(
            node=_expect(data.get("node", ""), str, "node"),
            widget_index=_expect(data.get("widget_index", 0), int, "widget_index"),
        )


def _targets(data: dict[str, Any]) -> list[Target]:
    return [Target.from_dict(_expect(t, dict, "target")) for t in _expect(data.get("targets", []), list, "targets")]


@dataclass
class ParameterDef:
    """A parameter a user may set with --name=value."""

    type: str = ""
    default: Any = None
    description: str = ""
    targets: list[Target] = field(default_factory=list)
    min: float | None = None
    max: float | None = None

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ParameterDef":
        return cls(
            type=_expect(data.get("type", ""), str, "type"),
            default=data.get("default"),
            description=_expect(data.get("description", ""), str, "description"),
            targets=_targets(data),
            min=_opt_float(data.get("min"), "min"),
            max=_opt_float(data.get("max"), "max"),
        )


@dataclass
class HardcodedValue:
    """A value always written into the workflow."""

    value: Any = None
    targets: list[Target] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "HardcodedValue":
        return cls(value=data.get("value"), targets=_targets(data))


@dataclass
class AibirdMeta:
    """The aibird_meta settings describing how a workflow is driven."""

    name: str = ""
    command: str = ""
    description: str = ""
    url: str = ""
    example: str = ""
    access_level: int = 0
    type: str = ""
    big_model: bool = False
    prompt_target: PromptTarget = field(default_factory=PromptTarget)
    parameters: dict[str, ParameterDef] = field(default_factory=dict)
    hardcoded: dict[str, HardcodedValue] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AibirdMeta":
        """Build from the decoded TOML table; raise ValueError on wrong types."""
        parameters = _expect(data.get("parameters", {}), dict, "parameters")
        hardcoded = _expect(data.get("hardcoded", {}), dict, "hardcoded")
        return cls(
            name=_expect(data.get("name", ""), str, "name"),
            command=_expect(data.get("command", ""), str, "command"),
            description=_expect(data.get("description", ""), str, "description"),
            url=_expect(data.get("url", ""), str, "url"),
            example=_expect(data.get("example", ""), str, "example"),
            access_level=_expect(data.get("accessLevel", 0), int, "accessLevel"),
            type=_expect(data.get("type", ""), str, "type"),
            big_model=_expect(data.get("bigModel", False), bool, "bigModel"),
            prompt_target=PromptTarget.from_dict(_expect(data.get("promptTarget", {}), dict, "promptTarget")),
            parameters={
                key: ParameterDef.from_dict(_expect(value, dict, key)) for key, value in parameters.items()
            },
            hardcoded={
                key: HardcodedValue.from_dict(_expect(value, dict, key)) for key, value in hardcoded.items()
            },
        )


def workflow_exists(workflow: str, directory: str | PathLike[str] = WORKFLOW_DIR) -> bool:
    return (Path(directory) / f"{workflow}.json").exists()


def list_workflows(directory: str | PathLike[str] = WORKFLOW_DIR) -> list[str]:
    """Names of the workflow files in the directory, sorted."""
    return sorted(path.name.replace(".json", "") for path in Path(directory).glob("*.json"))


def get_workflows(formatted: bool = False, directory: str | PathLike[str] = WORKFLOW_DIR) -> str:
    """Comma separated workflow names, optionally wrapped in bold codes."""
    names = list_workflows(directory)
    if formatted:
        names = [f"{{b}}{name}{{b}}" for name in names]
    return ", ".join(names)


def _is_meta_node(node: dict[str, Any]) -> bool:
    properties = node.get("properties")
    if isinstance(properties, dict) and properties.get("title") == META_NODE_TITLE:
        return True
    return node.get("title") == META_NODE_TITLE


def get_aibird_meta(workflow_file: str | PathLike[str]) -> AibirdMeta:
    """Read a workflow file and decode its aibird_meta node.

    Raises ValueError for an unsafe path or a malformed workflow, and OSError
    when the file cannot be read.
    """
    if ".." in str(workflow_file):
        raise ValueError(f"invalid workflow file path: {workflow_file}")

    data = json.loads(Path(workflow_file).read_text(encoding="utf-8"))
    nodes = data.get("nodes") if isinstance(data, dict) else None
    if not isinstance(nodes, list):
        raise ValueError("workflow has no nodes")

    meta_node = next((n for n in nodes if isinstance(n, dict) and _is_meta_node(n)), None)
    if meta_node is None:
        raise ValueError(f"workflow {workflow_file} has no {META_NODE_TITLE} node")

    widget_values = meta_node.get("widgets_values")
    if not isinstance(widget_values, list) or not widget_values:
        raise ValueError(f"node {META_NODE_TITLE} has no widget_values")

    toml_text = widget_values[0]
    if not isinstance(toml_text, str):
        raise ValueError(f"first widget value in node {META_NODE_TITLE} is not a string")

    return AibirdMeta.from_dict(tomllib.loads(toml_text))
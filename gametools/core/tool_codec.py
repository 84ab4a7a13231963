"""Tool JSON codec — current schema writer, current + legacy schema reader.

Documents without a ``use_flatpak_runtime`` key predate launcher support
and are read with the lenient legacy rules.  Everything else must follow
the current schema strictly.  Parsing happens in two steps: the document
is validated into a schema-specific record, then the record becomes a
:class:`Tool`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

from loguru import logger

from gametools.models.launcher import LauncherType
from gametools.models.tool import Runtime, Tool
from gametools.utils import path_str

# Marks the current schema
SCHEMA_MARKER = "use_flatpak_runtime"

_MISSING = object()


class ToolParseError(ValueError):
    """A tool document does not follow its schema."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(f"{key}: {message}" if key else message)
        self.key = key


class SchemaVersion(StrEnum):
    LEGACY = "legacy"
    CURRENT = "current"


def detect_schema(doc: dict[str, Any]) -> SchemaVersion:
    return SchemaVersion.CURRENT if SCHEMA_MARKER in doc else SchemaVersion.LEGACY


# ── Field readers ──


def _read(doc: dict[str, Any], key: str, kind: type, default: Any = _MISSING) -> Any:
    """Read ``doc[key]`` checking its JSON type. No default means required."""
    if key not in doc:
        if default is _MISSING:
            raise ToolParseError("missing required key", key)
        return default
    value = doc[key]
    # bool is an int subclass; JSON keeps them apart
    if kind is int and isinstance(value, bool):
        raise ToolParseError(f"expected int, got {type(value).__name__}", key)
    if not isinstance(value, kind):
        raise ToolParseError(f"expected {kind.__name__}, got {type(value).__name__}", key)
    return value


def _read_runtime(doc: dict[str, Any], strict: bool) -> Runtime:
    if "runtime" not in doc:
        if strict:
            raise ToolParseError("missing required key", "runtime")
        return Runtime.NATIVE
    value = doc["runtime"]
    if isinstance(value, str):
        return Runtime.from_name(value)
    if isinstance(value, int) and not isinstance(value, bool):
        if value in Runtime._value2member_map_:
            return Runtime(value)
        if strict:
            raise ToolParseError(f"unknown runtime code {value}", "runtime")
        logger.warning(f"Unknown runtime code {value} in legacy tool, using native")
        return Runtime.NATIVE
    if strict:
        raise ToolParseError(f"expected str or int, got {type(value).__name__}", "runtime")
    logger.warning(f"Unreadable runtime {value!r} in legacy tool, using native")
    return Runtime.NATIVE


def _read_environment(doc: dict[str, Any]) -> dict[str, str]:
    # Older writers omit the key when there are no variables
    entries = _read(doc, "environment_variables", list, [])
    variables: dict[str, str] = {}
    for i, entry in enumerate(entries):
        key = f"environment_variables[{i}]"
        if not isinstance(entry, dict):
            raise ToolParseError("expected object", key)
        try:
            variables[_read(entry, "variable", str)] = _read(entry, "value", str)
        except ToolParseError as e:
            raise ToolParseError(str(e), key) from e
    return variables


@dataclass(frozen=True)
class LauncherFields:
    """Launcher keys, shared by both schemas.

    The string aliases ``launcher`` / ``appName`` are read first and the
    typed keys ``launcher_type`` / ``launcher_identifier`` override them.
    """

    launcher_type: LauncherType = LauncherType.STEAM
    launcher_identifier: str = ""
    proton_path: str = ""

    @classmethod
    def parse(cls, doc: dict[str, Any], strict: bool) -> LauncherFields:
        launcher_type = LauncherType.STEAM
        if "launcher" in doc:
            alias = _read(doc, "launcher", str)
            launcher_type = LauncherType.HEROIC if alias == "heroic" else LauncherType.STEAM
        if "launcher_type" in doc:
            code = _read(doc, "launcher_type", int)
            if code in LauncherType._value2member_map_:
                launcher_type = LauncherType(code)
            elif strict:
                raise ToolParseError(f"unknown launcher code {code}", "launcher_type")
            else:
                logger.warning(f"Unknown launcher code {code} in legacy tool, using steam")
                launcher_type = LauncherType.STEAM

        identifier = _read(doc, "appName", str, "")
        identifier = _read(doc, "launcher_identifier", str, identifier)
        return cls(
            launcher_type=launcher_type,
            launcher_identifier=identifier,
            proton_path=_read(doc, "proton_path", str, ""),
        )


@dataclass(frozen=True)
class LegacyToolRecord:
    """Tool document written before launcher support existed."""

    name: str
    icon_path: str
    command: str
    runtime: Runtime = Runtime.NATIVE
    executable_path: str = ""
    working_directory: str = ""
    arguments: str = ""
    protontricks_arguments: str = ""
    launcher: LauncherFields = field(default_factory=LauncherFields)

    @classmethod
    def parse(cls, doc: dict[str, Any]) -> LegacyToolRecord:
        return cls(
            name=_read(doc, "name", str, ""),
            icon_path=_read(doc, "icon_path", str, ""),
            command=_read(doc, "command", str, ""),
            runtime=_read_runtime(doc, strict=False),
            executable_path=_read(doc, "executable_path", str, ""),
            working_directory=_read(doc, "working_directory", str, ""),
            arguments=_read(doc, "arguments", str, ""),
            protontricks_arguments=_read(doc, "protontricks_arguments", str, ""),
            launcher=LauncherFields.parse(doc, strict=False),
        )

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            icon_path=self.icon_path,
            runtime=self.runtime,
            command_override=self.command,
            executable_path=self.executable_path,
            working_directory=self.working_directory,
            arguments=self.arguments,
            protontricks_arguments=self.protontricks_arguments,
            launcher_type=self.launcher.launcher_type,
            launcher_identifier=self.launcher.launcher_identifier,
            proton_path=self.launcher.proton_path,
        )


@dataclass(frozen=True)
class CurrentToolRecord:
    """Tool document in the current schema."""

    name: str
    icon_path: str
    executable_path: str
    runtime: Runtime
    use_flatpak_runtime: bool
    prefix_path: str
    steam_app_id: int
    working_directory: str
    environment_variables: dict[str, str]
    arguments: str
    protontricks_arguments: str
    command: str
    launcher: LauncherFields

    @classmethod
    def parse(cls, doc: dict[str, Any]) -> CurrentToolRecord:
        return cls(
            name=_read(doc, "name", str),
            icon_path=_read(doc, "icon_path", str),
            executable_path=_read(doc, "executable_path", str),
            runtime=_read_runtime(doc, strict=True),
            use_flatpak_runtime=_read(doc, "use_flatpak_runtime", bool),
            prefix_path=_read(doc, "prefix_path", str),
            steam_app_id=_read(doc, "steam_app_id", int),
            working_directory=_read(doc, "working_directory", str),
            environment_variables=_read_environment(doc),
            arguments=_read(doc, "arguments", str),
            protontricks_arguments=_read(doc, "protontricks_arguments", str),
            command=_read(doc, "command", str),
            launcher=LauncherFields.parse(doc, strict=True),
        )

    def to_tool(self) -> Tool:
        return Tool(
            name=self.name,
            icon_path=self.icon_path,
            runtime=self.runtime,
            command_override=self.command,
            executable_path=self.executable_path,
            working_directory=self.working_directory,
            environment_variables=self.environment_variables,
            arguments=self.arguments,
            prefix_path=self.prefix_path,
            steam_app_id=self.steam_app_id,
            use_flatpak_runtime=self.use_flatpak_runtime,
            protontricks_arguments=self.protontricks_arguments,
            launcher_type=self.launcher.launcher_type,
            launcher_identifier=self.launcher.launcher_identifier,
            proton_path=self.launcher.proton_path,
        )


def tool_from_document(doc: Any) -> Tool:
    """Parse a tool from either schema. Raises :class:`ToolParseError`."""
    if not isinstance(doc, dict):
        raise ToolParseError(f"expected object, got {type(doc).__name__}")
    if detect_schema(doc) is SchemaVersion.LEGACY:
        return LegacyToolRecord.parse(doc).to_tool()
    return CurrentToolRecord.parse(doc).to_tool()


def tool_to_document(tool: Tool) -> dict[str, Any]:
    """Serialize a tool in the current schema."""
    return {
        "name": tool.name,
        "icon_path": path_str(tool.icon_path),
        "executable_path": path_str(tool.executable_path),
        "runtime": int(tool.runtime),
        "use_flatpak_runtime": tool.use_flatpak_runtime,
        "prefix_path": path_str(tool.prefix_path),
        "steam_app_id": tool.steam_app_id,
        "working_directory": path_str(tool.working_directory),
        "environment_variables": [
            {"variable": variable, "value": value}
            for variable, value in tool.environment_variables.items()
        ],
        "arguments": tool.arguments,
        "protontricks_arguments": tool.protontricks_arguments,
        "command": tool.command_override,
        "launcher_type": int(tool.launcher_type),
        "launcher_identifier": tool.launcher_identifier,
        "proton_path": path_str(tool.proton_path),
    }

"""Command synthesis — turn a Tool into a shell command line.

The result is a single string meant for a shell: paths are double-quoted,
a native working directory is entered with ``cd "<dir>";`` and
environment variables are inline assignments.  When the calling
application is itself sandboxed, everything is routed through
``flatpak-spawn --host`` and directory/environment become wrapper flags.

Rules, first match wins:
  1. manual command override
  2. Steam ``-applaunch``
  3. Heroic game run through its own Proton build
  4. native / wine / protontricks-launch
"""

from __future__ import annotations

from pathlib import Path

from loguru import logger

from gametools.models.tool import Runtime, Tool
from gametools.utils import FLATPAK_SPAWN_PREFIX, enclose_in_quotes, path_str

STEAM_HOST_COMMAND = "steam"
STEAM_FLATPAK_COMMAND = "flatpak run com.valvesoftware.Steam"
PROTONTRICKS_HOST_COMMAND = "protontricks-launch"
PROTONTRICKS_FLATPAK_COMMAND = (
    "flatpak run --command=protontricks-launch com.github.Matoking.protontricks"
)

# Proton reads the client install path only to locate Steam's runtime libs
STEAM_COMPAT_CLIENT_INSTALL_PATH = "/usr"


def build_command(tool: Tool, sandboxed: bool = False) -> str:
    """Return the command line running ``tool``."""
    if tool.command_override:
        if sandboxed:
            return f"{FLATPAK_SPAWN_PREFIX} {tool.command_override}"
        return tool.command_override

    parts: list[str] = [FLATPAK_SPAWN_PREFIX] if sandboxed else []

    if tool.runtime == Runtime.STEAM:
        parts.append(STEAM_FLATPAK_COMMAND if tool.use_flatpak_runtime else STEAM_HOST_COMMAND)
        parts.append(f"-applaunch {tool.steam_app_id}")
    elif tool.uses_heroic_proton:
        parts.extend(_heroic_proton_parts(tool, sandboxed))
    else:
        parts.extend(_runtime_parts(tool, sandboxed))

    command = " ".join(parts)
    logger.debug(f"Command for '{tool.name}': {command}")
    return command


def format_environment(variables: dict[str, str], sandboxed: bool) -> list[str]:
    """Render ``VAR="value"`` assignments, as ``--env=`` flags when sandboxed."""
    prefix = "--env=" if sandboxed else ""
    return [f"{prefix}{name}={enclose_in_quotes(value)}" for name, value in variables.items()]


def _working_directory_parts(directory: Path | None, sandboxed: bool) -> list[str]:
    if directory is None:
        return []
    quoted = enclose_in_quotes(path_str(directory))
    if sandboxed:
        return [f"--directory={quoted}"]
    return [f"cd {quoted};"]


def _heroic_proton_parts(tool: Tool, sandboxed: bool) -> list[str]:
    parts = _working_directory_parts(tool.working_directory, sandboxed)
    compat = {
        "STEAM_COMPAT_DATA_PATH": path_str(tool.prefix_path),
        "STEAM_COMPAT_CLIENT_INSTALL_PATH": STEAM_COMPAT_CLIENT_INSTALL_PATH,
    }
    parts.extend(format_environment(compat, sandboxed))
    parts.extend(format_environment(tool.environment_variables, sandboxed))

    if tool.proton_path is None:
        logger.warning(f"Heroic tool '{tool.name}' has no Proton path")
    parts.append(enclose_in_quotes(f"{path_str(tool.proton_path)}/proton"))
    parts.append("run")
    parts.append(enclose_in_quotes(path_str(tool.executable_path)))
    if tool.arguments:
        parts.append(tool.arguments)
    return parts


def _runtime_parts(tool: Tool, sandboxed: bool) -> list[str]:
    parts = _working_directory_parts(tool.working_directory, sandboxed)
    parts.extend(format_environment(tool.environment_variables, sandboxed))
    if tool.runtime == Runtime.WINE and tool.prefix_path is not None:
        parts.extend(format_environment({"WINEPREFIX": path_str(tool.prefix_path)}, sandboxed))

    if tool.runtime == Runtime.WINE:
        parts.append("wine")
    elif tool.runtime == Runtime.PROTONTRICKS:
        parts.append(
            PROTONTRICKS_FLATPAK_COMMAND if tool.use_flatpak_runtime else PROTONTRICKS_HOST_COMMAND
        )
        parts.append(f"--appid {tool.steam_app_id}")
        if tool.protontricks_arguments:
            parts.append(tool.protontricks_arguments)

    parts.append(enclose_in_quotes(path_str(tool.executable_path)))
    if tool.arguments:
        parts.append(tool.arguments)
    return parts

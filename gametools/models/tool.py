"""Tool model — a runnable configuration for an executable or a Steam game."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING, Any

from gametools.models.launcher import (
    HeroicLauncherConfig,
    LauncherType,
    SteamLauncherConfig,
)
from gametools.utils import path_str

if TYPE_CHECKING:
    from gametools.models.heroic_game import HeroicGameInfo

_PATH_FIELDS = (
    "icon_path",
    "executable_path",
    "working_directory",
    "prefix_path",
    "proton_path",
)


class Runtime(IntEnum):
    """Execution strategy. Values are the persisted integer codes."""

    NATIVE = 0
    WINE = 1
    PROTONTRICKS = 2
    STEAM = 3

    @classmethod
    def from_name(cls, name: str) -> Runtime:
        """Map a legacy runtime name; unknown names fall back to native."""
        try:
            return cls[name.upper()]
        except KeyError:
            return cls.NATIVE


@dataclass(frozen=True)
class Tool:
    """
    A tool as configured by the user.

    Either ``command_override`` is set (manual mode) and is run verbatim,
    or the structured fields describe how to run ``executable_path``.
    Unset paths are ``None``; empty paths are normalized to it.
    Instances are never mutated; use
    :meth:`replace` to derive a changed copy.
    """

    name: str
    icon_path: Path | None = None
    runtime: Runtime = Runtime.NATIVE
    command_override: str = ""
    executable_path: Path | None = None
    working_directory: Path | None = None
    environment_variables: dict[str, str] = field(default_factory=dict, hash=False)
    arguments: str = ""
    prefix_path: Path | None = None
    steam_app_id: int = 0
    use_flatpak_runtime: bool = False
    protontricks_arguments: str = ""
    launcher_type: LauncherType = LauncherType.STEAM
    launcher_identifier: str = ""
    proton_path: Path | None = None

    def __post_init__(self) -> None:
        for name in _PATH_FIELDS:
            # "", Path("") and Path(".") all mean unset
            text = path_str(getattr(self, name))
            object.__setattr__(self, name, Path(text) if text else None)
        object.__setattr__(self, "runtime", Runtime(self.runtime))
        object.__setattr__(self, "launcher_type", LauncherType(self.launcher_type))
        object.__setattr__(self, "environment_variables", dict(self.environment_variables))

    # ── Constructor shapes ──

    @classmethod
    def manual(cls, name: str, icon_path: str | Path | None, command: str) -> Tool:
        return cls(name=name, icon_path=icon_path, command_override=command)

    @classmethod
    def native(
        cls,
        name: str,
        icon_path: str | Path | None,
        executable_path: str | Path,
        working_directory: str | Path | None = None,
        environment_variables: dict[str, str] | None = None,
        arguments: str = "",
    ) -> Tool:
        return cls(
            name=name,
            icon_path=icon_path,
            runtime=Runtime.NATIVE,
            executable_path=executable_path,
            working_directory=working_directory,
            environment_variables=environment_variables or {},
            arguments=arguments,
        )

    @classmethod
    def wine(
        cls,
        name: str,
        icon_path: str | Path | None,
        executable_path: str | Path,
        prefix_path: str | Path | None = None,
        working_directory: str | Path | None = None,
        environment_variables: dict[str, str] | None = None,
        arguments: str = "",
    ) -> Tool:
        return cls(
            name=name,
            icon_path=icon_path,
            runtime=Runtime.WINE,
            executable_path=executable_path,
            prefix_path=prefix_path,
            working_directory=working_directory,
            environment_variables=environment_variables or {},
            arguments=arguments,
        )

    @classmethod
    def protontricks(
        cls,
        name: str,
        icon_path: str | Path | None,
        executable_path: str | Path,
        use_flatpak_protontricks: bool,
        steam_app_id: int,
        working_directory: str | Path | None = None,
        environment_variables: dict[str, str] | None = None,
        arguments: str = "",
        protontricks_arguments: str = "",
    ) -> Tool:
        return cls(
            name=name,
            icon_path=icon_path,
            runtime=Runtime.PROTONTRICKS,
            executable_path=executable_path,
            use_flatpak_runtime=use_flatpak_protontricks,
            steam_app_id=steam_app_id,
            working_directory=working_directory,
            environment_variables=environment_variables or {},
            arguments=arguments,
            protontricks_arguments=protontricks_arguments,
        )

    @classmethod
    def steam(
        cls,
        name: str,
        icon_path: str | Path | None,
        steam_app_id: int,
        use_flatpak_steam: bool = False,
    ) -> Tool:
        return cls(
            name=name,
            icon_path=icon_path,
            runtime=Runtime.STEAM,
            steam_app_id=steam_app_id,
            use_flatpak_runtime=use_flatpak_steam,
        )

    @classmethod
    def heroic(
        cls,
        name: str,
        icon_path: str | Path | None,
        executable_path: str | Path,
        game: HeroicGameInfo,
        working_directory: str | Path | None = None,
        environment_variables: dict[str, str] | None = None,
        arguments: str = "",
    ) -> Tool:
        """Run an executable inside a Heroic game's prefix through its Proton build."""
        return cls(
            name=name,
            icon_path=icon_path,
            runtime=Runtime.PROTONTRICKS,
            executable_path=executable_path,
            working_directory=path_str(working_directory) or game.install_path,
            environment_variables=environment_variables or {},
            arguments=arguments,
            prefix_path=game.wine_prefix,
            launcher_type=LauncherType.HEROIC,
            launcher_identifier=game.app_name,
            proton_path=game.proton_path,
        )

    # ── Queries ──

    @property
    def is_manual(self) -> bool:
        return bool(self.command_override)

    @property
    def uses_heroic_proton(self) -> bool:
        return self.launcher_type == LauncherType.HEROIC and self.runtime == Runtime.PROTONTRICKS

    def launcher_config(
        self, install_path: Path | None = None
    ) -> SteamLauncherConfig | HeroicLauncherConfig:
        """Project the launcher fields of this tool onto a LauncherConfig."""
        if self.launcher_type == LauncherType.HEROIC:
            return HeroicLauncherConfig(
                app_name=self.launcher_identifier,
                heroic_install_path=install_path or self.working_directory or Path(),
                heroic_wine_prefix=self.prefix_path or Path(),
                heroic_proton_path=self.proton_path,
            )
        return SteamLauncherConfig(
            steam_app_id=self.steam_app_id,
            steam_install_path=install_path or Path(),
            proton_prefix=self.prefix_path or Path(),
        )

    def replace(self, **changes: Any) -> Tool:
        return dataclasses.replace(self, **changes)

    # ── Command / persistence ──

    def build_command(self, sandboxed: bool = False) -> str:
        """Command line to run this tool. See :mod:`gametools.core.command_builder`."""
        from gametools.core.command_builder import build_command

        return build_command(self, sandboxed)

    def to_document(self) -> dict[str, Any]:
        from gametools.core.tool_codec import tool_to_document

        return tool_to_document(self)

    @classmethod
    def from_document(cls, doc: Any) -> Tool:
        from gametools.core.tool_codec import tool_from_document

        return tool_from_document(doc)

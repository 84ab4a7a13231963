"""Launcher configuration models.

A launcher is the game manager that owns a game's identity and install
layout.  ``LauncherConfig`` answers "where does this game's Wine
environment live" without the caller branching on the launcher type.

SteamLauncherConfig   → game owned by Steam, identified by its app id
HeroicLauncherConfig  → game owned by Heroic, identified by its app name
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import assert_never


class LauncherType(IntEnum):
    """Launcher owning a game. Values are the persisted integer codes."""

    STEAM = 0
    HEROIC = 1


class LauncherConfig(ABC):
    """Read-only view of a game's launcher-specific environment."""

    @property
    @abstractmethod
    def type(self) -> LauncherType: ...

    @property
    @abstractmethod
    def identifier(self) -> str:
        """Steam app id as a decimal string, or the Heroic app name."""
        ...

    @property
    @abstractmethod
    def install_path(self) -> Path: ...

    @property
    @abstractmethod
    def wine_prefix(self) -> Path:
        """Proton prefix for Steam, ``winePrefix`` (holding ``pfx``) for Heroic."""
        ...

    @property
    @abstractmethod
    def wine_version(self) -> str: ...

    @property
    @abstractmethod
    def proton_path(self) -> Path | None: ...

    @property
    @abstractmethod
    def is_flatpak(self) -> bool: ...


@dataclass(frozen=True)
class SteamLauncherConfig(LauncherConfig):
    """Game installed through Steam."""

    steam_app_id: int
    steam_install_path: Path
    proton_prefix: Path

    @property
    def type(self) -> LauncherType:
        return LauncherType.STEAM

    @property
    def identifier(self) -> str:
        return str(self.steam_app_id)

    @property
    def install_path(self) -> Path:
        return self.steam_install_path

    @property
    def wine_prefix(self) -> Path:
        return self.proton_prefix

    @property
    def wine_version(self) -> str:
        return "steam"

    @property
    def proton_path(self) -> Path | None:
        # Steam picks its own Proton build
        return None

    @property
    def is_flatpak(self) -> bool:
        return False


@dataclass(frozen=True)
class HeroicLauncherConfig(LauncherConfig):
    """Game installed through Heroic Games Launcher."""

    app_name: str
    heroic_install_path: Path
    heroic_wine_prefix: Path
    heroic_wine_version: str = ""
    heroic_proton_path: Path | None = None
    heroic_is_flatpak: bool = False

    @property
    def type(self) -> LauncherType:
        return LauncherType.HEROIC

    @property
    def identifier(self) -> str:
        return self.app_name

    @property
    def install_path(self) -> Path:
        return self.heroic_install_path

    @property
    def wine_prefix(self) -> Path:
        return self.heroic_wine_prefix

    @property
    def wine_version(self) -> str:
        return self.heroic_wine_version

    @property
    def proton_path(self) -> Path | None:
        return self.heroic_proton_path

    @property
    def is_flatpak(self) -> bool:
        return self.heroic_is_flatpak


def describe_launcher(config: SteamLauncherConfig | HeroicLauncherConfig) -> str:
    """Short human-readable label, e.g. ``Steam (app 489830)``."""
    match config:
        case SteamLauncherConfig():
            return f"Steam (app {config.identifier})"
        case HeroicLauncherConfig():
            label = f"Heroic ({config.identifier}"
            if config.wine_version:
                label += f", {config.wine_version}"
            return label + ")"
        case _:
            assert_never(config)

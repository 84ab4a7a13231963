"""Heroic game information model."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from gametools.models.launcher import HeroicLauncherConfig


@dataclass
class HeroicGameInfo:
    """Game detected in a Heroic Games Launcher configuration."""

    app_name: str  # Store-unique id, e.g. "Croc" for Epic
    install_path: Path
    wine_prefix: Path  # Contains the pfx subdirectory
    title: str = ""
    wine_version: str = ""  # e.g. "GE-Proton9-2"
    proton_path: Path | None = None

    @property
    def display_name(self) -> str:
        return self.title or self.app_name

    def to_launcher_config(self, is_flatpak: bool = False) -> HeroicLauncherConfig:
        return HeroicLauncherConfig(
            app_name=self.app_name,
            heroic_install_path=self.install_path,
            heroic_wine_prefix=self.wine_prefix,
            heroic_wine_version=self.wine_version,
            heroic_proton_path=self.proton_path,
            heroic_is_flatpak=is_flatpak,
        )

"""Heroic Games Launcher detection — installed games, prefixes and Proton builds.

Heroic keeps its configuration either in the Flatpak sandbox
(``~/.var/app/com.heroicgameslauncher.hgl/config/heroic``) or natively
(``~/.config/heroic``).  Layout consumed:

  store/installed.json          Epic  (array of {appName, title, ...})
  gog_store/installed.json      GOG
  amazon_store/installed.json   Amazon
  GamesConfig/<appName>.json    {install_path, winePrefix, wineVersion: {name}}
  tools/proton/<version>/       Proton builds downloaded by Heroic

Nothing is cached: every call reads the disk again.  Missing files and
malformed JSON are reported as "nothing found", never raised.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from loguru import logger

from gametools.models.heroic_game import HeroicGameInfo

FLATPAK_APP_ID = "com.heroicgameslauncher.hgl"


@dataclass(frozen=True)
class HeroicStore:
    """A store back-end and its installed-games manifest."""

    name: str
    manifest: Path  # Relative to the config root


STORES: tuple[HeroicStore, ...] = (
    HeroicStore("Epic", Path("store") / "installed.json"),
    HeroicStore("GOG", Path("gog_store") / "installed.json"),
    HeroicStore("Amazon", Path("amazon_store") / "installed.json"),
)


def _load_json(path: Path) -> Any:
    """Parse a JSON file, or return None if it cannot be read or parsed."""
    try:
        with open(path, encoding="utf-8") as f:
            return json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.debug(f"Failed to read {path}: {e}")
        return None


def _as_str(value: Any) -> str:
    # null or a non-string value reads as an empty path
    return value if isinstance(value, str) else ""


class HeroicDetector:
    """Reads Heroic's on-disk configuration below a given home directory."""

    def __init__(self, home: Path | None = None) -> None:
        self._home = Path(home) if home is not None else Path.home()

    # ── Roots ──

    @property
    def flatpak_config_dir(self) -> Path:
        return self._home / ".var" / "app" / FLATPAK_APP_ID / "config" / "heroic"

    @property
    def native_config_dir(self) -> Path:
        return self._home / ".config" / "heroic"

    def config_root(self) -> Path | None:
        """Heroic's config directory, Flatpak install first."""
        for candidate in (self.flatpak_config_dir, self.native_config_dir):
            if candidate.exists():
                return candidate
        return None

    def is_installed(self) -> bool:
        return self.config_root() is not None

    def is_flatpak(self) -> bool:
        return self.config_root() == self.flatpak_config_dir

    def tools_root(self) -> Path | None:
        """Directory holding Heroic's Proton builds."""
        root = self.config_root()
        if root is None:
            return None

        tools = root / "tools" / "proton"
        return tools if tools.exists() else None

    # ── Games ──

    def detect_games(self) -> list[HeroicGameInfo]:
        """All games installed through Heroic, across every store."""
        root = self.config_root()
        if root is None:
            logger.debug("Heroic config directory not found")
            return []

        games: list[HeroicGameInfo] = []
        for store in STORES:
            manifest = root / store.manifest
            if not manifest.exists():
                continue
            store_games = self._detect_store_games(store, manifest, root)
            logger.debug(f"Detected {len(store_games)} game(s) from {store.name} store")
            games.extend(store_games)

        logger.debug(f"Detected {len(games)} Heroic game(s)")
        return games

    def get_game_config(self, app_name: str) -> HeroicGameInfo | None:
        """Game info from ``GamesConfig/<app_name>.json``, or None."""
        root = self.config_root()
        if root is None:
            return None
        return self._parse_game_config(app_name, root)

    def _detect_store_games(
        self, store: HeroicStore, manifest: Path, root: Path
    ) -> list[HeroicGameInfo]:
        entries = _load_json(manifest)
        if not isinstance(entries, list):
            logger.debug(f"{store.name} installed games list is not an array")
            return []

        games: list[HeroicGameInfo] = []
        for entry in entries:
            if not isinstance(entry, dict) or "appName" not in entry:
                continue
            info = self._parse_game_config(str(entry["appName"]), root)
            if info is None:
                continue
            title = entry.get("title")
            if isinstance(title, str):
                info.title = title
            games.append(info)
        return games

    def _parse_game_config(self, app_name: str, root: Path) -> HeroicGameInfo | None:
        config_path = root / "GamesConfig" / f"{app_name}.json"
        if not config_path.exists():
            logger.debug(f"Heroic game config not found: {config_path}")
            return None

        data = _load_json(config_path)
        if not isinstance(data, dict):
            logger.debug(f"Heroic game config is not an object: {config_path}")
            return None

        for key in ("install_path", "winePrefix"):
            if key not in data:
                logger.debug(f"Heroic config missing {key}: {app_name}")
                return None

        wine_version = ""
        wine_info = data.get("wineVersion")
        if isinstance(wine_info, dict) and isinstance(wine_info.get("name"), str):
            wine_version = wine_info["name"]

        proton_path = None
        if wine_version:
            proton_path = self.find_proton_path(wine_version, self.tools_root())

        return HeroicGameInfo(
            app_name=app_name,
            install_path=Path(_as_str(data["install_path"])),
            wine_prefix=Path(_as_str(data["winePrefix"])),
            wine_version=wine_version,
            proton_path=proton_path,
        )

    # ── Proton ──

    @staticmethod
    def find_proton_path(version: str, tools_root: Path | None) -> Path | None:
        """
        Proton directory for ``version``: an exact name match, else the first
        directory (by name) containing ``version``.
        """
        if tools_root is None or not tools_root.exists():
            return None

        exact = tools_root / version
        if exact.is_dir():
            return exact

        try:
            candidates = sorted(p for p in tools_root.iterdir() if p.is_dir())
        except OSError as e:
            logger.debug(f"Error scanning Proton directory {tools_root}: {e}")
            return None

        for candidate in candidates:
            if version in candidate.name:
                return candidate
        return None

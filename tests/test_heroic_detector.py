"""Tests for HeroicDetector against synthetic Heroic configuration trees."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any
from unittest.mock import patch

import pytest

from gametools.core.heroic_detector import HeroicDetector
from gametools.models.tool import Tool


def _write_json(path: Path, data: Any) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data), encoding="utf-8")


def _add_game(root: Path, app_name: str, wine_version: str | None = "GE-Proton9-2") -> None:
    config: dict[str, Any] = {
        "install_path": f"/games/{app_name}",
        "winePrefix": f"/home/u/heroic/{app_name}",
    }
    if wine_version is not None:
        config["wineVersion"] = {"name": wine_version, "type": "proton"}
    _write_json(root / "GamesConfig" / f"{app_name}.json", config)


@pytest.fixture
def home(tmp_path: Path) -> Path:
    return tmp_path / "home"


@pytest.fixture
def native_root(home: Path) -> Path:
    root = home / ".config" / "heroic"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def flatpak_root(home: Path) -> Path:
    root = home / ".var" / "app" / "com.heroicgameslauncher.hgl" / "config" / "heroic"
    root.mkdir(parents=True)
    return root


@pytest.fixture
def detector(home: Path) -> HeroicDetector:
    return HeroicDetector(home)


class TestConfigRoot:
    def test_not_installed(self, detector: HeroicDetector) -> None:
        assert detector.config_root() is None
        assert not detector.is_installed()
        assert detector.tools_root() is None

    def test_native(self, detector: HeroicDetector, native_root: Path) -> None:
        assert detector.config_root() == native_root
        assert detector.is_installed()
        assert not detector.is_flatpak()

    def test_flatpak_preferred(
        self, detector: HeroicDetector, native_root: Path, flatpak_root: Path
    ) -> None:
        assert detector.config_root() == flatpak_root
        assert detector.is_flatpak()

    def test_tools_root(self, detector: HeroicDetector, native_root: Path) -> None:
        assert detector.tools_root() is None
        tools = native_root / "tools" / "proton"
        tools.mkdir(parents=True)
        assert detector.tools_root() == tools

    def test_flatpak_tools_root(self, detector: HeroicDetector, flatpak_root: Path) -> None:
        tools = flatpak_root / "tools" / "proton"
        tools.mkdir(parents=True)
        assert detector.tools_root() == tools

    def test_tools_root_follows_active_root(
        self, detector: HeroicDetector, native_root: Path, flatpak_root: Path
    ) -> None:
        (native_root / "tools" / "proton").mkdir(parents=True)
        assert detector.tools_root() is None


class TestGameConfig:
    def test_exact_proton_match(self, detector: HeroicDetector, native_root: Path) -> None:
        tools = native_root / "tools" / "proton"
        (tools / "GE-Proton9-2").mkdir(parents=True)
        _add_game(native_root, "Croc")

        info = detector.get_game_config("Croc")
        assert info is not None
        assert info.app_name == "Croc"
        assert info.install_path == Path("/games/Croc")
        assert info.wine_prefix == Path("/home/u/heroic/Croc")
        assert info.wine_version == "GE-Proton9-2"
        assert info.proton_path == tools / "GE-Proton9-2"

    def test_no_root(self, detector: HeroicDetector) -> None:
        assert detector.get_game_config("Croc") is None

    def test_missing_file(self, detector: HeroicDetector, native_root: Path) -> None:
        assert detector.get_game_config("Croc") is None

    @pytest.mark.parametrize("missing", ["install_path", "winePrefix"])
    def test_missing_required_key(
        self, detector: HeroicDetector, native_root: Path, missing: str
    ) -> None:
        config = {"install_path": "/games/Croc", "winePrefix": "/pfx"}
        del config[missing]
        _write_json(native_root / "GamesConfig" / "Croc.json", config)
        assert detector.get_game_config("Croc") is None

    def test_malformed_json(self, detector: HeroicDetector, native_root: Path) -> None:
        path = native_root / "GamesConfig" / "Croc.json"
        path.parent.mkdir(parents=True)
        path.write_text("{not json", encoding="utf-8")
        assert detector.get_game_config("Croc") is None

    @pytest.mark.parametrize("value", [None, 42, ["/games/Croc"]])
    def test_non_string_install_path(
        self, detector: HeroicDetector, native_root: Path, value: Any
    ) -> None:
        _write_json(
            native_root / "GamesConfig" / "Croc.json",
            {"install_path": value, "winePrefix": "/pfx"},
        )
        info = detector.get_game_config("Croc")
        assert info is not None
        assert str(info.install_path) == "."
        assert info.wine_prefix == Path("/pfx")

        tool = Tool.heroic("T", None, "/t.exe", info)
        assert tool.working_directory is None
        assert tool.build_command().startswith('STEAM_COMPAT_DATA_PATH="/pfx" ')

    def test_without_wine_version(self, detector: HeroicDetector, native_root: Path) -> None:
        _add_game(native_root, "Croc", wine_version=None)
        info = detector.get_game_config("Croc")
        assert info is not None
        assert info.wine_version == ""
        assert info.proton_path is None

    def test_unknown_proton_version(self, detector: HeroicDetector, native_root: Path) -> None:
        (native_root / "tools" / "proton" / "Proton-8.0").mkdir(parents=True)
        _add_game(native_root, "Croc")
        info = detector.get_game_config("Croc")
        assert info is not None
        assert info.proton_path is None


class TestDetectGames:
    def test_all_stores(self, detector: HeroicDetector, native_root: Path) -> None:
        _write_json(
            native_root / "store" / "installed.json", [{"appName": "Croc", "title": "Croc"}]
        )
        _write_json(native_root / "gog_store" / "installed.json", [{"appName": "1207658924"}])
        _write_json(
            native_root / "amazon_store" / "installed.json",
            [{"appName": "amzn1.adg", "title": "Amazon Game"}],
        )
        for app_name in ("Croc", "1207658924", "amzn1.adg"):
            _add_game(native_root, app_name)

        games = detector.detect_games()
        assert [g.app_name for g in games] == ["Croc", "1207658924", "amzn1.adg"]
        assert games[0].title == "Croc"
        assert games[1].title == ""
        assert games[1].display_name == "1207658924"

    def test_skips_entries_without_config(
        self, detector: HeroicDetector, native_root: Path
    ) -> None:
        _write_json(
            native_root / "store" / "installed.json",
            [{"appName": "Croc"}, {"appName": "Ghost"}, {"title": "no app name"}, "junk"],
        )
        _add_game(native_root, "Croc")
        assert [g.app_name for g in detector.detect_games()] == ["Croc"]

    def test_malformed_store_does_not_stop_others(
        self, detector: HeroicDetector, native_root: Path
    ) -> None:
        epic = native_root / "store" / "installed.json"
        epic.parent.mkdir(parents=True)
        epic.write_text("[{", encoding="utf-8")
        _write_json(native_root / "gog_store" / "installed.json", {"appName": "not a list"})
        _write_json(native_root / "amazon_store" / "installed.json", [{"appName": "Croc"}])
        _add_game(native_root, "Croc")

        assert [g.app_name for g in detector.detect_games()] == ["Croc"]

    def test_no_stores(self, detector: HeroicDetector, native_root: Path) -> None:
        assert detector.detect_games() == []

    def test_short_circuit_without_root(self, detector: HeroicDetector) -> None:
        with patch("gametools.core.heroic_detector._load_json") as load_json:
            assert detector.detect_games() == []
        load_json.assert_not_called()

    def test_fresh_read_each_call(self, detector: HeroicDetector, native_root: Path) -> None:
        assert detector.detect_games() == []
        _write_json(native_root / "store" / "installed.json", [{"appName": "Croc"}])
        _add_game(native_root, "Croc")
        assert len(detector.detect_games()) == 1


class TestFindProtonPath:
    def test_exact_beats_substring(self, tmp_path: Path) -> None:
        (tmp_path / "GE-Proton9-2-rc").mkdir()
        (tmp_path / "GE-Proton9-2").mkdir()
        result = HeroicDetector.find_proton_path("GE-Proton9-2", tmp_path)
        assert result == tmp_path / "GE-Proton9-2"

    def test_substring_match(self, tmp_path: Path) -> None:
        (tmp_path / "Proton-GE-Proton9-2-custom").mkdir()
        assert (
            HeroicDetector.find_proton_path("GE-Proton9-2", tmp_path)
            == tmp_path / "Proton-GE-Proton9-2-custom"
        )

    def test_files_ignored(self, tmp_path: Path) -> None:
        (tmp_path / "GE-Proton9-2.tar.gz").write_bytes(b"")
        assert HeroicDetector.find_proton_path("GE-Proton9-2", tmp_path) is None

    def test_no_match(self, tmp_path: Path) -> None:
        (tmp_path / "Wine-GE-8-26").mkdir()
        assert HeroicDetector.find_proton_path("GE-Proton9-2", tmp_path) is None

    def test_missing_tools_root(self, tmp_path: Path) -> None:
        assert HeroicDetector.find_proton_path("GE-Proton9-2", None) is None
        assert HeroicDetector.find_proton_path("GE-Proton9-2", tmp_path / "absent") is None

    def test_scan_error_tolerated(self, tmp_path: Path) -> None:
        with patch.object(Path, "iterdir", side_effect=PermissionError("denied")):
            assert HeroicDetector.find_proton_path("GE-Proton9-2", tmp_path) is None

"""Shared utility functions."""

from __future__ import annotations

import os
from pathlib import Path

FLATPAK_INFO_FILE = Path("/.flatpak-info")

# Prefix needed to escape the Flatpak sandbox and run a process on the host
FLATPAK_SPAWN_PREFIX = "flatpak-spawn --host"


def enclose_in_quotes(value: str) -> str:
    """Wrap a value in double quotes unless it already is."""
    if value.startswith('"') and value.endswith('"'):
        return value
    return f'"{value}"'


def path_str(path: str | Path | None) -> str:
    """Return a path as a string, with unset paths as ``""``."""
    if path is None:
        return ""
    path = str(path)
    # Path("") renders as "."
    return "" if path == "." else path


def running_in_flatpak() -> bool:
    """Whether this process itself runs inside a Flatpak sandbox."""
    return bool(os.environ.get("FLATPAK_ID")) or FLATPAK_INFO_FILE.exists()

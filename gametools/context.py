"""Application context — service container for dependency injection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gametools.config import Config
    from gametools.core.heroic_detector import HeroicDetector
    from gametools.data.tool_library import ToolLibrary


@dataclass
class AppContext:
    """Central service container handed to every command."""

    config: Config
    heroic_detector: HeroicDetector
    tool_library: ToolLibrary

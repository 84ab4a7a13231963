"""Tool library — JSON-backed list of configured tools."""

from __future__ import annotations

import json
from pathlib import Path

from loguru import logger

from gametools.core.tool_codec import ToolParseError
from gametools.models.tool import Tool


class ToolLibrary:
    """
    Ordered tool list — reads/writes a JSON array of tool documents.

    Entries that fail to parse are skipped on load; everything is written
    back in the current schema on save.
    """

    def __init__(self, path: Path) -> None:
        self._path = path
        self._tools: list[Tool] = []

    @property
    def path(self) -> Path:
        return self._path

    def load(self) -> None:
        """Load tools from disk."""
        self._tools.clear()
        if not self._path.exists():
            return
        try:
            with open(self._path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as e:
            logger.error(f"Failed to load tool library: {e}")
            return

        if not isinstance(data, list):
            logger.error(f"Tool library is not a JSON array: {self._path}")
            return
        for i, doc in enumerate(data):
            try:
                self._tools.append(Tool.from_document(doc))
            except ToolParseError as e:
                logger.warning(f"Skipping malformed tool #{i}: {e}")
        logger.debug(f"Loaded {len(self._tools)} tool(s) from {self._path}")

    def save(self) -> None:
        """Persist tools to disk."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        data = [tool.to_document() for tool in self._tools]
        tmp = self._path.with_suffix(".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False, indent=2)
            tmp.replace(self._path)
        except OSError as e:
            logger.error(f"Failed to save tool library: {e}")
            tmp.unlink(missing_ok=True)

    def add(self, tool: Tool) -> None:
        self._tools.append(tool)

    def remove(self, index: int) -> None:
        del self._tools[index]

    def replace(self, index: int, tool: Tool) -> None:
        self._tools[index] = tool

    def get(self, name: str) -> Tool | None:
        """First tool with the given name."""
        for tool in self._tools:
            if tool.name == name:
                return tool
        return None

    def all_tools(self) -> list[Tool]:
        return list(self._tools)

    @property
    def count(self) -> int:
        return len(self._tools)

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from smol_workspace.tools.base import BaseTool, ToolMode

if TYPE_CHECKING:
    from smol_workspace.tools.context import ToolContext
    from smol_workspace.workspace.file_store import FileStore


class ListFilesTool(BaseTool):
    """List the files visible in the workspace, one "- path" line per file."""

    def __init__(self, store: FileStore) -> None:
        self._store = store

    @property
    def name(self) -> str:
        return "list_files"

    @property
    def description(self) -> str:
        return "Get a list of all available files in a repository"

    @property
    def allowed_modes(self) -> frozenset[ToolMode]:
        return frozenset({ToolMode.read_only, ToolMode.read_write})

    async def execute(
        self, arguments: dict, context: ToolContext | None = None
    ) -> str:
        paths = await asyncio.to_thread(self._store.list)
        if not paths:
            return "(no files)"
        return "\n".join(f"- {path}" for path in paths)

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

from smol_workspace.tools.base import BaseTool, ToolMode, path_schema, require_str

if TYPE_CHECKING:
    from smol_workspace.tools.context import ToolContext
    from smol_workspace.workspace.file_store import FileStore


class ReadFileTool(BaseTool):
    """Read a file from the workspace. Returns the raw UTF-8 contents."""

    def __init__(self, store: FileStore) -> None:
        self._store = store

    @property
    def name(self) -> str:
        return "read_file"

    @property
    def description(self) -> str:
        return "Read the contents of a file in a repository"

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {"path": path_schema("read")},
            "required": ["path"],
        }

    @property
    def allowed_modes(self) -> frozenset[ToolMode]:
        return frozenset({ToolMode.read_only, ToolMode.read_write})

    @property
    def path_key(self) -> str:
        return "path"

    async def execute(
        self, arguments: dict, context: ToolContext | None = None
    ) -> str:
        path = require_str(arguments, "path")
        return await asyncio.to_thread(self._store.read, path)

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from smol_workspace.tools.base import BaseTool, path_schema, require_str

if TYPE_CHECKING:
    from smol_workspace.tools.context import ToolContext
    from smol_workspace.workspace.file_store import FileStore

logger = structlog.get_logger()


class DeleteFileTool(BaseTool):
    def __init__(self, store: FileStore) -> None:
        self._store = store

    @property
    def name(self) -> str:
        return "delete_file"

    @property
    def description(self) -> str:
        return "Delete a file from a repository"

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {"path": path_schema("delete")},
            "required": ["path"],
        }

    @property
    def path_key(self) -> str:
        return "path"

    async def execute(
        self, arguments: dict, context: ToolContext | None = None
    ) -> str:
        path = require_str(arguments, "path")
        await asyncio.to_thread(self._store.delete, path)
        logger.info("file_deleted", path=path, **(context.log_fields() if context else {}))
        return "File deleted successfully"

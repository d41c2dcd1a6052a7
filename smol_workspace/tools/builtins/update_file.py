from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from smol_workspace.tools.base import BaseTool, path_schema, require_str

if TYPE_CHECKING:
    from smol_workspace.tools.context import ToolContext
    from smol_workspace.workspace.file_store import FileStore

logger = structlog.get_logger()


class UpdateFileTool(BaseTool):
    """Replace the whole content of a file. No merge.

    A missing file is created, since the assistant often updates files it
    means to create.
    """

    def __init__(self, store: FileStore) -> None:
        self._store = store

    @property
    def name(self) -> str:
        return "update_file"

    @property
    def description(self) -> str:
        return "Update the contents of a file in a repository"

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "path": path_schema("update"),
                "content": {
                    "type": "string",
                    "description": "The new content for the file",
                },
            },
            "required": ["path", "content"],
        }

    @property
    def path_key(self) -> str:
        return "path"

    async def execute(
        self, arguments: dict, context: ToolContext | None = None
    ) -> str:
        path = require_str(arguments, "path")
        content = require_str(arguments, "content")
        existed = await asyncio.to_thread(self._store.exists, path)
        await asyncio.to_thread(self._store.write, path, content)
        logger.info(
            "file_updated",
            path=path,
            size=len(content),
            created=not existed,
            **(context.log_fields() if context else {}),
        )
        return "File updated successfully"

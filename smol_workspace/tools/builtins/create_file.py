from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog

from smol_workspace.tools.base import BaseTool, require_str

if TYPE_CHECKING:
    from smol_workspace.tools.context import ToolContext
    from smol_workspace.workspace.file_store import FileStore

logger = structlog.get_logger()


class CreateFileTool(BaseTool):
    """Write a new file, creating parent directories as needed.

    An existing file at the same path is overwritten.
    """

    def __init__(self, store: FileStore) -> None:
        self._store = store

    @property
    def name(self) -> str:
        return "create_file"

    @property
    def description(self) -> str:
        return "Create a new file in a repository"

    @property
    def parameters(self) -> dict:
        return {
            "type": "object",
            "properties": {
                "path": {
                    "type": "string",
                    "description": "The path for the new file - ./path/to/file",
                },
                "content": {
                    "type": "string",
                    "description": "The content for the new file",
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
        await asyncio.to_thread(self._store.write, path, content)
        logger.info(
            "file_created",
            path=path,
            size=len(content),
            **(context.log_fields() if context else {}),
        )
        return "File created successfully"

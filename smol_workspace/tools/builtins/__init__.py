from __future__ import annotations

from typing import TYPE_CHECKING

from smol_workspace.tools.builtins.create_file import CreateFileTool
from smol_workspace.tools.builtins.delete_file import DeleteFileTool
from smol_workspace.tools.builtins.list_files import ListFilesTool
from smol_workspace.tools.builtins.read_file import ReadFileTool
from smol_workspace.tools.builtins.update_file import UpdateFileTool

if TYPE_CHECKING:
    from smol_workspace.tools.registry import ToolRegistry
    from smol_workspace.workspace.file_store import FileStore


def register_builtins(registry: ToolRegistry, store: FileStore) -> None:
    """Register the five file tools, in catalog order, against one store."""
    registry.register(ListFilesTool(store))
    registry.register(ReadFileTool(store))
    registry.register(UpdateFileTool(store))
    registry.register(CreateFileTool(store))
    registry.register(DeleteFileTool(store))

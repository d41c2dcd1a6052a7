from __future__ import annotations

from abc import ABC, abstractmethod
from enum import StrEnum
from typing import TYPE_CHECKING

from smol_workspace.infra.errors import ToolArgumentsError

if TYPE_CHECKING:
    from smol_workspace.tools.context import ToolContext


class ToolMode(StrEnum):
    """Catalog variant declared to the assistant.

    read_only: list_files + read_file.
    read_write: the full five-tool catalog.
    """

    read_only = "read_only"
    read_write = "read_write"


class BaseTool(ABC):
    """Abstract base class for assistant tools."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Unique tool name used in function calling."""
        ...

    @property
    @abstractmethod
    def description(self) -> str:
        """Human-readable description of what the tool does."""
        ...

    @property
    def parameters(self) -> dict | None:
        """JSON Schema describing the tool's input parameters. None = no arguments."""
        return None

    @property
    def allowed_modes(self) -> frozenset[ToolMode]:
        """Modes in which this tool is declared. Conservative default: read_write only."""
        return frozenset({ToolMode.read_write})

    @property
    def path_key(self) -> str | None:
        """Argument naming the file this tool touches, used to serialize writes."""
        return None

    @abstractmethod
    async def execute(
        self, arguments: dict, context: ToolContext | None = None
    ) -> str:
        """Execute the tool and return its textual output.

        Failures are raised as ToolError subclasses; the dispatcher turns them
        into error results.
        """
        ...


def require_str(arguments: dict, key: str) -> str:
    """Return arguments[key], raising ToolArgumentsError unless it is a non-empty str."""
    value = arguments.get(key)
    if not isinstance(value, str):
        raise ToolArgumentsError(f"'{key}' must be a string")
    if key == "path" and not value:
        raise ToolArgumentsError("'path' must not be empty")
    return value


def path_schema(action: str) -> dict:
    return {
        "type": "string",
        "description": f"The path of the file to {action} - ./path/to/file",
    }

from __future__ import annotations

import structlog

from smol_workspace.tools.base import BaseTool, ToolMode

logger = structlog.get_logger()


class ToolRegistry:
    """Registry for assistant tools. Provides lookup and mode-aware filtering.

    The same registry + mode pair produces both the declared catalog and the
    set of names the dispatcher handles, so the two can never drift apart.
    """

    def __init__(self) -> None:
        self._tools: dict[str, BaseTool] = {}

    def register(self, tool: BaseTool) -> None:
        """Register a tool. Raises ValueError if name already registered."""
        if tool.name in self._tools:
            raise ValueError(f"Tool already registered: {tool.name}")
        if not tool.allowed_modes:
            logger.warning(
                "tool_registered_without_modes",
                tool_name=tool.name,
                msg="Tool has empty allowed_modes; it will not be declared in any mode.",
            )
        self._tools[tool.name] = tool
        logger.debug("tool_registered", tool_name=tool.name)

    def get(self, name: str) -> BaseTool | None:
        """Get a tool by name. Returns None if not found."""
        return self._tools.get(name)

    def check_mode(self, tool_name: str, mode: ToolMode) -> bool:
        """Check if a tool is available in the given mode. False for unknown tools."""
        tool = self._tools.get(tool_name)
        return tool is not None and mode in tool.allowed_modes

    def list_tools(self, mode: ToolMode) -> list[BaseTool]:
        """Return tools available in the given mode, in registration order."""
        return [tool for tool in self._tools.values() if mode in tool.allowed_modes]

    def get_tools_schema(self, mode: ToolMode) -> list[dict]:
        """Return tools in OpenAI function calling format, filtered by mode.

        Tools without parameters omit the "parameters" key.
        """
        schema: list[dict] = []
        for tool in self.list_tools(mode):
            function: dict = {"name": tool.name, "description": tool.description}
            if tool.parameters is not None:
                function["parameters"] = tool.parameters
            schema.append({"type": "function", "function": function})
        return schema

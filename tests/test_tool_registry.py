"""Tests for ToolRegistry catalog filtering and schema output."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from smol_workspace.tools.base import BaseTool, ToolMode
from smol_workspace.tools.registry import ToolRegistry

if TYPE_CHECKING:
    from smol_workspace.tools.context import ToolContext


class _NoModeTool(BaseTool):
    @property
    def name(self) -> str:
        return "no_mode"

    @property
    def description(self) -> str:
        return "Declared nowhere"

    @property
    def allowed_modes(self) -> frozenset[ToolMode]:
        return frozenset()

    async def execute(
        self, arguments: dict, context: ToolContext | None = None
    ) -> str:
        return "ok"


class TestRegistration:
    def test_duplicate_name_rejected(self, registry, store):
        from smol_workspace.tools.builtins.read_file import ReadFileTool

        with pytest.raises(ValueError, match="already registered"):
            registry.register(ReadFileTool(store))

    def test_get_unknown_returns_none(self, registry):
        assert registry.get("rm_rf") is None

    def test_tool_without_modes_never_listed(self):
        reg = ToolRegistry()
        reg.register(_NoModeTool())
        assert reg.list_tools(ToolMode.read_write) == []
        assert not reg.check_mode("no_mode", ToolMode.read_only)


class TestCatalog:
    def test_read_write_declares_five_tools_in_order(self, registry):
        names = [t["function"]["name"] for t in registry.get_tools_schema(ToolMode.read_write)]
        assert names == ["list_files", "read_file", "update_file", "create_file", "delete_file"]

    def test_read_only_declares_list_and_read(self, registry):
        names = [t["function"]["name"] for t in registry.get_tools_schema(ToolMode.read_only)]
        assert names == ["list_files", "read_file"]

    def test_check_mode(self, registry):
        assert registry.check_mode("read_file", ToolMode.read_only)
        assert not registry.check_mode("delete_file", ToolMode.read_only)
        assert not registry.check_mode("unknown", ToolMode.read_write)

    def test_list_files_has_no_parameters_key(self, registry):
        schema = registry.get_tools_schema(ToolMode.read_write)
        list_files = schema[0]
        assert list_files["type"] == "function"
        assert "parameters" not in list_files["function"]

    def test_write_tools_require_path_and_content(self, registry):
        schema = {
            t["function"]["name"]: t["function"]
            for t in registry.get_tools_schema(ToolMode.read_write)
        }
        for name in ("update_file", "create_file"):
            params = schema[name]["parameters"]
            assert params["type"] == "object"
            assert params["required"] == ["path", "content"]
            assert params["properties"]["content"]["type"] == "string"
        for name in ("read_file", "delete_file"):
            assert schema[name]["parameters"]["required"] == ["path"]

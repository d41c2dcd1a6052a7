"""Shared pytest fixtures for smol-workspace tests.

Provides an isolated workspace tree, a LocalFileStore over it, and a
dispatcher with the five built-in file tools registered.
"""

from __future__ import annotations

import pytest

from smol_workspace.tools.base import ToolMode
from smol_workspace.tools.builtins import register_builtins
from smol_workspace.tools.dispatcher import ToolDispatcher
from smol_workspace.tools.registry import ToolRegistry
from smol_workspace.workspace.file_store import LocalFileStore


@pytest.fixture()
def workspace(tmp_path):
    """Create an isolated workspace with a couple of files."""
    ws = tmp_path / "workspace"
    ws.mkdir()
    (ws / "index.html").write_text("<h1>hello</h1>", encoding="utf-8")
    (ws / "src").mkdir()
    (ws / "src" / "app.js").write_text("console.log('foo');\n", encoding="utf-8")
    return ws


@pytest.fixture()
def store(workspace):
    return LocalFileStore(workspace)


@pytest.fixture()
def registry(store):
    reg = ToolRegistry()
    register_builtins(reg, store)
    return reg


@pytest.fixture()
def dispatcher(registry):
    return ToolDispatcher(registry, ToolMode.read_write)

from __future__ import annotations

import asyncio
import json
import posixpath
from collections.abc import Sequence

import structlog

from smol_workspace.infra.errors import SmolWorkspaceError, ToolArgumentsError
from smol_workspace.run.models import PendingToolCall, ToolResult
from smol_workspace.tools.base import ToolMode
from smol_workspace.tools.context import ToolContext
from smol_workspace.tools.registry import ToolRegistry

logger = structlog.get_logger()


def _safe_parse_args(raw: str | None) -> dict:
    """Parse JSON tool call arguments. Empty payload means no arguments.

    Raises ToolArgumentsError unless the payload decodes to a dict.
    """
    if raw is None or not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ToolArgumentsError(f"Invalid JSON arguments: {e}") from e
    if not isinstance(parsed, dict):
        raise ToolArgumentsError(f"Expected dict arguments, got {type(parsed).__name__}")
    return parsed


def error_output(code: str, message: str) -> str:
    """Render a per-call failure as the tool output text."""
    return json.dumps({"error_code": code, "message": message}, ensure_ascii=False)


class ToolDispatcher:
    """Map pending tool calls to registered tools and collect their results.

    Never raises for a per-call failure: every call yields exactly one
    ToolResult, error or not. Calls in a batch run concurrently; calls on
    the same path are serialized in submission order.
    """

    def __init__(self, registry: ToolRegistry, mode: ToolMode = ToolMode.read_write) -> None:
        self._registry = registry
        self._mode = mode
        self._path_locks: dict[str, asyncio.Lock] = {}

    def tools_schema(self) -> list[dict]:
        """Catalog to declare to the assistant; matches what dispatch() handles."""
        return self._registry.get_tools_schema(self._mode)

    def _lock_for(self, path: str) -> asyncio.Lock:
        # "f.txt", "./f.txt" and "src/../f.txt" name the same file
        key = posixpath.normpath(path)
        lock = self._path_locks.get(key)
        if lock is None:
            lock = asyncio.Lock()
            self._path_locks[key] = lock
        return lock

    async def dispatch(
        self, call: PendingToolCall, context: ToolContext | None = None
    ) -> ToolResult:
        """Execute one call and return its result. Failures become error outputs."""
        tool = self._registry.get(call.name)
        if tool is None or not self._registry.check_mode(call.name, self._mode):
            logger.warning("unknown_tool", tool_name=call.name, tool_call_id=call.id)
            return ToolResult(
                call.id, error_output("UNKNOWN_TOOL", f"Unknown tool: {call.name}")
            )

        context = context or ToolContext(tool_call_id=call.id)
        try:
            arguments = _safe_parse_args(call.arguments)
            path = arguments.get(tool.path_key) if tool.path_key else None
            if isinstance(path, str) and path:
                async with self._lock_for(path):
                    output = await tool.execute(arguments, context)
            else:
                output = await tool.execute(arguments, context)
        except SmolWorkspaceError as e:
            logger.warning(
                "tool_execution_error",
                tool_name=call.name,
                tool_call_id=call.id,
                error_code=e.code,
                error=str(e),
            )
            return ToolResult(call.id, error_output(e.code, str(e)))
        except Exception:
            logger.exception("tool_execution_failed", tool_name=call.name, tool_call_id=call.id)
            return ToolResult(
                call.id, error_output("EXECUTION_ERROR", f"Tool {call.name} failed")
            )

        logger.info("tool_executed", tool_name=call.name, tool_call_id=call.id)
        return ToolResult(call.id, output)

    async def dispatch_batch(
        self,
        calls: Sequence[PendingToolCall],
        *,
        thread_id: str = "",
        run_id: str = "",
    ) -> list[ToolResult]:
        """Dispatch every call; results come back in input order, one per call."""
        return list(
            await asyncio.gather(
                *(
                    self.dispatch(
                        call,
                        ToolContext(thread_id=thread_id, run_id=run_id, tool_call_id=call.id),
                    )
                    for call in calls
                )
            )
        )

from __future__ import annotations

import json
from collections.abc import Sequence

from smol_workspace.assistant.gateway import SessionGateway
from smol_workspace.run.models import (
    Message,
    PendingToolCall,
    Run,
    RunStatus,
    Session,
    ToolResult,
)


def make_call(call_id: str, name: str, **arguments) -> PendingToolCall:
    """Build a PendingToolCall with JSON-encoded arguments."""
    return PendingToolCall(id=call_id, name=name, arguments=json.dumps(arguments))


class FakeGateway(SessionGateway):
    """Scripted SessionGateway: advance() returns the first run, each resume() the next."""

    def __init__(self, runs: list[Run], messages: list[Message] | None = None) -> None:
        self._runs = list(runs)
        self._messages = messages or []
        self.posted: list[str] = []
        self.resumed: list[list[ToolResult]] = []
        self.list_calls = 0
        self.closed = False

    async def create_session(self) -> Session:
        return Session(thread_id="thread_1", assistant_id="asst_1")

    async def post_message(self, session: Session, text: str) -> None:
        self.posted.append(text)

    async def advance(self, session: Session) -> Run:
        return self._runs.pop(0)

    async def resume(
        self, session: Session, run: Run, results: Sequence[ToolResult]
    ) -> Run:
        self.resumed.append(list(results))
        return self._runs.pop(0)

    async def list_messages(self, session: Session) -> list[Message]:
        self.list_calls += 1
        return list(self._messages)

    async def aclose(self) -> None:
        self.closed = True


def blocked_run(run_id: str, *calls: PendingToolCall) -> Run:
    return Run(id=run_id, status=RunStatus.requires_action, pending_tool_calls=calls)

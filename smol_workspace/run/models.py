from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum


class RunStatus(StrEnum):
    """Remote run statuses. Values mirror the Assistants API."""

    queued = "queued"
    in_progress = "in_progress"
    requires_action = "requires_action"
    cancelling = "cancelling"
    cancelled = "cancelled"
    failed = "failed"
    completed = "completed"
    incomplete = "incomplete"
    expired = "expired"
    unknown = "unknown"

    @classmethod
    def parse(cls, value: str | None) -> RunStatus:
        try:
            return cls(value)
        except ValueError:
            return cls.unknown


@dataclass(frozen=True)
class Session:
    """Remote conversational context for one issue-resolution attempt."""

    thread_id: str
    assistant_id: str


@dataclass(frozen=True)
class PendingToolCall:
    """A tool invocation requested by a blocked run. arguments is raw JSON."""

    id: str
    name: str
    arguments: str = ""


@dataclass(frozen=True)
class ToolResult:
    tool_call_id: str
    output: str

    def as_payload(self) -> dict[str, str]:
        return {"tool_call_id": self.tool_call_id, "output": self.output}


@dataclass(frozen=True)
class Run:
    """One snapshot of a remote run. Replaced, never mutated, on resume."""

    id: str
    status: RunStatus
    pending_tool_calls: tuple[PendingToolCall, ...] = ()
    last_error: str | None = None


@dataclass(frozen=True)
class Message:
    id: str
    role: str
    text: str


class OutcomeStatus(StrEnum):
    completed = "completed"
    failed = "failed"  # remote run ended in a status with no transition
    stalled = "stalled"  # requires_action with nothing to resolve
    cycle_limit = "cycle_limit"


@dataclass
class RunOutcome:
    """Terminal result of a RunDriver invocation.

    messages holds the full transcript for completed runs and is empty otherwise.
    """

    status: OutcomeStatus
    run: Run
    messages: list[Message] = field(default_factory=list)
    detail: str = ""
    cycles: int = 0

    @property
    def succeeded(self) -> bool:
        return self.status == OutcomeStatus.completed

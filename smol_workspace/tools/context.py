from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class ToolContext:
    """Runtime context injected into tool execution by the dispatcher.

    thread_id / run_id identify the remote run that requested the call
    (for audit/logging). tool_call_id is the PendingToolCall identifier.
    """

    thread_id: str = ""
    run_id: str = ""
    tool_call_id: str = ""

    def log_fields(self) -> dict[str, str]:
        """Non-empty identifiers, ready to splat into a log call."""
        fields = {
            "thread_id": self.thread_id,
            "run_id": self.run_id,
            "tool_call_id": self.tool_call_id,
        }
        return {k: v for k, v in fields.items() if v}

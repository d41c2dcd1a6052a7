from __future__ import annotations

import structlog

from smol_workspace.assistant.gateway import SessionGateway
from smol_workspace.run.models import OutcomeStatus, Run, RunOutcome, RunStatus, Session
from smol_workspace.tools.dispatcher import ToolDispatcher

logger = structlog.get_logger()

MAX_RUN_CYCLES = 25


class RunDriver:
    """Resolve a session's run until it reaches a terminal state.

    Flow: run → (requires_action → dispatch tools → resume)* → completed | other

    - completed: fetch the full transcript.
    - requires_action with pending calls: every call gets a result, the whole
      batch is submitted in one resume, the returned run replaces the old one.
    - requires_action with no pending calls: stop without resuming.
    - anything else: reported as a failed outcome, never raised.

    Gateway errors propagate; the driver does not retry.
    """

    def __init__(
        self,
        gateway: SessionGateway,
        dispatcher: ToolDispatcher,
        *,
        max_cycles: int = MAX_RUN_CYCLES,
    ) -> None:
        if max_cycles < 1:
            raise ValueError(f"max_cycles must be >= 1, got {max_cycles}")
        self._gateway = gateway
        self._dispatcher = dispatcher
        self._max_cycles = max_cycles

    async def start(self, session: Session) -> RunOutcome:
        """Advance the session past its latest message and resolve the run."""
        run = await self._gateway.advance(session)
        return await self.resolve(session, run)

    async def resolve(self, session: Session, run: Run) -> RunOutcome:
        cycles = 0
        while True:
            logger.info(
                "run_status",
                thread_id=session.thread_id,
                run_id=run.id,
                status=run.status,
                cycle=cycles,
            )

            if run.status == RunStatus.completed:
                messages = await self._gateway.list_messages(session)
                logger.info(
                    "run_completed",
                    thread_id=session.thread_id,
                    run_id=run.id,
                    message_count=len(messages),
                )
                return RunOutcome(
                    OutcomeStatus.completed, run, messages=messages, cycles=cycles
                )

            if run.status != RunStatus.requires_action:
                detail = f"Run ended with status '{run.status}'"
                if run.last_error:
                    detail += f": {run.last_error}"
                logger.error(
                    "run_did_not_complete",
                    thread_id=session.thread_id,
                    run_id=run.id,
                    status=run.status,
                    last_error=run.last_error,
                )
                return RunOutcome(OutcomeStatus.failed, run, detail=detail, cycles=cycles)

            if not run.pending_tool_calls:
                logger.warning("no_tool_calls_to_resolve", run_id=run.id)
                return RunOutcome(
                    OutcomeStatus.stalled,
                    run,
                    detail="Run requires action but requested no tool calls",
                    cycles=cycles,
                )

            if cycles >= self._max_cycles:
                logger.warning("max_run_cycles", max=self._max_cycles, run_id=run.id)
                return RunOutcome(
                    OutcomeStatus.cycle_limit,
                    run,
                    detail=f"Stopped after {self._max_cycles} tool resolution cycles",
                    cycles=cycles,
                )

            results = await self._dispatcher.dispatch_batch(
                run.pending_tool_calls, thread_id=session.thread_id, run_id=run.id
            )
            run = await self._gateway.resume(session, run, results)
            cycles += 1

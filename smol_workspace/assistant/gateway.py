from __future__ import annotations

import asyncio
import random
from abc import ABC, abstractmethod
from collections.abc import Callable, Coroutine, Sequence
from typing import Any, TypeVar

import structlog
from openai import (
    APIConnectionError,
    APIStatusError,
    APITimeoutError,
    AsyncOpenAI,
    RateLimitError,
)

from smol_workspace.constants import ASSISTANT_INSTRUCTIONS, ASSISTANT_NAME, DEFAULT_MODEL
from smol_workspace.infra.errors import RemoteUnavailableError
from smol_workspace.run.models import (
    Message,
    PendingToolCall,
    Run,
    RunStatus,
    Session,
    ToolResult,
)

logger = structlog.get_logger()

T = TypeVar("T")

_RETRYABLE = (APIConnectionError, APITimeoutError, RateLimitError)
# A 429 is rejected before the request takes effect; a timeout may land late.
_REJECTED = (RateLimitError,)


class SessionGateway(ABC):
    """Narrow contract to the remote long-running computation.

    advance() and resume() block until the remote run reaches a stable,
    non-transient status. Retry policy is the implementation's concern.
    """

    @abstractmethod
    async def create_session(self) -> Session:
        ...

    @abstractmethod
    async def post_message(self, session: Session, text: str) -> None:
        ...

    @abstractmethod
    async def advance(self, session: Session) -> Run:
        ...

    @abstractmethod
    async def resume(
        self, session: Session, run: Run, results: Sequence[ToolResult]
    ) -> Run:
        ...

    @abstractmethod
    async def list_messages(self, session: Session) -> list[Message]:
        """Return the session's messages in chronological order."""
        ...

    async def aclose(self) -> None:
        """Release transport resources. Nothing to release by default."""
        return None


def run_from_api(run: Any) -> Run:
    """Convert an SDK Run object into a Run snapshot."""
    pending: tuple[PendingToolCall, ...] = ()
    required = getattr(run, "required_action", None)
    submit = getattr(required, "submit_tool_outputs", None) if required else None
    if submit is not None and submit.tool_calls:
        pending = tuple(
            PendingToolCall(
                id=tc.id,
                name=tc.function.name,
                arguments=tc.function.arguments or "",
            )
            for tc in submit.tool_calls
        )
    last_error = None
    if getattr(run, "last_error", None) is not None:
        last_error = f"{run.last_error.code}: {run.last_error.message}"
    elif getattr(run, "incomplete_details", None) is not None:
        last_error = f"incomplete: {run.incomplete_details.reason}"
    return Run(
        id=run.id,
        status=RunStatus.parse(run.status),
        pending_tool_calls=pending,
        last_error=last_error,
    )


def message_from_api(message: Any) -> Message:
    """Convert an SDK thread message; text blocks are joined, other blocks skipped."""
    parts = [block.text.value for block in message.content if block.type == "text"]
    return Message(id=message.id, role=message.role, text="\n".join(parts))


class OpenAIAssistantsGateway(SessionGateway):
    """SessionGateway over the OpenAI Assistants (beta threads/runs) API.

    The assistant is created lazily on the first create_session() and reused
    for the gateway's lifetime. Includes exponential backoff retry for
    transient errors.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str | None = None,
        *,
        tools: list[dict],
        model: str = DEFAULT_MODEL,
        name: str = ASSISTANT_NAME,
        instructions: str = ASSISTANT_INSTRUCTIONS,
        code_interpreter: bool = True,
        poll_interval_ms: int = 1000,
        max_retries: int = 3,
        base_delay: float = 1.0,
    ) -> None:
        # Retries are owned by _retry_call so non-idempotent calls are never replayed.
        self._client = AsyncOpenAI(api_key=api_key, base_url=base_url, max_retries=0)
        self._tools = [{"type": "code_interpreter"}, *tools] if code_interpreter else list(tools)
        self._model = model
        self._name = name
        self._instructions = instructions
        self._poll_interval_ms = poll_interval_ms
        self._max_retries = max_retries
        self._base_delay = base_delay
        self._assistant_id: str | None = None

    async def _retry_call(
        self,
        coro_factory: Callable[[], Coroutine[Any, Any, T]],
        *,
        context: str = "",
        idempotent: bool = True,
    ) -> T:
        """Execute an async call with exponential backoff retry.

        Retries on: APIConnectionError, APITimeoutError, RateLimitError.
        Calls that create remote state (idempotent=False) are retried only on
        RateLimitError, since a timed-out request may still have been applied.
        Non-retryable API errors are wrapped in RemoteUnavailableError.
        """
        for attempt in range(self._max_retries + 1):
            try:
                return await coro_factory()
            except _RETRYABLE as e:
                if not idempotent and not isinstance(e, _REJECTED):
                    raise RemoteUnavailableError(
                        f"Assistant call '{context}' failed and is not safe to retry: {e}"
                    ) from e
                if attempt == self._max_retries:
                    raise RemoteUnavailableError(
                        f"Assistant call '{context}' failed after "
                        f"{self._max_retries + 1} attempts: {e}"
                    ) from e
                delay = self._base_delay * (2**attempt) + random.uniform(0, 0.5)
                logger.warning(
                    "remote_retry",
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                    delay=round(delay, 2),
                    error=str(e),
                    context=context,
                )
                await asyncio.sleep(delay)
            except APIStatusError as e:
                raise RemoteUnavailableError(
                    f"Assistant API error ({context}): {e.status_code} {e.message}"
                ) from e
        # Unreachable, but satisfies type checker
        raise RemoteUnavailableError("Retry loop exhausted")  # pragma: no cover

    async def _ensure_assistant(self) -> str:
        if self._assistant_id is None:
            assistant = await self._retry_call(
                lambda: self._client.beta.assistants.create(
                    model=self._model,
                    name=self._name,
                    instructions=self._instructions,
                    tools=self._tools,
                ),
                context="assistants.create",
            )
            self._assistant_id = assistant.id
            logger.info(
                "assistant_created",
                assistant_id=assistant.id,
                model=self._model,
                tool_count=len(self._tools),
            )
        return self._assistant_id

    async def create_session(self) -> Session:
        assistant_id = await self._ensure_assistant()
        thread = await self._retry_call(
            lambda: self._client.beta.threads.create(), context="threads.create"
        )
        logger.info("thread_created", thread_id=thread.id)
        return Session(thread_id=thread.id, assistant_id=assistant_id)

    async def post_message(self, session: Session, text: str) -> None:
        await self._retry_call(
            lambda: self._client.beta.threads.messages.create(
                session.thread_id, role="user", content=text
            ),
            context="messages.create",
            idempotent=False,
        )
        logger.debug("message_posted", thread_id=session.thread_id, chars=len(text))

    async def advance(self, session: Session) -> Run:
        created = await self._retry_call(
            lambda: self._client.beta.threads.runs.create(
                session.thread_id, assistant_id=session.assistant_id
            ),
            context="runs.create",
            idempotent=False,
        )
        logger.info("run_created", thread_id=session.thread_id, run_id=created.id)
        return await self._poll(session, created.id)

    async def resume(
        self, session: Session, run: Run, results: Sequence[ToolResult]
    ) -> Run:
        if not results:
            raise ValueError("Refusing to resume a run with an empty tool result batch")
        tool_outputs = [result.as_payload() for result in results]
        await self._retry_call(
            lambda: self._client.beta.threads.runs.submit_tool_outputs(
                run.id, thread_id=session.thread_id, tool_outputs=tool_outputs
            ),
            context="runs.submit_tool_outputs",
            idempotent=False,
        )
        logger.info("tool_outputs_submitted", run_id=run.id, count=len(tool_outputs))
        return await self._poll(session, run.id)

    async def _poll(self, session: Session, run_id: str) -> Run:
        """Wait for a stable status. Read-only, so safe to retry."""
        polled = await self._retry_call(
            lambda: self._client.beta.threads.runs.poll(
                run_id,
                thread_id=session.thread_id,
                poll_interval_ms=self._poll_interval_ms,
            ),
            context="runs.poll",
        )
        return run_from_api(polled)

    async def list_messages(self, session: Session) -> list[Message]:
        async def _collect() -> list[Message]:
            page = self._client.beta.threads.messages.list(session.thread_id, order="asc")
            return [message_from_api(m) async for m in page]

        return await self._retry_call(_collect, context="messages.list")

    async def aclose(self) -> None:
        await self._client.close()

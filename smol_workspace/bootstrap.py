from __future__ import annotations

import structlog

from smol_workspace.assistant.gateway import OpenAIAssistantsGateway, SessionGateway
from smol_workspace.config.settings import Settings, WorkspaceSettings
from smol_workspace.issues.tracker import GitHubIssueTracker, IssueTracker
from smol_workspace.run.driver import RunDriver
from smol_workspace.run.models import RunOutcome
from smol_workspace.tools.base import ToolMode
from smol_workspace.tools.builtins import register_builtins
from smol_workspace.tools.dispatcher import ToolDispatcher
from smol_workspace.tools.registry import ToolRegistry
from smol_workspace.workspace.file_store import FileStore, LocalFileStore, StaticListingFileStore

logger = structlog.get_logger()


class Bootstrap:
    """Issue → session → resolved run. Collaborators are injected."""

    def __init__(
        self,
        tracker: IssueTracker,
        gateway: SessionGateway,
        driver: RunDriver,
    ) -> None:
        self._tracker = tracker
        self._gateway = gateway
        self._driver = driver

    async def run(self, owner: str, repo: str, issue_number: int) -> RunOutcome:
        structlog.contextvars.bind_contextvars(issue_number=issue_number)
        logger.info("issue_run_started", repository=f"{owner}/{repo}")

        try:
            issue = await self._tracker.get_issue(owner, repo, issue_number)
            session = await self._gateway.create_session()
            structlog.contextvars.bind_contextvars(thread_id=session.thread_id)
            await self._gateway.post_message(session, issue.task_text)

            outcome = await self._driver.start(session)
        finally:
            await self._gateway.aclose()
        logger.info(
            "issue_run_finished",
            outcome=outcome.status,
            cycles=outcome.cycles,
            message_count=len(outcome.messages),
        )
        return outcome


def build_store(settings: WorkspaceSettings) -> FileStore:
    store: FileStore = LocalFileStore(settings.root)
    if settings.listing == "static":
        store = StaticListingFileStore(store, settings.static_paths)
    return store


def build_dispatcher(store: FileStore, mode: ToolMode) -> ToolDispatcher:
    registry = ToolRegistry()
    register_builtins(registry, store)
    return ToolDispatcher(registry, mode)


def build_bootstrap(settings: Settings) -> Bootstrap:
    """Wire the production collaborators from settings."""
    dispatcher = build_dispatcher(
        build_store(settings.workspace), ToolMode(settings.assistant.tool_mode)
    )
    gateway = OpenAIAssistantsGateway(
        settings.openai.api_key,
        settings.openai.base_url,
        tools=dispatcher.tools_schema(),
        model=settings.openai.model,
        name=settings.assistant.name,
        instructions=settings.assistant.instructions,
        code_interpreter=settings.assistant.code_interpreter,
        poll_interval_ms=settings.assistant.poll_interval_ms,
        max_retries=settings.assistant.max_retries,
    )
    tracker = GitHubIssueTracker(
        settings.github.token,
        api_url=settings.github.api_url,
        timeout=settings.github.timeout_s,
    )
    driver = RunDriver(gateway, dispatcher, max_cycles=settings.run.max_cycles)
    return Bootstrap(tracker, gateway, driver)


def render_outcome(outcome: RunOutcome) -> str:
    """Full transcript for a completed run, status report otherwise."""
    if not outcome.succeeded:
        return f"Run did not complete ({outcome.status}): {outcome.detail}"
    blocks = [f"[{m.role}]\n{m.text}" for m in outcome.messages]
    return "\n\n".join(blocks)

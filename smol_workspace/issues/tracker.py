from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass

import httpx
import structlog

from smol_workspace.infra.errors import ConfigError, IssueTrackerError

logger = structlog.get_logger()


@dataclass(frozen=True)
class Issue:
    number: int
    title: str
    body: str = ""

    @property
    def task_text(self) -> str:
        """The first message posted to the session."""
        return f"Issue: {self.title}\n\n{self.body}"


def parse_repository(value: str) -> tuple[str, str]:
    """Split "<owner>/<name>" into (owner, name). Raises ConfigError."""
    owner, sep, name = value.partition("/")
    if not sep or not owner or not name or "/" in name:
        raise ConfigError(f"Repository must look like '<owner>/<name>' (got '{value}')")
    return owner, name


class IssueTracker(ABC):
    @abstractmethod
    async def get_issue(self, owner: str, repo: str, number: int) -> Issue:
        """Return the issue's title and body."""
        ...


class GitHubIssueTracker(IssueTracker):
    """Fetch issues through the GitHub REST API."""

    def __init__(
        self,
        token: str = "",
        *,
        api_url: str = "https://api.github.com",
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._token = token
        self._api_url = api_url.rstrip("/")
        self._timeout = timeout
        self._transport = transport

    def _headers(self) -> dict[str, str]:
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        return headers

    async def get_issue(self, owner: str, repo: str, number: int) -> Issue:
        url = f"{self._api_url}/repos/{owner}/{repo}/issues/{number}"
        try:
            async with httpx.AsyncClient(
                timeout=self._timeout, transport=self._transport
            ) as client:
                response = await client.get(url, headers=self._headers())
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPStatusError as e:
            raise IssueTrackerError(
                f"GitHub API error for {owner}/{repo}#{number}: "
                f"{e.response.status_code} {e.response.text[:200]}"
            ) from e
        except httpx.RequestError as e:
            raise IssueTrackerError(f"GitHub request failed: {e}") from e

        logger.info("issue_fetched", repository=f"{owner}/{repo}", issue_number=number)
        return Issue(
            number=int(data.get("number", number)),
            title=data.get("title") or "",
            body=data.get("body") or "",
        )

"""
Abstract base classes for report sources.

This module defines the source interfaces the report assembler depends on
(issue tracker, review host, calendar) and the shared Basic-authenticated
REST plumbing used by the Jira and Bitbucket implementations.
"""

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any

import httpx
import structlog

from daily_report.exceptions import SourceHTTPError, SourceResponseError
from daily_report.models.domain import CalendarEvent, Issue, PullRequest, Repository
from daily_report.utils.connection_pool import HTTPConnectionPool

log = structlog.get_logger(__name__)


class IssueSource(ABC):
    """Issue tracker queried with a query language (JQL)."""

    @abstractmethod
    async def search(self, jql: str) -> list[Issue]:
        """Return issues matching a query, in the tracker's order.

        Raises:
            SourceError: If the request fails or the body cannot be parsed.
        """
        pass

    @abstractmethod
    async def get_issue(self, key: str) -> Issue:
        """Return a single issue by key.

        Raises:
            SourceError: If the request fails or the body cannot be parsed.
        """
        pass


class ReviewSource(ABC):
    """Code review host listing pull requests and repositories."""

    @abstractmethod
    async def get_pull_requests(self, project: str, repo: str, pr_filter: Any) -> list[PullRequest]:
        """Return pull requests of a repository matching a filter.

        Args:
            project: Project key owning the repository
            repo: Repository slug
            pr_filter: Provider-specific filter object

        Raises:
            SourceError: If the request fails or the body cannot be parsed.
        """
        pass

    @abstractmethod
    async def get_recent_repositories(self) -> list[Repository]:
        """Return the repositories the authenticated user touched recently."""
        pass


class CalendarSource(ABC):
    """Calendar listing events for a time window."""

    @abstractmethod
    async def list_events(self, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        """Return events starting inside ``[time_min, time_max]``, ordered by start.

        Raises:
            CalendarError: If authorization or the request fails.
        """
        pass


class RestSource:
    """Basic-authenticated, read-only REST client.

    Builds ``{scheme}://{host}:{port}{base_path}`` and resolves request paths
    relative to it. Responses are parsed as JSON; bodies that do not parse
    raise ``SourceResponseError`` carrying the raw text.
    """

    source_name = "rest"

    def __init__(
        self,
        host: str,
        base_path: str,
        login: str,
        password: str,
        port: int = 443,
        ssl: bool = True,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """Initialize REST source.

        Args:
            host: Server host name (e.g., jira.example.com)
            base_path: API base path, starting and ending with "/"
            login: Basic auth user name
            password: Basic auth password
            port: TCP port
            ssl: Use https when true, http otherwise
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests
        """
        if not host:
            raise ValueError("host must not be empty")
        if not base_path.startswith("/") or not base_path.endswith("/"):
            raise ValueError('base_path must start and end with "/"')
        if not login:
            raise ValueError("login must not be empty")
        if not 0 < port < 65536:
            raise ValueError(f"port out of range: {port}")

        self.host = host
        self.base_path = base_path
        self.login = login
        self.port = port
        self.ssl = ssl
        self.timeout = timeout
        scheme = "https" if ssl else "http"
        self.base_url = f"{scheme}://{host}:{port}{base_path}"
        self._password = password
        self._transport = transport
        self._pool: HTTPConnectionPool | None = None

    async def connect(self) -> None:
        """Initialize the connection pool."""
        if self._pool is None:
            self._pool = HTTPConnectionPool(
                base_url=self.base_url,
                auth=httpx.BasicAuth(self.login, self._password),
                timeout=self.timeout,
                headers={"Accept": "application/json"},
                transport=self._transport,
            )
            await self._pool.initialize()
            log.debug(f"{self.source_name}_connected", base_url=self.base_url)

    async def disconnect(self) -> None:
        """Close the connection pool."""
        if self._pool is not None:
            await self._pool.close()
            self._pool = None

    async def __aenter__(self) -> "RestSource":
        await self.connect()
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.disconnect()

    async def _get_json(self, path: str, params: dict[str, str] | None = None) -> Any:
        """GET ``path`` relative to the base path and return the parsed body.

        Raises:
            SourceHTTPError: On transport failure or a non-2xx status.
            SourceResponseError: If the body is not valid JSON.
        """
        if self._pool is None:
            await self.connect()
        assert self._pool is not None

        try:
            response = await self._pool.get(path.lstrip("/"), params=params)
        except httpx.HTTPError as e:
            raise SourceHTTPError(
                f"{self.source_name} request to {path} failed: {e}",
                source=self.source_name,
            ) from e

        if response.is_error:
            raise SourceHTTPError(
                f"{self.source_name} request to {path} returned HTTP {response.status_code}",
                source=self.source_name,
                body=response.text,
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise SourceResponseError(
                f"{self.source_name} returned a malformed response for {path}: {response.text}",
                source=self.source_name,
                body=response.text,
            ) from e

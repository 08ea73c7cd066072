"""Bitbucket Server provider implementation using direct REST API calls."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import structlog

from daily_report.exceptions import SourceResponseError
from daily_report.models.domain import PullRequest, Repository
from daily_report.providers.base import RestSource, ReviewSource

log = structlog.get_logger(__name__)


class PullRequestDirection(str, Enum):
    """Which side of the pull request the filtered repository is on."""

    INCOMING = "INCOMING"
    OUTGOING = "OUTGOING"


class PullRequestState(str, Enum):
    """Pull request state filter."""

    OPEN = "OPEN"
    DECLINED = "DECLINED"
    MERGED = "MERGED"
    ALL = "ALL"


class PullRequestOrder(str, Enum):
    """Result ordering."""

    NEWEST = "NEWEST"
    OLDEST = "OLDEST"


class ParticipantRole(str, Enum):
    """Role of a pull request participant."""

    AUTHOR = "AUTHOR"
    REVIEWER = "REVIEWER"
    PARTICIPANT = "PARTICIPANT"


@dataclass(frozen=True)
class Participant:
    """Participant filter entry."""

    username: str
    role: ParticipantRole | None = None
    approved: bool | None = None


def _flag(value: bool) -> str:
    return "true" if value else "false"


@dataclass
class PullRequestFilter:
    """Query options for listing pull requests of a repository.

    Unset fields are omitted from the query string. Participants are
    serialized as one indexed group per entry, starting at 1::

        username.1=jdoe&role.1=REVIEWER&approved.1=false

    Example:
        >>> pr_filter = PullRequestFilter(
        ...     direction=PullRequestDirection.OUTGOING,
        ...     state=PullRequestState.OPEN,
        ... )
        >>> pr_filter.add_participant("jdoe", ParticipantRole.REVIEWER)
    """

    direction: PullRequestDirection | None = None
    at: str | None = None
    state: PullRequestState | None = None
    order: PullRequestOrder | None = None
    with_attributes: bool | None = None
    with_properties: bool | None = None
    participants: list[Participant] = field(default_factory=list)

    def __post_init__(self) -> None:
        if self.at is not None and not self.at:
            raise ValueError("at must be a non-empty branch reference")

    def add_participant(
        self,
        username: str,
        role: ParticipantRole | None = None,
        approved: bool | None = None,
    ) -> None:
        """Append a participant to filter by."""
        if not username:
            raise ValueError("participant username must not be empty")
        self.participants.append(Participant(username=username, role=role, approved=approved))

    def to_params(self) -> dict[str, str]:
        """Serialize into Bitbucket query parameters."""
        params: dict[str, str] = {}

        if self.direction is not None:
            params["direction"] = self.direction.value
        if self.at is not None:
            params["at"] = self.at
        if self.state is not None:
            params["state"] = self.state.value
        if self.order is not None:
            params["order"] = self.order.value
        if self.with_attributes is not None:
            params["withAttributes"] = _flag(self.with_attributes)
        if self.with_properties is not None:
            params["withProperties"] = _flag(self.with_properties)

        for index, participant in enumerate(self.participants, start=1):
            params[f"username.{index}"] = participant.username
            if participant.role is not None:
                params[f"role.{index}"] = participant.role.value
            if participant.approved is not None:
                params[f"approved.{index}"] = _flag(participant.approved)

        return params


class BitbucketRestProvider(RestSource, ReviewSource):
    """Bitbucket Server implementation using the REST API (``/rest/api/latest``)."""

    source_name = "bitbucket"

    async def get_pull_requests(
        self,
        project: str,
        repo: str,
        pr_filter: PullRequestFilter,
    ) -> list[PullRequest]:
        """List pull requests of a repository."""
        if not project or not repo:
            raise ValueError("project and repo must not be empty")

        log.info("bitbucket_pull_requests", project=project, repo=repo)

        data = await self._get_json(
            f"projects/{project}/repos/{repo}/pull-requests",
            params=pr_filter.to_params(),
        )
        return [self._parse_pull_request(pr_data) for pr_data in self._values(data)]

    async def get_recent_repositories(self) -> list[Repository]:
        """List repositories recently accessed by the authenticated user."""
        log.info("bitbucket_recent_repositories")

        data = await self._get_json("profile/recent/repos")
        return [self._parse_repository(repo_data) for repo_data in self._values(data)]

    def _values(self, data: Any) -> list[dict[str, Any]]:
        """Extract the ``values`` list of a paged Bitbucket response."""
        if not isinstance(data, dict) or not isinstance(data.get("values"), list):
            raise SourceResponseError(
                f"bitbucket response has no values list: {data!r}",
                source=self.source_name,
                body=repr(data),
            )
        return data["values"]

    def _parse_pull_request(self, data: dict[str, Any]) -> PullRequest:
        """Parse pull request data.

        Field mappings:
            - data["id"] -> id
            - data["title"] -> title
            - data["author"]["user"]["displayName"] -> author_display_name
        """
        try:
            return PullRequest(
                id=data["id"],
                title=data["title"],
                author_display_name=data["author"]["user"]["displayName"],
            )
        except (KeyError, TypeError) as e:
            raise SourceResponseError(
                f"bitbucket pull request record is missing {e}",
                source=self.source_name,
                body=repr(data),
            ) from e

    def _parse_repository(self, data: dict[str, Any]) -> Repository:
        try:
            return Repository(
                project_key=data["project"]["key"],
                slug=data["slug"],
                name=data["name"],
            )
        except (KeyError, TypeError) as e:
            raise SourceResponseError(
                f"bitbucket repository record is missing {e}",
                source=self.source_name,
                body=repr(data),
            ) from e

"""Report assembly.

The assembler queries each source in turn and collects the report lines.
Every request is awaited before the next one starts. Issue tracker and review
host errors propagate and abort the run; calendar errors are logged and leave
the meeting list empty.
"""

from collections.abc import Awaitable, Callable
from datetime import datetime, time, tzinfo

import structlog

from daily_report.config.settings import QueryConfig
from daily_report.engine.jql import JqlQueries
from daily_report.exceptions import CalendarError
from daily_report.models.domain import CalendarEvent, Issue, Report
from daily_report.providers.base import CalendarSource, IssueSource, ReviewSource
from daily_report.providers.bitbucket_rest import (
    ParticipantRole,
    PullRequestDirection,
    PullRequestFilter,
    PullRequestState,
)

log = structlog.get_logger(__name__)

IssueLookup = Callable[[str], Awaitable[Issue]]


def _local_now() -> datetime:
    return datetime.now().astimezone()


async def resolve_blocked_by(issue: Issue, lookup: IssueLookup) -> list[str]:
    """Describe every issue blocking ``issue``.

    Each inward "is blocked by" link is resolved with one ``lookup`` call, in
    link order, and yields one line. Other links are ignored.
    """
    lines = []
    for link in issue.links:
        if not link.is_blocked_by:
            continue
        blocking = await lookup(link.linked_key)
        lines.append(f'"{issue.key} {issue.summary}" is blocked by "{link.linked_key} {blocking.summary}"')
    return lines


def format_meeting(event: CalendarEvent, tz: tzinfo | None = None) -> str:
    """Meeting line with the start time shown in ``tz`` (local time by default).

    All-day events carry no offset and show midnight.
    """
    start = event.start.astimezone(tz) if event.start.tzinfo is not None else event.start
    return f'Event at {start.strftime("%H:%M")} "{event.summary}"'


def reviewer_filter(user: str) -> PullRequestFilter:
    """Open pull requests in which ``user`` is a reviewer."""
    pr_filter = PullRequestFilter(
        direction=PullRequestDirection.OUTGOING,
        state=PullRequestState.OPEN,
        with_attributes=False,
        with_properties=False,
    )
    pr_filter.add_participant(user, ParticipantRole.REVIEWER)
    return pr_filter


class ReportAssembler:
    """Builds a Report for one user from the configured sources."""

    def __init__(
        self,
        issues: IssueSource,
        reviews: ReviewSource,
        login: str,
        user: str | None = None,
        calendar: CalendarSource | None = None,
        routines: list[str] | None = None,
        query_config: QueryConfig | None = None,
        clock: Callable[[], datetime] = _local_now,
    ):
        """Initialize assembler.

        Args:
            issues: Issue tracker source
            reviews: Review host source
            login: Authenticated login
            user: User to report on, defaults to ``login``
            calendar: Optional calendar source
            routines: Daily routine lines, copied into the report as given
            query_config: Issue query parameters
            clock: Returns the current local time
        """
        self.issues = issues
        self.reviews = reviews
        self.login = login
        self.user = user or login
        self.calendar = calendar
        self.routines = list(routines or [])
        self.query_config = query_config or QueryConfig()
        self.clock = clock

    async def build_report(self) -> Report:
        """Query every source and assemble the report."""
        now = self.clock()
        queries = JqlQueries(self.user, now.date(), self.query_config)
        log.info("report_started", user=self.user, lookback_days=queries.days)

        report = Report(daily_routines=list(self.routines))

        for issue in await self.issues.search(queries.blocked()):
            report.blocked_tickets.extend(await resolve_blocked_by(issue, self.issues.get_issue))

        report.my_tickets_in_progress = [
            f"{issue.key}: {issue.summary}" for issue in await self.issues.search(queries.in_progress())
        ]
        report.my_tickets_done_yesterday = [str(issue) for issue in await self.issues.search(queries.done())]
        report.my_tickets_cancelled_yesterday = [
            str(issue) for issue in await self.issues.search(queries.cancelled())
        ]
        report.tickets_created_by_me_yesterday = [
            str(issue) for issue in await self.issues.search(queries.created())
        ]

        report.reviewing_prs = await self._load_reviewing_prs()

        if self.calendar is not None and self.user == self.login:
            report.daily_meetings = [format_meeting(event, now.tzinfo) for event in await self._load_meetings(now)]

        log.info("report_finished", user=self.user)
        return report

    async def _load_reviewing_prs(self) -> list[str]:
        lines = []
        pr_filter = reviewer_filter(self.user)
        for repo in await self.reviews.get_recent_repositories():
            pull_requests = await self.reviews.get_pull_requests(repo.project_key, repo.slug, pr_filter)
            lines.extend(f"{repo.name}: {pr.title} ({pr.author_display_name})" for pr in pull_requests)
        return lines

    async def _load_meetings(self, now: datetime) -> list[CalendarEvent]:
        """Today's events; empty when the calendar is unavailable."""
        assert self.calendar is not None
        day_start = datetime.combine(now.date(), time.min, tzinfo=now.tzinfo)
        day_end = datetime.combine(now.date(), time.max, tzinfo=now.tzinfo)

        try:
            return await self.calendar.list_events(day_start, day_end)
        except CalendarError as e:
            log.warning("calendar_unavailable", error=e.message)
            return []

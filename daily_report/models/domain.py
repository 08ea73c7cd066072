"""
Domain models for the daily report.

These models are the normalized internal representation of records fetched
from the issue tracker (Jira), the review host (Bitbucket Server) and the
calendar (Google Calendar). Sources convert their raw JSON into these models;
the report assembler works exclusively with them.

Example:
    Creating an issue that is blocked by another one::

        issue = Issue(
            key="VST-12",
            summary="Ship login page",
            links=(
                IssueLink(
                    relation="is blocked by",
                    linked_key="VST-7",
                    direction=LinkDirection.INWARD,
                ),
            ),
        )
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum

BLOCKED_BY_RELATION = "is blocked by"


class LinkDirection(str, Enum):
    """Direction of an issue link relative to the subject issue."""

    INWARD = "inward"
    """The linked issue points toward the subject (e.g. "is blocked by")."""

    OUTWARD = "outward"
    """The subject points toward the linked issue (e.g. "blocks")."""


@dataclass(frozen=True)
class IssueLink:
    """A typed link from an issue to another issue.

    Jira reports each link once per issue, with either an ``inwardIssue`` or an
    ``outwardIssue``. ``relation`` is the link type label matching that side,
    so an inward link of type "Blocks" carries ``relation="is blocked by"``.
    """

    relation: str
    linked_key: str
    direction: LinkDirection

    @property
    def is_blocked_by(self) -> bool:
        """True when the linked issue blocks the subject issue."""
        return self.direction == LinkDirection.INWARD and self.relation == BLOCKED_BY_RELATION


@dataclass(frozen=True)
class Issue:
    """An issue tracker record. Immutable once fetched."""

    key: str
    """Issue key, e.g. ``VST-12``."""

    summary: str
    """One-line issue title."""

    links: tuple[IssueLink, ...] = ()
    """Typed links to other issues, in the order the tracker returned them."""

    def __str__(self) -> str:
        return f"{self.key} {self.summary}"


@dataclass(frozen=True)
class PullRequest:
    """A pull request on the review host."""

    id: int
    title: str
    author_display_name: str


@dataclass(frozen=True)
class Repository:
    """A repository on the review host."""

    project_key: str
    slug: str
    name: str


@dataclass(frozen=True)
class CalendarEvent:
    """A calendar event.

    All-day events start at midnight of their date.
    """

    start: datetime
    summary: str


@dataclass
class Report:
    """The assembled daily report.

    Every list keeps the order in which the sources returned the underlying
    records; nothing is sorted or deduplicated.
    """

    daily_routines: list[str] = field(default_factory=list)
    my_tickets_in_progress: list[str] = field(default_factory=list)
    my_tickets_done_yesterday: list[str] = field(default_factory=list)
    my_tickets_cancelled_yesterday: list[str] = field(default_factory=list)
    tickets_created_by_me_yesterday: list[str] = field(default_factory=list)
    reviewing_prs: list[str] = field(default_factory=list)
    blocked_tickets: list[str] = field(default_factory=list)
    daily_meetings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, list[str]]:
        """Return the report keyed by its published (camelCase) field names."""
        data = asdict(self)
        return {REPORT_FIELD_NAMES[name]: value for name, value in data.items()}


REPORT_FIELD_NAMES = {
    "daily_routines": "dailyRoutines",
    "my_tickets_in_progress": "myTicketsInProgress",
    "my_tickets_done_yesterday": "myTicketsDoneYesterday",
    "my_tickets_cancelled_yesterday": "myTicketsCancelledYesterday",
    "tickets_created_by_me_yesterday": "ticketsCreatedByMeYesterday",
    "reviewing_prs": "reviewingPRs",
    "blocked_tickets": "blockedTickets",
    "daily_meetings": "dailyMeetings",
}

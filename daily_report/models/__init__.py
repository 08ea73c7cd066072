"""Core domain models for the daily report.

Key Models:
    - Issue: Issue tracker record with its typed links
    - IssueLink: Directional link between two issues
    - PullRequest: Pull request on the review host
    - Repository: Repository on the review host
    - CalendarEvent: Calendar event with its start time
    - Report: Assembled standup report

Example:
    >>> from daily_report.models import Issue, Report
    >>> issue = Issue(key="VST-1", summary="Fix bug")
    >>> report = Report(my_tickets_done_yesterday=[str(issue)])
"""

from daily_report.models.domain import (
    BLOCKED_BY_RELATION,
    CalendarEvent,
    Issue,
    IssueLink,
    LinkDirection,
    PullRequest,
    Report,
    Repository,
)

__all__ = [
    "BLOCKED_BY_RELATION",
    "CalendarEvent",
    "Issue",
    "IssueLink",
    "LinkDirection",
    "PullRequest",
    "Report",
    "Repository",
]

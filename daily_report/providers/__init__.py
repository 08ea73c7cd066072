"""Source implementations for the daily report.

Key Components:
    - IssueSource / ReviewSource / CalendarSource: Interfaces used by the assembler
    - RestSource: Basic-authenticated REST plumbing
    - JiraRestProvider: Jira REST API implementation
    - BitbucketRestProvider: Bitbucket Server REST API implementation
    - GoogleCalendarProvider: Google Calendar API implementation

Example:
    >>> from daily_report.providers.jira_rest import JiraRestProvider
    >>> jira = JiraRestProvider("jira.example.com", "/jira/rest/api/latest/", "jdoe", "secret")
    >>> async with jira:
    ...     issues = await jira.search("assignee=jdoe")
"""

from daily_report.providers.base import CalendarSource, IssueSource, RestSource, ReviewSource

__all__ = [
    "CalendarSource",
    "IssueSource",
    "RestSource",
    "ReviewSource",
]

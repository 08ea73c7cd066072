"""Configuration for the daily report.

Key Components:
    - ReportSettings: Main settings container with YAML loading support
    - JiraConfig / BitbucketConfig: REST server location
    - CalendarConfig: Google Calendar OAuth files
    - QueryConfig: Issue query parameters

Example:
    >>> from daily_report.config import ReportSettings
    >>> settings = ReportSettings.from_yaml("daily-report.yaml")
    >>> settings.jira.host
    'jira.example.com'
"""

from daily_report.config.settings import (
    BitbucketConfig,
    CalendarConfig,
    JiraConfig,
    QueryConfig,
    ReportSettings,
)

__all__ = [
    "BitbucketConfig",
    "CalendarConfig",
    "JiraConfig",
    "QueryConfig",
    "ReportSettings",
]

"""Custom exception hierarchy for the daily-report tool.

Exception Hierarchy:
    DailyReportError (base)
    ├── ConfigurationError
    ├── SourceError
    │   ├── SourceHTTPError
    │   └── SourceResponseError
    └── CalendarError
        └── CalendarAuthorizationError

Issue and review source errors are fatal and abort the run. Calendar errors
are caught by the report assembler, which falls back to an empty meeting list.

Example Usage:
    >>> from daily_report.exceptions import ConfigurationError
    >>> try:
    ...     settings = ReportSettings.from_yaml(path)
    ... except ConfigurationError as e:
    ...     print(e.message)
"""


class DailyReportError(Exception):
    """Base exception for all daily-report errors.

    Attributes:
        message: Human-readable error description
    """

    def __init__(self, message: str) -> None:
        """Initialize exception.

        Args:
            message: Error message
        """
        self.message = message
        super().__init__(message)


class ConfigurationError(DailyReportError):
    """Invalid or missing arguments and configuration values.

    Raised before any network call is made.
    """

    pass


class SourceError(DailyReportError):
    """A request against the issue tracker or review host failed.

    Attributes:
        message: Human-readable error description
        source: Name of the source that failed (e.g., "jira")
        body: Raw response body, if one was received
    """

    def __init__(self, message: str, source: str | None = None, body: str | None = None) -> None:
        """Initialize exception.

        Args:
            message: Error message
            source: Name of the failing source
            body: Raw response text
        """
        self.source = source
        self.body = body
        super().__init__(message)


class SourceHTTPError(SourceError):
    """Non-2xx status or transport failure."""

    def __init__(
        self,
        message: str,
        source: str | None = None,
        body: str | None = None,
        status_code: int | None = None,
    ) -> None:
        self.status_code = status_code
        super().__init__(message, source=source, body=body)


class SourceResponseError(SourceError):
    """Response body could not be parsed as JSON.

    The raw response text is kept in ``body``.
    """

    pass


class CalendarError(DailyReportError):
    """Calendar events could not be listed."""

    pass


class CalendarAuthorizationError(CalendarError):
    """OAuth client credentials or token are missing or were rejected."""

    pass

"""daily-report: standup report generator for Jira, Bitbucket Server and Google Calendar."""

__version__ = "0.1.0"

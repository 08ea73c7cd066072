"""Report assembly engine.

Key Components:
    - ReportAssembler: Queries the sources and builds the Report
    - resolve_blocked_by: Describes the issues blocking a given issue
    - JqlQueries / lookback_days: Issue tracker queries for the report
"""

from daily_report.engine.assembler import ReportAssembler, resolve_blocked_by
from daily_report.engine.jql import JqlQueries, lookback_days

__all__ = [
    "JqlQueries",
    "ReportAssembler",
    "lookback_days",
    "resolve_blocked_by",
]

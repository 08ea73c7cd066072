"""JQL queries for the daily report.

Every query is limited to the active sprint and to the target user. Queries
about "yesterday" look back further after a weekend: two days on Sunday and
three days on Monday.
"""

from datetime import date

from daily_report.config.settings import QueryConfig

ACTIVE_SPRINT = "sprint in openSprints() AND sprint not in futureSprints()"


def lookback_days(today: date) -> int:
    """Number of days covered by "yesterday" when run on ``today``."""
    weekday = today.weekday()
    if weekday == 6:  # Sunday
        return 2
    if weekday == 0:  # Monday
        return 3
    return 1


def _quote_list(values: list[str]) -> str:
    return ", ".join(f'"{value}"' if " " in value else value for value in values)


class JqlQueries:
    """Builds the five report queries for one user and one day."""

    def __init__(self, user: str, today: date, config: QueryConfig | None = None):
        self.user = user
        self.today = today
        self.config = config or QueryConfig()
        self.days = lookback_days(today)

    def _scoped(self, *clauses: str, project: bool = False) -> str:
        parts = []
        if project and self.config.project:
            parts.append(f"project={self.config.project}")
        parts.extend(clauses)
        parts.append(ACTIVE_SPRINT)
        return " AND ".join(parts)

    def blocked(self) -> str:
        """Unresolved issues of the user, candidates for blocking links."""
        return self._scoped("resolution=Unresolved", f"assignee={self.user}", project=True)

    def in_progress(self) -> str:
        return self._scoped(
            f'status="{self.config.in_progress_status}"',
            f"assignee={self.user}",
            project=True,
        )

    def done(self) -> str:
        return self._scoped(
            f"resolution in ({_quote_list(self.config.done_resolutions)})",
            f"assignee={self.user}",
            f"status changed during (-{self.days}d, now())",
        )

    def cancelled(self) -> str:
        return self._scoped(
            f"resolution in ({_quote_list(self.config.cancelled_resolutions)})",
            f"assignee={self.user}",
            f"status changed during (-{self.days}d, now())",
        )

    def created(self) -> str:
        return self._scoped(
            f"creator in ({self.user})",
            f"created >= -{self.days}d",
        )

"""Report rendering.

Two output formats are supported:

- ``text``: the standup message, made of up to three blocks ("Done yesterday:",
  "Planned today:", "Blocked tickets:"). Each block is a header line followed
  by ``* <item>`` bullet lines and is left out when it has nothing to show.
- ``json``: the report object as is, keyed by its published field names.

Example:
    >>> report = Report(
    ...     my_tickets_done_yesterday=["VST-1 Fix bug"],
    ...     tickets_created_by_me_yesterday=["VST-2 New feature"],
    ... )
    >>> render_text(report)
    'Done yesterday:\\n* VST-1 Fix bug\\n* Created VST-2 New feature\\n'
"""

import json
from typing import Literal

from daily_report.models.domain import Report

OutputFormat = Literal["text", "json"]


def _block(header: str, items: list[str]) -> str:
    return f"{header}\n" + "".join(f"* {item}\n" for item in items)


def render_text(report: Report) -> str:
    """Render the report as a plain-text standup message."""
    blocks = []

    done = (
        report.my_tickets_done_yesterday
        + [f"Created {item}" for item in report.tickets_created_by_me_yesterday]
        + [f"Cancelled {item}" for item in report.my_tickets_cancelled_yesterday]
    )
    if done:
        blocks.append(_block("Done yesterday:", done))

    # Meetings alone do not make a plan for the day.
    if report.daily_routines or report.my_tickets_in_progress or report.reviewing_prs:
        planned = (
            report.daily_routines
            + report.my_tickets_in_progress
            + [f"Reviewing PR {item}" for item in report.reviewing_prs]
            + report.daily_meetings
        )
        blocks.append(_block("Planned today:", planned))

    if report.blocked_tickets:
        blocks.append(_block("Blocked tickets:", report.blocked_tickets))

    return "".join(blocks)


def render_json(report: Report) -> str:
    """Render the report as a JSON object."""
    return json.dumps(report.to_dict(), indent=2, ensure_ascii=False)


def render(report: Report, output_format: OutputFormat = "text") -> str:
    """Render the report in the requested format."""
    if output_format == "text":
        return render_text(report)
    return render_json(report)

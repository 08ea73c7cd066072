"""Pytest configuration and shared fixtures."""

import os
from datetime import datetime, timezone
from typing import Any

import pytest
import structlog

from daily_report.models.domain import Issue, IssueLink, LinkDirection


def jira_issue_data(key: str, summary: str, links: list[dict[str, Any]] | None = None) -> dict[str, Any]:
    """Build an issue record as returned by the Jira REST API."""
    return {
        "id": "10001",
        "key": key,
        "self": f"https://jira.example.com/jira/rest/api/latest/issue/{key}",
        "fields": {
            "summary": summary,
            "issuelinks": links or [],
        },
    }


def blocked_by_link(key: str, summary: str = "") -> dict[str, Any]:
    """Build an inward "Blocks" link entry as returned by the Jira REST API."""
    return {
        "id": "20001",
        "type": {"id": "10000", "name": "Blocks", "inward": "is blocked by", "outward": "blocks"},
        "inwardIssue": {"key": key, "fields": {"summary": summary}},
    }


def blocks_link(key: str) -> dict[str, Any]:
    """Build an outward "Blocks" link entry as returned by the Jira REST API."""
    return {
        "id": "20002",
        "type": {"id": "10000", "name": "Blocks", "inward": "is blocked by", "outward": "blocks"},
        "outwardIssue": {"key": key, "fields": {"summary": ""}},
    }


@pytest.fixture
def wednesday() -> datetime:
    """A mid-week morning."""
    return datetime(2024, 6, 19, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def blocked_issue() -> Issue:
    """Issue blocked by two others, with an unrelated outward link in between."""
    return Issue(
        key="VST-10",
        summary="Release checkout page",
        links=(
            IssueLink(relation="is blocked by", linked_key="VST-3", direction=LinkDirection.INWARD),
            IssueLink(relation="blocks", linked_key="VST-20", direction=LinkDirection.OUTWARD),
            IssueLink(relation="is blocked by", linked_key="VST-4", direction=LinkDirection.INWARD),
        ),
    )


@pytest.fixture
def clear_report_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove DAILY_REPORT_* variables so settings only see explicit values."""
    for name in list(os.environ):
        if name.upper().startswith("DAILY_REPORT_"):
            monkeypatch.delenv(name)


@pytest.fixture
def make_jira_issue():
    """Factory for Jira issue records."""
    return jira_issue_data


@pytest.fixture
def make_blocked_by_link():
    """Factory for inward "is blocked by" link records."""
    return blocked_by_link


@pytest.fixture
def make_blocks_link():
    """Factory for outward "blocks" link records."""
    return blocks_link


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo logging configuration done by CLI invocations."""
    yield
    structlog.reset_defaults()

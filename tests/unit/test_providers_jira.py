"""Tests for daily_report/providers/jira_rest.py - Jira REST API provider."""

from unittest.mock import AsyncMock

import httpx
import pytest

from daily_report.exceptions import SourceResponseError
from daily_report.models.domain import LinkDirection
from daily_report.providers.jira_rest import JiraRestProvider

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def provider() -> JiraRestProvider:
    return JiraRestProvider(
        host="jira.example.com",
        base_path="/jira/rest/api/latest/",
        login="jdoe",
        password="s3cret",
    )


# =============================================================================
# Search Tests
# =============================================================================


class TestJiraSearch:
    """Tests for JQL search."""

    @pytest.mark.asyncio
    async def test_search_sends_encoded_jql(self, make_jira_issue) -> None:
        """Should pass the JQL as a query parameter and parse the issues."""
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(
                200,
                json={"issues": [make_jira_issue("VST-1", "Fix bug"), make_jira_issue("VST-2", "New feature")]},
            )

        jql = 'status="Development in Progress" AND assignee=jdoe'
        async with JiraRestProvider(
            "jira.example.com",
            "/jira/rest/api/latest/",
            "jdoe",
            "s3cret",
            transport=httpx.MockTransport(handler),
        ) as jira:
            issues = await jira.search(jql)

        assert [str(issue) for issue in issues] == ["VST-1 Fix bug", "VST-2 New feature"]
        assert requests[0].url.path == "/jira/rest/api/latest/search"
        assert requests[0].url.params["jql"] == jql

    @pytest.mark.asyncio
    async def test_search_preserves_order(self, provider: JiraRestProvider, make_jira_issue) -> None:
        provider._get_json = AsyncMock(
            return_value={"issues": [make_jira_issue(f"VST-{n}", f"Issue {n}") for n in (3, 1, 2)]}
        )

        issues = await provider.search("assignee=jdoe")

        assert [issue.key for issue in issues] == ["VST-3", "VST-1", "VST-2"]

    @pytest.mark.asyncio
    async def test_search_without_issue_list(self, provider: JiraRestProvider) -> None:
        """Should reject error payloads that carry no issue list."""
        provider._get_json = AsyncMock(return_value={"errorMessages": ["The value 'XYZ' does not exist"]})

        with pytest.raises(SourceResponseError) as exc_info:
            await provider.search("project=XYZ")

        assert "errorMessages" in exc_info.value.body

    @pytest.mark.asyncio
    async def test_search_empty(self, provider: JiraRestProvider) -> None:
        provider._get_json = AsyncMock(return_value={"issues": []})

        assert await provider.search("assignee=jdoe") == []


# =============================================================================
# Issue Tests
# =============================================================================


class TestJiraGetIssue:
    """Tests for single-issue retrieval and parsing."""

    @pytest.mark.asyncio
    async def test_get_issue_path(self, provider: JiraRestProvider, make_jira_issue) -> None:
        provider._get_json = AsyncMock(return_value=make_jira_issue("VST-3", "Fix API"))

        issue = await provider.get_issue("VST-3")

        provider._get_json.assert_awaited_once_with("issue/VST-3")
        assert issue.key == "VST-3"
        assert issue.summary == "Fix API"
        assert issue.links == ()

    @pytest.mark.asyncio
    async def test_parses_links_in_order(
        self,
        provider: JiraRestProvider,
        make_jira_issue,
        make_blocked_by_link,
        make_blocks_link,
    ) -> None:
        """Should keep inward and outward links with their side's label."""
        provider._get_json = AsyncMock(
            return_value=make_jira_issue(
                "VST-10",
                "Release",
                links=[make_blocked_by_link("VST-3"), make_blocks_link("VST-20"), make_blocked_by_link("VST-4")],
            )
        )

        issue = await provider.get_issue("VST-10")

        assert [(link.relation, link.linked_key, link.direction) for link in issue.links] == [
            ("is blocked by", "VST-3", LinkDirection.INWARD),
            ("blocks", "VST-20", LinkDirection.OUTWARD),
            ("is blocked by", "VST-4", LinkDirection.INWARD),
        ]
        assert [link.is_blocked_by for link in issue.links] == [True, False, True]

    def test_parse_issue_without_issuelinks_field(self, provider: JiraRestProvider) -> None:
        issue = provider._parse_issue({"key": "VST-1", "fields": {"summary": "Fix bug"}})

        assert issue.links == ()

    def test_parse_issue_skips_links_without_target(self, provider: JiraRestProvider) -> None:
        data = {
            "key": "VST-1",
            "fields": {"summary": "Fix bug", "issuelinks": [{"type": {"inward": "is blocked by"}}]},
        }

        assert provider._parse_issue(data).links == ()

    def test_parse_issue_missing_fields(self, provider: JiraRestProvider) -> None:
        with pytest.raises(SourceResponseError):
            provider._parse_issue({"errorMessages": ["Issue does not exist"]})

    @pytest.mark.parametrize(
        "link",
        [
            {"type": {"inward": "is blocked by"}, "inwardIssue": {"fields": {}}},
            {"type": {"outward": "blocks"}, "outwardIssue": None},
            "not-a-link",
        ],
    )
    def test_parse_issue_malformed_link(self, provider: JiraRestProvider, link) -> None:
        data = {"key": "VST-1", "fields": {"summary": "Fix bug", "issuelinks": [link]}}

        with pytest.raises(SourceResponseError) as exc_info:
            provider._parse_issue(data)

        assert exc_info.value.source == "jira"
        assert "VST-1" in exc_info.value.message

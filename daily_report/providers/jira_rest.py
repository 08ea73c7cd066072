"""Jira provider implementation using direct REST API calls."""

from typing import Any

import structlog

from daily_report.exceptions import SourceResponseError
from daily_report.models.domain import Issue, IssueLink, LinkDirection
from daily_report.providers.base import IssueSource, RestSource

log = structlog.get_logger(__name__)


class JiraRestProvider(RestSource, IssueSource):
    """Jira implementation using the REST API (``/rest/api/latest``)."""

    source_name = "jira"

    async def search(self, jql: str) -> list[Issue]:
        """Search issues using JQL."""
        log.info("jira_search", jql=jql)

        data = await self._get_json("search", params={"jql": jql})
        if not isinstance(data, dict) or not isinstance(data.get("issues"), list):
            raise SourceResponseError(
                f"jira search response has no issue list: {data!r}",
                source=self.source_name,
                body=repr(data),
            )

        return [self._parse_issue(issue_data) for issue_data in data["issues"]]

    async def get_issue(self, key: str) -> Issue:
        """Get single issue by key."""
        log.info("jira_get_issue", key=key)

        data = await self._get_json(f"issue/{key}")
        return self._parse_issue(data)

    def _parse_issue(self, data: dict[str, Any]) -> Issue:
        """Parse a Jira issue into the internal Issue model.

        Field mappings:
            - data["key"] -> key
            - data["fields"]["summary"] -> summary
            - data["fields"]["issuelinks"] -> links

        Each entry of ``issuelinks`` carries either an ``inwardIssue`` or an
        ``outwardIssue``; the link type label for that side becomes the
        relation. Entries with neither are skipped.
        """
        try:
            fields = data["fields"]
            key = data["key"]
            summary = fields.get("summary") or ""
        except (AttributeError, KeyError, TypeError) as e:
            raise SourceResponseError(
                f"jira issue record is missing {e}",
                source=self.source_name,
                body=repr(data),
            ) from e

        links = []
        try:
            for link in fields.get("issuelinks") or []:
                link_type = link.get("type", {})
                if "inwardIssue" in link:
                    links.append(
                        IssueLink(
                            relation=link_type.get("inward", ""),
                            linked_key=link["inwardIssue"]["key"],
                            direction=LinkDirection.INWARD,
                        )
                    )
                elif "outwardIssue" in link:
                    links.append(
                        IssueLink(
                            relation=link_type.get("outward", ""),
                            linked_key=link["outwardIssue"]["key"],
                            direction=LinkDirection.OUTWARD,
                        )
                    )
        except (AttributeError, KeyError, TypeError) as e:
            raise SourceResponseError(
                f"jira issue {key} has a malformed link: {e}",
                source=self.source_name,
                body=repr(data),
            ) from e

        return Issue(key=key, summary=summary, links=tuple(links))

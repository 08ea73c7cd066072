"""CLI entry point for the daily report."""

import asyncio
import sys

import click
import structlog

from daily_report.config.settings import ReportSettings
from daily_report.engine.assembler import ReportAssembler
from daily_report.exceptions import ConfigurationError, DailyReportError
from daily_report.models.domain import Report
from daily_report.providers.bitbucket_rest import BitbucketRestProvider
from daily_report.providers.google_calendar import GoogleCalendarProvider
from daily_report.providers.jira_rest import JiraRestProvider
from daily_report.rendering.formatter import render
from daily_report.utils.logging_config import configure_logging

log = structlog.get_logger(__name__)


@click.command()
@click.option("--config", "config_path", type=click.Path(dir_okay=False), help="YAML configuration file")
@click.option("--login", help="Login for Jira and Bitbucket, e.g. --login=my.username")
@click.option("--password", help='Password for Jira and Bitbucket, e.g. --password="123456"')
@click.option("--user", help="User to report on (defaults to --login), e.g. --user=some.one")
@click.option("--jiraHost", "jira_host", help="Jira host, e.g. --jiraHost=jira.example.com")
@click.option("--jiraBasePath", "jira_base_path", help="Jira REST API base path [default: /jira/rest/api/latest/]")
@click.option("--jiraPort", "jira_port", type=int, help="Jira port [default: 443]")
@click.option("--bitbucketHost", "bitbucket_host", help="Bitbucket host, e.g. --bitbucketHost=bitbucket.example.com")
@click.option(
    "--bitBucketBasePath",
    "bitbucket_base_path",
    help="Bitbucket REST API base path [default: /bitbucket/rest/api/latest/]",
)
@click.option("--bitbucketPort", "bitbucket_port", type=int, help="Bitbucket port [default: 443]")
@click.option("--insecure", is_flag=True, help="Use plain http for Jira and Bitbucket")
@click.option("--project", help="Restrict blocked and in-progress tickets to a Jira project")
@click.option("--routine", "routines", multiple=True, help="Daily routine line (repeatable)")
@click.option(
    "--format",
    "output_format",
    type=click.Choice(["text", "json", "structured"]),
    help="Output format, structured is an alias for json [default: text]",
)
@click.option("--calendar-credentials", type=click.Path(dir_okay=False), help="Google OAuth client secrets file")
@click.option("--calendar-token", type=click.Path(dir_okay=False), help="Where to store the Google OAuth token")
@click.option("--no-calendar", is_flag=True, help="Do not list today's meetings")
@click.option("--log-level", default="WARNING", help="Logging level")
def cli(
    config_path: str | None,
    login: str | None,
    password: str | None,
    user: str | None,
    jira_host: str | None,
    jira_base_path: str | None,
    jira_port: int | None,
    bitbucket_host: str | None,
    bitbucket_base_path: str | None,
    bitbucket_port: int | None,
    insecure: bool,
    project: str | None,
    routines: tuple[str, ...],
    output_format: str | None,
    calendar_credentials: str | None,
    calendar_token: str | None,
    no_calendar: bool,
    log_level: str,
) -> None:
    """Print a daily standup report built from Jira, Bitbucket and Google Calendar."""
    configure_logging(log_level)

    ssl = False if insecure else None
    try:
        settings = ReportSettings.load(
            config_path,
            login=login,
            password=password,
            user=user,
            jira={"host": jira_host, "base_path": jira_base_path, "port": jira_port, "ssl": ssl},
            bitbucket={"host": bitbucket_host, "base_path": bitbucket_base_path, "port": bitbucket_port, "ssl": ssl},
            calendar={
                "enabled": False if no_calendar else None,
                "credentials_path": calendar_credentials,
                "token_path": calendar_token,
            },
            query={"project": project},
            routines=list(routines) or None,
            output_format="json" if output_format == "structured" else output_format,
        )
    except ConfigurationError as e:
        click.echo(f"Error: {e.message}", err=True)
        log.debug("config_error", exc_info=True)
        sys.exit(1)

    try:
        report = asyncio.run(_generate_report(settings))
    except DailyReportError as e:
        click.echo(f"Error: {e.message}", err=True)
        log.debug("report_error", exc_info=True)
        sys.exit(1)
    except KeyboardInterrupt:
        click.echo("\nInterrupted by user", err=True)
        sys.exit(130)
    except Exception as e:
        click.echo(f"Unexpected error: {e}", err=True)
        log.error("report_unexpected", exc_info=True)
        sys.exit(1)

    output = render(report, settings.output_format)
    click.echo(output, nl=not output.endswith("\n"))


async def _generate_report(settings: ReportSettings) -> Report:
    """Open the sources and assemble the report.

    Args:
        settings: Validated report settings
    """
    password = settings.password.get_secret_value()
    jira = JiraRestProvider(
        host=settings.jira.host,
        base_path=settings.jira.base_path,
        login=settings.login,
        password=password,
        port=settings.jira.port,
        ssl=settings.jira.ssl,
        timeout=settings.timeout,
    )
    bitbucket = BitbucketRestProvider(
        host=settings.bitbucket.host,
        base_path=settings.bitbucket.base_path,
        login=settings.login,
        password=password,
        port=settings.bitbucket.port,
        ssl=settings.bitbucket.ssl,
        timeout=settings.timeout,
    )

    # The calendar belongs to the authenticated login only.
    calendar = None
    if settings.calendar.enabled and settings.reports_on_self:
        calendar = GoogleCalendarProvider(
            credentials_path=settings.calendar.credentials_path,
            token_path=settings.calendar.token_path,
            scopes=settings.calendar.scopes,
        )

    async with jira, bitbucket:
        assembler = ReportAssembler(
            issues=jira,
            reviews=bitbucket,
            login=settings.login,
            user=settings.target_user,
            calendar=calendar,
            routines=settings.routines,
            query_config=settings.query,
        )
        return await assembler.build_report()


if __name__ == "__main__":
    cli()

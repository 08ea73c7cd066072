"""Google Calendar provider.

Authorizes once through the OAuth2 installed-app flow: the user opens the
printed URL, pastes the code back, and the resulting token is stored on disk
for later runs. Stored tokens are refreshed when they expire.
"""

import asyncio
import json
from collections.abc import Callable
from datetime import date, datetime, time
from pathlib import Path
from typing import Any

import click
import httplib2
import structlog
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from googleapiclient.discovery import build
from googleapiclient.errors import HttpError
from oauthlib.oauth2.rfc6749.errors import OAuth2Error

from daily_report.exceptions import CalendarAuthorizationError, CalendarError
from daily_report.models.domain import CalendarEvent
from daily_report.providers.base import CalendarSource

log = structlog.get_logger(__name__)

# If modifying these scopes, delete the stored token.
DEFAULT_SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]


def _prompt_for_code(text: str) -> str:
    return click.prompt(text, err=True)


def _echo(text: str) -> None:
    click.echo(text, err=True)


class GoogleCalendarProvider(CalendarSource):
    """Google Calendar implementation using google-api-python-client."""

    def __init__(
        self,
        credentials_path: Path,
        token_path: Path,
        scopes: list[str] | None = None,
        calendar_id: str = "primary",
        prompt: Callable[[str], str] = _prompt_for_code,
        echo: Callable[[str], None] = _echo,
    ):
        """Initialize Google Calendar provider.

        Args:
            credentials_path: OAuth client secrets file ("installed" client)
            token_path: Where the user's access and refresh tokens are stored
            scopes: OAuth scopes to request
            calendar_id: Calendar to list events from
            prompt: Reads the authorization code from the user
            echo: Shows the authorization URL to the user
        """
        self.credentials_path = Path(credentials_path)
        self.token_path = Path(token_path)
        self.scopes = scopes or list(DEFAULT_SCOPES)
        self.calendar_id = calendar_id
        self._prompt = prompt
        self._echo = echo
        self._credentials: Credentials | None = None

    def authorize(self) -> Credentials:
        """Return OAuth credentials, running the interactive flow if needed.

        Authorization happens only once per instance.

        Raises:
            CalendarAuthorizationError: If the client secrets file is missing
                or invalid, or the token exchange fails.
        """
        if self._credentials is not None:
            return self._credentials

        if not self.credentials_path.exists():
            raise CalendarAuthorizationError(f"Calendar credentials file not found: {self.credentials_path}")

        try:
            credentials = self._load_stored_token()
            if credentials is None:
                credentials = self._run_authorization_flow()
        except (GoogleAuthError, OAuth2Error, ValueError, KeyError, OSError, EOFError, click.Abort) as e:
            raise CalendarAuthorizationError(f"Calendar authorization failed: {e}") from e

        self._credentials = credentials
        return credentials

    def _load_stored_token(self) -> Credentials | None:
        if not self.token_path.exists():
            return None

        credentials = Credentials.from_authorized_user_file(str(self.token_path), self.scopes)
        if credentials.valid:
            return credentials

        if credentials.expired and credentials.refresh_token:
            log.info("calendar_token_refresh", token_path=str(self.token_path))
            credentials.refresh(Request())
            self._store_token(credentials)
            return credentials

        return None

    def _run_authorization_flow(self) -> Credentials:
        client_config = json.loads(self.credentials_path.read_text())
        redirect_uri = client_config["installed"]["redirect_uris"][0]

        flow = InstalledAppFlow.from_client_config(client_config, scopes=self.scopes, redirect_uri=redirect_uri)
        auth_url, _ = flow.authorization_url(access_type="offline")

        self._echo(f"Authorize this app by visiting this url:\n{auth_url}")
        code = self._prompt("Enter the code from that page here")

        flow.fetch_token(code=code)
        credentials = flow.credentials
        self._store_token(credentials)
        log.info("calendar_token_stored", token_path=str(self.token_path))
        return credentials

    def _store_token(self, credentials: Credentials) -> None:
        self.token_path.parent.mkdir(parents=True, exist_ok=True)
        self.token_path.write_text(credentials.to_json())

    async def list_events(self, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        """List single events in a time window, ordered by start time."""
        log.info("calendar_list_events", time_min=time_min.isoformat(), time_max=time_max.isoformat())
        return await asyncio.to_thread(self._list_events, time_min, time_max)

    def _list_events(self, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        credentials = self.authorize()

        try:
            service = build("calendar", "v3", credentials=credentials, cache_discovery=False)
            result = (
                service.events()
                .list(
                    calendarId=self.calendar_id,
                    timeMin=time_min.isoformat(),
                    timeMax=time_max.isoformat(),
                    singleEvents=True,
                    orderBy="startTime",
                )
                .execute()
            )
        except HttpError as e:
            if e.resp.status in (401, 403):
                raise CalendarAuthorizationError(f"Calendar access denied: {e}") from e
            raise CalendarError(f"Calendar request failed: {e}") from e
        except GoogleAuthError as e:
            raise CalendarAuthorizationError(f"Calendar authorization failed: {e}") from e
        except (httplib2.HttpLib2Error, OSError) as e:
            raise CalendarError(f"Calendar request failed: {e}") from e

        try:
            return [self._parse_event(item) for item in result.get("items", [])]
        except (KeyError, TypeError, ValueError) as e:
            raise CalendarError(f"Calendar returned a malformed event: {e}") from e

    def _parse_event(self, data: dict[str, Any]) -> CalendarEvent:
        """Parse a Calendar API event.

        Timed events carry ``start.dateTime`` (RFC 3339, with offset); all-day
        events carry ``start.date`` and start at midnight of that date.
        """
        start = data.get("start", {})
        if start.get("dateTime"):
            start_at = datetime.fromisoformat(start["dateTime"].replace("Z", "+00:00"))
        else:
            start_at = datetime.combine(date.fromisoformat(start["date"]), time())

        return CalendarEvent(start=start_at, summary=data.get("summary", ""))

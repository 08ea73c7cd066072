"""
Configuration system using Pydantic for type-safe settings management.

Settings come from command-line flags, an optional YAML file and
``DAILY_REPORT_*`` environment variables, in that order of precedence.
"""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, Field, SecretStr, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from daily_report.exceptions import ConfigurationError

DEFAULT_JIRA_BASE_PATH = "/jira/rest/api/latest/"
DEFAULT_BITBUCKET_BASE_PATH = "/bitbucket/rest/api/latest/"
DEFAULT_DATA_DIR = Path.home() / ".daily-report"


class ServerConfig(BaseModel):
    """Host, port and API base path of a REST server."""

    host: str = Field(..., min_length=1, description="Server host name")
    base_path: str = Field(..., description="API base path, starting and ending with '/'")
    port: int = Field(default=443, ge=1, le=65535, description="TCP port")
    ssl: bool = Field(default=True, description="Use https")

    @field_validator("base_path")
    @classmethod
    def validate_base_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError('1st symbol in the path must be "/"')
        if not value.endswith("/"):
            raise ValueError('Last symbol in the path must be "/"')
        return value


class JiraConfig(ServerConfig):
    """Jira server configuration."""

    base_path: str = Field(default=DEFAULT_JIRA_BASE_PATH, description="Jira REST API base path")


class BitbucketConfig(ServerConfig):
    """Bitbucket Server configuration."""

    base_path: str = Field(default=DEFAULT_BITBUCKET_BASE_PATH, description="Bitbucket REST API base path")


class CalendarConfig(BaseModel):
    """Google Calendar configuration."""

    enabled: bool = Field(default=True, description="List today's meetings")
    credentials_path: Path = Field(
        default=DEFAULT_DATA_DIR / "google_calendar_credentials.json",
        description="OAuth client secrets file",
    )
    token_path: Path = Field(
        default=DEFAULT_DATA_DIR / "google_calendar_token.json",
        description="Stored OAuth token",
    )
    scopes: list[str] = Field(
        default_factory=lambda: ["https://www.googleapis.com/auth/calendar.readonly"],
        description="OAuth scopes",
    )


class QueryConfig(BaseModel):
    """Issue query parameters."""

    project: str | None = Field(default=None, description="Restrict blocked and in-progress queries to a project")
    in_progress_status: str = Field(default="Development in Progress", description="Status of work in progress")
    done_resolutions: list[str] = Field(default_factory=lambda: ["Done"], description="Resolutions counted as done")
    cancelled_resolutions: list[str] = Field(
        default_factory=lambda: ["Cancelled", "Cannot Reproduce"],
        description="Resolutions counted as cancelled",
    )


class ReportSettings(BaseSettings):
    """Main daily-report settings."""

    model_config = SettingsConfigDict(
        env_prefix="DAILY_REPORT_",
        env_nested_delimiter="__",
        case_sensitive=False,
    )

    login: str = Field(..., min_length=1, description="Login used for Jira and Bitbucket")
    password: SecretStr = Field(..., description="Password used for Jira and Bitbucket")
    user: str | None = Field(default=None, description="User to report on (defaults to login)")
    jira: JiraConfig
    bitbucket: BitbucketConfig
    calendar: CalendarConfig = Field(default_factory=CalendarConfig)
    query: QueryConfig = Field(default_factory=QueryConfig)
    routines: list[str] = Field(default_factory=list, description="Daily routine lines")
    output_format: Literal["text", "json"] = Field(default="text", description="Output format")
    timeout: float = Field(default=30.0, gt=0, description="HTTP timeout in seconds")

    @field_validator("user")
    @classmethod
    def validate_user(cls, value: str | None) -> str | None:
        if value is not None and not value:
            raise ValueError("user is given but empty")
        return value

    @model_validator(mode="after")
    def default_user_to_login(self) -> ReportSettings:
        """Report on the authenticated user unless another one is given."""
        if self.user is None:
            self.user = self.login
        return self

    @property
    def target_user(self) -> str:
        return self.user or self.login

    @property
    def reports_on_self(self) -> bool:
        """True when the report is for the authenticated login."""
        return self.target_user == self.login

    @classmethod
    def load(cls, config_path: str | None = None, **overrides: Any) -> ReportSettings:
        """Build settings from an optional YAML file plus explicit overrides.

        Overrides whose value is None are ignored; nested sections are merged
        key by key.

        Raises:
            ConfigurationError: If the file or the resulting settings are invalid
        """
        data: dict[str, Any] = cls.read_yaml(config_path) if config_path else {}
        _deep_merge(data, _drop_none(overrides))

        try:
            return cls(**data)
        except ValidationError as e:
            raise ConfigurationError(_format_validation_error(e)) from e

    @classmethod
    def from_yaml(cls, config_path: str) -> ReportSettings:
        """Load settings from a YAML file with environment variable interpolation.

        Raises:
            ConfigurationError: If config file is invalid or missing required fields
        """
        return cls.load(config_path)

    @classmethod
    def read_yaml(cls, config_path: str) -> dict[str, Any]:
        """Read a YAML config file into a dict, interpolating ``${VAR}`` references."""
        config_file = Path(config_path)
        if not config_file.exists():
            raise ConfigurationError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file) as f:
                yaml_content = f.read()
        except OSError as e:
            raise ConfigurationError(f"Cannot read configuration file: {config_path}") from e

        try:
            yaml_content = cls._interpolate_env_vars(yaml_content)
        except ValueError as e:
            raise ConfigurationError(f"Invalid environment variable reference in config: {e}") from e

        try:
            config_dict = yaml.safe_load(yaml_content)
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Invalid YAML syntax in {config_path}: {e}") from e

        if config_dict is None:
            return {}
        if not isinstance(config_dict, dict):
            raise ConfigurationError("Configuration must be a YAML object, not a list or scalar")
        return config_dict

    @staticmethod
    def _interpolate_env_vars(content: str) -> str:
        """Interpolate ${VAR_NAME} and ${VAR_NAME:-default} placeholders.

        YAML comment lines are left unchanged.

        Raises:
            ValueError: If a required environment variable is not set
        """
        pattern = re.compile(r"\$\{([A-Z_][A-Z0-9_]*)(?::-([^}]*))?\}")

        def replace_var(match: re.Match[str]) -> str:
            var_name = match.group(1)
            default_value = match.group(2)
            value = os.getenv(var_name)

            if value is not None:
                return value
            elif default_value is not None:
                return default_value
            else:
                raise ValueError(f"Environment variable {var_name} is not set")

        def process_line(line: str) -> str:
            if line.lstrip().startswith("#"):
                return line
            return pattern.sub(replace_var, line)

        return "\n".join(process_line(line) for line in content.split("\n"))


def _drop_none(data: dict[str, Any]) -> dict[str, Any]:
    result: dict[str, Any] = {}
    for key, value in data.items():
        if isinstance(value, dict):
            nested = _drop_none(value)
            if nested:
                result[key] = nested
        elif value is not None:
            result[key] = value
    return result


def _deep_merge(base: dict[str, Any], overrides: dict[str, Any]) -> None:
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value


def _format_validation_error(error: ValidationError) -> str:
    problems = []
    for item in error.errors():
        location = ".".join(str(part) for part in item["loc"]) or "settings"
        problems.append(f"{location}: {item['msg']}")
    return "Invalid configuration: " + "; ".join(problems)

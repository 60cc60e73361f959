"""Configuration loading for ticketgate.

Settings are read from the process environment exactly once, at startup, and
then handed to each component's constructor.
"""

from __future__ import annotations

from pydantic import Field, ValidationError, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from ticketgate.exceptions import TicketGateError

DEFAULT_REVIEW_COMMAND = "git.code.review"
DEFAULT_REVIEWER_FIELD = "customfield_19601"
DEFAULT_ORG_PREFIX = "AdobeStock"
DEFAULT_SEARCH_PAGE_SIZE = 25
DEFAULT_HOST = "0.0.0.0"  # noqa: S104
DEFAULT_PORT = 5001


class ConfigError(TicketGateError):
    """Raised when configuration is invalid or missing."""


class Settings(BaseSettings):
    """Immutable process configuration.

    Each field is read from the environment variable named by its alias.
    Keyword arguments use the field names and take precedence over the
    environment.

    Attributes:
        jira_base_url: Jira REST base URL, e.g. https://jira.example.com/rest/api/2.
        bearer_token: Static token accepted by the bearer scheme.
        api_key: Client key id accepted by the signed-request scheme.
        api_secret: Shared HMAC secret for the signed-request scheme.
        confluence_host: Confluence base URL. Page tools are disabled when empty.
        git_host: Restricts PR aliasing to one host. Empty means any host.
        repo_org_prefix: Organization prefix stripped from PR display labels.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        populate_by_name=True,
        case_sensitive=False,
        env_ignore_empty=True,
        extra="ignore",
    )

    jira_base_url: str = Field(default="", validation_alias="JIRA_API_BASE_URL")
    bearer_token: str = Field(default="", validation_alias="GPT_BEARER_TOKEN")
    api_key: str = Field(default="", validation_alias="MCP_API_KEY")
    api_secret: str = Field(default="", validation_alias="MCP_API_SECRET")
    jira_email: str = Field(default="", validation_alias="JIRA_EMAIL")
    jira_api_token: str = Field(default="", validation_alias="JIRA_API_TOKEN")
    confluence_host: str = Field(default="", validation_alias="CONFLUENCE_HOST")
    confluence_username: str = Field(default="", validation_alias="CONFLUENCE_USERNAME")
    confluence_api_token: str = Field(default="", validation_alias="CONFLUENCE_API_TOKEN")
    git_host: str = Field(default="", validation_alias="TICKETGATE_GIT_HOST")
    repo_org_prefix: str = Field(
        default=DEFAULT_ORG_PREFIX, validation_alias="TICKETGATE_REPO_ORG_PREFIX"
    )
    review_command: str = Field(
        default=DEFAULT_REVIEW_COMMAND, validation_alias="TICKETGATE_REVIEW_COMMAND"
    )
    reviewer_field: str = Field(
        default=DEFAULT_REVIEWER_FIELD, validation_alias="TICKETGATE_REVIEWER_FIELD"
    )
    search_page_size: int = Field(
        default=DEFAULT_SEARCH_PAGE_SIZE, ge=1, validation_alias="TICKETGATE_SEARCH_PAGE_SIZE"
    )
    replay_protection: bool = Field(
        default=False, validation_alias="TICKETGATE_REPLAY_PROTECTION"
    )
    host: str = Field(default=DEFAULT_HOST, validation_alias="TICKETGATE_HOST")
    port: int = Field(default=DEFAULT_PORT, validation_alias="PORT")

    @field_validator("jira_base_url", "confluence_host")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @model_validator(mode="after")
    def _check_required(self) -> Settings:
        if not self.jira_base_url:
            raise ValueError("JIRA_API_BASE_URL is required")
        if not self.bearer_token and not (self.api_key and self.api_secret):
            raise ValueError(
                "No authentication scheme configured: set GPT_BEARER_TOKEN "
                "or both MCP_API_KEY and MCP_API_SECRET"
            )
        return self

    @property
    def confluence_enabled(self) -> bool:
        """Whether page tools can be served."""
        return bool(self.confluence_host)

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from environment variables.

        Raises:
            ConfigError: If a required value is missing or malformed.
        """
        try:
            return cls()
        except ValidationError as e:
            raise ConfigError(f"Invalid configuration: {e}") from e

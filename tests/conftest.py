"""Shared pytest fixtures and configuration."""

import pytest

from ticketgate.config import Settings

TEST_BEARER_TOKEN = "test-bearer-token"
TEST_API_KEY = "test-key"
TEST_API_SECRET = "test-secret"

SETTINGS_ENV_VARS = [
    field.validation_alias for field in Settings.model_fields.values() if field.validation_alias
]


# Register custom markers
def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: fast tests with no external dependencies")
    config.addinivalue_line("markers", "integration: component interaction tests")


# Shared fixtures


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep the developer's environment out of Settings."""
    for name in SETTINGS_ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def settings() -> Settings:
    """Settings with both authentication schemes and Confluence configured."""
    return Settings(
        jira_base_url="https://jira.example.com/rest/api/2",
        bearer_token=TEST_BEARER_TOKEN,
        api_key=TEST_API_KEY,
        api_secret=TEST_API_SECRET,
        jira_email="bot@example.com",
        jira_api_token="jira-token",
        confluence_host="https://wiki.example.com",
        confluence_username="bot",
        confluence_api_token="wiki-token",
        git_host="git.example.com",
        repo_org_prefix="org",
    )

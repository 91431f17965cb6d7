"""Unit tests for environment-driven settings."""

import pytest
from pydantic import ValidationError

from treepush.config.settings import Settings


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch, tmp_path):
    """Isolate from the developer's environment and any local .env file."""
    for name in (
        "GITHUB_ACCESS_TOKEN",
        "GITHUB_API_URL",
        "UPLOAD_MAX_CONCURRENCY",
        "DEFAULT_BRANCH",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)


class TestSettings:
    """Tests for Settings defaults and environment overrides."""

    def test_defaults(self):
        s = Settings()
        assert s.github_access_token == ""
        assert s.github_enabled is False
        assert s.github_api_url == "https://api.github.com"
        assert s.upload_max_concurrency == 8
        assert s.default_branch == "main"

    def test_token_from_environment(self, monkeypatch):
        monkeypatch.setenv("GITHUB_ACCESS_TOKEN", "ghp_abc")
        s = Settings()
        assert s.github_access_token == "ghp_abc"
        assert s.github_enabled is True

    def test_reads_dotenv_file(self, tmp_path):
        (tmp_path / ".env").write_text("GITHUB_ACCESS_TOKEN=ghp_from_file\nDEFAULT_BRANCH=trunk\n")
        s = Settings()
        assert s.github_access_token == "ghp_from_file"
        assert s.default_branch == "trunk"

    def test_api_url_trailing_slash_stripped(self, monkeypatch):
        monkeypatch.setenv("GITHUB_API_URL", "https://ghe.example.com/api/v3/")
        assert Settings().github_api_url == "https://ghe.example.com/api/v3"

    def test_negative_concurrency_rejected(self, monkeypatch):
        monkeypatch.setenv("UPLOAD_MAX_CONCURRENCY", "-1")
        with pytest.raises(ValidationError):
            Settings()

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
    )

    # GitHub - personal access token or fine-grained token with "contents: write"
    # Read from GITHUB_ACCESS_TOKEN; passed explicitly into GitHubService
    github_access_token: str = ""
    # Override for GitHub Enterprise Server, e.g. https://ghe.example.com/api/v3
    github_api_url: str = "https://api.github.com"

    # HTTP client
    http_timeout: float = 30.0
    http_connect_timeout: float = 5.0

    # Upload
    # Maximum blob uploads in flight at once (0 = unbounded)
    upload_max_concurrency: int = 8
    default_branch: str = "main"
    default_commit_message: str = "Upload files"

    # Application
    debug: bool = False
    log_level: str = "INFO"

    @field_validator("github_api_url")
    @classmethod
    def _strip_trailing_slash(cls, value: str) -> str:
        return value.rstrip("/")

    @field_validator("upload_max_concurrency")
    @classmethod
    def _non_negative_concurrency(cls, value: int) -> int:
        if value < 0:
            raise ValueError("upload_max_concurrency must be >= 0")
        return value

    @property
    def github_enabled(self) -> bool:
        """Check if a GitHub credential is configured."""
        return bool(self.github_access_token)


settings = Settings()

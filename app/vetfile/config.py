"""
Application configuration using Pydantic Settings.

Automatically loads environment variables from .env files.
"""

from functools import lru_cache
from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # OpenAI
    openai_api_key: str | None = None
    openai_model: str = "gpt-4o"
    provider_timeout_seconds: float = 60.0

    # Serve the bundled mock analysis instead of calling OpenAI
    use_mock_ai: bool = False

    # Uploads
    upload_dir: Path = Path(__file__).parent / "uploads"
    max_upload_files: int = 10
    max_file_size_mb: int = 20

    # Pages rendered for vision transcription of scanned PDFs
    vision_max_pages: int = 5

    cors_origins: list[str] = [
        "https://www.vetfile.ai",
        "https://vetfile.ai",
        "http://localhost:3000",
    ]

    # Debug flags
    debug: bool = False
    log_level: str = "INFO"

    model_config = SettingsConfigDict(
        # Load from .env file in the package directory
        env_file=Path(__file__).parent / ".env",
        env_file_encoding="utf-8",
        extra="ignore",
        # Case insensitive environment variable names
        case_sensitive=False,
    )

    @property
    def max_file_size_bytes(self) -> int:
        return self.max_file_size_mb * 1024 * 1024


@lru_cache
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings: Application configuration loaded from environment.
    """
    return Settings()

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

# Resolve .env from the project root (one level above server/)
_PROJECT_ROOT = Path(__file__).resolve().parent.parent.parent
_ENV_FILE = _PROJECT_ROOT / ".env"


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=str(_ENV_FILE),
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    # Provider credentials
    genius_api_token: str = ""
    youtube_api_key: str = ""
    google_ai_api_key: str = ""
    suno_api_key: str = ""

    # Externally reachable base URL, used for the music callback field
    public_base_url: str = "http://localhost:8000"

    # Provider endpoints and models
    youtube_api_url: str = "https://www.googleapis.com/youtube/v3/search"
    suno_api_url: str = "https://api.sunoapi.org"
    suno_model: str = "V4_5"
    gemini_model: str = "gemini-2.5-flash-lite"
    parody_max_output_tokens: int = 2048

    # Music job polling
    poll_interval_seconds: float = 10.0
    poll_max_attempts: int = 60

    # App settings
    http_timeout_seconds: float = 30.0
    cors_origins: str = "http://localhost:5173"
    log_level: str = "INFO"

    @property
    def cors_origin_list(self) -> list[str]:
        return [o.strip() for o in self.cors_origins.split(",")]

    @property
    def music_callback_url(self) -> str:
        return f"{self.public_base_url.rstrip('/')}/music-callback"


settings = Settings()

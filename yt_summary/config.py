from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Optional

class Settings(BaseSettings):
    # LLM Configuration (OpenAI-compatible endpoint, Gemini by default)
    LLM_API_KEY: Optional[str] = None
    LLM_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    LLM_MODEL: str = "gemini-2.5-flash"
    LLM_TEMPERATURE: float = 0.7

    # YouTube Data API v3
    YOUTUBE_API_KEY: Optional[str] = None

    # Language Settings
    TRANSCRIPT_LANGS: str = "ko,en"
    TARGET_LANG: str = "ko"
    RELEVANCE_LANGUAGE: str = "ko"
    RELATED_MAX_RESULTS: int = 5

    # Strategy selection: auto | library | ytdlp  /  auto | api | ytdlp
    CAPTION_SOURCE: str = "auto"
    CATALOG: str = "auto"

    # System Settings
    LOG_LEVEL: str = "INFO"
    MAX_RETRIES: int = 3
    HTTP_TIMEOUT: float = 30.0

    # Paths
    OUTPUT_DIR: str = "outputs"
    COOKIES_PATH: Optional[str] = None

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def transcript_languages(self) -> List[str]:
        return [l.strip() for l in self.TRANSCRIPT_LANGS.split(",") if l.strip()]

settings = Settings()

from typing import Literal

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    model_config = SettingsConfigDict(
        env_file=".env",
        env_ignore_empty=True,
        extra="ignore",
    )

    PROJECT_NAME: str = "SEO Structure Planner"
    API_V1_STR: str = "/api/v1"
    ENVIRONMENT: Literal["local", "staging", "production"] = "local"
    LOG_LEVEL: str = "INFO"
    BACKEND_CORS_ORIGINS: list[str] = ["http://localhost:3000"]

    DATABASE_URL: str = "sqlite:///./seo_planner.db"

    # Generation backend (OpenAI-compatible endpoint, Gemini by default)
    LLM_API_KEY: str | None = None
    GEMINI_API_KEY: str | None = None
    LLM_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    MODEL_DEFAULT: str = "gemini-2.5-flash"
    LLM_TIMEOUT_SECONDS: float = 120.0

    GENERATION_MAX_ATTEMPTS: int = 3
    FORMAT_RETRY_DELAY_SECONDS: float = 0.5
    FORMAT_RETRY_TEMPERATURE_STEP: float = 0.1
    # Backend allows ~15 requests per minute
    BRIEF_REQUEST_DELAY_SECONDS: float = 1.0


settings = Settings()  # type: ignore

"""Application configuration."""
import logging
from typing import List

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


DEFAULT_ADVISOR_MODELS = [
    "gemini-2.0-flash",
    "gemini-2.5-flash",
    "gemini-2.5-flash-preview-05-20",
    "gemini-flash-latest",
    "gemini-pro-latest",
    "gemini-2.5-flash-lite",
]


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Required external credentials
    CLERK_PUBLISHABLE_KEY: str
    DATABASE_URL: str
    GEMINI_API_KEY: str

    # Application
    APP_ENV: str = "development"
    API_V1_PREFIX: str = "/api"
    LOG_LEVEL: str = "INFO"

    # Frontend
    FRONTEND_URL: str = "http://localhost:5173"

    # Identity provider (Clerk)
    CLERK_SECRET_KEY: str = ""
    CLERK_JWT_KEY: str = ""
    CLERK_API_URL: str = "https://api.clerk.com/v1"

    # Generative AI (Gemini via its OpenAI-compatible endpoint)
    GEMINI_BASE_URL: str = "https://generativelanguage.googleapis.com/v1beta/openai/"
    ADVISOR_MODELS: List[str] = list(DEFAULT_ADVISOR_MODELS)
    ADVISOR_TEMPERATURE: float = 0.7
    ADVISOR_TOP_K: int = 40
    ADVISOR_TOP_P: float = 0.95
    ADVISOR_MAX_OUTPUT_TOKENS: int = 1024
    ADVISOR_MIN_REQUEST_INTERVAL_SECONDS: float = 2.0
    ADVISOR_MAX_REQUESTS_PER_MINUTE: int = 10
    ADVISOR_MAX_MESSAGE_LENGTH: int = 1000
    ADVISOR_HISTORY_WINDOW: int = 5

    # Mock live data
    HISTORY_TICK_SECONDS: int = 45

    # HTTP rate limiting
    RATE_LIMIT_DEFAULT: str = "120/minute"

    @field_validator("GEMINI_API_KEY")
    @classmethod
    def warn_on_unusual_key(cls, v: str) -> str:
        if not v.startswith("AIza"):
            logger.warning('GEMINI_API_KEY format may be incorrect; Gemini keys typically start with "AIza"')
        return v

    # CORS
    @property
    def ALLOWED_ORIGINS(self) -> List[str]:
        if self.APP_ENV == "development":
            return ["*"]  # Allow all origins in development
        return [self.FRONTEND_URL, "http://localhost:5173"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True
    )


settings = Settings()

from pydantic_settings import BaseSettings, SettingsConfigDict
from functools import lru_cache
from enum import Enum

class EnvironmentType(str, Enum):
    DEVELOPMENT = "development"
    TESTING = "testing"
    PRODUCTION = "production"

class Settings(BaseSettings):
    # Basic Settings
    APP_NAME: str = "Interview Feedback Service"
    ENVIRONMENT: EnvironmentType = EnvironmentType.DEVELOPMENT
    DEBUG: bool = True
    API_PREFIX: str = "/api"

    # Server Settings
    HOST: str = "0.0.0.0"
    PORT: int = 8000
    LOG_LEVEL: str = "DEBUG"

    # AI Settings
    OPENAI_API_KEY: str | None = None
    AI_MODEL: str = "gpt-4o-mini"
    IDEAL_ANSWER_MODEL: str = "gpt-4o-mini"
    GENERATION_TIMEOUT_SECONDS: float = 30.0
    IDEAL_ANSWER_CONCURRENCY: int = 4

    # Speech Analysis
    DEFAULT_SPEECH_DURATION_MS: int = 5000
    FEEDBACK_MAX_ITEMS: int = 3

    # Database
    DATABASE_URL: str = "sqlite:///./interview_feedback.db"
    LATEST_INTERVIEWS_LIMIT: int = 20

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra='ignore'
    )

@lru_cache
def get_settings() -> Settings:
    return Settings()

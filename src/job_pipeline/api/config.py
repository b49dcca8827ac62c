"""Configuration for the dashboard FastAPI service."""

from functools import lru_cache

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Service settings loaded from environment variables."""

    # Airtable
    AIRTABLE_API_KEY: str
    AIRTABLE_BASE_ID: str
    AIRTABLE_API_URL: str = "https://api.airtable.com/v0"

    # Job Pulse build service
    JOB_PULSE_URL: str

    # OpenAI (follow-up drafting is disabled when no key is set)
    OPENAI_API_KEY: str = ""
    OPENAI_CHAT_MODEL: str = "gpt-4.1-mini"
    OPENAI_MAX_TOKENS: int = 1024

    # Outreach
    NEETO_CAL_LINK: str = ""

    # HTTP / logging
    HTTP_TIMEOUT_SECONDS: float = 30.0
    LOG_JSON: bool = True
    LOG_LEVEL: str = "INFO"


@lru_cache
def get_settings() -> Settings:
    """Cached settings singleton."""
    return Settings()

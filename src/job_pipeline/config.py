"""
Configuration for the Job Pipeline ops core.

Loads the project-root .env file, then exposes the settings shared by the
core modules. The clients read their own credentials from the environment,
and the HTTP service validates its settings with pydantic-settings
(job_pipeline.api.config).
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env file from project root
_project_root = Path(__file__).parent.parent.parent
_env_file = _project_root / '.env'
if _env_file.exists():
    load_dotenv(_env_file)


class Config:
    """Configuration settings loaded from environment."""

    # Record deep links in view payloads, e.g. https://airtable.com/appX/tblY
    AIRTABLE_JOBS_URL: str = os.getenv('AIRTABLE_JOBS_URL', '')

    # Logging
    LOG_LEVEL: str = os.getenv('LOG_LEVEL', 'INFO')

    @classmethod
    def record_url(cls, record_id: str) -> str | None:
        """Deep link to a Jobs Pipeline record, or None when no prefix is set."""
        if not cls.AIRTABLE_JOBS_URL:
            return None
        return f"{cls.AIRTABLE_JOBS_URL.rstrip('/')}/{record_id}"


# Singleton config instance
config = Config()

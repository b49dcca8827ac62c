"""Tests for dashboard service configuration."""

import os
from unittest.mock import patch

from job_pipeline.api.config import Settings


class TestApiConfig:
    def test_config_loads_from_env(self):
        env = {
            "AIRTABLE_API_KEY": "pat-test",
            "AIRTABLE_BASE_ID": "appTEST",
            "JOB_PULSE_URL": "https://pulse.test",
            "OPENAI_API_KEY": "sk-test-key",
            "NEETO_CAL_LINK": "https://cal.test/steve",
            "OPENAI_MAX_TOKENS": "256",
        }
        with patch.dict(os.environ, env, clear=False):
            settings = Settings()
            assert settings.AIRTABLE_API_KEY == "pat-test"
            assert settings.AIRTABLE_BASE_ID == "appTEST"
            assert settings.JOB_PULSE_URL == "https://pulse.test"
            assert settings.OPENAI_API_KEY == "sk-test-key"
            assert settings.NEETO_CAL_LINK == "https://cal.test/steve"
            assert settings.OPENAI_MAX_TOKENS == 256

    def test_config_defaults(self):
        env = {
            "AIRTABLE_API_KEY": "pat-test",
            "AIRTABLE_BASE_ID": "appTEST",
            "JOB_PULSE_URL": "https://pulse.test",
        }
        with patch.dict(os.environ, env, clear=True):
            settings = Settings()
            assert settings.AIRTABLE_API_URL == "https://api.airtable.com/v0"
            assert settings.OPENAI_API_KEY == ""
            assert settings.HTTP_TIMEOUT_SECONDS == 30.0
            assert settings.OPENAI_MAX_TOKENS == 1024
            assert settings.LOG_JSON is True

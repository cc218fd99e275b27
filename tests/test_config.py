"""Tests for environment-driven settings."""
import pytest

from cvoptimize.config import DEFAULT_JOB_SEARCH_URL, DEFAULT_LLM_MODEL, Settings

_ENV_KEYS = (
    "GROQ_API_KEY", "GROQ_LLM_MODEL", "LLM_BASE_URL", "JOB_SEARCH_URL",
    "JOB_SEARCH_MAX_OFFERS", "JOB_SEARCH_PROXY", "JOB_SEARCH_TIMEOUT",
    "MATCH_MAX_ATTEMPTS", "MATCH_BASE_DELAY", "RESUME_MAX_CHARS",
)


@pytest.fixture
def clean_env(monkeypatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    return monkeypatch


class TestSettingsFromEnv:
    def test_defaults(self, clean_env):
        settings = Settings.from_env(dotenv=False)
        assert settings.api_key == ""
        assert not settings.has_api_key
        assert settings.llm_model == DEFAULT_LLM_MODEL
        assert settings.job_search_url == DEFAULT_JOB_SEARCH_URL
        assert settings.max_postings == 10
        assert settings.job_search_proxy is None
        assert settings.match_max_attempts == 3
        assert settings.match_base_delay == 1.0

    def test_overrides(self, clean_env):
        clean_env.setenv("GROQ_API_KEY", "  gsk_test  ")
        clean_env.setenv("JOB_SEARCH_URL", "https://jobs.example.mg/")
        clean_env.setenv("JOB_SEARCH_MAX_OFFERS", "5")
        clean_env.setenv("JOB_SEARCH_PROXY", "https://proxy.example/?url=")
        clean_env.setenv("MATCH_BASE_DELAY", "0.5")

        settings = Settings.from_env(dotenv=False)

        assert settings.api_key == "gsk_test"
        assert settings.has_api_key
        assert settings.job_search_url == "https://jobs.example.mg/"
        assert settings.max_postings == 5
        assert settings.job_search_proxy == "https://proxy.example/?url="
        assert settings.match_base_delay == 0.5

    @pytest.mark.parametrize("raw", ["ten", "0", "-3"])
    def test_invalid_max_postings_falls_back(self, clean_env, raw):
        clean_env.setenv("JOB_SEARCH_MAX_OFFERS", raw)
        assert Settings.from_env(dotenv=False).max_postings == 10

    def test_invalid_delay_falls_back(self, clean_env):
        clean_env.setenv("MATCH_BASE_DELAY", "soon")
        assert Settings.from_env(dotenv=False).match_base_delay == 1.0

    def test_settings_are_frozen(self):
        settings = Settings()
        with pytest.raises(AttributeError):
            settings.api_key = "x"

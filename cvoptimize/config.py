"""Load runtime settings from the environment (and an optional .env file)."""
from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from cvoptimize.log import get_logger

log = get_logger(__name__)

ROOT_DIR: Path = Path(__file__).resolve().parent.parent

DEFAULT_JOB_SEARCH_URL = "https://www.portaljob-madagascar.com/"
DEFAULT_MAX_POSTINGS = 10
DEFAULT_LLM_MODEL = "llama-3.3-70b-versatile"
DEFAULT_LLM_BASE_URL = "https://api.groq.com/openai/v1"


def get_env(key: str, default: str = "") -> str:
    return os.environ.get(key, default).strip()


def _int_env(key: str, default: int, minimum: int = 1) -> int:
    raw = get_env(key)
    if not raw:
        return default
    try:
        value = int(raw)
    except ValueError:
        log.warning("Ignoring %s=%r (not an integer), using %d", key, raw, default)
        return default
    if value < minimum:
        log.warning("Ignoring %s=%d (below %d), using %d", key, value, minimum, default)
        return default
    return value


def _float_env(key: str, default: float) -> float:
    raw = get_env(key)
    if not raw:
        return default
    try:
        value = float(raw)
    except ValueError:
        log.warning("Ignoring %s=%r (not a number), using %.1f", key, raw, default)
        return default
    if value < 0:
        log.warning("Ignoring %s=%s (negative), using %.1f", key, raw, default)
        return default
    return value


@dataclass(frozen=True)
class Settings:
    """Process-wide configuration, built once at startup and passed around."""

    api_key: str = ""
    llm_model: str = DEFAULT_LLM_MODEL
    llm_base_url: str = DEFAULT_LLM_BASE_URL
    job_search_url: str = DEFAULT_JOB_SEARCH_URL
    max_postings: int = DEFAULT_MAX_POSTINGS
    job_search_proxy: str | None = None
    http_timeout: float = 15.0
    match_max_attempts: int = 3
    match_base_delay: float = 1.0
    resume_max_chars: int = 12000

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> "Settings":
        if dotenv:
            load_dotenv()
        return cls(
            api_key=get_env("GROQ_API_KEY"),
            llm_model=get_env("GROQ_LLM_MODEL") or DEFAULT_LLM_MODEL,
            llm_base_url=get_env("LLM_BASE_URL") or DEFAULT_LLM_BASE_URL,
            job_search_url=get_env("JOB_SEARCH_URL") or DEFAULT_JOB_SEARCH_URL,
            max_postings=_int_env("JOB_SEARCH_MAX_OFFERS", DEFAULT_MAX_POSTINGS),
            job_search_proxy=get_env("JOB_SEARCH_PROXY") or None,
            http_timeout=_float_env("JOB_SEARCH_TIMEOUT", 15.0),
            match_max_attempts=_int_env("MATCH_MAX_ATTEMPTS", 3),
            match_base_delay=_float_env("MATCH_BASE_DELAY", 1.0),
            resume_max_chars=_int_env("RESUME_MAX_CHARS", 12000),
        )

    @property
    def has_api_key(self) -> bool:
        return bool(self.api_key)

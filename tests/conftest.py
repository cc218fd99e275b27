"""Pytest fixtures for CV Optimize tests."""
import sys
from pathlib import Path
from typing import Any

import pytest
import requests

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from cvoptimize.config import Settings
from cvoptimize.models import JobPosting, ResumeProfile


# =============================================================================
# FAKES
# =============================================================================


class Overloaded(Exception):
    """Mimics the SDK's 503 error."""

    status_code = 503


class FakeLLMClient:
    """Stands in for LLMClient.

    ``responses`` is consumed in order; each item is a dict to return, an
    exception to raise, or a callable taking the prompt.
    """

    def __init__(self, responses: list[Any] | None = None, default: Any = None):
        self.responses = list(responses or [])
        self.default = default
        self.calls: list[tuple[str, dict]] = []

    def complete_json(self, prompt: str, schema: dict, **kwargs) -> dict:
        self.calls.append((prompt, schema))
        item = self.responses.pop(0) if self.responses else self.default
        if callable(item) and not isinstance(item, dict):
            item = item(prompt)
        if isinstance(item, BaseException):
            raise item
        return item


class FakeResponse:
    def __init__(self, text: str = "", status_code: int = 200):
        self.text = text
        self.status_code = status_code

    @property
    def ok(self) -> bool:
        return self.status_code < 400


class StubSession:
    """requests.Session replacement keyed by URL."""

    def __init__(self, routes: dict[str, Any] | None = None):
        self.routes = routes or {}
        self.requested: list[str] = []
        self.closed = False

    def get(self, url: str, **kwargs) -> FakeResponse:
        self.requested.append(url)
        outcome = self.routes.get(url, requests.ConnectionError(f"no route to {url}"))
        if isinstance(outcome, BaseException):
            raise outcome
        return outcome

    def close(self) -> None:
        self.closed = True


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    return Settings(
        api_key="test-key",
        job_search_url="https://jobs.example.mg/",
        max_postings=10,
        match_base_delay=1.0,
    )


@pytest.fixture
def resume() -> ResumeProfile:
    return ResumeProfile.from_dict(
        {
            "contactInfo": {
                "name": "Hery Rakoto",
                "email": "hery@example.mg",
                "phone": "+261 34 00 000 00",
                "address": "Antananarivo",
                "links": ["https://linkedin.com/in/hery"],
            },
            "summary": "Commercial terrain avec 5 ans d'expérience.",
            "education": [
                {"institution": "Université d'Antananarivo", "degree": "Licence Gestion", "dates": "2015-2018"}
            ],
            "experience": [
                {
                    "company": "Telma",
                    "role": "Commercial",
                    "dates": "2019-2024",
                    "description": "Prospection et vente B2B.",
                }
            ],
            "skills": ["Excel", "Vente"],
            "languages": ["Français", "Malagasy"],
        }
    )


@pytest.fixture
def postings() -> list[JobPosting]:
    return [
        JobPosting(title="COMMERCIAL", company="CAPMAD SA", contract_type="Free-lance",
                   sector="Commercial / Vente", date="19 Nov 2025"),
        JobPosting(title="Comptable", company="EVOLUTIS", contract_type="CDI",
                   sector="Finance", date="20 Nov 2025"),
    ]


@pytest.fixture
def sleep() -> RecordingSleep:
    return RecordingSleep()


LISTING_HTML = """
<html><body>
  <header class="site-header"><h1>Portal Job</h1></header>
  <div class="listing">
    <article>
      <h3>Responsable Contenu -réf:RC-19-11</h3>
      <strong>HELLOTANA</strong>
      <span class="contract">CDD</span>
      <span class="sector">Marketing / Communication</span>
      <time>20 Nov 2025</time>
      <a href="/emploi/responsable-contenu-123">Voir</a>
    </article>
    <article>
      <h3>COMMERCIAL</h3>
      <span class="company">CAPMAD SA</span>
      <a href="https://www.portaljob-madagascar.com/emploi/commercial-456">Voir</a>
    </article>
    <article>
      <p>Advertisement without a title</p>
    </article>
    <article>
      <h2>GESTIONNAIRE DE PLANNING-réf:GPA1125</h2>
      <div class="item_company">Rouge Hexagone</div>
      <div class="contract_type">CDI</div>
      <div class="date_pub">20 Nov 2025</div>
    </article>
  </div>
</body></html>
"""

"""Tests for the end-to-end workflow."""
from dataclasses import replace

import fitz
import pytest

from cvoptimize.config import Settings
from cvoptimize.llm import MissingApiKeyError
from cvoptimize.schemas import ANALYSIS_SCHEMA, MATCH_SCHEMA, RESUME_SCHEMA, REWRITE_SCHEMA
from cvoptimize.scorer import REASON_OVERLOADED
from cvoptimize.sources import EXAMPLE_POSTINGS
from cvoptimize.workflow import analyze, build_client, find_matches, is_offers_only

from conftest import FakeLLMClient, FakeResponse, LISTING_HTML, Overloaded, StubSession

RESUME_JSON = {
    "contactInfo": {"name": "Hery Rakoto"},
    "summary": "Commercial",
    "skills": ["Vente"],
}


def _pdf() -> bytes:
    doc = fitz.open()
    doc.new_page().insert_text((72, 72), "Hery Rakoto - Commercial", fontname="helv", fontsize=11)
    data = doc.tobytes()
    doc.close()
    return data


class SchemaClient(FakeLLMClient):
    """Answers according to the requested schema."""

    def __init__(self, answers):
        super().__init__()
        self.answers = answers

    def complete_json(self, prompt, schema, **kwargs):
        self.calls.append((prompt, schema))
        answer = self.answers[id(schema)]
        if isinstance(answer, BaseException):
            raise answer
        return answer


class TestOffersOnly:
    @pytest.mark.parametrize("text", [None, "", "   ", "dev", "  court    "])
    def test_short_descriptions(self, text):
        assert is_offers_only(text)

    def test_real_description(self):
        assert not is_offers_only("Commercial terrain, CDI")


class TestAnalyze:
    def test_offers_only_skips_analysis(self, settings):
        client = SchemaClient({id(RESUME_SCHEMA): RESUME_JSON})
        outcome = analyze(_pdf(), "court", settings, client)

        assert outcome.offers_only
        assert outcome.resume.contact.name == "Hery Rakoto"
        assert outcome.rewritten is None
        assert [schema for _, schema in client.calls] == [RESUME_SCHEMA]
        assert "Hery Rakoto" in client.calls[0][0]

    def test_full_analysis(self, settings):
        client = SchemaClient(
            {
                id(RESUME_SCHEMA): RESUME_JSON,
                id(ANALYSIS_SCHEMA): {"matchingScore": 61, "improvementSuggestions": ["Ajouter Excel"]},
                id(REWRITE_SCHEMA): {"markdownContent": "# Hery Rakoto", "rawJson": {"summary": "Vendeur"}},
            }
        )
        outcome = analyze(_pdf(), "Commercial B2B à Antananarivo", settings, client)

        assert not outcome.offers_only
        assert outcome.analysis.matching_score == 61
        assert outcome.rewritten.markdown == "# Hery Rakoto"
        assert outcome.rewritten.profile.summary == "Vendeur"
        assert [schema for _, schema in client.calls] == [RESUME_SCHEMA, ANALYSIS_SCHEMA, REWRITE_SCHEMA]
        assert "Ajouter Excel" in client.calls[2][0]


class TestFindMatches:
    def test_live_postings_sorted(self, settings, resume, sleep):
        session = StubSession({settings.job_search_url: FakeResponse(LISTING_HTML)})

        def score(prompt):
            if "COMMERCIAL" in prompt:
                return {"matchingScore": 90, "matchReasons": ["Vente"]}
            return {"matchingScore": 30}

        client = FakeLLMClient(default=score)
        outcome = find_matches(resume, settings, client, session=session, sleep=sleep)

        assert not outcome.from_examples
        assert len(outcome.scored) == 3
        assert outcome.scored[0].posting.title == "COMMERCIAL"
        assert [s.score for s in outcome.scored] == [90, 30, 30]
        assert outcome.failures == 0
        assert all(schema is MATCH_SCHEMA for _, schema in client.calls)

    def test_examples_with_failures(self, settings, resume, sleep):
        settings = replace(settings, max_postings=3, match_max_attempts=2)
        client = FakeLLMClient(
            [
                {"matchingScore": 40},
                Overloaded("overloaded"),
                Overloaded("overloaded"),
                ValueError("bad json"),
            ]
        )
        outcome = find_matches(resume, settings, client, session=StubSession(), sleep=sleep)

        assert outcome.from_examples
        assert len(outcome.scored) == 3
        assert [s.posting for s in outcome.scored] == list(EXAMPLE_POSTINGS[:3])
        assert outcome.failures == 2
        assert outcome.scored[1].reasons == (REASON_OVERLOADED,)
        assert sleep.delays == [1.0]


def test_build_client_requires_key():
    with pytest.raises(MissingApiKeyError):
        build_client(Settings(api_key=""))

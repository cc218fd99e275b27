"""Tests for posting scoring and the matching pipeline."""
import pytest

from cvoptimize.llm import LLMResponseError
from cvoptimize.models import JobPosting
from cvoptimize.scorer import (
    REASON_OVERLOADED,
    REASON_TECHNICAL,
    build_match_prompt,
    match_all,
    score_posting,
)

from conftest import FakeLLMClient, Overloaded


def _posting(title: str) -> JobPosting:
    return JobPosting(title=title, company="ACME", contract_type="CDI", sector="Vente", date="20 Nov 2025")


class TestBuildMatchPrompt:
    def test_includes_resume_and_posting_fields(self, resume, postings):
        prompt = build_match_prompt(resume, postings[0])
        assert "Excel, Vente" in prompt
        assert "Telma" in prompt
        assert "Français, Malagasy" in prompt
        assert "COMMERCIAL" in prompt
        assert "CAPMAD SA" in prompt
        assert "Free-lance" in prompt
        assert "Description" not in prompt

    def test_description_only_when_present(self, resume):
        posting = JobPosting(
            title="Vendeur", company="X", contract_type="CDI", sector="Vente",
            date="1 Jan 2026", description="Vente en magasin",
        )
        assert "- Description: Vente en magasin" in build_match_prompt(resume, posting)


class TestScorePosting:
    def test_returns_scored_posting(self, resume, postings, sleep):
        client = FakeLLMClient([{"matchingScore": 82, "matchReasons": ["Sales experience", "Excel"]}])
        scored = score_posting(resume, postings[0], client, sleep=sleep)
        assert scored.posting == postings[0]
        assert scored.score == 82
        assert scored.reasons == ("Sales experience", "Excel")
        assert sleep.delays == []

    def test_score_is_clamped_and_rounded(self, resume, postings, sleep):
        client = FakeLLMClient([{"matchingScore": 120.4, "matchReasons": []}])
        assert score_posting(resume, postings[0], client, sleep=sleep).score == 100

        client = FakeLLMClient([{"matchingScore": "77.6"}])
        scored = score_posting(resume, postings[0], client, sleep=sleep)
        assert scored.score == 78
        assert scored.reasons == ()

    def test_retries_overload_then_succeeds(self, resume, postings, sleep):
        client = FakeLLMClient([
            Overloaded("model overloaded"),
            Overloaded("model overloaded"),
            {"matchingScore": 64, "matchReasons": ["ok"]},
        ])
        scored = score_posting(resume, postings[0], client, max_attempts=3, base_delay=1.0, sleep=sleep)
        assert scored.score == 64
        assert len(client.calls) == 3
        assert sleep.delays == [1.0, 2.0]

    def test_non_retryable_error_propagates_immediately(self, resume, postings, sleep):
        client = FakeLLMClient([ValueError("bad request"), {"matchingScore": 50}])
        with pytest.raises(ValueError):
            score_posting(resume, postings[0], client, sleep=sleep)
        assert len(client.calls) == 1
        assert sleep.delays == []

    def test_exactly_max_attempts_on_persistent_overload(self, resume, postings, sleep):
        client = FakeLLMClient(default=Overloaded("503 UNAVAILABLE"))
        with pytest.raises(Overloaded):
            score_posting(resume, postings[0], client, max_attempts=4, base_delay=0.25, sleep=sleep)
        assert len(client.calls) == 4
        assert sleep.delays == [0.25, 0.5, 1.0]

    def test_empty_answer_is_an_error(self, resume, postings, sleep):
        client = FakeLLMClient([{}])
        with pytest.raises(LLMResponseError):
            score_posting(resume, postings[0], client, sleep=sleep)


class TestMatchAll:
    def test_end_to_end_partial_failure(self, resume, postings, sleep):
        client = FakeLLMClient([
            {"matchingScore": 82, "matchReasons": ["Vente"]},
            ValueError("boom"),
        ])
        result = match_all(resume, postings, client, sleep=sleep)

        assert [s.posting for s in result] == postings
        assert result[0].score == 82
        assert result[1].score == 0
        assert result[1].reasons == (REASON_TECHNICAL,)
        assert "technical" in result[1].reasons[0]
        assert result[1].is_placeholder

    def test_overload_placeholder_reason(self, resume, postings, sleep):
        client = FakeLLMClient([Overloaded("overloaded")] * 3 + [{"matchingScore": 40}])
        result = match_all(resume, postings, client, max_attempts=3, sleep=sleep)
        assert result[0].posting == postings[1]
        assert result[0].score == 40
        assert result[1].reasons == (REASON_OVERLOADED,)
        assert sleep.delays == [1.0, 2.0]

    def test_length_preserved_when_everything_fails(self, resume, sleep):
        items = [_posting(f"Job {i}") for i in range(5)]
        client = FakeLLMClient(default=RuntimeError("down"))
        result = match_all(resume, items, client, sleep=sleep)
        assert len(result) == 5
        assert all(s.score == 0 for s in result)

    def test_sorted_descending_and_stable_for_ties(self, resume, sleep):
        items = [_posting(name) for name in ("A", "B", "C", "D", "E")]
        client = FakeLLMClient([
            {"matchingScore": 50},
            {"matchingScore": 90},
            RuntimeError("x"),
            {"matchingScore": 50},
            RuntimeError("y"),
        ])
        result = match_all(resume, items, client, sleep=sleep)
        assert [s.posting.title for s in result] == ["B", "A", "D", "C", "E"]
        assert [s.score for s in result] == [90, 50, 50, 0, 0]

    def test_scores_in_input_order(self, resume, sleep):
        items = [_posting(name) for name in ("first", "second", "third")]
        client = FakeLLMClient(default={"matchingScore": 10})
        match_all(resume, items, client, sleep=sleep)
        assert ["first" in c[0] for c in client.calls] == [True, False, False]
        assert "third" in client.calls[2][0]

    def test_empty_postings(self, resume, sleep):
        client = FakeLLMClient()
        assert match_all(resume, [], client, sleep=sleep) == []
        assert client.calls == []

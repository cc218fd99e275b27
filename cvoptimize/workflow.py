"""
End-to-end résumé workflow.

Runs: PDF text → structured résumé → (job description given ?
analysis → rewrite : offers only). Job matching runs separately:
postings → per-posting score → sorted list.
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Callable

import requests

from cvoptimize.analysis import analyze_resume, rewrite_resume
from cvoptimize.config import Settings
from cvoptimize.llm import LLMClient
from cvoptimize.log import get_logger
from cvoptimize.models import ResumeAnalysis, ResumeProfile, RewrittenResume, ScoredPosting
from cvoptimize.resume_parser import PdfSource, extract_resume, extract_text
from cvoptimize.scorer import match_all
from cvoptimize.sources import fetch_postings

log = get_logger(__name__)

MIN_JOB_DESCRIPTION_CHARS = 10


@dataclass
class AnalysisOutcome:
    resume: ResumeProfile
    analysis: ResumeAnalysis | None = None
    rewritten: RewrittenResume | None = None

    @property
    def offers_only(self) -> bool:
        return self.analysis is None


@dataclass
class MatchOutcome:
    scored: list[ScoredPosting] = field(default_factory=list)
    from_examples: bool = False

    @property
    def failures(self) -> int:
        return sum(1 for s in self.scored if s.is_placeholder)


def build_client(settings: Settings) -> LLMClient:
    """One client per process; raises MissingApiKeyError without a key."""
    return LLMClient(settings)


def is_offers_only(job_description: str | None) -> bool:
    return len((job_description or "").strip()) < MIN_JOB_DESCRIPTION_CHARS


def analyze(
    pdf: PdfSource,
    job_description: str | None,
    settings: Settings,
    client: LLMClient,
) -> AnalysisOutcome:
    text = extract_text(pdf)
    resume = extract_resume(text, client, max_chars=settings.resume_max_chars)

    if is_offers_only(job_description):
        log.info("No usable job description, offers-only mode")
        return AnalysisOutcome(resume=resume)

    analysis = analyze_resume(resume, job_description or "", client)
    rewritten = rewrite_resume(resume, job_description or "", analysis.improvement_suggestions, client)
    return AnalysisOutcome(resume=resume, analysis=analysis, rewritten=rewritten)


def find_matches(
    resume: ResumeProfile,
    settings: Settings,
    client: LLMClient,
    *,
    session: requests.Session | None = None,
    sleep: Callable[[float], None] = time.sleep,
) -> MatchOutcome:
    batch = fetch_postings(settings, session=session)
    log.info("Matching %d posting(s) from %s", len(batch.postings), batch.origin)
    scored = match_all(
        resume,
        batch.postings,
        client,
        max_attempts=settings.match_max_attempts,
        base_delay=settings.match_base_delay,
        sleep=sleep,
    )
    outcome = MatchOutcome(scored=scored, from_examples=batch.from_examples)
    log.info(
        "Match run complete: postings=%d, failures=%d, examples=%s",
        len(outcome.scored),
        outcome.failures,
        outcome.from_examples,
    )
    return outcome

"""Score job postings against a résumé with the language model."""
from __future__ import annotations

import json
import time
from typing import Callable, Sequence

from cvoptimize.analysis import clamp_score
from cvoptimize.llm import LLMClient, LLMResponseError, is_overloaded
from cvoptimize.log import get_logger
from cvoptimize.models import JobPosting, ResumeProfile, ScoredPosting
from cvoptimize.retry import call_with_retry
from cvoptimize.schemas import MATCH_SCHEMA

log = get_logger(__name__)

REASON_OVERLOADED = "Analysis unavailable (service overloaded)"
REASON_TECHNICAL = "Analysis unavailable (technical error)"

_MATCH_PROMPT = """\
You are an expert recruiter. Analyse how well this résumé matches this job offer.

Résumé data:
- Summary: {summary}
- Experience: {experience}
- Skills: {skills}
- Education: {education}
- Languages: {languages}

Job offer:
- Title: {title}
- Company: {company}
- Contract type: {contract_type}
- Sector: {sector}
{description}
Give a match score from 0 to 100 and list the main reasons for this match.
"""


def build_match_prompt(resume: ResumeProfile, posting: JobPosting) -> str:
    data = resume.to_dict()
    return _MATCH_PROMPT.format(
        summary=resume.summary,
        experience=json.dumps(data["experience"], ensure_ascii=False),
        skills=", ".join(resume.skills),
        education=json.dumps(data["education"], ensure_ascii=False),
        languages=", ".join(resume.languages),
        title=posting.title,
        company=posting.company,
        contract_type=posting.contract_type,
        sector=posting.sector,
        description=f"- Description: {posting.description}\n" if posting.description else "",
    )


def score_posting(
    resume: ResumeProfile,
    posting: JobPosting,
    client: LLMClient,
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> ScoredPosting:
    """Ask the model for a 0-100 score and reasons for one posting.

    Overload errors are retried with exponential backoff; anything else,
    or the last overload, propagates.
    """
    prompt = build_match_prompt(resume, posting)

    def _attempt() -> ScoredPosting:
        data = client.complete_json(prompt, MATCH_SCHEMA, max_tokens=600)
        if not data:
            raise LLMResponseError("Match analysis returned no data")
        reasons = data.get("matchReasons") or []
        if not isinstance(reasons, list):
            reasons = [reasons]
        return ScoredPosting(
            posting=posting,
            score=clamp_score(data.get("matchingScore")),
            reasons=tuple(str(r).strip() for r in reasons if str(r).strip()),
        )

    return call_with_retry(
        _attempt,
        max_attempts=max_attempts,
        base_delay=base_delay,
        is_retryable=is_overloaded,
        sleep=sleep,
        label=f"score_posting[{posting.title[:40]}]",
    )


def placeholder(posting: JobPosting, exc: BaseException) -> ScoredPosting:
    reason = REASON_OVERLOADED if is_overloaded(exc) else REASON_TECHNICAL
    return ScoredPosting(posting=posting, score=0, reasons=(reason,))


def match_all(
    resume: ResumeProfile,
    postings: Sequence[JobPosting],
    client: LLMClient,
    *,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> list[ScoredPosting]:
    """Score every posting, one at a time, best match first.

    Never raises for a scoring failure: the posting is kept with score 0.
    The sort is stable, so equal scores stay in input order.
    """
    scored: list[ScoredPosting] = []
    failures = 0
    for posting in postings:
        try:
            scored.append(
                score_posting(
                    resume,
                    posting,
                    client,
                    max_attempts=max_attempts,
                    base_delay=base_delay,
                    sleep=sleep,
                )
            )
        except Exception as exc:
            failures += 1
            log.warning("Could not score posting %r: %s", posting.title, exc)
            scored.append(placeholder(posting, exc))

    result = sorted(scored, key=lambda s: s.score, reverse=True)
    log.info("Scored %d posting(s), %d failure(s)", len(result), failures)
    return result

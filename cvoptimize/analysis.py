"""Compare a résumé with a job description and rewrite it for that job."""
from __future__ import annotations

import json
from dataclasses import replace
from typing import Any, Sequence

from cvoptimize.llm import LLMClient, LLMResponseError
from cvoptimize.log import get_logger
from cvoptimize.models import ResumeAnalysis, ResumeProfile, RewrittenResume
from cvoptimize.schemas import ANALYSIS_SCHEMA, REWRITE_SCHEMA

log = get_logger(__name__)


def clamp_score(value: Any) -> int:
    """Coerce a model-supplied score to an int in 0..100 (0 when unusable)."""
    try:
        score = round(float(value))
    except (TypeError, ValueError, OverflowError):
        return 0
    return max(0, min(100, score))


def _strings(value: Any) -> tuple[str, ...]:
    if not isinstance(value, list):
        return ()
    return tuple(str(v).strip() for v in value if str(v).strip())


_ANALYSIS_PROMPT = """\
You are a senior recruiter. Analyse this résumé against the job offer below.
Give an honest match score out of 100.
List the strengths (why this candidate matches).
List the weaknesses (what is missing or badly worded).
Give concrete suggestions to improve the résumé for THIS specific offer.
Answer in the language of the job offer.

Résumé data: {resume_json}

Job offer: {job_description}
"""


def analyze_resume(resume: ResumeProfile, job_description: str, client: LLMClient) -> ResumeAnalysis:
    prompt = _ANALYSIS_PROMPT.format(
        resume_json=json.dumps(resume.to_dict(), ensure_ascii=False),
        job_description=job_description.strip(),
    )
    data = client.complete_json(prompt, ANALYSIS_SCHEMA, max_tokens=2000)
    if not data:
        raise LLMResponseError("Résumé analysis returned no data")
    analysis = ResumeAnalysis(
        matching_score=clamp_score(data.get("matchingScore")),
        positive_points=_strings(data.get("positivePoints")),
        negative_points=_strings(data.get("negativePoints")),
        improvement_suggestions=_strings(data.get("improvementSuggestions")),
        summary_feedback=str(data.get("summaryFeedback") or "").strip(),
    )
    log.info(
        "Analysis complete: score=%d, suggestions=%d",
        analysis.matching_score,
        len(analysis.improvement_suggestions),
    )
    return analysis


_REWRITE_PROMPT = """\
You are a professional résumé writer.
Rewrite this résumé so that it fits the job offer as closely as possible,
applying the improvement suggestions.

Rules:
1. Do not invent experience that does not exist (stay truthful).
2. Rephrase the summary (profile) using the offer's keywords.
3. Highlight the hard and soft skills the offer asks for.
4. Rephrase job descriptions to emphasise the relevant achievements.
5. The output must be clean, professional MARKDOWN, ready to read.

Original data: {resume_json}
Job offer: {job_description}
Applied suggestions: {suggestions}
"""


def rewrite_resume(
    resume: ResumeProfile,
    job_description: str,
    suggestions: Sequence[str],
    client: LLMClient,
) -> RewrittenResume:
    prompt = _REWRITE_PROMPT.format(
        resume_json=json.dumps(resume.to_dict(), ensure_ascii=False),
        job_description=job_description.strip(),
        suggestions=json.dumps(list(suggestions), ensure_ascii=False),
    )
    data = client.complete_json(prompt, REWRITE_SCHEMA, max_tokens=4000, temperature=0.3)
    markdown = str(data.get("markdownContent") or "").strip()
    if not markdown:
        raise LLMResponseError("Résumé rewrite returned no Markdown content")

    # Only the summary and name come back; everything else is kept from the original.
    raw = data.get("rawJson") or {}
    profile = resume
    if isinstance(raw, dict):
        summary = str(raw.get("summary") or "").strip()
        contact = raw.get("contactInfo")
        name = str(contact.get("name") or "").strip() if isinstance(contact, dict) else ""
        if summary:
            profile = replace(profile, summary=summary)
        if name:
            profile = replace(profile, contact=replace(profile.contact, name=name))

    log.info("Rewrite complete: %d characters of Markdown", len(markdown))
    return RewrittenResume(markdown=markdown, profile=profile)

"""Streamlit UI for CV Optimize."""
from __future__ import annotations

import sys
from pathlib import Path

import pandas as pd
import streamlit as st

ROOT = Path(__file__).resolve().parent
sys.path.insert(0, str(ROOT))

from cvoptimize.config import Settings
from cvoptimize.llm import LLMClient, LLMError, MissingApiKeyError
from cvoptimize.log import get_logger
from cvoptimize.models import ResumeProfile, RewrittenResume
from cvoptimize.pdf_export import PDF_FILENAME, markdown_to_pdf
from cvoptimize.report import build_match_report, score_band, score_label
from cvoptimize.resume_parser import ResumeReadError
from cvoptimize.workflow import (
    MIN_JOB_DESCRIPTION_CHARS,
    AnalysisOutcome,
    MatchOutcome,
    analyze,
    build_client,
    find_matches,
)

log = get_logger(__name__)

# ── Constants ────────────────────────────────────────────────────────────

STEP_UPLOAD = "upload"
STEP_RESULTS = "results"
STEP_CV = "cv"
STEP_OFFERS = "offers"
STEP_ERROR = "error"

_SESSION_KEYS = ("step", "outcome", "matches", "error", "markdown")

_GLASS_CSS = """
<style>
[data-testid="stAppViewContainer"] {
    background: linear-gradient(135deg, #eef2ff 0%, #f8fafc 50%, #f1f5f9 100%);
}
[data-testid="stSidebar"] {
    background: rgba(255,255,255,0.55);
    backdrop-filter: blur(16px);
    -webkit-backdrop-filter: blur(16px);
    border-right: 1px solid rgba(255,255,255,0.3);
}
.block-container {
    padding-top: 2rem;
}
[data-testid="stMetric"],
[data-testid="stForm"],
[data-testid="stExpander"] {
    background: rgba(255,255,255,0.6);
    backdrop-filter: blur(12px);
    -webkit-backdrop-filter: blur(12px);
    border-radius: 12px;
    border: 1px solid rgba(255,255,255,0.4);
    box-shadow: 0 4px 16px rgba(0,0,0,0.06);
}
[data-testid="stMetric"] {
    padding: 0.75rem 1rem;
}
.stButton > button[kind="primary"] {
    border-radius: 8px;
    font-weight: 600;
}
h1, h2, h3 {
    color: #1e1b4b;
}
.score-badge {
    display: inline-block; min-width: 4.5rem; text-align: center;
    padding: 0.6rem 0.5rem; border-radius: 10px; border: 2px solid;
    font-size: 1.4rem; font-weight: 700;
}
.score-high   { color: #16a34a; background: #f0fdf4; border-color: #bbf7d0; }
.score-medium { color: #ca8a04; background: #fefce8; border-color: #fef08a; }
.score-low    { color: #dc2626; background: #fef2f2; border-color: #fecaca; }
.score-none   { color: #94a3b8; background: #f8fafc; border-color: #cbd5e1; }
.tag {
    display: inline-block; padding: 0.15rem 0.6rem; margin-right: 0.3rem;
    border-radius: 999px; font-size: 0.75rem; font-weight: 500;
    background: #dbeafe; color: #1e40af;
}
.tag-sector { background: #f3e8ff; color: #6b21a8; }
</style>
"""

# ── Helpers ──────────────────────────────────────────────────────────────


@st.cache_resource
def _settings() -> Settings:
    return Settings.from_env()


@st.cache_resource
def _client() -> LLMClient:
    return build_client(_settings())


def _reset() -> None:
    for key in _SESSION_KEYS:
        st.session_state.pop(key, None)
    st.session_state["step"] = STEP_UPLOAD


def _fail(message: str) -> None:
    st.session_state["error"] = message
    st.session_state["step"] = STEP_ERROR


def _check(label: str, ok: bool) -> str:
    icon = "✅" if ok else "⬜"
    return f"{icon}  {label}"


# ── Step: Upload ─────────────────────────────────────────────────────────


def step_upload() -> None:
    st.header("Optimize your résumé")
    st.write(
        "Upload your résumé as a PDF. Paste a job description to get a match score, "
        "feedback and a rewritten résumé; leave it empty to see matching job postings only."
    )

    with st.form("upload"):
        uploaded = st.file_uploader("Résumé (PDF)", type=["pdf"])
        job_description = st.text_area(
            "Target job description (optional)",
            height=220,
            placeholder="Paste the job offer here…",
            help=f"Fewer than {MIN_JOB_DESCRIPTION_CHARS} characters switches to job-postings-only mode.",
        )
        submitted = st.form_submit_button("Analyze", type="primary", use_container_width=True)

    if not submitted:
        return
    if uploaded is None:
        st.error("Please upload a PDF résumé first.")
        return

    try:
        client = _client()
    except MissingApiKeyError as exc:
        st.error(str(exc))
        return

    with st.spinner("Reading and analyzing your résumé…"):
        try:
            outcome = analyze(uploaded.getvalue(), job_description, _settings(), client)
        except ResumeReadError as exc:
            _fail(str(exc))
        except LLMError as exc:
            log.error("Analysis failed: %s", exc)
            _fail(f"The AI service could not complete the analysis: {exc}")
        except Exception as exc:
            log.exception("Unexpected error during analysis")
            _fail(str(exc) or "An error occurred during the analysis.")
        else:
            st.session_state["outcome"] = outcome
            if outcome.rewritten is not None:
                st.session_state["markdown"] = outcome.rewritten.markdown
            st.session_state["step"] = STEP_OFFERS if outcome.offers_only else STEP_RESULTS
    st.rerun()


# ── Step: Analysis dashboard ─────────────────────────────────────────────


def step_results(outcome: AnalysisOutcome) -> None:
    analysis = outcome.analysis
    if analysis is None:
        st.session_state["step"] = STEP_OFFERS
        st.rerun()
        return

    name = outcome.resume.contact.name or "Your résumé"
    st.header(f"Analysis — {name}")

    c1, c2 = st.columns([1, 3])
    c1.metric("Match score", f"{analysis.matching_score}/100")
    with c2:
        st.progress(analysis.matching_score / 100)
        if analysis.summary_feedback:
            st.info(analysis.summary_feedback)

    c1, c2 = st.columns(2)
    with c1:
        st.subheader("Strengths")
        for point in analysis.positive_points or ("—",):
            st.markdown(f"- {point}")
    with c2:
        st.subheader("Weaknesses")
        for point in analysis.negative_points or ("—",):
            st.markdown(f"- {point}")

    st.subheader("Improvement suggestions")
    for i, suggestion in enumerate(analysis.improvement_suggestions, 1):
        st.markdown(f"{i}. {suggestion}")

    st.divider()
    c1, c2, c3 = st.columns(3)
    if c1.button("View optimized résumé", type="primary", use_container_width=True):
        st.session_state["step"] = STEP_CV
        st.rerun()
    if c2.button("Find matching job postings", use_container_width=True):
        st.session_state["step"] = STEP_OFFERS
        st.rerun()
    if c3.button("Start over", use_container_width=True):
        _reset()
        st.rerun()


# ── Step: Improved résumé ────────────────────────────────────────────────


def step_cv(rewritten: RewrittenResume) -> None:
    st.header("Optimized résumé")

    markdown = st.session_state.get("markdown", rewritten.markdown)
    tab_preview, tab_edit = st.tabs(["Preview", "Markdown"])
    with tab_preview:
        st.markdown(markdown)
    with tab_edit:
        edited = st.text_area("Edit before downloading", value=markdown, height=500)
        if edited != markdown:
            st.session_state["markdown"] = edited
            markdown = edited
        st.code(markdown, language="markdown")

    final = rewritten.with_markdown(markdown)
    c1, c2, c3, c4 = st.columns(4)
    with c1:
        try:
            st.download_button(
                "Download PDF",
                data=markdown_to_pdf(final.markdown),
                file_name=PDF_FILENAME,
                mime="application/pdf",
                type="primary",
                use_container_width=True,
            )
        except Exception as exc:
            log.exception("PDF export failed")
            st.error(f"PDF export failed: {exc}")
    c2.download_button(
        "Download Markdown",
        data=final.markdown.encode("utf-8"),
        file_name="CV_Optimized.md",
        mime="text/markdown",
        use_container_width=True,
    )
    if c3.button("Back to analysis", use_container_width=True):
        st.session_state["step"] = STEP_RESULTS
        st.rerun()
    if c4.button("Start over", use_container_width=True):
        _reset()
        st.rerun()


# ── Step: Job postings ───────────────────────────────────────────────────


def _posting_card(index: int, scored) -> None:
    p = scored.posting
    band = score_band(scored.score)
    with st.container(border=True):
        c1, c2 = st.columns([1, 6])
        c1.markdown(
            f'<div class="score-badge score-{band}">{score_label(scored.score)}</div>',
            unsafe_allow_html=True,
        )
        with c2:
            title = f"[{p.title}]({p.url})" if p.url else p.title
            st.markdown(f"**{index}. {title}**")
            meta = f"🏢 {p.company} · 📅 {p.date}"
            if p.reference:
                meta += f" · Ref: `{p.reference}`"
            st.caption(meta)
            st.markdown(
                f'<span class="tag">{p.contract_type}</span>'
                f'<span class="tag tag-sector">{p.sector}</span>',
                unsafe_allow_html=True,
            )
            for reason in scored.reasons:
                st.markdown(f"- {reason}")


def step_offers(resume: ResumeProfile) -> None:
    settings = _settings()
    st.header("Matching job postings")
    st.write(f"Postings from {settings.job_search_url} scored against your résumé.")

    matches: MatchOutcome | None = st.session_state.get("matches")
    if matches is None:
        try:
            client = _client()
        except MissingApiKeyError as exc:
            st.error(str(exc))
            return
        with st.spinner("Searching and scoring job postings…"):
            try:
                matches = find_matches(resume, settings, client)
            except Exception as exc:
                log.exception("Job matching failed")
                st.error(f"Could not retrieve job postings: {exc}")
                return
        st.session_state["matches"] = matches

    if not matches.scored:
        st.info("No job postings found at the moment.")
    else:
        st.caption(f"{len(matches.scored)} posting(s) found")
        if matches.from_examples:
            st.warning(
                "The job board could not be read directly. The postings shown are examples "
                f"based on recent listings — visit {settings.job_search_url} for live offers."
            )
        if matches.failures:
            st.warning(
                f"{matches.failures} posting(s) could not be scored and are shown without a "
                "match percentage."
            )

        tab_cards, tab_table = st.tabs(["Cards", "Table"])
        with tab_cards:
            for i, scored in enumerate(matches.scored, 1):
                _posting_card(i, scored)
        with tab_table:
            df = pd.DataFrame(
                [
                    {
                        "score": s.score or None,
                        "title": s.posting.title,
                        "company": s.posting.company,
                        "contract": s.posting.contract_type,
                        "sector": s.posting.sector,
                        "date": s.posting.date,
                        "url": s.posting.url,
                    }
                    for s in matches.scored
                ]
            )
            st.dataframe(
                df,
                use_container_width=True,
                column_config={
                    "url": st.column_config.LinkColumn("Link"),
                    "score": st.column_config.ProgressColumn(
                        "Score", min_value=0, max_value=100, format="%d%%"
                    ),
                },
                hide_index=True,
            )

        st.download_button(
            "Download list (Markdown)",
            data=build_match_report(
                matches.scored,
                from_examples=matches.from_examples,
                source_url=settings.job_search_url,
            ).encode("utf-8"),
            file_name="matching_postings.md",
            mime="text/markdown",
        )

    st.divider()
    c1, c2 = st.columns(2)
    outcome: AnalysisOutcome | None = st.session_state.get("outcome")
    if outcome is not None and not outcome.offers_only:
        if c1.button("Back to analysis", use_container_width=True):
            st.session_state["step"] = STEP_RESULTS
            st.rerun()
    if c2.button("Analyze another résumé", type="primary", use_container_width=True):
        _reset()
        st.rerun()


# ── Main ─────────────────────────────────────────────────────────────────


def _inject_css() -> None:
    st.markdown(_GLASS_CSS, unsafe_allow_html=True)


def _sidebar_status() -> None:
    settings = _settings()
    with st.sidebar:
        st.markdown("### ✨ CV Optimize")
        st.caption(f"Powered by `{settings.llm_model}`")
        st.divider()
        st.markdown("**Status**")
        st.markdown(_check("Groq API key", settings.has_api_key))
        st.markdown(_check("Job board proxy", bool(settings.job_search_proxy)))
        st.divider()
        if st.button("🗑️ Start over", use_container_width=True):
            _reset()
            st.rerun()


def main() -> None:
    st.set_page_config(page_title="CV Optimize", page_icon="✨", layout="wide")
    _inject_css()
    _sidebar_status()

    if not _settings().has_api_key:
        st.error(
            "GROQ_API_KEY is not set. Create a `.env` file with `GROQ_API_KEY=your_key` "
            "and restart the app."
        )
        return

    step = st.session_state.setdefault("step", STEP_UPLOAD)
    outcome: AnalysisOutcome | None = st.session_state.get("outcome")

    if step == STEP_ERROR:
        st.error(st.session_state.get("error") or "An unknown error occurred.")
        if st.button("Try again", type="primary"):
            _reset()
            st.rerun()
    elif step == STEP_RESULTS and outcome is not None:
        step_results(outcome)
    elif step == STEP_CV and outcome is not None and outcome.rewritten is not None:
        step_cv(outcome.rewritten)
    elif step == STEP_OFFERS and outcome is not None:
        step_offers(outcome.resume)
    else:
        step_upload()


main()

"""Presentation helpers and a Markdown report of matched postings."""
from __future__ import annotations

from datetime import datetime, timezone
from typing import Sequence
from urllib.parse import urlparse

from cvoptimize.log import get_logger
from cvoptimize.models import ScoredPosting

log = get_logger(__name__)


def score_label(score: int) -> str:
    """'N/A' for the 0 sentinel, otherwise a percentage."""
    return "N/A" if score == 0 else f"{score}%"


def score_band(score: int) -> str:
    if score == 0:
        return "none"
    if score >= 70:
        return "high"
    if score >= 50:
        return "medium"
    return "low"


def _short_url_label(url: str) -> str:
    host = (urlparse(url).hostname or "").replace("www.", "")
    parts = host.split(".")
    return parts[0].capitalize() if parts and parts[0] else "Link"


def build_match_report(
    scored: Sequence[ScoredPosting],
    *,
    from_examples: bool = False,
    source_url: str = "",
) -> str:
    date = datetime.now(timezone.utc).strftime("%Y-%m-%d")
    failed = sum(1 for s in scored if s.is_placeholder)
    lines: list[str] = [f"# Matching job postings — {date}", ""]
    lines.append(f"**{len(scored)}** postings | **{len(scored) - failed}** scored | **{failed}** without score")
    lines.append("")

    if from_examples:
        lines.append(
            "> Note: the job board could not be read, these are example postings"
            + (f" based on {source_url}" if source_url else "")
            + "."
        )
        lines.append("")

    for s in scored:
        p = s.posting
        lines.append(f"## {p.title} @ {p.company}")
        lines.append(f"- **Score:** {score_label(s.score)}")
        lines.append(f"- **Contract:** {p.contract_type} | **Sector:** {p.sector} | **Date:** {p.date}")
        if p.reference:
            lines.append(f"- **Reference:** {p.reference}")
        if s.reasons:
            lines.append(f"- **Why:** {'; '.join(s.reasons)}")
        if p.url:
            lines.append(f"- **Link:** [{_short_url_label(p.url)}]({p.url})")
        lines.append("")

    if scored:
        lines.append("---")
        lines.append("")
        lines.append("| # | Role | Company | Contract | Score |")
        lines.append("|--:|------|---------|----------|------:|")
        for i, s in enumerate(scored, 1):
            title = s.posting.title[:40] + ("…" if len(s.posting.title) > 40 else "")
            company = s.posting.company[:22] + ("…" if len(s.posting.company) > 22 else "")
            lines.append(f"| {i} | {title} | {company} | {s.posting.contract_type} | {score_label(s.score)} |")
        lines.append("")

    log.info("Built match report: %d postings, %d without score", len(scored), failed)
    return "\n".join(lines)

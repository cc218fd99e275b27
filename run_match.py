#!/usr/bin/env python3
"""Command-line entry point: analyze a résumé PDF and list matching postings."""
from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parent))

from cvoptimize.config import Settings
from cvoptimize.llm import LLMError
from cvoptimize.log import get_logger, set_console_level
from cvoptimize.report import build_match_report, score_label
from cvoptimize.resume_parser import ResumeReadError
from cvoptimize.workflow import analyze, build_client, find_matches

log = get_logger(__name__)


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("resume", type=Path, help="Résumé PDF")
    parser.add_argument(
        "--job-description",
        type=Path,
        help="Text file with the target job description (enables analysis and rewrite)",
    )
    parser.add_argument("--markdown", type=Path, help="Write the rewritten résumé here")
    parser.add_argument("--pdf", type=Path, help="Write the rewritten résumé as PDF here")
    parser.add_argument("--report", type=Path, help="Write the matching postings report here")
    parser.add_argument("--max", type=int, metavar="N", help="Maximum number of postings to score")
    parser.add_argument("--no-matching", action="store_true", help="Skip job posting matching")
    parser.add_argument("-v", "--verbose", action="store_true", help="Show debug logs on the console")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = _parse_args(argv)
    if args.verbose:
        set_console_level("DEBUG")
    settings = Settings.from_env()
    if args.max is not None:
        if args.max < 1:
            log.error("--max must be at least 1")
            return 2
        settings = replace(settings, max_postings=args.max)

    try:
        client = build_client(settings)
        job_description = (
            args.job_description.read_text(encoding="utf-8") if args.job_description else ""
        )
        outcome = analyze(args.resume, job_description, settings, client)
    except (ResumeReadError, LLMError, OSError) as exc:
        log.error("%s", exc)
        return 1

    if outcome.analysis is not None:
        log.info("Match score: %d/100", outcome.analysis.matching_score)
        for suggestion in outcome.analysis.improvement_suggestions:
            log.info("  Suggestion: %s", suggestion)

    if outcome.rewritten is not None:
        if args.markdown:
            args.markdown.write_text(outcome.rewritten.markdown, encoding="utf-8")
            log.info("Rewritten résumé → %s", args.markdown)
        if args.pdf:
            from cvoptimize.pdf_export import markdown_to_pdf

            args.pdf.write_bytes(markdown_to_pdf(outcome.rewritten.markdown))
            log.info("Rewritten résumé PDF → %s", args.pdf)

    if args.no_matching:
        return 0

    matches = find_matches(outcome.resume, settings, client)
    if matches.from_examples:
        log.warning("Job board unreachable, showing example postings")
    for i, scored in enumerate(matches.scored, 1):
        log.info(
            "%2d. [%4s] %s @ %s", i, score_label(scored.score), scored.posting.title, scored.posting.company
        )
    if args.report:
        args.report.write_text(
            build_match_report(
                matches.scored,
                from_examples=matches.from_examples,
                source_url=settings.job_search_url,
            ),
            encoding="utf-8",
        )
        log.info("Report → %s", args.report)
    return 0


if __name__ == "__main__":
    sys.exit(main())

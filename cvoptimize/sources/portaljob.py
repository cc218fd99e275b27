"""portaljob-madagascar.com: scrape the latest postings from the home page.

The site has no API and its markup is not stable, so candidates are found
with several permissive CSS selectors and every field is best effort.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import Any
from urllib.parse import urljoin, urlsplit

import requests
from bs4 import BeautifulSoup

from cvoptimize.log import get_logger
from cvoptimize.models import JobPosting
from cvoptimize.sources.base import PostingSource

log = get_logger(__name__)

CANDIDATE_SELECTOR = 'article, .job-offer, .offer-item, [class*="offer"], [class*="job"]'
_TITLE_SELECTOR = 'h2, h3, .title, [class*="title"]'
_COMPANY_SELECTOR = '.company, [class*="company"], strong'
_CONTRACT_SELECTOR = '.contract, [class*="contract"], [class*="type"]'
_SECTOR_SELECTOR = '.sector, [class*="sector"]'
_DATE_SELECTOR = '.date, [class*="date"], time'

NOT_SPECIFIED = "Not specified"
COMPANY_NOT_SPECIFIED = "Company not specified"

_REFERENCE_RE = re.compile(r"r[ée]f\s*:\s*([A-Z0-9][A-Z0-9_/-]*)", re.IGNORECASE)

_HEADERS = {
    "Accept": "text/html,application/xhtml+xml,application/xml;q=0.9,*/*;q=0.8",
    "User-Agent": "Mozilla/5.0 (X11; Linux x86_64) AppleWebKit/537.36 (KHTML, like Gecko)",
}


@dataclass
class ParseResult:
    postings: list[JobPosting] = field(default_factory=list)
    attempted: int = 0

    @property
    def accepted(self) -> int:
        return len(self.postings)


def base_origin(url: str) -> str:
    parts = urlsplit(url)
    return f"{parts.scheme}://{parts.netloc}/" if parts.netloc else url


def extract_reference(title: str) -> str | None:
    m = _REFERENCE_RE.search(title)
    return m.group(1) if m else None


def _text_of(element: Any, selector: str) -> str:
    found = element.select_one(selector)
    if found is None:
        return ""
    return " ".join(found.get_text(" ").split())


def _parse_candidate(element: Any, origin: str) -> JobPosting | None:
    title = _text_of(element, _TITLE_SELECTOR)
    if not title:
        return None

    link = element.select_one("a[href]")
    href = (link.get("href") or "").strip() if link is not None else ""

    return JobPosting(
        title=title,
        company=_text_of(element, _COMPANY_SELECTOR) or COMPANY_NOT_SPECIFIED,
        contract_type=_text_of(element, _CONTRACT_SELECTOR) or NOT_SPECIFIED,
        sector=_text_of(element, _SECTOR_SELECTOR) or NOT_SPECIFIED,
        date=_text_of(element, _DATE_SELECTOR) or date.today().strftime("%d %b %Y"),
        reference=extract_reference(title),
        url=urljoin(origin, href) if href else None,
    )


def parse_postings(html: str, max_postings: int, origin: str) -> ParseResult:
    """Parse a listing page into postings (pure, no I/O).

    Candidates without a resolvable title are dropped; an error on one
    candidate skips that candidate only. When matching elements are nested,
    the innermost one that yields a posting wins, so a wrapper around a card
    (or around the whole list) never produces a posting of its own.
    """
    result = ParseResult()
    if max_postings <= 0 or not html:
        return result

    soup = BeautifulSoup(html, "html.parser")
    parsed: dict[int, JobPosting | None] = {}

    def posting_of(element: Any) -> JobPosting | None:
        key = id(element)
        if key not in parsed:
            try:
                parsed[key] = _parse_candidate(element, origin)
            except Exception as exc:
                log.warning("Skipping unparsable posting candidate: %s", exc)
                parsed[key] = None
        return parsed[key]

    for element in soup.select(CANDIDATE_SELECTOR):
        if result.accepted >= max_postings:
            break
        result.attempted += 1
        posting = posting_of(element)
        if posting is None:
            continue
        if any(posting_of(inner) is not None for inner in element.select(CANDIDATE_SELECTOR)):
            continue
        result.postings.append(posting)

    log.debug(
        "Parsed %d posting(s) from %d candidate(s)", result.accepted, result.attempted
    )
    return result


class PortalJobSource(PostingSource):
    """Fetch the job board directly, or through a proxy URL prefix."""

    def __init__(
        self,
        url: str,
        *,
        proxy: str | None = None,
        session: requests.Session | None = None,
        timeout: float = 15.0,
    ) -> None:
        self.url = url
        self.proxy = proxy
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def name(self) -> str:
        return "proxy" if self.proxy else "direct"

    @property
    def request_url(self) -> str:
        return f"{self.proxy}{self.url}" if self.proxy else self.url

    def _fetch(self) -> str | None:
        via = self.name
        try:
            r = self.session.get(self.request_url, headers=_HEADERS, timeout=self.timeout)
        except requests.RequestException as exc:
            log.debug("Job board %s fetch failed: %s", via, exc)
            return None
        if r.status_code == 403 and self.proxy:
            log.debug("Proxy refused the request (403), it may need activation")
            return None
        if not r.ok:
            log.debug("Job board %s fetch returned HTTP %d", via, r.status_code)
            return None
        return r.text

    def search(self, limit: int = 10) -> list[JobPosting]:
        html = self._fetch()
        if html is None:
            return []
        result = parse_postings(html, limit, base_origin(self.url))
        log.info(
            "Job board (%s): %d posting(s) from %d candidate(s)",
            self.name,
            result.accepted,
            result.attempted,
        )
        return result.postings

from __future__ import annotations

from dataclasses import dataclass, field

import requests

from cvoptimize.config import Settings
from cvoptimize.log import get_logger
from cvoptimize.models import JobPosting

from .base import PostingSource
from .examples import EXAMPLE_POSTINGS, ExampleSource
from .portaljob import ParseResult, PortalJobSource, parse_postings

log = get_logger(__name__)

__all__ = [
    "PostingSource", "PortalJobSource", "ExampleSource", "EXAMPLE_POSTINGS",
    "ParseResult", "PostingBatch", "parse_postings", "fetch_postings",
]


@dataclass
class PostingBatch:
    postings: list[JobPosting] = field(default_factory=list)
    origin: str = "examples"  # "direct", "proxy" or "examples"

    @property
    def from_examples(self) -> bool:
        return self.origin == "examples"


def fetch_postings(settings: Settings, session: requests.Session | None = None) -> PostingBatch:
    """Live postings if the board can be read, else the example set.

    Tries a direct fetch, then the configured proxy; never raises for
    network or parsing trouble.
    """
    limit = settings.max_postings
    owns_session = session is None
    session = session or requests.Session()
    try:
        proxies: list[str | None] = [None]
        if settings.job_search_proxy:
            proxies.append(settings.job_search_proxy)

        for proxy in proxies:
            source = PortalJobSource(
                settings.job_search_url,
                proxy=proxy,
                session=session,
                timeout=settings.http_timeout,
            )
            postings = source.search(limit=limit)
            if postings:
                return PostingBatch(postings=postings[:limit], origin=source.name)
    finally:
        if owns_session:
            session.close()

    log.info("Job board unavailable, falling back to example postings")
    fallback = ExampleSource()
    return PostingBatch(postings=fallback.search(limit=limit), origin=fallback.name)

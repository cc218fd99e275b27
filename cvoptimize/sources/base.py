from __future__ import annotations

from abc import ABC, abstractmethod

from cvoptimize.models import JobPosting


class PostingSource(ABC):
    """Somewhere job postings come from.

    ``search`` returns at most *limit* postings and an empty list when the
    source has nothing usable; network or markup trouble must not raise.
    """

    name: str = "source"

    @abstractmethod
    def search(self, limit: int = 10) -> list[JobPosting]:
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.name}>"

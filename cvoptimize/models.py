"""Data models for résumés, job postings and match results."""
from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from typing import Any


def _text(value: Any) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _strings(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [_text(v) for v in value if _text(v)]


@dataclass(frozen=True)
class ContactInfo:
    name: str = ""
    email: str = ""
    phone: str = ""
    address: str = ""
    links: tuple[str, ...] = ()


@dataclass(frozen=True)
class EducationEntry:
    institution: str = ""
    degree: str = ""
    dates: str = ""
    description: str | None = None


@dataclass(frozen=True)
class ExperienceEntry:
    company: str = ""
    role: str = ""
    dates: str = ""
    description: str = ""


@dataclass(frozen=True)
class ResumeProfile:
    """Structured résumé data as returned by the extraction step."""

    contact: ContactInfo = field(default_factory=ContactInfo)
    summary: str = ""
    education: tuple[EducationEntry, ...] = ()
    experience: tuple[ExperienceEntry, ...] = ()
    skills: tuple[str, ...] = ()
    languages: tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ResumeProfile":
        """Build a profile from model JSON, tolerating missing or null keys."""
        contact = data.get("contactInfo") or {}
        education = [
            EducationEntry(
                institution=_text(e.get("institution")),
                degree=_text(e.get("degree")),
                dates=_text(e.get("dates")),
                description=_text(e.get("description")) or None,
            )
            for e in data.get("education") or []
            if isinstance(e, dict)
        ]
        experience = [
            ExperienceEntry(
                company=_text(e.get("company")),
                role=_text(e.get("role")),
                dates=_text(e.get("dates")),
                description=_text(e.get("description")),
            )
            for e in data.get("experience") or []
            if isinstance(e, dict)
        ]
        return cls(
            contact=ContactInfo(
                name=_text(contact.get("name")),
                email=_text(contact.get("email")),
                phone=_text(contact.get("phone")),
                address=_text(contact.get("address")),
                links=tuple(_strings(contact.get("links"))),
            ),
            summary=_text(data.get("summary")),
            education=tuple(education),
            experience=tuple(experience),
            # skills behave like a set but keep the model's order
            skills=tuple(dict.fromkeys(_strings(data.get("skills")))),
            languages=tuple(_strings(data.get("languages"))),
        )

    def to_dict(self) -> dict[str, Any]:
        """JSON-ready mapping using the same keys the model produces."""
        return {
            "contactInfo": {
                "name": self.contact.name,
                "email": self.contact.email,
                "phone": self.contact.phone,
                "address": self.contact.address,
                "links": list(self.contact.links),
            },
            "summary": self.summary,
            "education": [
                {k: v for k, v in asdict(e).items() if v is not None} for e in self.education
            ],
            "experience": [asdict(e) for e in self.experience],
            "skills": list(self.skills),
            "languages": list(self.languages),
        }


@dataclass(frozen=True)
class JobPosting:
    title: str
    company: str
    contract_type: str
    sector: str
    date: str
    reference: str | None = None
    url: str | None = None
    description: str | None = None


@dataclass(frozen=True)
class ScoredPosting:
    posting: JobPosting
    score: int
    reasons: tuple[str, ...] = ()

    @property
    def is_placeholder(self) -> bool:
        """Score 0 is reserved for postings that could not be scored."""
        return self.score == 0


@dataclass(frozen=True)
class ResumeAnalysis:
    matching_score: int
    positive_points: tuple[str, ...] = ()
    negative_points: tuple[str, ...] = ()
    improvement_suggestions: tuple[str, ...] = ()
    summary_feedback: str = ""


@dataclass(frozen=True)
class RewrittenResume:
    markdown: str
    profile: ResumeProfile

    def with_markdown(self, markdown: str) -> "RewrittenResume":
        return replace(self, markdown=markdown)

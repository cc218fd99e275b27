"""Extract structured résumé data from an uploaded PDF.

Text comes from the PDF's text layer via pypdf; the raw text is then sent
to the language model, which returns the ``RESUME_SCHEMA`` shape.
"""
from __future__ import annotations

import io
import re
from pathlib import Path
from typing import BinaryIO, Union

from pypdf import PdfReader

from cvoptimize.llm import LLMClient, LLMResponseError
from cvoptimize.log import get_logger
from cvoptimize.models import ResumeProfile
from cvoptimize.schemas import RESUME_SCHEMA

log = get_logger(__name__)

PdfSource = Union[str, Path, bytes, BinaryIO]


class ResumeReadError(ValueError):
    """The uploaded file could not be read as a PDF with a text layer."""


# ── Text extraction ──────────────────────────────────────────────────────


def _fix_spacing(text: str) -> str:
    """Re-insert spaces when PDF extraction merges words together.

    Detects the problem by checking if the space-to-character ratio is
    abnormally low, then applies heuristic space insertion.
    """
    if not text or len(text) < 50:
        return text
    space_ratio = text.count(" ") / len(text)
    if space_ratio > 0.08:
        return text

    log.debug("Low space ratio (%.2f%%), applying spacing fix", space_ratio * 100)
    fixed = re.sub(r"([a-zà-ÿ])([A-ZÀ-Ý])", r"\1 \2", text)
    fixed = re.sub(r"([a-zA-Z])(\d)", r"\1 \2", fixed)
    fixed = re.sub(r"(\d)([a-zA-Z])", r"\1 \2", fixed)
    fixed = re.sub(r"([.!?,;:])([A-Za-z])", r"\1 \2", fixed)
    return fixed


def extract_text(source: PdfSource) -> str:
    """Return the text layer of every page, one line per page."""
    if isinstance(source, (bytes, bytearray)):
        source = io.BytesIO(source)
    elif isinstance(source, Path):
        source = str(source)

    try:
        reader = PdfReader(source)
        pages = [_fix_spacing(page.extract_text() or "") for page in reader.pages]
    except Exception as exc:
        log.error("Error parsing PDF: %s", exc)
        raise ResumeReadError("Unable to read the PDF file.") from exc

    text = "\n".join(pages)
    if not text.strip():
        raise ResumeReadError(
            "No text found in the PDF. Scanned documents without a text layer are not supported."
        )
    log.info("Extracted %d characters from %d page(s)", len(text), len(pages))
    return text


# ── LLM-based extraction ────────────────────────────────────────────────

_EXTRACT_PROMPT = """\
You are an HR data-extraction expert.
Analyse the raw text below, taken from a résumé, and extract its information
as structured JSON. Keep the résumé's original language. Use an empty string
or an empty list when a field is unknown.

Résumé text:
{resume_text}
"""


def extract_resume(text: str, client: LLMClient, *, max_chars: int = 12000) -> ResumeProfile:
    """Turn raw résumé text into a ``ResumeProfile``."""
    if not text.strip():
        raise ValueError("Résumé text is empty")
    prompt = _EXTRACT_PROMPT.format(resume_text=text[:max_chars])
    data = client.complete_json(prompt, RESUME_SCHEMA, max_tokens=3000, temperature=0.1)
    if not data:
        raise LLMResponseError("Résumé extraction returned no data")
    profile = ResumeProfile.from_dict(data)
    log.info(
        "Résumé extraction complete: name=%s, skills=%d, experience=%d",
        profile.contact.name or "?",
        len(profile.skills),
        len(profile.experience),
    )
    return profile


def parse_resume(source: PdfSource, client: LLMClient, *, max_chars: int = 12000) -> ResumeProfile:
    """PDF in, ``ResumeProfile`` out."""
    return extract_resume(extract_text(source), client, max_chars=max_chars)

"""Render the rewritten Markdown résumé as a simple paginated PDF.

Layout is deliberately naive: ``#`` lines become bold headings, ``-`` lines
are indented, everything else is body text wrapped to the page width.
"""
from __future__ import annotations

import re
from dataclasses import dataclass

import fitz  # PyMuPDF

from cvoptimize.log import get_logger

log = get_logger(__name__)

PDF_FILENAME = "CV_Optimized.pdf"

MM = 72 / 25.4
PAGE_WIDTH, PAGE_HEIGHT = fitz.paper_size("a4")
MARGIN = 15 * MM
TOP = 15 * MM
BOTTOM = 280 * MM
BULLET_INDENT = 2 * MM

BODY_FONT, BOLD_FONT = "helv", "hebo"
BODY_SIZE, HEADING_SIZE = 10, 12
BODY_ADVANCE, HEADING_ADVANCE = 5 * MM, 7 * MM

_EMPHASIS_RE = re.compile(r"(\*\*|__)(.+?)\1")


@dataclass(frozen=True)
class PlacedLine:
    x: float
    y: float
    text: str
    font: str
    size: float


def wrap_text(text: str, width: float, font: str = BODY_FONT, size: float = BODY_SIZE) -> list[str]:
    """Greedy word wrap measured with the real font metrics."""
    if not text.strip():
        return [""]

    def fits(s: str) -> bool:
        return fitz.get_text_length(s, fontname=font, fontsize=size) <= width

    lines: list[str] = []
    current = ""
    for word in text.split():
        candidate = f"{current} {word}" if current else word
        if fits(candidate):
            current = candidate
            continue
        if current:
            lines.append(current)
        # a single word wider than the line is split by characters
        while len(word) > 1 and not fits(word):
            cut = len(word) - 1
            while cut > 1 and not fits(word[:cut]):
                cut -= 1
            lines.append(word[:cut])
            word = word[cut:]
        current = word
    lines.append(current)
    return lines


def layout(markdown: str) -> list[list[PlacedLine]]:
    """Place every line on a page; returns one list of lines per page."""
    text_width = PAGE_WIDTH - 2 * MARGIN
    pages: list[list[PlacedLine]] = [[]]
    y = TOP

    def place(x: float, text: str, font: str, size: float, advance: float) -> None:
        nonlocal y
        if y > BOTTOM:
            pages.append([])
            y = TOP
        pages[-1].append(PlacedLine(x, y, text, font, size))
        y += advance

    for raw in markdown.splitlines():
        stripped = _EMPHASIS_RE.sub(r"\2", raw.strip())
        if stripped.startswith("#"):
            heading = stripped.replace("#", "").strip()
            for part in wrap_text(heading, text_width, BOLD_FONT, HEADING_SIZE):
                place(MARGIN, part, BOLD_FONT, HEADING_SIZE, HEADING_ADVANCE)
        elif stripped.startswith("-"):
            for part in wrap_text(stripped, text_width - BULLET_INDENT):
                place(MARGIN + BULLET_INDENT, part, BODY_FONT, BODY_SIZE, BODY_ADVANCE)
        else:
            for part in wrap_text(stripped, text_width):
                place(MARGIN, part, BODY_FONT, BODY_SIZE, BODY_ADVANCE)
    return pages


def markdown_to_pdf(markdown: str) -> bytes:
    pages = layout(markdown)
    doc = fitz.open()
    try:
        for lines in pages:
            page = doc.new_page(width=PAGE_WIDTH, height=PAGE_HEIGHT)
            for line in lines:
                if line.text:
                    page.insert_text(
                        (line.x, line.y), line.text, fontname=line.font, fontsize=line.size
                    )
        data = doc.tobytes()
    finally:
        doc.close()
    log.info("Exported résumé PDF: %d page(s), %d bytes", len(pages), len(data))
    return data

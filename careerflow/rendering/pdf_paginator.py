"""Paginate projected resume Markdown into a fixed A4 PDF.

Layout is computed first as a list of pages of draw operations (in
millimetres, measured down from the top edge), then drawn with ReportLab.
Only the line-level markers produced by the projector are interpreted.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from enum import Enum
from io import BytesIO
from pathlib import Path
from typing import Dict, List, Optional, Union

from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

EXPORT_FILENAME = "resume.pdf"

LINE_HEIGHT = 5.0
BLOCK_GAP = 2.0
BLANK_GAP = 4.0
RULE_GAP = 6.0
HEADING_ADVANCE = 8.0
DATE_ADVANCE = 5.0
BULLET_INDENT = 5.0
BULLET_GLYPH = "•"
RULE_GREY = 150 / 255

_DATE_RANGE_RE = re.compile(r"^\d{4}\s*-\s*\d{4}$")


class LineKind(str, Enum):
    NAME = "name"
    TITLE = "title"
    CONTACT = "contact"
    RULE = "rule"
    HEADING = "heading"
    TWO_COLUMN = "two_column"
    DATE_RANGE = "date_range"
    BULLET = "bullet"
    TEXT = "text"


@dataclass(frozen=True)
class FontSpec:
    name: str
    size: float


FONTS: Dict[LineKind, FontSpec] = {
    LineKind.NAME: FontSpec("Helvetica-Bold", 16),
    LineKind.TITLE: FontSpec("Helvetica", 12),
    LineKind.CONTACT: FontSpec("Helvetica", 10),
    LineKind.HEADING: FontSpec("Helvetica-Bold", 14),
    LineKind.TWO_COLUMN: FontSpec("Helvetica-Bold", 12),
    LineKind.DATE_RANGE: FontSpec("Helvetica", 10),
    LineKind.BULLET: FontSpec("Helvetica", 12),
    LineKind.TEXT: FontSpec("Helvetica", 12),
}

# name, title, contact line: consumed positionally with fixed advances
_HEADER_LINES = (
    (LineKind.NAME, 6.0),
    (LineKind.TITLE, 5.0),
    (LineKind.CONTACT, 8.0),
)


@dataclass(frozen=True)
class PageGeometry:
    """Page size and margins in millimetres."""

    width: float = 210.0
    height: float = 297.0
    margin: float = 15.0

    @property
    def content_width(self) -> float:
        return self.width - 2 * self.margin

    @property
    def bottom_limit(self) -> float:
        return self.height - self.margin


A4 = PageGeometry()


@dataclass
class DrawOp:
    """One element to draw. ``y`` is the first baseline, from the top edge."""

    kind: LineKind
    y: float
    x: float
    lines: List[str] = field(default_factory=list)

    @property
    def font(self) -> FontSpec:
        return FONTS.get(self.kind, FONTS[LineKind.TEXT])


@dataclass
class Page:
    number: int
    ops: List[DrawOp] = field(default_factory=list)


@dataclass
class DocumentLayout:
    geometry: PageGeometry
    pages: List[Page] = field(default_factory=list)

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def ops(self) -> List[DrawOp]:
        return [op for page in self.pages for op in page.ops]


# ---------------------------------------------------------------------------
# Classification and layout
# ---------------------------------------------------------------------------


def classify_line(line: str) -> LineKind:
    """Classify a trimmed, non-empty body line. Earlier rules win."""
    if line == "---":
        return LineKind.RULE
    if line.startswith("## "):
        return LineKind.HEADING
    if " | " in line and not line.startswith("-"):
        return LineKind.TWO_COLUMN
    if _DATE_RANGE_RE.match(line):
        return LineKind.DATE_RANGE
    if line.startswith("- "):
        return LineKind.BULLET
    return LineKind.TEXT


def wrap_text(text: str, font: FontSpec, max_width: float) -> List[str]:
    """Word-wrap *text* to *max_width* millimetres using the font's metrics."""
    return simpleSplit(text, font.name, font.size, max_width * mm) or [text]


def layout_document(text: str, geometry: PageGeometry = A4) -> DocumentLayout:
    """Compute pages of draw operations for projected resume text.

    The page check runs after each drawn element; when the cursor has
    passed the bottom limit, the next drawn element opens a new page.
    A block taller than one page is not split.
    """
    layout = DocumentLayout(geometry=geometry, pages=[Page(number=1)])
    lines = text.split("\n")
    y = geometry.margin
    break_pending = False
    header_done = False
    i = 0

    while i < len(lines):
        line = lines[i].strip()
        if not line:
            y += BLANK_GAP
            i += 1
            continue

        if break_pending:
            layout.pages.append(Page(number=len(layout.pages) + 1))
            break_pending = False
        page = layout.pages[-1]

        if not header_done:
            for offset, (kind, advance) in enumerate(_HEADER_LINES):
                header_text = line if offset == 0 else _line_at(lines, i + offset)
                if header_text:
                    page.ops.append(DrawOp(kind=kind, y=y, x=geometry.margin, lines=[header_text]))
                y += advance
            i += len(_HEADER_LINES)
            header_done = True
        else:
            y = _layout_body_line(page, line, y, geometry)
            i += 1

        if y > geometry.bottom_limit:
            break_pending = True
            y = geometry.margin

    logger.debug("Laid out resume: %d line(s), %d page(s)", len(lines), layout.page_count)
    return layout


def _line_at(lines: List[str], index: int) -> str:
    return lines[index].strip() if index < len(lines) else ""


def _layout_body_line(page: Page, line: str, y: float, geometry: PageGeometry) -> float:
    kind = classify_line(line)
    margin = geometry.margin

    if kind == LineKind.RULE:
        page.ops.append(DrawOp(kind=kind, y=y, x=margin))
        return y + RULE_GAP

    if kind == LineKind.HEADING:
        page.ops.append(DrawOp(kind=kind, y=y, x=margin, lines=[line[3:].strip()]))
        return y + HEADING_ADVANCE

    if kind == LineKind.DATE_RANGE:
        page.ops.append(DrawOp(kind=kind, y=y, x=margin, lines=[line]))
        return y + DATE_ADVANCE

    if kind == LineKind.BULLET:
        wrapped = wrap_text(line[2:].strip(), FONTS[kind], geometry.content_width - BULLET_INDENT)
        page.ops.append(DrawOp(kind=kind, y=y, x=margin + BULLET_INDENT, lines=wrapped))
        return y + len(wrapped) * LINE_HEIGHT + BLOCK_GAP

    wrapped = wrap_text(line, FONTS[kind], geometry.content_width)
    page.ops.append(DrawOp(kind=kind, y=y, x=margin, lines=wrapped))
    return y + len(wrapped) * LINE_HEIGHT + BLOCK_GAP


# ---------------------------------------------------------------------------
# Drawing
# ---------------------------------------------------------------------------


def render_pdf(text: str, geometry: PageGeometry = A4, title: Optional[str] = None) -> bytes:
    """Render projected resume text to PDF bytes."""
    layout = layout_document(text, geometry)
    buffer = BytesIO()
    pdf = canvas.Canvas(buffer, pagesize=(geometry.width * mm, geometry.height * mm))
    pdf.setTitle(title or "Resume")

    for index, page in enumerate(layout.pages):
        if index:
            pdf.showPage()
        for op in page.ops:
            _draw(pdf, op, geometry)

    pdf.save()
    return buffer.getvalue()


def write_pdf(text: str, directory: Union[str, Path], geometry: PageGeometry = A4) -> Path:
    """Render *text* and write it to ``<directory>/resume.pdf``."""
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    path = target_dir / EXPORT_FILENAME
    path.write_bytes(render_pdf(text, geometry))
    logger.info("Wrote %s (%d bytes)", path, path.stat().st_size)
    return path


def _draw(pdf: canvas.Canvas, op: DrawOp, geometry: PageGeometry) -> None:
    top = geometry.height * mm

    if op.kind == LineKind.RULE:
        pdf.setStrokeColorRGB(RULE_GREY, RULE_GREY, RULE_GREY)
        pdf.line(geometry.margin * mm, top - op.y * mm, (geometry.width - geometry.margin) * mm, top - op.y * mm)
        return

    font = op.font
    pdf.setFont(font.name, font.size)
    if op.kind == LineKind.BULLET:
        pdf.drawString(geometry.margin * mm, top - op.y * mm, BULLET_GLYPH)
    for offset, text in enumerate(op.lines):
        pdf.drawString(op.x * mm, top - (op.y + offset * LINE_HEIGHT) * mm, text)

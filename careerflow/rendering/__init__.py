"""PDF export of projected resume text."""

from .pdf_paginator import (
    A4,
    EXPORT_FILENAME,
    DocumentLayout,
    DrawOp,
    LineKind,
    Page,
    PageGeometry,
    classify_line,
    layout_document,
    render_pdf,
    wrap_text,
    write_pdf,
)

__all__ = [
    "A4",
    "EXPORT_FILENAME",
    "DocumentLayout",
    "DrawOp",
    "LineKind",
    "Page",
    "PageGeometry",
    "classify_line",
    "layout_document",
    "render_pdf",
    "wrap_text",
    "write_pdf",
]

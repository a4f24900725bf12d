"""Helpers for configuring Unicode-capable fonts in ReportLab PDFs."""

from __future__ import annotations

import logging
from pathlib import Path

logger = logging.getLogger(__name__)

FONT_NAME: str = "BakeryUnicode"
FONT_CANDIDATES: list[str] = [
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    r"C:\Windows\Fonts\arial.ttf",
]

_fallback_logged = False


def find_unicode_ttf(candidates: list[str] | None = None) -> str | None:
    """Return first existing font path."""
    for candidate in candidates or FONT_CANDIDATES:
        if Path(candidate).exists():
            return candidate
    return None


def register_pdf_font() -> str:
    """Register a Unicode font for ReportLab and return the font name to use."""
    global _fallback_logged

    font_path = find_unicode_ttf()
    if font_path is None:
        if not _fallback_logged:
            logger.warning("No Unicode TTF font found; falling back to Helvetica for fulfillment sheets.")
            _fallback_logged = True
        return "Helvetica"

    from reportlab.pdfbase import pdfmetrics
    from reportlab.pdfbase.ttfonts import TTFont

    if FONT_NAME not in pdfmetrics.getRegisteredFontNames():
        pdfmetrics.registerFont(TTFont(FONT_NAME, font_path))
    return FONT_NAME

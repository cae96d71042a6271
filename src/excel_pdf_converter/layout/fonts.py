"""Font lookup and text measurement for layout and rendering.

A ``FontRegistry`` is the rendering context shared by the column-width solver
and the PDF renderer. It is always passed explicitly; nothing in the layout
engine looks fonts up from module state.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Protocol

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont

from excel_pdf_converter.grid import FontStyle
from excel_pdf_converter.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_TEXT_COLOR = "#000000"


class FontVariant(str, Enum):
    """Face of the single font family used for every cell."""

    REGULAR = "regular"
    BOLD = "bold"
    ITALIC = "italic"
    BOLD_ITALIC = "bold-italic"


def select_variant(font: FontStyle | None) -> FontVariant:
    """Pick the face from a cell's bold/italic flags."""
    if font is None:
        return FontVariant.REGULAR
    if font.bold and font.italic:
        return FontVariant.BOLD_ITALIC
    if font.bold:
        return FontVariant.BOLD
    if font.italic:
        return FontVariant.ITALIC
    return FontVariant.REGULAR


class TextMeasurer(Protocol):
    """Anything that can report the rendered width of a string in points."""

    def string_width(self, text: str, variant: FontVariant, size: float) -> float: ...


# Standard PDF fonts, always available to reportlab without embedding.
BUILTIN_FACES: dict[FontVariant, str] = {
    FontVariant.REGULAR: "Helvetica",
    FontVariant.BOLD: "Helvetica-Bold",
    FontVariant.ITALIC: "Helvetica-Oblique",
    FontVariant.BOLD_ITALIC: "Helvetica-BoldOblique",
}


@dataclass(frozen=True)
class FontRegistry:
    """Maps font variants to reportlab font names and measures text."""

    faces: dict[FontVariant, str]
    family: str = "Helvetica"

    @classmethod
    def builtin(cls) -> FontRegistry:
        return cls(faces=dict(BUILTIN_FACES))

    @classmethod
    def from_ttf_files(
        cls,
        family: str,
        regular: str | Path,
        bold: str | Path,
        italic: str | Path,
        bold_italic: str | Path,
    ) -> FontRegistry:
        """Register four TrueType faces with reportlab and return a registry.

        Raises:
            reportlab.pdfbase.ttfonts.TTFError: If a file is not a usable font.
            FileNotFoundError: If a font file does not exist.
        """
        paths = {
            FontVariant.REGULAR: regular,
            FontVariant.BOLD: bold,
            FontVariant.ITALIC: italic,
            FontVariant.BOLD_ITALIC: bold_italic,
        }
        faces: dict[FontVariant, str] = {}
        for variant, path in paths.items():
            name = f"{family}-{variant.value}"
            if name not in pdfmetrics.getRegisteredFontNames():
                pdfmetrics.registerFont(TTFont(name, str(path)))
                logger.debug("Registered TrueType font", name=name, path=path)
            faces[variant] = name
        return cls(faces=faces, family=family)

    def font_name(self, variant: FontVariant) -> str:
        return self.faces[variant]

    def string_width(self, text: str, variant: FontVariant, size: float) -> float:
        """Width of ``text`` in points at ``size``."""
        return pdfmetrics.stringWidth(text, self.faces[variant], size)

    def ascent(self, variant: FontVariant, size: float) -> float:
        """Distance from baseline to the top of the face at ``size``."""
        return pdfmetrics.getAscent(self.faces[variant], size)

"""PDF rendering backend for paint plans, built on reportlab."""

from __future__ import annotations

import io
from dataclasses import dataclass

from PIL import Image, UnidentifiedImageError
from reportlab.lib.colors import HexColor
from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from excel_pdf_converter.layout.fonts import FontRegistry, FontVariant
from excel_pdf_converter.layout.paint import (
    DrawText,
    FillRect,
    PaintPlan,
    PlaceImage,
    StartPage,
    StrokeLine,
)
from excel_pdf_converter.utils.exceptions import RenderBackendError
from excel_pdf_converter.utils.logging import get_logger

logger = get_logger(__name__)

ELLIPSIS = "…"


@dataclass(frozen=True)
class RenderedDocument:
    content: bytes
    page_count: int


class PdfRenderer:
    """Serialize a ``PaintPlan`` into PDF bytes.

    Paint plans use a top-left origin; reportlab draws from the bottom-left,
    so every y coordinate is flipped against the current page height.
    """

    def __init__(self, fonts: FontRegistry | None = None, title: str | None = None) -> None:
        self._fonts = fonts or FontRegistry.builtin()
        self._title = title

    def render(self, plan: PaintPlan) -> RenderedDocument:
        """Render the plan to an in-memory PDF.

        Raises:
            RenderBackendError: If reportlab fails while drawing or saving.
        """
        buffer = io.BytesIO()
        page_number = 0
        try:
            pdf = canvas.Canvas(buffer, pageCompression=1)
            if self._title:
                pdf.setTitle(self._title)
            page_height = 0.0
            for command in plan:
                match command:
                    case StartPage(width=width, height=height):
                        if page_number > 0:
                            pdf.showPage()
                        page_number += 1
                        page_height = height
                        pdf.setPageSize((width, height))
                    case FillRect():
                        self._fill_rect(pdf, command, page_height)
                    case StrokeLine():
                        self._stroke_line(pdf, command, page_height)
                    case DrawText():
                        self._draw_text(pdf, command, page_height)
                    case PlaceImage():
                        self._place_image(pdf, command, page_height)
            if page_number == 0:
                raise RenderBackendError("Paint plan contains no pages")
            pdf.showPage()
            pdf.save()
        except RenderBackendError:
            raise
        except Exception as e:
            raise RenderBackendError(
                f"Error rendering PDF: {e}", page_number=page_number or None
            ) from e

        content = buffer.getvalue()
        logger.debug("PDF rendered", pages=page_number, size_bytes=len(content))
        return RenderedDocument(content=content, page_count=page_number)

    # ------------------------------------------------------------------ #
    # Drawing helpers
    # ------------------------------------------------------------------ #

    @staticmethod
    def _fill_rect(pdf: canvas.Canvas, command: FillRect, page_height: float) -> None:
        pdf.setFillColor(HexColor(command.color))
        pdf.rect(
            command.x,
            page_height - command.y - command.height,
            command.width,
            command.height,
            stroke=0,
            fill=1,
        )

    @staticmethod
    def _stroke_line(pdf: canvas.Canvas, command: StrokeLine, page_height: float) -> None:
        pdf.setStrokeColor(HexColor(command.color))
        pdf.setLineWidth(command.line_width)
        pdf.line(
            command.x1,
            page_height - command.y1,
            command.x2,
            page_height - command.y2,
        )

    def _draw_text(self, pdf: canvas.Canvas, command: DrawText, page_height: float) -> None:
        if not command.text:
            return
        font_name = self._fonts.font_name(command.variant)
        text = command.text
        if command.ellipsis:
            text = self._fit_text(text, command.variant, command.size, command.width)
            if not text:
                return

        pdf.setFont(font_name, command.size)
        pdf.setFillColor(HexColor(command.color))
        baseline = page_height - command.y - self._fonts.ascent(
            command.variant, command.size
        )
        if command.align == "center":
            pdf.drawCentredString(command.x + command.width / 2, baseline, text)
        elif command.align == "right":
            pdf.drawRightString(command.right, baseline, text)
        else:
            pdf.drawString(command.x, baseline, text)

    def _fit_text(
        self, text: str, variant: FontVariant, size: float, max_width: float
    ) -> str:
        """Truncate ``text`` with an ellipsis until it fits ``max_width``."""
        if self._fonts.string_width(text, variant, size) <= max_width:
            return text
        trimmed = text
        while trimmed:
            trimmed = trimmed[:-1]
            candidate = trimmed + ELLIPSIS
            if self._fonts.string_width(candidate, variant, size) <= max_width:
                return candidate
        return ""

    @staticmethod
    def _place_image(pdf: canvas.Canvas, command: PlaceImage, page_height: float) -> None:
        try:
            with Image.open(io.BytesIO(command.data)) as source:
                source.load()
                image = source if source.mode in ("RGB", "RGBA", "L") else source.convert("RGB")
                reader = ImageReader(image)
                pdf.drawImage(
                    reader,
                    command.x,
                    page_height - command.y - command.height,
                    width=command.width,
                    height=command.height,
                    mask="auto",
                )
        except (UnidentifiedImageError, OSError) as e:
            logger.warning("Skipping undecodable image", error=str(e))

from __future__ import annotations

import io

import pytest
from PIL import Image

from excel_pdf_converter.grid import (
    Cell,
    CellStyle,
    FontStyle,
    Grid,
    Number,
    Text,
)
from excel_pdf_converter.layout.fonts import FontVariant
from excel_pdf_converter.layout.options import LayoutOptions


class FixedWidthMeasurer:
    """Measures every character as half the font size wide."""

    def string_width(self, text: str, variant: FontVariant, size: float) -> float:
        return len(text) * size * 0.5


@pytest.fixture
def measurer() -> FixedWidthMeasurer:
    return FixedWidthMeasurer()


@pytest.fixture
def options() -> LayoutOptions:
    return LayoutOptions()


@pytest.fixture
def small_grid() -> Grid:
    """Two rows: a bold header and one data row."""
    bold = CellStyle(font=FontStyle(bold=True))
    return Grid.from_rows(
        [
            [Cell(Text("Name"), bold), Cell(Text("Age"), bold)],
            [Cell(Text("Alice")), Cell(Number(30))],
        ]
    )


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (40, 20), color=(200, 30, 30)).save(buffer, format="PNG")
    return buffer.getvalue()

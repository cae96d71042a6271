"""Dataclasses representing a decoded worksheet grid.

The grid is produced once by the workbook reader and treated as immutable by
the layout engine. Cell values are an explicit tagged union; every variant is a
frozen dataclass so the text resolver can pattern-match on them.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any


@dataclass(frozen=True)
class CellRef:
    """1-based (row, column) coordinate of a cell."""

    row: int
    col: int


# ---------------------------------------------------------------------- #
# Cell values
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class Empty:
    """A cell with no value."""


@dataclass(frozen=True)
class Text:
    text: str


@dataclass(frozen=True)
class Number:
    """A numeric value with the cell's number-format string."""

    value: float
    format_hint: str = ""


@dataclass(frozen=True)
class RichText:
    """Ordered text runs; styling of individual runs is not rendered."""

    runs: tuple[str, ...]


@dataclass(frozen=True)
class FormulaResult:
    """A formula cell with whatever the workbook cached for it.

    Attributes:
        evaluated: The cached result, or None when the workbook holds none.
        cached_text: Display text cached alongside the formula, if any.
        error_code: Error code without the leading ``#`` (e.g. ``div/0!``).
        formula: Formula source without the leading ``=``.
        shared: Whether the formula is a shared-formula follower.
        format_hint: Number format applied to numeric results.
    """

    evaluated: Any = None
    cached_text: str = ""
    error_code: str | None = None
    formula: str = ""
    shared: bool = False
    format_hint: str = ""


@dataclass(frozen=True)
class Hyperlink:
    display_text: str
    target: str | None = None


@dataclass(frozen=True)
class Date:
    """A date value as an ISO 8601 literal (``YYYY-MM-DDTHH:mm:ss.sssZ``)."""

    iso: str


@dataclass(frozen=True)
class RawValue:
    """Any other collaborator value that has no dedicated variant."""

    raw: Any


CellValue = Empty | Text | Number | RichText | FormulaResult | Hyperlink | Date | RawValue

EMPTY = Empty()


# ---------------------------------------------------------------------- #
# Styles
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class FontStyle:
    """Font attributes of a cell. Unset values fall back to layout defaults."""

    size: float | None = None
    bold: bool = False
    italic: bool = False
    color: str | None = None


@dataclass(frozen=True)
class BorderSide:
    style: str | None = None
    color: str | None = None

    @property
    def is_drawn(self) -> bool:
        """Whether the side has a style other than ``none``."""
        return bool(self.style) and self.style.lower() != "none"


@dataclass(frozen=True)
class BorderSet:
    top: BorderSide = field(default_factory=BorderSide)
    left: BorderSide = field(default_factory=BorderSide)
    bottom: BorderSide = field(default_factory=BorderSide)
    right: BorderSide = field(default_factory=BorderSide)


@dataclass(frozen=True)
class CellStyle:
    """Visual style of a cell.

    Attributes:
        font: Font attributes, or None when the cell declares no font.
        fill_color: Solid background as ``#RRGGBB``.
        border: Per-side border styles.
        horizontal: ``left``, ``center`` or ``right``; None means left.
    """

    font: FontStyle | None = None
    fill_color: str | None = None
    border: BorderSet = field(default_factory=BorderSet)
    horizontal: str | None = None


DEFAULT_STYLE = CellStyle()


# ---------------------------------------------------------------------- #
# Cells, merges, images and the grid
# ---------------------------------------------------------------------- #


@dataclass(frozen=True)
class Cell:
    """A single grid cell.

    ``rendered_text`` is the display text the reading collaborator supplies
    (possibly empty); ``display_text`` is derived by the text resolver.
    """

    value: CellValue = EMPTY
    style: CellStyle = DEFAULT_STYLE
    rendered_text: str = ""
    display_text: str = ""


EMPTY_CELL = Cell()


@dataclass(frozen=True)
class MergeRegion:
    """Inclusive, 1-based merged range anchored at (top, left)."""

    top: int
    left: int
    bottom: int
    right: int

    @property
    def anchor(self) -> CellRef:
        return CellRef(self.top, self.left)

    @property
    def num_rows(self) -> int:
        return self.bottom - self.top + 1

    @property
    def num_cols(self) -> int:
        return self.right - self.left + 1

    def contains(self, row: int, col: int) -> bool:
        return self.top <= row <= self.bottom and self.left <= col <= self.right


@dataclass(frozen=True)
class EmbeddedImage:
    """An image anchored at a 0-based top-left cell.

    Attributes:
        data: Encoded image bytes (PNG, JPEG, ...).
        col: 0-based anchor column.
        row: 0-based anchor row.
        width_px: Displayed width in pixels.
        height_px: Displayed height in pixels.
    """

    data: bytes
    col: int
    row: int
    width_px: float
    height_px: float


@dataclass(frozen=True)
class Grid:
    """A worksheet as rows of cells with fixed dimensions."""

    rows: tuple[tuple[Cell, ...], ...]
    total_rows: int
    total_cols: int
    merges: tuple[MergeRegion, ...] = ()
    images: tuple[EmbeddedImage, ...] = ()
    name: str = "Sheet1"

    @classmethod
    def from_rows(
        cls,
        rows: list[list[Cell]],
        merges: list[MergeRegion] | None = None,
        images: list[EmbeddedImage] | None = None,
        total_cols: int | None = None,
        name: str = "Sheet1",
    ) -> Grid:
        """Build a grid, padding short rows with empty cells."""
        width = total_cols
        if width is None:
            width = max((len(row) for row in rows), default=0)
        padded = tuple(
            tuple(row[:width]) + (EMPTY_CELL,) * max(0, width - len(row))
            for row in rows
        )
        return cls(
            rows=padded,
            total_rows=len(padded),
            total_cols=width,
            merges=tuple(merges or ()),
            images=tuple(images or ()),
            name=name,
        )

    def cell(self, row: int, col: int) -> Cell:
        """Return the cell at 1-based (row, col)."""
        return self.rows[row - 1][col - 1]

    def resolve_text(self, fixed_decimal_places: int = 2) -> Grid:
        """Return a copy of the grid with every ``display_text`` resolved."""
        from excel_pdf_converter.layout.cell_text import resolve_cell_text

        rows = tuple(
            tuple(
                replace(
                    cell,
                    display_text=resolve_cell_text(
                        cell.value,
                        rendered_text=cell.rendered_text,
                        fixed_decimal_places=fixed_decimal_places,
                    ),
                )
                for cell in row
            )
            for row in self.rows
        )
        return replace(self, rows=rows)

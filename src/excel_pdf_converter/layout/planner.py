"""Row placement, pagination and image positioning.

The planner walks the grid once, top to bottom, and assigns every drawn cell
an absolute rectangle in points (top-left origin). Merge anchors receive the
rectangle of their whole region; secondary cells only advance the cursor.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from excel_pdf_converter.grid import Cell, EmbeddedImage, Grid
from excel_pdf_converter.layout.column_widths import span_width, table_width
from excel_pdf_converter.layout.merges import Anchor, MergeMap, Secondary
from excel_pdf_converter.layout.options import LayoutOptions
from excel_pdf_converter.utils.exceptions import ImagePlacementError
from excel_pdf_converter.utils.logging import get_logger

logger = get_logger(__name__)

POINTS_PER_PIXEL = 0.75
# Slack below the last row and below the table when sizing a single page.
TABLE_BOTTOM_PADDING = 10.0
PAGE_BOTTOM_ALLOWANCE = 40.0


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True)
class CellPlacement:
    """A drawn cell (ordinary or merge anchor) and its rectangle."""

    row: int
    col: int
    rect: Rect
    cell: Cell
    merged: bool = False


@dataclass(frozen=True)
class ImagePlacement:
    index: int
    rect: Rect
    data: bytes


@dataclass(frozen=True)
class PlacedPage:
    number: int
    width: float
    height: float
    images: tuple[ImagePlacement, ...]
    cells: tuple[CellPlacement, ...]


@dataclass(frozen=True)
class PageGeometry:
    """Page size and row metrics used by the planner."""

    page_width: float
    page_height: float
    margin: float
    row_height: float
    paginate: bool = False


@dataclass(frozen=True)
class SheetLayout:
    pages: tuple[PlacedPage, ...]
    widths: tuple[float, ...]
    geometry: PageGeometry

    @property
    def page_count(self) -> int:
        return len(self.pages)


def compute_page_geometry(
    widths: Sequence[float],
    total_rows: int,
    options: LayoutOptions | None = None,
) -> PageGeometry:
    """Size the page to fit the table, within the configured limits.

    Without pagination the page holds the whole table. Requested pagination
    uses ``paginated_page_height``. A height above ``max_page_height`` is
    capped and turns pagination on; a width above ``max_page_width`` is
    capped. With ``enforce_minimum_size`` both dimensions are raised to the
    configured minimums.
    """
    opts = options or LayoutOptions()
    table_height = total_rows * opts.row_height + TABLE_BOTTOM_PADDING
    page_width = table_width(widths) + opts.margin * 2
    page_height = table_height + opts.margin * 2 + PAGE_BOTTOM_ALLOWANCE
    paginate = opts.enable_pagination

    if paginate:
        page_height = opts.paginated_page_height

    if page_width > opts.max_page_width:
        logger.warning(
            "Table wider than maximum page width, capping",
            page_width=f"{page_width:.2f}",
            max_page_width=opts.max_page_width,
        )
        page_width = opts.max_page_width

    if page_height > opts.max_page_height:
        if not paginate:
            logger.info(
                "Table taller than maximum page height, enabling pagination",
                page_height=f"{page_height:.2f}",
                max_page_height=opts.max_page_height,
            )
        page_height = opts.max_page_height
        paginate = True

    if opts.enforce_minimum_size:
        page_width = max(page_width, opts.min_page_width)
        page_height = max(page_height, opts.min_page_height)

    return PageGeometry(
        page_width=page_width,
        page_height=page_height,
        margin=opts.margin,
        row_height=opts.row_height,
        paginate=paginate,
    )


def place_images(
    images: Sequence[EmbeddedImage],
    widths: Sequence[float],
    geometry: PageGeometry,
) -> tuple[ImagePlacement, ...]:
    """Position images by their 0-based anchor cell; unplaceable ones are skipped."""
    placements: list[ImagePlacement] = []
    for index, image in enumerate(images):
        try:
            placements.append(_place_image(index, image, widths, geometry))
        except ImagePlacementError as e:
            logger.warning("Skipping image", error=e.message, **e.details)
    return tuple(placements)


def _place_image(
    index: int,
    image: EmbeddedImage,
    widths: Sequence[float],
    geometry: PageGeometry,
) -> ImagePlacement:
    if not image.data:
        raise ImagePlacementError("Image has no data", image_index=index)
    if image.col < 0 or image.row < 0:
        raise ImagePlacementError(
            "Image anchor is outside the sheet",
            image_index=index,
            details={"col": image.col, "row": image.row},
        )
    width = image.width_px * POINTS_PER_PIXEL
    height = image.height_px * POINTS_PER_PIXEL
    if width <= 0 or height <= 0:
        raise ImagePlacementError(
            "Image has no extent",
            image_index=index,
            details={"width_px": image.width_px, "height_px": image.height_px},
        )
    x = geometry.margin + sum(widths[: image.col])
    y = geometry.margin + image.row * geometry.row_height
    return ImagePlacement(index=index, rect=Rect(x, y, width, height), data=image.data)


def plan_pages(
    grid: Grid,
    merge_map: MergeMap,
    widths: Sequence[float],
    geometry: PageGeometry,
) -> SheetLayout:
    """Place every drawn cell and image, breaking pages when paginating.

    Before each row, if pagination is on and ``y + row_height`` would pass
    ``page_height - margin``, a new page starts with ``y`` back at the top
    margin. The check uses the single row height even for rows that anchor a
    taller merge, so such a merge can run past the page bottom.

    A page never breaks before its first row. Compared with checking every
    row, this only differs when a page is shorter than two margins plus one
    row: that row is placed past the bottom margin instead of leaving an
    empty page behind.
    """
    margin = geometry.margin
    row_height = geometry.row_height
    limit = geometry.page_height - margin

    images = place_images(grid.images, widths, geometry)
    pages: list[PlacedPage] = []
    cells: list[CellPlacement] = []
    rows_on_page = 0
    y = margin

    def close_page() -> None:
        pages.append(
            PlacedPage(
                number=len(pages) + 1,
                width=geometry.page_width,
                height=geometry.page_height,
                images=images if not pages else (),
                cells=tuple(cells),
            )
        )

    for row_index, row in enumerate(grid.rows):
        row_number = row_index + 1
        if geometry.paginate and rows_on_page > 0 and y + row_height > limit:
            close_page()
            logger.debug("Page break", before_row=row_number, page=len(pages) + 1)
            cells = []
            rows_on_page = 0
            y = margin

        x = margin
        for col_index, cell in enumerate(row):
            col_width = widths[col_index]
            match merge_map.membership(row_number, col_index + 1):
                case Secondary():
                    pass
                case Anchor(region=region):
                    rect = Rect(
                        x,
                        y,
                        span_width(widths, col_index, region.num_cols),
                        row_height * region.num_rows,
                    )
                    cells.append(
                        CellPlacement(row_number, col_index + 1, rect, cell, merged=True)
                    )
                case _:
                    rect = Rect(x, y, col_width, row_height)
                    cells.append(CellPlacement(row_number, col_index + 1, rect, cell))
            x += col_width

        y += row_height
        rows_on_page += 1

    close_page()
    return SheetLayout(pages=tuple(pages), widths=tuple(widths), geometry=geometry)

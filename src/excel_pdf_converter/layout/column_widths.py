"""Dynamic column width solving from measured cell text."""

from collections.abc import Sequence

from excel_pdf_converter.grid import Grid
from excel_pdf_converter.layout.fonts import TextMeasurer, select_variant
from excel_pdf_converter.layout.merges import MergeMap
from excel_pdf_converter.layout.options import LayoutOptions
from excel_pdf_converter.utils.logging import get_logger

logger = get_logger(__name__)

ColumnWidths = tuple[float, ...]


def solve_column_widths(
    grid: Grid,
    merge_map: MergeMap,
    measurer: TextMeasurer,
    options: LayoutOptions | None = None,
) -> ColumnWidths:
    """Compute every column's width in a single row-major pass.

    Each column starts at ``padding``. A drawn cell needs its measured text
    width plus ``padding + extra_space``. Ordinary cells widen their own
    column to that requirement; a merge anchor whose spanned columns are too
    narrow spreads the deficit evenly over them. Widths only ever grow, and
    the pass is not repeated: a later merge anchor can widen columns that an
    earlier anchor already sized.

    Args:
        grid: Grid with resolved ``display_text``.
        merge_map: Merge membership of the grid.
        measurer: Text measurement context.
        options: Layout options; defaults are used when omitted.

    Returns:
        One width per column, in points.
    """
    opts = options or LayoutOptions()
    widths = [opts.padding] * grid.total_cols

    for row_number, row in enumerate(grid.rows, start=1):
        for col_number, cell in enumerate(row, start=1):
            if merge_map.is_secondary(row_number, col_number):
                continue

            font = cell.style.font
            size = (font.size if font and font.size else None) or opts.default_font_size
            required = (
                measurer.string_width(cell.display_text, select_variant(font), size)
                + opts.padding
                + opts.extra_space
            )

            region = merge_map.anchor_region(row_number, col_number)
            if region is not None:
                start = region.left - 1
                end = min(region.right, grid.total_cols)
                merged_width = sum(widths[start:end])
                if merged_width < required and end > start:
                    span = end - start
                    extra = (required - merged_width) / span
                    for index in range(start, end):
                        widths[index] += extra
            elif required > widths[col_number - 1]:
                widths[col_number - 1] = required

    logger.debug(
        "Column widths solved",
        columns=grid.total_cols,
        table_width=f"{sum(widths):.2f}",
    )
    return tuple(widths)


def table_width(widths: Sequence[float]) -> float:
    return sum(widths)


def span_width(widths: Sequence[float], start_index: int, count: int) -> float:
    """Sum of ``count`` widths starting at 0-based ``start_index``."""
    return sum(widths[start_index : start_index + count])

"""End-to-end layout: grid in, paint plan out."""

from dataclasses import dataclass

from excel_pdf_converter.grid import Grid
from excel_pdf_converter.layout.column_widths import solve_column_widths
from excel_pdf_converter.layout.fonts import TextMeasurer
from excel_pdf_converter.layout.merges import build_merge_map
from excel_pdf_converter.layout.options import LayoutOptions
from excel_pdf_converter.layout.paint import PaintPlan, emit_paint_plan
from excel_pdf_converter.layout.planner import (
    SheetLayout,
    compute_page_geometry,
    plan_pages,
)


@dataclass(frozen=True)
class LayoutResult:
    """Everything the layout stages produced for one sheet."""

    grid: Grid
    layout: SheetLayout
    plan: PaintPlan


def layout_sheet(
    grid: Grid,
    fonts: TextMeasurer,
    options: LayoutOptions | None = None,
) -> LayoutResult:
    """Run text resolution, merge mapping, width solving, placement and emission."""
    opts = options or LayoutOptions()
    resolved = grid.resolve_text(opts.fixed_decimal_places)
    merge_map = build_merge_map(resolved.merges)
    widths = solve_column_widths(resolved, merge_map, fonts, opts)
    geometry = compute_page_geometry(widths, resolved.total_rows, opts)
    layout = plan_pages(resolved, merge_map, widths, geometry)
    plan = emit_paint_plan(layout, opts)
    return LayoutResult(grid=resolved, layout=layout, plan=plan)

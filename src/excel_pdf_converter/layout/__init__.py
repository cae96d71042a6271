"""Layout engine: turns a worksheet grid into an absolute paint plan."""

from excel_pdf_converter.layout.cell_text import resolve_cell_text
from excel_pdf_converter.layout.column_widths import solve_column_widths
from excel_pdf_converter.layout.engine import LayoutResult, layout_sheet
from excel_pdf_converter.layout.fonts import FontRegistry, FontVariant
from excel_pdf_converter.layout.merges import build_merge_map
from excel_pdf_converter.layout.options import LayoutOptions
from excel_pdf_converter.layout.paint import PaintPlan, emit_paint_plan
from excel_pdf_converter.layout.planner import compute_page_geometry, plan_pages
from excel_pdf_converter.layout.references import decode_cell, encode_cell

__all__ = [
    "FontRegistry",
    "FontVariant",
    "LayoutOptions",
    "LayoutResult",
    "PaintPlan",
    "build_merge_map",
    "compute_page_geometry",
    "decode_cell",
    "emit_paint_plan",
    "encode_cell",
    "layout_sheet",
    "plan_pages",
    "resolve_cell_text",
    "solve_column_widths",
]

"""Tests for paint command emission."""

from excel_pdf_converter.grid import (
    BorderSet,
    BorderSide,
    Cell,
    CellStyle,
    FontStyle,
    Text,
)
from excel_pdf_converter.layout.fonts import FontVariant
from excel_pdf_converter.layout.paint import (
    DrawText,
    FillRect,
    PaintPlan,
    PlaceImage,
    StartPage,
    StrokeLine,
    emit_cell,
    emit_paint_plan,
)
from excel_pdf_converter.layout.planner import (
    CellPlacement,
    ImagePlacement,
    PageGeometry,
    PlacedPage,
    Rect,
    SheetLayout,
)

RECT = Rect(50, 50, 100, 25)


def _placement(cell: Cell, merged: bool = False) -> CellPlacement:
    return CellPlacement(row=1, col=1, rect=RECT, cell=cell, merged=merged)


def _styled_cell(text: str = "Total") -> Cell:
    thin = BorderSide(style="thin", color="#FF0000")
    return Cell(
        Text(text),
        CellStyle(
            font=FontStyle(size=14, bold=True, italic=True, color="#112233"),
            fill_color="#FFFF00",
            border=BorderSet(top=thin, left=BorderSide(), bottom=thin, right=thin),
            horizontal="center",
        ),
        display_text=text,
    )


class TestEmitCell:
    def test_draw_order_is_fill_borders_text(self) -> None:
        commands = emit_cell(_placement(_styled_cell()))
        kinds = [type(c) for c in commands]
        assert kinds == [FillRect, StrokeLine, StrokeLine, StrokeLine, DrawText]

    def test_fill_covers_cell(self) -> None:
        fill = emit_cell(_placement(_styled_cell()))[0]
        assert fill == FillRect(50, 50, 100, 25, "#FFFF00")

    def test_borders_follow_cell_edges(self) -> None:
        lines = [c for c in emit_cell(_placement(_styled_cell())) if isinstance(c, StrokeLine)]
        # top, bottom, right; the left side has no style
        assert [(l.x1, l.y1, l.x2, l.y2) for l in lines] == [
            (50, 50, 150, 50),
            (50, 75, 150, 75),
            (150, 50, 150, 75),
        ]
        assert all(l.color == "#FF0000" for l in lines)

    def test_border_without_color_is_black(self) -> None:
        cell = Cell(
            Text("x"),
            CellStyle(border=BorderSet(top=BorderSide(style="medium"))),
            display_text="x",
        )
        (line,) = [c for c in emit_cell(_placement(cell)) if isinstance(c, StrokeLine)]
        assert line.color == "#000000"

    def test_none_border_style_is_not_drawn(self) -> None:
        cell = Cell(
            Text("x"),
            CellStyle(border=BorderSet(top=BorderSide(style="none"))),
        )
        assert not any(isinstance(c, StrokeLine) for c in emit_cell(_placement(cell)))

    def test_text_box_and_font(self) -> None:
        text = emit_cell(_placement(_styled_cell()))[-1]
        assert text == DrawText(
            text="Total",
            x=52,
            y=50 + (25 - 14) / 2,
            width=96,
            align="center",
            color="#112233",
            variant=FontVariant.BOLD_ITALIC,
            size=14,
            ellipsis=True,
        )
        assert text.right == 148

    def test_plain_cell_uses_defaults(self) -> None:
        cell = Cell(Text("x"), display_text="x")
        (text,) = emit_cell(_placement(cell), default_font_size=11)
        assert text.size == 11
        assert text.color == "#000000"
        assert text.align == "left"
        assert text.variant == FontVariant.REGULAR

    def test_merged_cells_are_not_truncated(self) -> None:
        cell = Cell(Text("x"), display_text="x")
        (text,) = emit_cell(_placement(cell, merged=True))
        assert text.ellipsis is False

    def test_narrow_cell_text_width_is_not_negative(self) -> None:
        placement = CellPlacement(1, 1, Rect(0, 0, 3, 25), Cell(display_text="x"))
        (text,) = emit_cell(placement)
        assert text.width == 0


def _layout(png_bytes: bytes) -> SheetLayout:
    geometry = PageGeometry(page_width=300, page_height=200, margin=50, row_height=25)
    cell = Cell(Text("a"), display_text="a")
    first = PlacedPage(
        number=1,
        width=300,
        height=200,
        images=(ImagePlacement(0, Rect(50, 50, 30, 15), png_bytes),),
        cells=(CellPlacement(1, 1, RECT, cell),),
    )
    second = PlacedPage(
        number=2,
        width=300,
        height=200,
        images=(),
        cells=(CellPlacement(2, 1, RECT, cell),),
    )
    return SheetLayout(pages=(first, second), widths=(100.0,), geometry=geometry)


class TestPaintPlan:
    def test_pages_start_with_start_page_then_images(self, png_bytes: bytes) -> None:
        plan = emit_paint_plan(_layout(png_bytes))
        commands = list(plan)

        assert commands[0] == StartPage(1, 300, 200)
        assert isinstance(commands[1], PlaceImage)
        assert isinstance(commands[2], DrawText)
        assert commands[3] == StartPage(2, 300, 200)
        assert len(plan) == 5

    def test_plan_summary_helpers(self, png_bytes: bytes) -> None:
        plan = emit_paint_plan(_layout(png_bytes))

        assert plan.page_count == 2
        assert plan.count(DrawText) == 2
        assert plan.count(PlaceImage) == 1
        pages = plan.pages
        assert [page.start.number for page in pages] == [1, 2]
        assert [len(page.commands) for page in pages] == [2, 1]

    def test_empty_plan(self) -> None:
        plan = PaintPlan(())
        assert plan.page_count == 0
        assert plan.pages == []

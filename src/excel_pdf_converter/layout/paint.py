"""Paint commands and the emitter that turns a sheet layout into a paint plan.

Coordinates are absolute points with the origin at the top-left corner of the
page; the rendering backend is responsible for any axis flip.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass

from excel_pdf_converter.layout.fonts import (
    DEFAULT_TEXT_COLOR,
    FontVariant,
    select_variant,
)
from excel_pdf_converter.layout.options import LayoutOptions
from excel_pdf_converter.layout.planner import CellPlacement, SheetLayout
from excel_pdf_converter.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BORDER_COLOR = "#000000"
BORDER_LINE_WIDTH = 1.0
# Horizontal inset of the text box inside its cell, per side.
TEXT_INSET = 2.0


@dataclass(frozen=True)
class StartPage:
    number: int
    width: float
    height: float


@dataclass(frozen=True)
class FillRect:
    x: float
    y: float
    width: float
    height: float
    color: str


@dataclass(frozen=True)
class StrokeLine:
    x1: float
    y1: float
    x2: float
    y2: float
    color: str = DEFAULT_BORDER_COLOR
    line_width: float = BORDER_LINE_WIDTH


@dataclass(frozen=True)
class DrawText:
    """A single line of text inside a box.

    ``y`` is the top of the text line; ``x`` and ``width`` bound the box the
    text is aligned within. With ``ellipsis`` the renderer truncates text
    wider than the box.
    """

    text: str
    x: float
    y: float
    width: float
    align: str
    color: str
    variant: FontVariant
    size: float
    ellipsis: bool = False

    @property
    def right(self) -> float:
        return self.x + self.width


@dataclass(frozen=True)
class PlaceImage:
    x: float
    y: float
    width: float
    height: float
    data: bytes


PaintCommand = StartPage | FillRect | StrokeLine | DrawText | PlaceImage


@dataclass(frozen=True)
class PaintPage:
    start: StartPage
    commands: tuple[PaintCommand, ...]


@dataclass(frozen=True)
class PaintPlan:
    """Ordered paint commands; each page begins with a ``StartPage``."""

    commands: tuple[PaintCommand, ...]

    def __iter__(self) -> Iterator[PaintCommand]:
        return iter(self.commands)

    def __len__(self) -> int:
        return len(self.commands)

    @property
    def pages(self) -> list[PaintPage]:
        pages: list[PaintPage] = []
        start: StartPage | None = None
        body: list[PaintCommand] = []
        for command in self.commands:
            if isinstance(command, StartPage):
                if start is not None:
                    pages.append(PaintPage(start, tuple(body)))
                start, body = command, []
            elif start is not None:
                body.append(command)
        if start is not None:
            pages.append(PaintPage(start, tuple(body)))
        return pages

    @property
    def page_count(self) -> int:
        return sum(1 for command in self.commands if isinstance(command, StartPage))

    def count(self, command_type: type) -> int:
        """Number of commands of the given type."""
        return sum(1 for command in self.commands if isinstance(command, command_type))


def emit_paint_plan(
    layout: SheetLayout,
    options: LayoutOptions | None = None,
) -> PaintPlan:
    """Turn a sheet layout into draw commands.

    Every page starts with ``StartPage`` followed by its images. Each placed
    cell then yields an optional fill, one line per bordered side and one
    text run, in that order.
    """
    opts = options or LayoutOptions()
    commands: list[PaintCommand] = []
    for page in layout.pages:
        commands.append(StartPage(page.number, page.width, page.height))
        for image in page.images:
            commands.append(
                PlaceImage(
                    image.rect.x,
                    image.rect.y,
                    image.rect.width,
                    image.rect.height,
                    image.data,
                )
            )
        for placement in page.cells:
            commands.extend(emit_cell(placement, opts.default_font_size))

    plan = PaintPlan(tuple(commands))
    logger.debug("Paint plan emitted", pages=plan.page_count, commands=len(plan))
    return plan


def emit_cell(
    placement: CellPlacement, default_font_size: float = 11.0
) -> list[PaintCommand]:
    """Draw commands for one placed cell: fill, borders, then text."""
    rect = placement.rect
    style = placement.cell.style
    commands: list[PaintCommand] = []

    if style.fill_color:
        commands.append(
            FillRect(rect.x, rect.y, rect.width, rect.height, style.fill_color)
        )

    sides = (
        ("top", (rect.x, rect.y, rect.right, rect.y)),
        ("left", (rect.x, rect.y, rect.x, rect.bottom)),
        ("bottom", (rect.x, rect.bottom, rect.right, rect.bottom)),
        ("right", (rect.right, rect.y, rect.right, rect.bottom)),
    )
    for name, (x1, y1, x2, y2) in sides:
        side = getattr(style.border, name)
        if side.is_drawn:
            commands.append(
                StrokeLine(x1, y1, x2, y2, side.color or DEFAULT_BORDER_COLOR)
            )

    font = style.font
    size = (font.size if font and font.size else None) or default_font_size
    color = (font.color if font else None) or DEFAULT_TEXT_COLOR
    commands.append(
        DrawText(
            text=placement.cell.display_text,
            x=rect.x + TEXT_INSET,
            y=rect.y + (rect.height - size) / 2,
            width=max(rect.width - TEXT_INSET * 2, 0.0),
            align=style.horizontal or "left",
            color=color,
            variant=select_variant(font),
            size=size,
            ellipsis=not placement.merged,
        )
    )
    return commands

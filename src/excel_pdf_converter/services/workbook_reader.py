"""Native Excel reader that decodes a worksheet into a layout grid."""

from __future__ import annotations

import io
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any
from zipfile import BadZipFile

from openpyxl import load_workbook
from openpyxl.cell.cell import Cell as OpenpyxlCell
from openpyxl.cell.cell import MergedCell
from openpyxl.cell.rich_text import CellRichText
from openpyxl.drawing.spreadsheet_drawing import TwoCellAnchor
from openpyxl.styles.colors import COLOR_INDEX, Color
from openpyxl.utils import get_column_letter
from openpyxl.utils.exceptions import InvalidFileException
from openpyxl.utils.units import DEFAULT_ROW_HEIGHT, EMU_to_pixels, points_to_pixels
from openpyxl.workbook.workbook import Workbook
from openpyxl.worksheet.worksheet import Worksheet
from PIL import Image, UnidentifiedImageError

from excel_pdf_converter.grid import (
    EMPTY,
    EMPTY_CELL,
    BorderSet,
    BorderSide,
    Cell,
    CellStyle,
    CellValue,
    Date,
    EmbeddedImage,
    FontStyle,
    FormulaResult,
    Grid,
    Hyperlink,
    MergeRegion,
    Number,
    RawValue,
    RichText,
    Text,
)
from excel_pdf_converter.layout.cell_text import format_iso_date
from excel_pdf_converter.layout.references import decode_cell
from excel_pdf_converter.utils.exceptions import (
    ConverterFileNotFoundError,
    ErrorCode,
    ImagePlacementError,
    InvalidReferenceError,
    WorkbookReadError,
)
from excel_pdf_converter.utils.logging import get_logger

logger = get_logger(__name__)

# Excel's default column width (8.43 characters)
DEFAULT_COLUMN_PIXELS = 64

ERROR_LITERALS = ("#NULL!", "#DIV/0!", "#VALUE!", "#REF!", "#NAME?", "#NUM!", "#N/A")

_HORIZONTAL_ALIGNMENT = {
    "left": "left",
    "center": "center",
    "centerContinuous": "center",
    "right": "right",
}


@dataclass
class WorkbookReadOptions:
    """Options controlling which worksheet is read."""

    sheet_name: str | None = None


class WorkbookReader:
    """Decode xlsx worksheets into ``Grid`` objects using openpyxl."""

    def read_path(
        self, file_path: Path, options: WorkbookReadOptions | None = None
    ) -> Grid:
        """Read a worksheet from an xlsx file on disk."""
        if not file_path.exists():
            raise ConverterFileNotFoundError(str(file_path))
        return self._read(lambda: file_path, options or WorkbookReadOptions())

    def read_bytes(
        self, data: bytes, options: WorkbookReadOptions | None = None
    ) -> Grid:
        """Read a worksheet from in-memory xlsx content."""
        return self._read(lambda: io.BytesIO(data), options or WorkbookReadOptions())

    def get_sheet_names(self, file_path: Path) -> list[str]:
        """List all sheet names in a workbook."""
        if not file_path.exists():
            raise ConverterFileNotFoundError(str(file_path))
        workbook = self._load(lambda: file_path, data_only=True, read_only=True)
        try:
            return list(workbook.sheetnames)
        finally:
            workbook.close()

    # ------------------------------------------------------------------ #
    # Internal helpers
    # ------------------------------------------------------------------ #

    def _read(self, source: Any, options: WorkbookReadOptions) -> Grid:
        # Load twice: once to capture formulas, once for cached results
        workbook = self._load(source, data_only=False)
        computed_wb = self._load(source, data_only=True)

        if options.sheet_name is None:
            sheet = workbook.worksheets[0]
        elif options.sheet_name in workbook.sheetnames:
            sheet = workbook[options.sheet_name]
        else:
            raise WorkbookReadError(
                f"Sheet '{options.sheet_name}' not found in workbook",
                error_code=ErrorCode.SHEET_NOT_FOUND,
                sheet_name=options.sheet_name,
                details={"sheet_names": workbook.sheetnames},
            )
        computed_sheet = computed_wb[sheet.title]

        try:
            return self._extract_sheet(sheet, computed_sheet)
        except (AttributeError, KeyError, TypeError, ValueError) as e:
            raise WorkbookReadError(
                f"Error processing Excel file: {e}", sheet_name=sheet.title
            ) from e

    @staticmethod
    def _load(source: Any, data_only: bool, read_only: bool = False) -> Workbook:
        try:
            return load_workbook(
                filename=source(),
                data_only=data_only,
                read_only=read_only,
                rich_text=not data_only,
            )
        except (InvalidFileException, BadZipFile, KeyError, OSError, ValueError) as e:
            raise WorkbookReadError(f"Error processing Excel file: {e}") from e

    def _extract_sheet(self, sheet: Worksheet, computed_sheet: Worksheet) -> Grid:
        total_rows = sheet.max_row
        total_cols = sheet.max_column

        rows: list[list[Cell]] = []
        row_iter = sheet.iter_rows(min_row=1, max_row=total_rows, max_col=total_cols)
        computed_iter = computed_sheet.iter_rows(
            min_row=1, max_row=total_rows, max_col=total_cols, values_only=True
        )
        for row_cells, computed_values in zip(row_iter, computed_iter, strict=True):
            rows.append(
                [
                    self._build_cell(cell, computed)
                    for cell, computed in zip(row_cells, computed_values, strict=True)
                ]
            )

        merges = sorted(
            (
                MergeRegion(rng.min_row, rng.min_col, rng.max_row, rng.max_col)
                for rng in sheet.merged_cells.ranges
            ),
            key=lambda region: (region.top, region.left),
        )
        images = self._extract_images(sheet)

        logger.info(
            "Worksheet decoded",
            sheet=sheet.title,
            rows=total_rows,
            columns=total_cols,
            merges=len(merges),
            images=len(images),
        )
        return Grid.from_rows(
            rows,
            merges=merges,
            images=images,
            total_cols=total_cols,
            name=sheet.title,
        )

    def _build_cell(self, cell: OpenpyxlCell | MergedCell, computed: Any) -> Cell:
        if isinstance(cell, MergedCell):
            return EMPTY_CELL
        return Cell(value=self._build_value(cell, computed), style=self._build_style(cell))

    @staticmethod
    def _build_value(cell: OpenpyxlCell, computed: Any) -> CellValue:
        """Map an openpyxl cell to the tagged value union."""
        raw = cell.value
        number_format = cell.number_format or ""

        if cell.data_type == "f":
            formula = str(getattr(raw, "text", raw) or "").removeprefix("=")
            if isinstance(computed, str) and computed in ERROR_LITERALS:
                return FormulaResult(
                    error_code=computed[1:].lower(),
                    formula=formula,
                    format_hint=number_format,
                )
            return FormulaResult(
                evaluated=_formula_value(computed),
                formula=formula,
                format_hint=number_format,
            )

        if raw is None:
            return EMPTY
        if cell.hyperlink is not None:
            return Hyperlink(display_text=str(raw), target=cell.hyperlink.target)
        if isinstance(raw, CellRichText):
            return RichText(
                tuple(part if isinstance(part, str) else part.text for part in raw)
            )
        if isinstance(raw, bool):
            return Text("TRUE" if raw else "FALSE")
        if isinstance(raw, (int, float)):
            return Number(raw, number_format)
        if isinstance(raw, (datetime, date)):
            return Date(_iso_timestamp(raw))
        if isinstance(raw, str):
            return Text(raw)
        return RawValue(raw)

    @staticmethod
    def _build_style(cell: OpenpyxlCell) -> CellStyle:
        font = cell.font
        font_style = None
        if font is not None:
            font_style = FontStyle(
                size=float(font.sz) if font.sz else None,
                bold=bool(font.b),
                italic=bool(font.i),
                color=_hex_color(font.color),
            )

        fill_color = None
        if cell.fill is not None and cell.fill.fill_type == "solid":
            fill_color = _hex_color(cell.fill.fgColor)

        border = cell.border
        border_set = BorderSet(
            top=_border_side(border.top),
            left=_border_side(border.left),
            bottom=_border_side(border.bottom),
            right=_border_side(border.right),
        )

        horizontal = None
        if cell.alignment is not None and cell.alignment.horizontal:
            horizontal = _HORIZONTAL_ALIGNMENT.get(cell.alignment.horizontal, "left")

        return CellStyle(
            font=font_style,
            fill_color=fill_color,
            border=border_set,
            horizontal=horizontal,
        )

    def _extract_images(self, sheet: Worksheet) -> list[EmbeddedImage]:
        images: list[EmbeddedImage] = []
        for index, image in enumerate(getattr(sheet, "_images", [])):
            try:
                images.append(self._build_image(index, image, sheet))
            except (ImagePlacementError, InvalidReferenceError) as e:
                logger.warning("Skipping image", error=e.message, **e.details)
        return images

    @staticmethod
    def _build_image(index: int, image: Any, sheet: Worksheet) -> EmbeddedImage:
        """Decode one drawing into its 0-based anchor cell and displayed pixel size."""
        anchor = image.anchor
        if isinstance(anchor, str):
            ref = decode_cell(anchor)
            col, row = ref.col - 1, ref.row - 1
        else:
            marker = getattr(anchor, "_from", None)
            if marker is None:
                raise ImagePlacementError("Image has no top-left anchor", image_index=index)
            col, row = marker.col, marker.row

        try:
            data = image._data()
        except (OSError, ValueError) as e:
            raise ImagePlacementError(
                f"Unreadable image data: {e}", image_index=index
            ) from e

        # Displayed size from the anchor first, then the picture's own size
        size = _anchor_size(anchor, sheet)
        if size is None:
            width, height = getattr(image, "width", None), getattr(image, "height", None)
            if width and height:
                size = (width, height)
        if size is None:
            try:
                with Image.open(io.BytesIO(data)) as probe:
                    size = probe.size
            except (UnidentifiedImageError, OSError) as e:
                raise ImagePlacementError(
                    f"Cannot determine image size: {e}", image_index=index
                ) from e

        width, height = size
        return EmbeddedImage(
            data=data,
            col=col,
            row=row,
            width_px=float(width),
            height_px=float(height),
        )


def _anchor_size(anchor: Any, sheet: Worksheet) -> tuple[int, int] | None:
    """Pixel size an anchor gives a drawing, or None if it carries no extent."""
    if isinstance(anchor, TwoCellAnchor):
        start, end = anchor._from, anchor.to
        if start is None or end is None:
            return None
        width = sum(_column_pixels(sheet, col) for col in range(start.col, end.col))
        height = sum(_row_pixels(sheet, row) for row in range(start.row, end.row))
        width += EMU_to_pixels(end.colOff - start.colOff)
        height += EMU_to_pixels(end.rowOff - start.rowOff)
    else:
        # OneCellAnchor and AbsoluteAnchor store the extent in EMU
        ext = getattr(anchor, "ext", None)
        if ext is None:
            return None
        width, height = EMU_to_pixels(ext.width), EMU_to_pixels(ext.height)
    if width <= 0 or height <= 0:
        return None
    return width, height


def _column_pixels(sheet: Worksheet, index: int) -> int:
    """Width of the 0-based column ``index`` in screen pixels."""
    dimension = sheet.column_dimensions.get(get_column_letter(index + 1))
    if dimension is not None and dimension.customWidth:
        width = dimension.width
    else:
        width = sheet.sheet_format.defaultColWidth
    if not width:
        return DEFAULT_COLUMN_PIXELS
    return int(width * 7 + 0.5)


def _row_pixels(sheet: Worksheet, index: int) -> int:
    dimension = sheet.row_dimensions.get(index + 1)
    height = dimension.height if dimension is not None else None
    return points_to_pixels(
        height or sheet.sheet_format.defaultRowHeight or DEFAULT_ROW_HEIGHT
    )


def _formula_value(value: Any) -> Any:
    """Cached formula result; dates read as they display in a date cell."""
    if isinstance(value, (datetime, date)):
        return format_iso_date(_iso_timestamp(value))
    return value


def _iso_timestamp(value: datetime | date) -> str:
    if not isinstance(value, datetime):
        value = datetime(value.year, value.month, value.day)
    millis = value.microsecond // 1000
    return f"{value.strftime('%Y-%m-%dT%H:%M:%S')}.{millis:03d}Z"


def _hex_color(color: Color | None) -> str | None:
    """Convert an openpyxl colour to ``#RRGGBB``; theme colours are not resolved."""
    if color is None:
        return None
    argb: Any = None
    if color.type == "rgb":
        argb = color.rgb
    elif color.type == "indexed" and isinstance(color.indexed, int):
        if 0 <= color.indexed < len(COLOR_INDEX):
            argb = COLOR_INDEX[color.indexed]
    if not isinstance(argb, str):
        return None
    if len(argb) == 8:
        return f"#{argb[2:].upper()}"
    if len(argb) == 6:
        return f"#{argb.upper()}"
    return None


def _border_side(side: Any) -> BorderSide:
    if side is None or not side.style:
        return BorderSide()
    return BorderSide(style=side.style, color=_hex_color(side.color))

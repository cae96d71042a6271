"""Conversion service tying the workbook reader, layout engine and renderer together."""

import time
import uuid
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path

from excel_pdf_converter.grid import Grid
from excel_pdf_converter.layout.engine import LayoutResult, layout_sheet
from excel_pdf_converter.layout.fonts import FontRegistry
from excel_pdf_converter.layout.options import LayoutOptions
from excel_pdf_converter.layout.paint import PaintPlan, PlaceImage
from excel_pdf_converter.services.pdf_renderer import PdfRenderer
from excel_pdf_converter.services.workbook_reader import (
    WorkbookReader,
    WorkbookReadOptions,
)
from excel_pdf_converter.utils.exceptions import ConverterError, ErrorCode, FileError
from excel_pdf_converter.utils.logging import LogContext, get_logger, timed_operation

logger = get_logger(__name__)


@dataclass(frozen=True)
class ConversionResult:
    """Output of a full conversion.

    Attributes:
        pdf: Serialized PDF document.
        page_count: Number of pages in the document.
        layout: Grid, page layout and paint plan the document was drawn from.
        processing_time_seconds: Wall-clock time of the conversion.
    """

    pdf: bytes
    page_count: int
    layout: LayoutResult
    processing_time_seconds: float

    @property
    def plan(self) -> PaintPlan:
        return self.layout.plan


class ExcelPdfConverter:
    """Converts xlsx worksheets to PDF documents.

    The converter owns one font registry, used both to measure text while
    solving column widths and to draw it, so widths and rendering agree.
    """

    def __init__(
        self,
        options: LayoutOptions | None = None,
        fonts: FontRegistry | None = None,
        reader: WorkbookReader | None = None,
        renderer: PdfRenderer | None = None,
    ) -> None:
        self.options = options or LayoutOptions()
        self.fonts = fonts or FontRegistry.builtin()
        self.reader = reader or WorkbookReader()
        self.renderer = renderer or PdfRenderer(self.fonts)

    def build_plan(self, grid: Grid) -> LayoutResult:
        """Lay out a decoded grid without rendering it."""
        with timed_operation(logger, "layout") as metrics:
            result = layout_sheet(grid, self.fonts, self.options)
            metrics.rows_processed = grid.total_rows
            metrics.columns_processed = grid.total_cols
            metrics.pages_emitted = result.plan.page_count
            metrics.images_placed = result.plan.count(PlaceImage)
            metrics.commands_emitted = len(result.plan)
        return result

    def plan_bytes(self, data: bytes, sheet_name: str | None = None) -> LayoutResult:
        """Decode xlsx content and lay it out, stopping short of rendering."""
        grid = self.reader.read_bytes(data, WorkbookReadOptions(sheet_name=sheet_name))
        return self.build_plan(grid)

    def convert_bytes(
        self, data: bytes, sheet_name: str | None = None
    ) -> ConversionResult:
        """Convert in-memory xlsx content to PDF bytes.

        Args:
            data: Contents of an xlsx file.
            sheet_name: Worksheet to convert; the first sheet when omitted.

        Returns:
            ConversionResult with the PDF and the layout it was drawn from.

        Raises:
            WorkbookReadError: If the workbook cannot be decoded.
            RenderBackendError: If the PDF cannot be produced.
        """
        return self._convert(
            lambda: self.reader.read_bytes(
                data, WorkbookReadOptions(sheet_name=sheet_name)
            )
        )

    def convert_file(
        self,
        input_path: Path,
        output_path: Path,
        sheet_name: str | None = None,
    ) -> ConversionResult:
        """Convert an xlsx file on disk and write the PDF to ``output_path``."""
        result = self._convert(
            lambda: self.reader.read_path(
                input_path, WorkbookReadOptions(sheet_name=sheet_name)
            ),
            source=str(input_path),
        )
        try:
            output_path.write_bytes(result.pdf)
        except OSError as e:
            raise FileError(
                f"Cannot write PDF: {e}",
                error_code=ErrorCode.FILE_WRITE_ERROR,
                file_path=str(output_path),
            ) from e
        logger.info("PDF written", output_path=str(output_path), pages=result.page_count)
        return result

    def _convert(
        self, read_grid: Callable[[], Grid], source: str | None = None
    ) -> ConversionResult:
        conversion_id = str(uuid.uuid4())
        context = {"conversion_id": conversion_id}
        if source:
            context["source"] = source

        with LogContext(**context):
            start = time.time()
            try:
                grid = read_grid()
                layout = self.build_plan(grid)
                with timed_operation(logger, "render") as metrics:
                    document = self.renderer.render(layout.plan)
                    metrics.pages_emitted = document.page_count
            except ConverterError as e:
                logger.log_conversion_result(
                    success=False,
                    duration_seconds=time.time() - start,
                    page_count=0,
                    error_message=str(e),
                )
                raise

            elapsed = time.time() - start
            logger.log_conversion_result(
                success=True,
                duration_seconds=elapsed,
                page_count=document.page_count,
                output_bytes=len(document.content),
            )
            return ConversionResult(
                pdf=document.content,
                page_count=document.page_count,
                layout=layout,
                processing_time_seconds=elapsed,
            )
